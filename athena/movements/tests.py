"""
Test suite for the movement journals
Tests: Daily Bon, Bon PDS and MSK creation, status transitions with stock effects,
technician scoping and edit locks
"""
import re

from django.test import TestCase
from rest_framework import status

from athena.core.models import AuditLog
from athena.core.permissions import ROLE_ADMIN, ROLE_MANAGER, ROLE_TEKNISI, ROLE_VIEWER
from athena.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from athena.inventory.models import InventoryItem
from athena.movements.models import DailyBon, BonPds, Msk
from athena.movements.services import apply_status_change, generate_pds_transaction_number
from athena.movements.serializers import DailyBonUpdateSerializer


class StatusChangeServiceTests(TestCase):
    """apply_status_change keeps stock_updated and Report Stock in step"""

    def setUp(self):
        self.item = TestDataFactory.create_item(part='SVC-1', qty_baik=10, qty_rusak=1)

    def stock(self):
        self.item.refresh_from_db()
        return self.item.qty_baik, self.item.available_qty, self.item.qty_real

    def test_daily_bon_deduct_and_restock(self):
        bon = TestDataFactory.create_daily_bon('SVC-1', qty=3)
        apply_status_change(bon, 'RECEIVED')
        self.assertTrue(bon.stock_updated)
        self.assertEqual(self.stock(), (7, 8, 11))

        bon.status_bon = 'RECEIVED'
        self.assertIsNone(apply_status_change(bon, 'KMP'))
        self.assertEqual(self.stock(), (7, 8, 11))

        bon.status_bon = 'KMP'
        apply_status_change(bon, 'CANCELED')
        self.assertFalse(bon.stock_updated)
        self.assertEqual(self.stock(), (10, 11, 11))

    def test_msk_adds_stock(self):
        msk = TestDataFactory.create_msk('SVC-1', qty=4)
        apply_status_change(msk, 'RECEIVED')
        self.assertEqual(self.stock(), (14, 15, 11))

    def test_stale_instance_does_not_apply_stock_twice(self):
        bon = TestDataFactory.create_daily_bon('SVC-1', qty=3)
        first = DailyBon.objects.get(pk=bon.pk)
        second = DailyBon.objects.get(pk=bon.pk)

        serializer = DailyBonUpdateSerializer(first, data={'status_bon': 'RECEIVED'}, partial=True)
        self.assertTrue(serializer.is_valid())
        serializer.save()

        serializer = DailyBonUpdateSerializer(second, data={'status_bon': 'RECEIVED', 'no_tkl': 'TKL-9'}, partial=True)
        self.assertTrue(serializer.is_valid())
        serializer.save()

        self.assertEqual(self.stock(), (7, 8, 11))
        bon.refresh_from_db()
        self.assertTrue(bon.stock_updated)
        self.assertEqual(bon.no_tkl, 'TKL-9')

    def test_pds_number_format(self):
        self.assertRegex(generate_pds_transaction_number(), r'^TRX-PDS-\d{13}$')


class DailyBonAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        self.teknisi = TestDataFactory.create_user(role=ROLE_TEKNISI, nama_teknisi='Budi')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.item = TestDataFactory.create_item(part='OIL-5W30', deskripsi='Engine oil', qty_baik=5, qty_rusak=2)

    def test_create_fills_from_inventory(self):
        data = {'part': 'oil-5w30', 'qty_dailybon': 2, 'teknisi': 'Joko', 'keterangan': 'Unit 7'}
        response = self.client.post('/api/v1/daily-bon/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['part'], 'OIL-5W30')
        self.assertEqual(response.data['deskripsi'], 'Engine oil')
        self.assertEqual(response.data['harga'], '11100.00')
        self.assertEqual(response.data['status_bon'], 'BON')
        self.assertEqual(response.data['no_tkl'], '')
        self.assertFalse(response.data['stock_updated'])
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='DailyBon').exists())

    def test_create_unknown_part_has_empty_description(self):
        data = {'part': 'UNKNOWN', 'qty_dailybon': 1, 'teknisi': 'Joko'}
        response = self.client.post('/api/v1/daily-bon/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['deskripsi'], '')
        self.assertEqual(response.data['harga'], '0.00')

    def test_create_validation(self):
        response = self.client.post('/api/v1/daily-bon/', {'part': 'OIL-5W30', 'qty_dailybon': 0, 'teknisi': 'Joko'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('qty_dailybon', response.data)
        response = self.client.post('/api/v1/daily-bon/', {'part': 'OIL-5W30', 'qty_dailybon': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('teknisi', response.data)

    def test_teknisi_creates_in_own_name(self):
        client = AuthenticatedAPIClient().authenticate_user(self.teknisi)
        data = {'part': 'OIL-5W30', 'qty_dailybon': 1, 'teknisi': 'Someone Else'}
        response = client.post('/api/v1/daily-bon/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['teknisi'], 'Budi')

    def test_teknisi_sees_only_own_bons(self):
        own = TestDataFactory.create_daily_bon('OIL-5W30', teknisi='Budi')
        other = TestDataFactory.create_daily_bon('OIL-5W30', teknisi='Joko')
        client = AuthenticatedAPIClient().authenticate_user(self.teknisi)
        response = client.get('/api/v1/daily-bon/')
        self.assertEqual([r['id'] for r in response.data['results']], [own.id])
        self.assertEqual(client.get(f'/api/v1/daily-bon/{other.id}/').status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.get('/api/v1/daily-bon/?teknisi=joko')
        self.assertEqual([r['id'] for r in response.data['results']], [other.id])

    def test_teknisi_scope_ignores_name_case(self):
        bon = TestDataFactory.create_daily_bon('OIL-5W30', teknisi='budi', created_by=self.admin)
        client = AuthenticatedAPIClient().authenticate_user(self.teknisi)
        response = client.get('/api/v1/daily-bon/')
        self.assertEqual([r['id'] for r in response.data['results']], [bon.id])
        self.assertEqual(client.get(f'/api/v1/daily-bon/{bon.id}/').status_code, status.HTTP_200_OK)

    def test_received_deducts_stock(self):
        bon = TestDataFactory.create_daily_bon('OIL-5W30', qty=3)
        response = self.client.patch(f'/api/v1/daily-bon/{bon.id}/', {'status_bon': 'RECEIVED', 'no_tkl': 'TKL-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['stock_updated'])
        self.item.refresh_from_db()
        self.assertEqual(self.item.qty_baik, 2)
        self.assertEqual(self.item.available_qty, 4)
        self.assertEqual(self.item.qty_real, 7)

    def test_insufficient_stock_rolls_back(self):
        bon = TestDataFactory.create_daily_bon('OIL-5W30', qty=9)
        response = self.client.patch(f'/api/v1/daily-bon/{bon.id}/', {'status_bon': 'KMP', 'no_tkl': 'TKL-2'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)
        bon.refresh_from_db()
        self.assertEqual(bon.status_bon, 'BON')
        self.assertEqual(bon.no_tkl, '')
        self.assertFalse(bon.stock_updated)
        self.item.refresh_from_db()
        self.assertEqual(self.item.qty_baik, 5)

    def test_unknown_part_rolls_back(self):
        bon = TestDataFactory.create_daily_bon('GHOST', qty=1)
        response = self.client.patch(f'/api/v1/daily-bon/{bon.id}/', {'status_bon': 'RECEIVED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('GHOST', response.data['error'])

    def test_admin_can_reopen_received_bon(self):
        bon = TestDataFactory.create_daily_bon('OIL-5W30', qty=2)
        self.client.patch(f'/api/v1/daily-bon/{bon.id}/', {'status_bon': 'RECEIVED'}, format='json')
        response = self.client.patch(f'/api/v1/daily-bon/{bon.id}/', {'status_bon': 'BON'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['stock_updated'])
        self.item.refresh_from_db()
        self.assertEqual(self.item.qty_baik, 5)

    def test_teknisi_cannot_edit_received_bon(self):
        bon = TestDataFactory.create_daily_bon('OIL-5W30', teknisi='Budi', status_bon='RECEIVED')
        client = AuthenticatedAPIClient().authenticate_user(self.teknisi)
        response = client.get(f'/api/v1/daily-bon/{bon.id}/')
        self.assertFalse(response.data['can_edit'])
        response = client.patch(f'/api/v1/daily-bon/{bon.id}/', {'status_bon': 'BON'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_manager_cannot_edit_daily_bon(self):
        manager = TestDataFactory.create_user(role=ROLE_MANAGER)
        bon = TestDataFactory.create_daily_bon('OIL-5W30')
        client = AuthenticatedAPIClient().authenticate_user(manager)
        response = client.get('/api/v1/daily-bon/')
        self.assertFalse(response.data['results'][0]['can_edit'])
        response = client.patch(f'/api/v1/daily-bon/{bon.id}/', {'status_bon': 'CANCELED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_leaves_stock(self):
        bon = TestDataFactory.create_daily_bon('OIL-5W30', qty=2)
        self.client.patch(f'/api/v1/daily-bon/{bon.id}/', {'status_bon': 'RECEIVED'}, format='json')
        response = self.client.delete(f'/api/v1/daily-bon/{bon.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(DailyBon.objects.filter(pk=bon.pk).exists())
        self.item.refresh_from_db()
        self.assertEqual(self.item.qty_baik, 3)

    def test_viewer_has_no_access(self):
        viewer = TestDataFactory.create_user(role=ROLE_VIEWER)
        client = AuthenticatedAPIClient().authenticate_user(viewer)
        self.assertEqual(client.get('/api/v1/daily-bon/').status_code, status.HTTP_403_FORBIDDEN)


class BonPdsAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.item = TestDataFactory.create_item(part='CBL-10', deskripsi='Cable 10m', qty_baik=8)

    def test_create_generates_transaction_number(self):
        data = {'part': 'CBL-10', 'qty_bonpds': 3, 'site_bonpds': 'Site Bandung'}
        response = self.client.post('/api/v1/bon-pds/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(re.match(r'^TRX-PDS-\d+$', response.data['no_transaksi']))
        self.assertEqual(response.data['deskripsi'], 'Cable 10m')
        self.assertEqual(response.data['status_bonpds'], 'BON')

    def test_create_requires_site(self):
        response = self.client.post('/api/v1/bon-pds/', {'part': 'CBL-10', 'qty_bonpds': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('site_bonpds', response.data)

    def test_received_transfers_out(self):
        bon = TestDataFactory.create_bon_pds('CBL-10', qty=3)
        data = {'status_bonpds': 'RECEIVED', 'no_transaksi': bon.no_transaksi}
        response = self.client.patch(f'/api/v1/bon-pds/{bon.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.item.refresh_from_db()
        self.assertEqual(self.item.qty_baik, 5)

        response = self.client.patch(f'/api/v1/bon-pds/{bon.id}/', {'status_bonpds': 'CANCELED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.item.refresh_from_db()
        self.assertEqual(self.item.qty_baik, 8)

    def test_blank_transaction_number_rejected(self):
        bon = TestDataFactory.create_bon_pds('CBL-10')
        response = self.client.patch(f'/api/v1/bon-pds/{bon.id}/', {'no_transaksi': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('no_transaksi', response.data)

    def test_search_by_site(self):
        TestDataFactory.create_bon_pds('CBL-10', site='Site Bandung')
        TestDataFactory.create_bon_pds('CBL-10', site='Site Medan')
        response = self.client.get('/api/v1/bon-pds/?search=medan')
        self.assertEqual([r['site_bonpds'] for r in response.data['results']], ['Site Medan'])

    def test_manager_cannot_edit_received(self):
        manager = TestDataFactory.create_user(role=ROLE_MANAGER)
        bon = TestDataFactory.create_bon_pds('CBL-10', status_bonpds='RECEIVED')
        client = AuthenticatedAPIClient().authenticate_user(manager)
        response = client.patch(f'/api/v1/bon-pds/{bon.id}/', {'status_bonpds': 'BON'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_manager_cannot_delete(self):
        manager = TestDataFactory.create_user(role=ROLE_MANAGER)
        bon = TestDataFactory.create_bon_pds('CBL-10')
        client = AuthenticatedAPIClient().authenticate_user(manager)
        response = client.delete(f'/api/v1/bon-pds/{bon.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(BonPds.objects.filter(pk=bon.pk).exists())


class MskAPITests(TestCase):

    def setUp(self):
        self.manager = TestDataFactory.create_user(role=ROLE_MANAGER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)
        self.item = TestDataFactory.create_item(part='FUSE-5A', qty_baik=1)

    def test_create_requires_transaction_number(self):
        data = {'part': 'FUSE-5A', 'qty_msk': 10, 'site_msk': 'Gudang Pusat'}
        response = self.client.post('/api/v1/msk/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('no_transaksi', response.data)

    def test_received_adds_stock(self):
        data = {'part': 'FUSE-5A', 'qty_msk': 10, 'site_msk': 'Gudang Pusat', 'no_transaksi': 'MSK-001'}
        response = self.client.post('/api/v1/msk/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        msk_id = response.data['id']

        response = self.client.patch(f'/api/v1/msk/{msk_id}/', {'status_msk': 'RECEIVED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['stock_updated'])
        self.assertFalse(response.data['can_edit'])
        self.item.refresh_from_db()
        self.assertEqual(self.item.qty_baik, 11)
        self.assertEqual(self.item.available_qty, 11)

    def test_reverting_received_needs_stock(self):
        admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        client = AuthenticatedAPIClient().authenticate_user(admin)
        msk = TestDataFactory.create_msk('FUSE-5A', qty=10, status_msk='RECEIVED')
        InventoryItem.objects.filter(pk=self.item.pk).update(qty_baik=4, available_qty=4)

        response = client.patch(f'/api/v1/msk/{msk.id}/', {'status_msk': 'CANCELED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        msk.refresh_from_db()
        self.assertEqual(msk.status_msk, 'RECEIVED')
        self.assertTrue(msk.stock_updated)

    def test_search_by_transaction_number(self):
        TestDataFactory.create_msk('FUSE-5A', no_transaksi='MSK-ALPHA')
        TestDataFactory.create_msk('FUSE-5A', no_transaksi='MSK-BETA')
        response = self.client.get('/api/v1/msk/?search=alpha')
        self.assertEqual([r['no_transaksi'] for r in response.data['results']], ['MSK-ALPHA'])

    def test_status_filter(self):
        TestDataFactory.create_msk('FUSE-5A', status_msk='CANCELED')
        TestDataFactory.create_msk('FUSE-5A')
        response = self.client.get('/api/v1/msk/?status=CANCELED')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(Msk.objects.count(), 2)
