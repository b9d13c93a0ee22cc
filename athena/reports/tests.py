"""
Test suite for the dashboard summary
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from athena.core.permissions import ROLE_ADMIN, ROLE_TEKNISI
from athena.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class DashboardSummaryTests(TestCase):

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        TestDataFactory.create_item(part='A-1', qty_baik=2, qty_rusak=1, total_harga=1000)
        TestDataFactory.create_item(part='B-2', qty_baik=0, qty_rusak=3, total_harga=500)

    def test_inventory_totals(self):
        response = self.client.get('/api/v1/dashboard/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        inventory = response.data['inventory']
        self.assertEqual(inventory['items'], 2)
        self.assertEqual(inventory['qty_baik'], 2)
        self.assertEqual(inventory['qty_rusak'], 4)
        self.assertEqual(inventory['available_qty'], 6)
        self.assertEqual(inventory['out_of_stock'], 1)
        self.assertEqual(float(inventory['stock_value']), 2000.0)

    def test_status_counts(self):
        TestDataFactory.create_daily_bon('A-1', teknisi='Budi')
        TestDataFactory.create_daily_bon('A-1', teknisi='Joko', status_bon='KMP')
        TestDataFactory.create_msk('A-1', status_msk='RECEIVED')
        response = self.client.get('/api/v1/dashboard/summary/')
        self.assertEqual(response.data['daily_bon']['BON'], 1)
        self.assertEqual(response.data['daily_bon']['KMP'], 1)
        self.assertEqual(response.data['daily_bon']['total'], 2)
        self.assertEqual(response.data['msk']['RECEIVED'], 1)
        self.assertEqual(response.data['bon_pds']['total'], 0)

    def test_teknisi_counts_own_bons(self):
        teknisi = TestDataFactory.create_user(role=ROLE_TEKNISI, nama_teknisi='Budi')
        TestDataFactory.create_daily_bon('A-1', teknisi='Budi')
        TestDataFactory.create_daily_bon('A-1', teknisi='Joko')
        client = AuthenticatedAPIClient().authenticate_user(teknisi)
        response = client.get('/api/v1/dashboard/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['daily_bon']['total'], 1)

    def test_teknisi_counts_ignore_name_case(self):
        teknisi = TestDataFactory.create_user(role=ROLE_TEKNISI, nama_teknisi='Budi')
        TestDataFactory.create_daily_bon('A-1', teknisi='Budi')
        TestDataFactory.create_daily_bon('A-1', teknisi='BUDI', created_by=self.admin)
        TestDataFactory.create_daily_bon('A-1', teknisi='Joko')
        client = AuthenticatedAPIClient().authenticate_user(teknisi)
        response = client.get('/api/v1/dashboard/summary/')
        self.assertEqual(response.data['daily_bon']['total'], 2)

    def test_cache_invalidated_on_stock_change(self):
        first = self.client.get('/api/v1/dashboard/summary/')
        self.assertEqual(first.data['inventory']['items'], 2)
        TestDataFactory.create_item(part='C-3')
        second = self.client.get('/api/v1/dashboard/summary/')
        self.assertEqual(second.data['inventory']['items'], 3)

    def test_requires_dashboard_view(self):
        user = TestDataFactory.create_user(permissions={})
        client = AuthenticatedAPIClient().authenticate_user(user)
        response = client.get('/api/v1/dashboard/summary/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
