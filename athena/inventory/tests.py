"""
Test suite for the Report Stock module
Tests: listing/search, manual stock count, stock service, Excel import/export, delete-all
"""
import io
import os
import tempfile
from decimal import Decimal
from io import StringIO

import openpyxl
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status

from athena.core.models import AuditLog
from athena.core.permissions import ROLE_ADMIN, ROLE_MANAGER, ROLE_TEKNISI
from athena.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from athena.inventory.excel import import_inventory, export_inventory, ImportFormatError
from athena.inventory.models import InventoryItem
from athena.inventory.services import adjust_good_stock, find_item, PartNotFound, InsufficientStock


def xlsx_upload(buffer, name='report_stock.xlsx'):
    return SimpleUploadedFile(
        name, buffer.getvalue(),
        content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )


class StockServiceTests(TestCase):

    def setUp(self):
        self.item = TestDataFactory.create_item(part='ABC-1', qty_baik=5, qty_rusak=2)

    def test_find_item_case_insensitive(self):
        self.assertEqual(find_item('abc-1'), self.item)
        self.assertEqual(find_item(' ABC-1 '), self.item)
        self.assertIsNone(find_item('XYZ'))
        self.assertIsNone(find_item(''))

    def test_adjust_moves_good_and_available_only(self):
        adjust_good_stock('ABC-1', -3)
        self.item.refresh_from_db()
        self.assertEqual(self.item.qty_baik, 2)
        self.assertEqual(self.item.available_qty, 4)
        self.assertEqual(self.item.qty_real, 7)
        self.assertEqual(self.item.qty_rusak, 2)

    def test_adjust_rejects_negative_good_stock(self):
        with self.assertRaises(InsufficientStock):
            adjust_good_stock('ABC-1', -6)
        self.item.refresh_from_db()
        self.assertEqual(self.item.qty_baik, 5)

    def test_adjust_unknown_part(self):
        with self.assertRaises(PartNotFound):
            adjust_good_stock('NOPE', 1)


class InventoryAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.item = TestDataFactory.create_item(part='FLT-001', deskripsi='Oil filter', qty_baik=4, qty_rusak=1)
        TestDataFactory.create_item(part='BRG-200', deskripsi='Bearing 6204', qty_baik=0)

    def test_list_paginated(self):
        response = self.client.get('/api/v1/inventory/?limit=1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['total_pages'], 2)
        self.assertEqual(len(response.data['results']), 1)
        self.assertTrue(response.data['results'][0]['can_edit'])

    def test_search_part_or_description(self):
        response = self.client.get('/api/v1/inventory/?search=bearing')
        self.assertEqual([r['part'] for r in response.data['results']], ['BRG-200'])
        response = self.client.get('/api/v1/inventory/?search=flt')
        self.assertEqual([r['part'] for r in response.data['results']], ['FLT-001'])

    def test_out_of_stock_filter(self):
        response = self.client.get('/api/v1/inventory/?out_of_stock=true')
        self.assertEqual([r['part'] for r in response.data['results']], ['BRG-200'])

    def test_stock_count_recomputes_totals(self):
        response = self.client.patch(f'/api/v1/inventory/{self.item.id}/', {'qty_baik': 7, 'qty_rusak': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['available_qty'], 10)
        self.assertEqual(response.data['qty_real'], 10)
        self.assertTrue(AuditLog.objects.filter(action='stock_adjust', object_name='FLT-001').exists())

    def test_stock_count_ignores_other_fields(self):
        response = self.client.patch(f'/api/v1/inventory/{self.item.id}/', {'qty_baik': 2, 'deskripsi': 'changed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.item.refresh_from_db()
        self.assertEqual(self.item.deskripsi, 'Oil filter')
        self.assertEqual(self.item.available_qty, 3)

    def test_negative_quantity_rejected(self):
        response = self.client.patch(f'/api/v1/inventory/{self.item.id}/', {'qty_rusak': -1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_lookup(self):
        response = self.client.get('/api/v1/inventory/lookup/?part=flt-001')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['deskripsi'], 'Oil filter')
        self.assertEqual(Decimal(response.data['total_harga']), Decimal('11100.00'))

    def test_lookup_unknown(self):
        response = self.client.get('/api/v1/inventory/lookup/?part=none')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_all(self):
        response = self.client.delete('/api/v1/inventory/delete-all/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(InventoryItem.objects.count(), 0)
        self.assertTrue(AuditLog.objects.filter(action='stock_delete_all').exists())

    def test_manager_cannot_delete(self):
        manager = TestDataFactory.create_user(role=ROLE_MANAGER)
        client = AuthenticatedAPIClient().authenticate_user(manager)
        response = client.delete(f'/api/v1/inventory/{self.item.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = client.get('/api/v1/inventory/')
        self.assertFalse(response.data['results'][0]['can_delete'])

    def test_teknisi_is_read_only(self):
        teknisi = TestDataFactory.create_user(role=ROLE_TEKNISI)
        client = AuthenticatedAPIClient().authenticate_user(teknisi)
        self.assertEqual(client.get('/api/v1/inventory/').status_code, status.HTTP_200_OK)
        response = client.patch(f'/api/v1/inventory/{self.item.id}/', {'qty_baik': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ExcelTests(TestCase):

    def test_import_upserts_and_recomputes(self):
        TestDataFactory.create_item(part='FLT-001', qty_baik=1)
        workbook = TestDataFactory.build_workbook([
            ['FLT-001', 'Oil filter', 10000, 1100, 11100, None, 6, 2, 'RAK-1', 'YES'],
            ['NEW-9', 'Gasket', '5000', '550', '5550', 'set', None, 1, None, 0],
            [None, 'orphan row', 1, 1, 1, 'pcs', 1, 1, None, None],
        ])
        imported = import_inventory(workbook)
        self.assertEqual(imported, 2)

        filter_item = InventoryItem.objects.get(part='FLT-001')
        self.assertEqual(filter_item.qty_baik, 6)
        self.assertEqual(filter_item.available_qty, 8)
        self.assertEqual(filter_item.qty_real, 8)
        self.assertEqual(filter_item.satuan, 'pcs')
        self.assertEqual(filter_item.return_to_factory, 'YES')

        gasket = InventoryItem.objects.get(part='NEW-9')
        self.assertEqual(gasket.qty_baik, 0)
        self.assertEqual(gasket.available_qty, 1)
        self.assertEqual(gasket.total_harga, Decimal('5550'))
        self.assertEqual(gasket.return_to_factory, 'NO')

    def test_import_matches_existing_part_ignoring_case(self):
        TestDataFactory.create_item(part='abc-1', qty_baik=1)
        workbook = TestDataFactory.build_workbook([['ABC-1', 'Seal kit', 1, 1, 2, 'pcs', 9, 0, 'R3', 'NO']])
        import_inventory(workbook)
        self.assertEqual(InventoryItem.objects.filter(part__iexact='abc-1').count(), 1)
        item = InventoryItem.objects.get(part__iexact='abc-1')
        self.assertEqual(item.part, 'abc-1')
        self.assertEqual(item.qty_baik, 9)
        self.assertEqual(item.deskripsi, 'Seal kit')

    def test_import_non_finite_numbers_count_as_zero(self):
        workbook = TestDataFactory.build_workbook([['INF-1', 'Odd cells', 'inf', 'nan', '-Infinity', 'pcs', 'inf', 'NaN', None, 'nan']])
        import_inventory(workbook)
        item = InventoryItem.objects.get(part='INF-1')
        self.assertEqual(item.harga_dpp, Decimal('0'))
        self.assertEqual(item.total_harga, Decimal('0'))
        self.assertEqual(item.qty_baik, 0)
        self.assertEqual(item.qty_rusak, 0)
        self.assertEqual(item.return_to_factory, 'NO')

    def test_import_rejects_quantity_out_of_range(self):
        TestDataFactory.create_item(part='BIG-0', qty_baik=3)
        workbook = TestDataFactory.build_workbook([
            ['BIG-0', 'Kept', 1, 1, 2, 'pcs', 5, 0, None, 'NO'],
            ['BIG-1', 'Huge', 1, 1, 2, 'pcs', '99999999999', 0, None, 'NO'],
        ])
        with self.assertRaises(ImportFormatError):
            import_inventory(workbook)
        self.assertEqual(InventoryItem.objects.get(part='BIG-0').qty_baik, 3)
        self.assertFalse(InventoryItem.objects.filter(part='BIG-1').exists())

    def test_import_endpoint_quantity_out_of_range(self):
        admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        client = AuthenticatedAPIClient().authenticate_user(admin)
        workbook = TestDataFactory.build_workbook([['BIG-2', 'Huge', 1, 1, 2, 'pcs', 1, '1e12', None, 'NO']])
        response = client.post('/api/v1/inventory/import/', {'file': xlsx_upload(workbook)}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('out of range', response.data['error'])
        self.assertFalse(InventoryItem.objects.filter(part='BIG-2').exists())

    def test_import_requires_part_column(self):
        workbook = TestDataFactory.build_workbook([['x', 1]], header=['item', 'qty'])
        with self.assertRaises(ImportFormatError):
            import_inventory(workbook)

    def test_import_rejects_non_excel(self):
        with self.assertRaises(ImportFormatError):
            import_inventory(io.BytesIO(b'not a workbook'))

    def test_export_layout(self):
        TestDataFactory.create_item(part='B-2')
        TestDataFactory.create_item(part='A-1')
        workbook = openpyxl.load_workbook(io.BytesIO(export_inventory()))
        worksheet = workbook.active
        self.assertEqual(worksheet.title, 'Report Stock')
        header = [cell.value for cell in worksheet[1]]
        self.assertEqual(header[0], 'part')
        self.assertNotIn('id', header)
        self.assertEqual(worksheet.cell(row=2, column=1).value, 'A-1')

    def test_import_endpoint(self):
        admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        client = AuthenticatedAPIClient().authenticate_user(admin)
        workbook = TestDataFactory.build_workbook([['P-1', 'Part one', 1, 1, 2, 'pcs', 3, 0, 'R1', 'NO']])
        response = client.post('/api/v1/inventory/import/', {'file': xlsx_upload(workbook)}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['imported'], 1)
        self.assertTrue(AuditLog.objects.filter(action='stock_import').exists())

    def test_import_endpoint_bad_format(self):
        admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        client = AuthenticatedAPIClient().authenticate_user(admin)
        workbook = TestDataFactory.build_workbook([['x']], header=['nama'])
        response = client.post('/api/v1/inventory/import/', {'file': xlsx_upload(workbook)}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('part', response.data['error'])

    def test_import_endpoint_wrong_extension(self):
        admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        client = AuthenticatedAPIClient().authenticate_user(admin)
        upload = SimpleUploadedFile('stock.csv', b'part\nA', content_type='text/csv')
        response = client.post('/api/v1/inventory/import/', {'file': upload}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_export_endpoint(self):
        TestDataFactory.create_item(part='EXP-1')
        admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        client = AuthenticatedAPIClient().authenticate_user(admin)
        response = client.get('/api/v1/inventory/export/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('report_stock.xlsx', response['Content-Disposition'])

    def test_export_endpoint_empty(self):
        admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        client = AuthenticatedAPIClient().authenticate_user(admin)
        response = client.get('/api/v1/inventory/export/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_import_command(self):
        workbook = TestDataFactory.build_workbook([['CMD-1', 'From command', 1, 1, 2, 'pcs', 2, 2, 'R2', 'NO']])
        with tempfile.NamedTemporaryFile(suffix='.xlsx', delete=False) as f:
            f.write(workbook.getvalue())
            path = f.name
        try:
            call_command('import_report_stock', path, stdout=StringIO())
        finally:
            os.remove(path)
        self.assertEqual(InventoryItem.objects.get(part='CMD-1').qty_real, 4)
