"""
Test utilities and factories for creating test data
"""
import io
import random
import string
from decimal import Decimal

import openpyxl
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from athena.core.permissions import ROLE_VIEWER, default_permissions
from athena.inventory.models import InventoryItem
from athena.movements.models import DailyBon, BonPds, Msk
from athena.registers.models import Nr

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role=ROLE_VIEWER,
                    nama_teknisi=None, is_staff=False, is_superuser=False, permissions=None):
        """Create a test user carrying the default permissions of ``role``"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser,
            role=role,
            nama_teknisi=nama_teknisi if nama_teknisi is not None else username.title(),
            nik=f'NIK{random.randint(10000, 99999)}',
            permissions=permissions if permissions is not None else default_permissions(role),
        )
        return user

    @staticmethod
    def create_item(part=None, qty_baik=10, qty_rusak=0, total_harga=None, deskripsi=None):
        """Create a Report Stock row with consistent totals"""
        if not part:
            part = f'PART-{TestDataFactory.random_string(6).upper()}'
        if total_harga is None:
            total_harga = Decimal('11100.00')
        return InventoryItem.objects.create(
            part=part,
            deskripsi=deskripsi or f'Test part {part}',
            harga_dpp=Decimal('10000.00'),
            ppn=Decimal('1100.00'),
            total_harga=total_harga,
            satuan='pcs',
            qty_baik=qty_baik,
            qty_rusak=qty_rusak,
            available_qty=qty_baik + qty_rusak,
            qty_real=qty_baik + qty_rusak,
            lokasi='RAK-A1',
        )

    @staticmethod
    def create_daily_bon(part, qty=1, teknisi='Budi', status_bon='BON', stock_updated=None, created_by=None):
        """Create a daily bon row directly (no stock effect)"""
        if stock_updated is None:
            stock_updated = status_bon in DailyBon.STOCK_STATUSES
        return DailyBon.objects.create(
            part=part,
            deskripsi=f'Test part {part}',
            qty_dailybon=qty,
            harga=Decimal('0.00'),
            status_bon=status_bon,
            teknisi=teknisi,
            tanggal_dailybon=timezone.localdate(),
            stock_updated=stock_updated,
            created_by=created_by,
        )

    @staticmethod
    def create_bon_pds(part, qty=1, site='SITE-01', status_bonpds='BON', stock_updated=None):
        if stock_updated is None:
            stock_updated = status_bonpds in BonPds.STOCK_STATUSES
        return BonPds.objects.create(
            part=part,
            qty_bonpds=qty,
            site_bonpds=site,
            status_bonpds=status_bonpds,
            tanggal_bonpds=timezone.localdate(),
            no_transaksi=f'TRX-PDS-{random.randint(10 ** 12, 10 ** 13)}',
            stock_updated=stock_updated,
        )

    @staticmethod
    def create_msk(part, qty=1, site='GUDANG PUSAT', status_msk='BON', no_transaksi=None, stock_updated=None):
        if stock_updated is None:
            stock_updated = status_msk in Msk.STOCK_STATUSES
        return Msk.objects.create(
            part=part,
            qty_msk=qty,
            site_msk=site,
            status_msk=status_msk,
            tanggal_msk=timezone.localdate(),
            no_transaksi=no_transaksi or f'MSK-{TestDataFactory.random_string(6).upper()}',
            stock_updated=stock_updated,
        )

    @staticmethod
    def create_nr(name=None):
        return Nr.objects.create(name=name or f'NR {TestDataFactory.random_string(6)}')

    @staticmethod
    def build_workbook(rows, header=None):
        """Return an in-memory .xlsx file with ``header`` followed by ``rows``"""
        workbook = openpyxl.Workbook()
        worksheet = workbook.active
        worksheet.append(header or ['part', 'deskripsi', 'harga_dpp', 'ppn', 'total_harga', 'satuan',
                                    'qty_baik', 'qty_rusak', 'lokasi', 'return_to_factory'])
        for row in rows:
            worksheet.append(row)
        output = io.BytesIO()
        workbook.save(output)
        output.seek(0)
        output.name = 'report_stock.xlsx'
        return output


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
