from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class InventoryItem(models.Model):
    """A spare part held in the warehouse (one row of the Report Stock)"""
    RETURN_TO_FACTORY_CHOICES = [
        ('YES', 'Yes'),
        ('NO', 'No'),
    ]

    part = models.CharField(max_length=100, unique=True)
    deskripsi = models.CharField(max_length=255, blank=True)
    harga_dpp = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    ppn = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_harga = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    satuan = models.CharField(max_length=20, default='pcs')
    available_qty = models.IntegerField(default=0)
    qty_baik = models.IntegerField(default=0, help_text="Good-condition quantity")
    qty_rusak = models.IntegerField(default=0, help_text="Damaged quantity")
    lokasi = models.CharField(max_length=100, blank=True)
    return_to_factory = models.CharField(max_length=3, choices=RETURN_TO_FACTORY_CHOICES, default='NO')
    qty_real = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.part

    def clean(self):
        if self.qty_baik < 0 or self.qty_rusak < 0:
            raise ValidationError('Stock quantities cannot be negative')

    def recompute_totals(self):
        """Counted stock: available and real quantity are good + damaged"""
        self.available_qty = self.qty_baik + self.qty_rusak
        self.qty_real = self.qty_baik + self.qty_rusak

    class Meta:
        db_table = 'inventory_items'
        ordering = ['part']
        indexes = [
            models.Index(fields=['deskripsi'], name='idx_inventory_deskripsi'),
        ]
