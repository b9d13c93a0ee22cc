from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class StockMovement(models.Model):
    """
    Common shape of the movement journals.

    Subclasses name their quantity and status columns and declare which
    statuses mean the quantity is reflected in Report Stock
    (``STOCK_STATUSES``) and in which direction (``STOCK_DIRECTION``:
    -1 takes stock out, +1 brings it in).
    """
    QTY_FIELD = None
    STATUS_FIELD = None
    DATE_FIELD = None
    STOCK_STATUSES = frozenset()
    STOCK_DIRECTION = -1
    # Non-admins cannot edit a record once it reaches one of these
    LOCKED_STATUSES = frozenset({'RECEIVED', 'CANCELED'})

    part = models.CharField(max_length=100)
    deskripsi = models.CharField(max_length=255, blank=True)
    keterangan = models.TextField(blank=True)
    stock_updated = models.BooleanField(default=False)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    @property
    def quantity(self):
        return getattr(self, self.QTY_FIELD)

    @property
    def status(self):
        return getattr(self, self.STATUS_FIELD)

    @property
    def is_locked(self):
        return self.status in self.LOCKED_STATUSES


class DailyBon(StockMovement):
    """A technician's withdrawal of a spare part"""
    STATUS_CHOICES = [
        ('BON', 'Bon'),
        ('RECEIVED', 'Received'),
        ('KMP', 'KMP'),
        ('CANCELED', 'Canceled'),
    ]
    QTY_FIELD = 'qty_dailybon'
    STATUS_FIELD = 'status_bon'
    DATE_FIELD = 'tanggal_dailybon'
    STOCK_STATUSES = frozenset({'RECEIVED', 'KMP'})
    STOCK_DIRECTION = -1

    qty_dailybon = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    harga = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    status_bon = models.CharField(max_length=10, choices=STATUS_CHOICES, default='BON')
    teknisi = models.CharField(max_length=150)
    tanggal_dailybon = models.DateField()
    no_tkl = models.CharField(max_length=100, blank=True)

    def __str__(self):
        return f"{self.part} x{self.qty_dailybon} ({self.teknisi})"

    class Meta:
        db_table = 'daily_bons'
        ordering = ['-tanggal_dailybon', '-created_at']
        indexes = [
            models.Index(fields=['teknisi'], name='idx_dailybon_teknisi'),
            models.Index(fields=['status_bon'], name='idx_dailybon_status'),
        ]


class BonPds(StockMovement):
    """A transfer of stock out to an external site"""
    STATUS_CHOICES = [
        ('BON', 'Bon'),
        ('RECEIVED', 'Received'),
        ('CANCELED', 'Canceled'),
    ]
    QTY_FIELD = 'qty_bonpds'
    STATUS_FIELD = 'status_bonpds'
    DATE_FIELD = 'tanggal_bonpds'
    STOCK_STATUSES = frozenset({'RECEIVED'})
    STOCK_DIRECTION = -1

    qty_bonpds = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status_bonpds = models.CharField(max_length=10, choices=STATUS_CHOICES, default='BON')
    site_bonpds = models.CharField(max_length=150)
    tanggal_bonpds = models.DateField()
    no_transaksi = models.CharField(max_length=100)

    def __str__(self):
        return self.no_transaksi or f"{self.part} -> {self.site_bonpds}"

    class Meta:
        db_table = 'bon_pds'
        ordering = ['-tanggal_bonpds', '-created_at']
        verbose_name = 'Bon PDS'
        verbose_name_plural = 'Bon PDS'
        indexes = [
            models.Index(fields=['status_bonpds'], name='idx_bonpds_status'),
        ]


class Msk(StockMovement):
    """Stock coming in from a site or the central warehouse"""
    STATUS_CHOICES = [
        ('BON', 'Bon'),
        ('RECEIVED', 'Received'),
        ('CANCELED', 'Canceled'),
    ]
    QTY_FIELD = 'qty_msk'
    STATUS_FIELD = 'status_msk'
    DATE_FIELD = 'tanggal_msk'
    STOCK_STATUSES = frozenset({'RECEIVED'})
    STOCK_DIRECTION = 1

    qty_msk = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status_msk = models.CharField(max_length=10, choices=STATUS_CHOICES, default='BON')
    site_msk = models.CharField(max_length=150)
    tanggal_msk = models.DateField()
    no_transaksi = models.CharField(max_length=100)

    def __str__(self):
        return self.no_transaksi

    class Meta:
        db_table = 'msk'
        ordering = ['-tanggal_msk', '-created_at']
        verbose_name = 'MSK'
        verbose_name_plural = 'MSK'
        indexes = [
            models.Index(fields=['status_msk'], name='idx_msk_status'),
            models.Index(fields=['no_transaksi'], name='idx_msk_no_transaksi'),
        ]
