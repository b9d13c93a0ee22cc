from django.contrib import admin
from .models import DailyBon, BonPds, Msk


@admin.register(DailyBon)
class DailyBonAdmin(admin.ModelAdmin):
    list_display = ['part', 'qty_dailybon', 'teknisi', 'status_bon', 'tanggal_dailybon', 'no_tkl', 'stock_updated']
    list_filter = ['status_bon', 'stock_updated', 'tanggal_dailybon']
    search_fields = ['part', 'deskripsi', 'teknisi', 'no_tkl']
    ordering = ['-tanggal_dailybon', '-created_at']
    # Status changes go through the API so stock stays in sync
    readonly_fields = ['status_bon', 'stock_updated', 'created_by', 'created_at', 'updated_at']


@admin.register(BonPds)
class BonPdsAdmin(admin.ModelAdmin):
    list_display = ['no_transaksi', 'part', 'qty_bonpds', 'site_bonpds', 'status_bonpds', 'tanggal_bonpds', 'stock_updated']
    list_filter = ['status_bonpds', 'stock_updated', 'tanggal_bonpds']
    search_fields = ['no_transaksi', 'part', 'site_bonpds']
    ordering = ['-tanggal_bonpds', '-created_at']
    readonly_fields = ['status_bonpds', 'stock_updated', 'created_by', 'created_at', 'updated_at']


@admin.register(Msk)
class MskAdmin(admin.ModelAdmin):
    list_display = ['no_transaksi', 'part', 'qty_msk', 'site_msk', 'status_msk', 'tanggal_msk', 'stock_updated']
    list_filter = ['status_msk', 'stock_updated', 'tanggal_msk']
    search_fields = ['no_transaksi', 'part', 'site_msk']
    ordering = ['-tanggal_msk', '-created_at']
    readonly_fields = ['status_msk', 'stock_updated', 'created_by', 'created_at', 'updated_at']
