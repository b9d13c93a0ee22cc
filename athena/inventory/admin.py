from django.contrib import admin
from .models import InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['part', 'deskripsi', 'satuan', 'qty_baik', 'qty_rusak', 'available_qty', 'qty_real', 'lokasi', 'return_to_factory', 'updated_at']
    list_filter = ['return_to_factory', 'satuan', 'updated_at']
    search_fields = ['part', 'deskripsi', 'lokasi']
    ordering = ['part']
    readonly_fields = ['available_qty', 'qty_real', 'created_at', 'updated_at']

    def save_model(self, request, obj, form, change):
        obj.recompute_totals()
        super().save_model(request, obj, form, change)
