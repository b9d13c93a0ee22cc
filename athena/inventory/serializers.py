from rest_framework import serializers

from athena.core.permissions import has_permission
from .models import InventoryItem


class InventoryItemSerializer(serializers.ModelSerializer):
    can_edit = serializers.SerializerMethodField()
    can_delete = serializers.SerializerMethodField()

    class Meta:
        model = InventoryItem
        fields = ['id', 'part', 'deskripsi', 'harga_dpp', 'ppn', 'total_harga', 'satuan',
                  'available_qty', 'qty_baik', 'qty_rusak', 'lokasi', 'return_to_factory', 'qty_real',
                  'can_edit', 'can_delete', 'created_at', 'updated_at']
        read_only_fields = fields

    def _user(self):
        request = self.context.get('request')
        return getattr(request, 'user', None)

    def get_can_edit(self, obj):
        return has_permission(self._user(), 'reportstock', 'edit')

    def get_can_delete(self, obj):
        return has_permission(self._user(), 'reportstock', 'delete')


class StockCountSerializer(serializers.ModelSerializer):
    """Manual stock count: only good and damaged quantities are editable"""
    qty_baik = serializers.IntegerField(min_value=0)
    qty_rusak = serializers.IntegerField(min_value=0)

    class Meta:
        model = InventoryItem
        fields = ['qty_baik', 'qty_rusak']

    def update(self, instance, validated_data):
        instance.qty_baik = validated_data.get('qty_baik', instance.qty_baik)
        instance.qty_rusak = validated_data.get('qty_rusak', instance.qty_rusak)
        instance.recompute_totals()
        instance.save()
        return instance


class PartLookupSerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryItem
        fields = ['id', 'part', 'deskripsi', 'total_harga', 'satuan', 'qty_baik', 'available_qty']


class InventoryImportSerializer(serializers.Serializer):
    file = serializers.FileField()

    def validate_file(self, value):
        name = (value.name or '').lower()
        if not name.endswith(('.xlsx', '.xlsm')):
            raise serializers.ValidationError("Upload an Excel .xlsx file.")
        return value
