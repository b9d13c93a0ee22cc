from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from .models import DailyBon, BonPds, Msk
from .services import (
    apply_status_change, resolve_part, generate_pds_transaction_number,
    is_technician_only, technician_name, can_edit_record, can_delete_record,
)


class MovementSerializer(serializers.ModelSerializer):
    """Read serializer adding the per-user action flags"""
    FEATURE = None

    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)
    can_edit = serializers.SerializerMethodField()
    can_delete = serializers.SerializerMethodField()

    def _user(self):
        request = self.context.get('request')
        return getattr(request, 'user', None)

    def get_can_edit(self, obj):
        return can_edit_record(self._user(), obj, self.FEATURE)

    def get_can_delete(self, obj):
        return can_delete_record(self._user(), obj, self.FEATURE)


class MovementCreateMixin:
    """Fills description, date and initial status of a new journal record"""

    def validate_part(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Part is required.")
        return value

    def create(self, validated_data):
        model = self.Meta.model
        part, item = resolve_part(validated_data.pop('part'))
        validated_data['part'] = part
        validated_data['deskripsi'] = item.deskripsi if item else ''
        validated_data[model.STATUS_FIELD] = 'BON'
        validated_data[model.DATE_FIELD] = timezone.localdate()
        validated_data['stock_updated'] = False
        self.fill_from_item(validated_data, item)
        return super().create(validated_data)

    def fill_from_item(self, validated_data, item):
        pass


class MovementUpdateMixin:
    """Status edits move stock before the record is saved"""

    def update(self, instance, validated_data):
        with transaction.atomic():
            # Stock bookkeeping follows the stored row, not a possibly stale instance
            current = type(instance).objects.select_for_update().get(pk=instance.pk)
            instance.stock_updated = current.stock_updated
            setattr(instance, instance.STATUS_FIELD, current.status)

            new_status = validated_data.get(instance.STATUS_FIELD, instance.status)
            apply_status_change(instance, new_status)
            for attr, value in validated_data.items():
                setattr(instance, attr, value)
            instance.save()
        return instance


# Daily Bon

class DailyBonSerializer(MovementSerializer):
    FEATURE = 'dailybon'

    class Meta:
        model = DailyBon
        fields = ['id', 'part', 'deskripsi', 'qty_dailybon', 'harga', 'status_bon', 'teknisi',
                  'tanggal_dailybon', 'no_tkl', 'keterangan', 'stock_updated',
                  'created_by_username', 'created_at', 'updated_at', 'can_edit', 'can_delete']
        read_only_fields = fields


class DailyBonCreateSerializer(MovementCreateMixin, serializers.ModelSerializer):
    part = serializers.CharField(max_length=100)
    qty_dailybon = serializers.IntegerField(min_value=1)
    teknisi = serializers.CharField(max_length=150, required=False, allow_blank=True)
    keterangan = serializers.CharField(required=False, allow_blank=True, default='')

    class Meta:
        model = DailyBon
        fields = ['part', 'qty_dailybon', 'teknisi', 'keterangan']

    def validate(self, attrs):
        request = self.context.get('request')
        user = getattr(request, 'user', None)
        if is_technician_only(user):
            # Technicians always withdraw in their own name
            attrs['teknisi'] = technician_name(user)
        elif not (attrs.get('teknisi') or '').strip():
            raise serializers.ValidationError({'teknisi': 'Teknisi is required.'})
        attrs['teknisi'] = attrs['teknisi'].strip()
        return attrs

    def fill_from_item(self, validated_data, item):
        validated_data['harga'] = item.total_harga if item else 0
        validated_data['no_tkl'] = ''


class DailyBonUpdateSerializer(MovementUpdateMixin, serializers.ModelSerializer):
    no_tkl = serializers.CharField(max_length=100, required=False, allow_blank=True)
    keterangan = serializers.CharField(required=False, allow_blank=True)

    class Meta:
        model = DailyBon
        fields = ['status_bon', 'no_tkl', 'keterangan']


# Bon PDS

class BonPdsSerializer(MovementSerializer):
    FEATURE = 'bonpds'

    class Meta:
        model = BonPds
        fields = ['id', 'part', 'deskripsi', 'qty_bonpds', 'status_bonpds', 'site_bonpds',
                  'tanggal_bonpds', 'no_transaksi', 'keterangan', 'stock_updated',
                  'created_by_username', 'created_at', 'updated_at', 'can_edit', 'can_delete']
        read_only_fields = fields


class BonPdsCreateSerializer(MovementCreateMixin, serializers.ModelSerializer):
    part = serializers.CharField(max_length=100)
    qty_bonpds = serializers.IntegerField(min_value=1)
    site_bonpds = serializers.CharField(max_length=150)
    keterangan = serializers.CharField(required=False, allow_blank=True, default='')

    class Meta:
        model = BonPds
        fields = ['part', 'qty_bonpds', 'site_bonpds', 'keterangan']

    def fill_from_item(self, validated_data, item):
        validated_data['no_transaksi'] = generate_pds_transaction_number()


class BonPdsUpdateSerializer(MovementUpdateMixin, serializers.ModelSerializer):
    no_transaksi = serializers.CharField(max_length=100)
    keterangan = serializers.CharField(required=False, allow_blank=True)

    class Meta:
        model = BonPds
        fields = ['status_bonpds', 'no_transaksi', 'keterangan']

    def validate_no_transaksi(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("No. Transaksi is required.")
        return value


# MSK

class MskSerializer(MovementSerializer):
    FEATURE = 'msk'

    class Meta:
        model = Msk
        fields = ['id', 'part', 'deskripsi', 'qty_msk', 'status_msk', 'site_msk', 'tanggal_msk',
                  'no_transaksi', 'keterangan', 'stock_updated',
                  'created_by_username', 'created_at', 'updated_at', 'can_edit', 'can_delete']
        read_only_fields = fields


class MskCreateSerializer(MovementCreateMixin, serializers.ModelSerializer):
    part = serializers.CharField(max_length=100)
    qty_msk = serializers.IntegerField(min_value=1)
    site_msk = serializers.CharField(max_length=150)
    no_transaksi = serializers.CharField(max_length=100)
    keterangan = serializers.CharField(required=False, allow_blank=True, default='')

    class Meta:
        model = Msk
        fields = ['part', 'qty_msk', 'site_msk', 'no_transaksi', 'keterangan']

    def validate_no_transaksi(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("No. Transaksi is required.")
        return value


class MskUpdateSerializer(MovementUpdateMixin, serializers.ModelSerializer):
    no_transaksi = serializers.CharField(max_length=100, required=False)
    keterangan = serializers.CharField(required=False, allow_blank=True)

    class Meta:
        model = Msk
        fields = ['status_msk', 'no_transaksi', 'keterangan']

    def validate_no_transaksi(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("No. Transaksi is required.")
        return value
