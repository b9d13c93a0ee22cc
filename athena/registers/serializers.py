from rest_framework import serializers

from athena.core.permissions import has_permission
from .models import Nr, Tsn, Tsp, Sob


class RegisterEntrySerializer(serializers.ModelSerializer):
    FEATURE = None

    can_edit = serializers.SerializerMethodField()
    can_delete = serializers.SerializerMethodField()

    class Meta:
        fields = ['id', 'name', 'keterangan', 'created_at', 'updated_at', 'can_edit', 'can_delete']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def _user(self):
        request = self.context.get('request')
        return getattr(request, 'user', None)

    def get_can_edit(self, obj):
        return has_permission(self._user(), self.FEATURE, 'edit')

    def get_can_delete(self, obj):
        return has_permission(self._user(), self.FEATURE, 'delete')

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value


class NrSerializer(RegisterEntrySerializer):
    FEATURE = 'nr'

    class Meta(RegisterEntrySerializer.Meta):
        model = Nr


class TsnSerializer(RegisterEntrySerializer):
    FEATURE = 'tsn'

    class Meta(RegisterEntrySerializer.Meta):
        model = Tsn


class TspSerializer(RegisterEntrySerializer):
    FEATURE = 'tsp'

    class Meta(RegisterEntrySerializer.Meta):
        model = Tsp


class SobSerializer(RegisterEntrySerializer):
    FEATURE = 'sob'

    class Meta(RegisterEntrySerializer.Meta):
        model = Sob
