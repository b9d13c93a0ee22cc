import django_filters
from django.db.models import Q

from .models import InventoryItem


class InventoryItemFilter(django_filters.FilterSet):
    """Report Stock search: part or description, plus stock-state shortcuts"""

    search = django_filters.CharFilter(method='filter_search', label='Search')
    lokasi = django_filters.CharFilter(field_name='lokasi', lookup_expr='icontains')
    out_of_stock = django_filters.BooleanFilter(method='filter_out_of_stock', label='Out of Stock')
    return_to_factory = django_filters.ChoiceFilter(choices=InventoryItem.RETURN_TO_FACTORY_CHOICES)

    class Meta:
        model = InventoryItem
        fields = ['search', 'lokasi', 'out_of_stock', 'return_to_factory']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(part__icontains=value) | Q(deskripsi__icontains=value))

    def filter_out_of_stock(self, queryset, name, value):
        if value is None:
            return queryset
        if value:
            return queryset.filter(qty_baik__lte=0)
        return queryset.filter(qty_baik__gt=0)
