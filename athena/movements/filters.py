import django_filters
from django.db.models import Q

from .models import DailyBon, BonPds, Msk


class DailyBonFilter(django_filters.FilterSet):
    teknisi = django_filters.CharFilter(field_name='teknisi', lookup_expr='iexact')
    status = django_filters.ChoiceFilter(field_name='status_bon', choices=DailyBon.STATUS_CHOICES)
    search = django_filters.CharFilter(method='filter_search', label='Search')
    date_from = django_filters.DateFilter(field_name='tanggal_dailybon', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='tanggal_dailybon', lookup_expr='lte')

    class Meta:
        model = DailyBon
        fields = ['teknisi', 'status', 'search', 'date_from', 'date_to']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(part__icontains=value) | Q(deskripsi__icontains=value) | Q(no_tkl__icontains=value))


class BonPdsFilter(django_filters.FilterSet):
    """Search matches the destination site or the part number"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.ChoiceFilter(field_name='status_bonpds', choices=BonPds.STATUS_CHOICES)

    class Meta:
        model = BonPds
        fields = ['search', 'status']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(site_bonpds__icontains=value) | Q(part__icontains=value))


class MskFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(field_name='no_transaksi', lookup_expr='icontains')
    status = django_filters.ChoiceFilter(field_name='status_msk', choices=Msk.STATUS_CHOICES)

    class Meta:
        model = Msk
        fields = ['search', 'status']
