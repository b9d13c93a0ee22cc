import logging
from decimal import Decimal

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.conf import settings
from django.core.cache import cache
from django.db.models import Sum, Count, F, DecimalField, ExpressionWrapper
from django.utils import timezone

from athena.core.cache_signals import DASHBOARD_CACHE_PREFIX, get_dashboard_cache_version
from athena.core.permissions import FeaturePermission
from athena.inventory.models import InventoryItem
from athena.movements.models import DailyBon, BonPds, Msk
from athena.movements.services import is_technician_only, technician_name

logger = logging.getLogger(__name__)


def _status_counts(queryset, model):
    counts = {value: 0 for value, _ in model.STATUS_CHOICES}
    for row in queryset.values(model.STATUS_FIELD).annotate(count=Count('id')):
        counts[row[model.STATUS_FIELD]] = row['count']
    counts['total'] = sum(counts.values())
    return counts


def build_dashboard_summary(user):
    """Stock totals plus per-journal status counts as seen by ``user``"""
    totals = InventoryItem.objects.aggregate(
        items=Count('id'),
        qty_baik=Sum('qty_baik'),
        qty_rusak=Sum('qty_rusak'),
        available_qty=Sum('available_qty'),
        stock_value=Sum(
            ExpressionWrapper(F('total_harga') * F('qty_baik'), output_field=DecimalField(max_digits=20, decimal_places=2))
        ),
    )
    out_of_stock = InventoryItem.objects.filter(qty_baik__lte=0).count()

    daily_bons = DailyBon.objects.all()
    if is_technician_only(user):
        daily_bons = daily_bons.filter(teknisi__iexact=technician_name(user))

    return {
        'inventory': {
            'items': totals['items'] or 0,
            'qty_baik': totals['qty_baik'] or 0,
            'qty_rusak': totals['qty_rusak'] or 0,
            'available_qty': totals['available_qty'] or 0,
            'stock_value': str(totals['stock_value'] or Decimal('0.00')),
            'out_of_stock': out_of_stock,
        },
        'daily_bon': _status_counts(daily_bons, DailyBon),
        'bon_pds': _status_counts(BonPds.objects.all(), BonPds),
        'msk': _status_counts(Msk.objects.all(), Msk),
        'generated_at': timezone.now().isoformat(),
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated, FeaturePermission('dashboard')])
def dashboard_summary(request):
    """Dashboard figures, cached per audience until stock or journals change"""
    scope = f"teknisi:{technician_name(request.user)}" if is_technician_only(request.user) else 'all'
    cache_key = f"{DASHBOARD_CACHE_PREFIX}:v{get_dashboard_cache_version()}:{scope}"

    try:
        cached = cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Dashboard summary cache HIT ({scope})")
            return Response(cached)
    except Exception as e:
        logger.warning(f"Cache unavailable, proceeding without cache: {e}")

    data = build_dashboard_summary(request.user)

    try:
        cache.set(cache_key, data, settings.DASHBOARD_CACHE_TTL)
    except Exception as e:
        logger.warning(f"Unable to cache dashboard summary: {e}")
    return Response(data)
