import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.http import HttpResponse
from django.shortcuts import get_object_or_404

from athena.core.cache_signals import suspend_cache_signals, invalidate_dashboard_cache
from athena.core.permissions import FeaturePermission, has_permission
from athena.core.utils import create_audit_log, paginate
from .excel import ImportFormatError, import_inventory, export_inventory, EXPORT_FILENAME
from .filters import InventoryItemFilter
from .models import InventoryItem
from .serializers import (
    InventoryItemSerializer, StockCountSerializer, PartLookupSerializer, InventoryImportSerializer
)
from .services import find_item

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


@api_view(['GET'])
@permission_classes([IsAuthenticated, FeaturePermission('reportstock')])
def inventory_list(request):
    """Report Stock listing with search and pagination"""
    item_filter = InventoryItemFilter(request.query_params, queryset=InventoryItem.objects.all())
    if not item_filter.is_valid():
        return Response(item_filter.errors, status=status.HTTP_400_BAD_REQUEST)
    queryset = item_filter.qs.order_by('part')
    return Response(paginate(request, queryset, InventoryItemSerializer))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, FeaturePermission('reportstock')])
def inventory_detail(request, pk):
    """Retrieve an item, record a manual stock count, or delete the item"""
    item = get_object_or_404(InventoryItem, pk=pk)

    if request.method == 'GET':
        serializer = InventoryItemSerializer(item, context={'request': request})
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        previous = {'qty_baik': item.qty_baik, 'qty_rusak': item.qty_rusak}
        serializer = StockCountSerializer(item, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            item = serializer.save()
            create_audit_log(
                request=request,
                action='stock_adjust',
                model_name='InventoryItem',
                object_id=item.id,
                object_name=item.part,
                changes={
                    'previous': previous,
                    'qty_baik': item.qty_baik,
                    'qty_rusak': item.qty_rusak,
                    'available_qty': item.available_qty,
                    'qty_real': item.qty_real,
                },
            )
            return Response(InventoryItemSerializer(item, context={'request': request}).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(
            request=request,
            action='delete',
            model_name='InventoryItem',
            object_id=item.id,
            object_name=item.part,
            changes={'deskripsi': item.deskripsi, 'qty_baik': item.qty_baik, 'qty_rusak': item.qty_rusak},
        )
        item.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, FeaturePermission('reportstock')])
def inventory_delete_all(request):
    """Remove every Report Stock row in one transaction"""
    with transaction.atomic(), suspend_cache_signals():
        deleted, _ = InventoryItem.objects.all().delete()
    invalidate_dashboard_cache()
    create_audit_log(
        request=request,
        action='stock_delete_all',
        model_name='InventoryItem',
        object_id='*',
        changes={'deleted': deleted},
    )
    logger.info(f"Deleted all inventory items ({deleted} rows)")
    return Response({'deleted': deleted})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_lookup(request):
    """Auto-fill for movement forms: description and price of a part"""
    part = request.query_params.get('part', '').strip()
    if not part:
        return Response({'error': 'part is required'}, status=status.HTTP_400_BAD_REQUEST)
    item = find_item(part)
    if item is None:
        return Response({'error': f'Part {part} not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(PartLookupSerializer(item).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def inventory_import(request):
    """Upsert Report Stock rows from an uploaded Excel workbook"""
    if not has_permission(request.user, 'reportstock', 'edit'):
        return Response({'detail': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    serializer = InventoryImportSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        imported = import_inventory(serializer.validated_data['file'])
    except ImportFormatError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    create_audit_log(
        request=request,
        action='stock_import',
        model_name='InventoryItem',
        object_id='*',
        object_reference=serializer.validated_data['file'].name,
        changes={'imported': imported},
    )
    return Response({'imported': imported}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, FeaturePermission('reportstock')])
def inventory_export(request):
    """Download the Report Stock as report_stock.xlsx"""
    if not InventoryItem.objects.exists():
        return Response({'error': 'No data to export.'}, status=status.HTTP_404_NOT_FOUND)
    content = export_inventory()
    response = HttpResponse(content, content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename="{EXPORT_FILENAME}"'
    return response
