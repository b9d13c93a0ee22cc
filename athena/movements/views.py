import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404

from athena.core.permissions import FeaturePermission, is_admin
from athena.core.utils import create_audit_log, paginate
from athena.inventory.services import StockError
from .filters import DailyBonFilter, BonPdsFilter, MskFilter
from .models import DailyBon, BonPds, Msk
from .serializers import (
    DailyBonSerializer, DailyBonCreateSerializer, DailyBonUpdateSerializer,
    BonPdsSerializer, BonPdsCreateSerializer, BonPdsUpdateSerializer,
    MskSerializer, MskCreateSerializer, MskUpdateSerializer,
)
from .services import is_technician_only, technician_name

logger = logging.getLogger(__name__)


def _reference(record):
    return getattr(record, 'no_transaksi', None) or getattr(record, 'no_tkl', None) or None


def _list(request, queryset, filter_class, serializer_class):
    record_filter = filter_class(request.query_params, queryset=queryset)
    if not record_filter.is_valid():
        return Response(record_filter.errors, status=status.HTTP_400_BAD_REQUEST)
    return Response(paginate(request, record_filter.qs, serializer_class))


def _create(request, create_serializer_class, serializer_class):
    serializer = create_serializer_class(data=request.data, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    record = serializer.save(created_by=request.user)
    create_audit_log(
        request=request,
        action='create',
        model_name=record.__class__.__name__,
        object_id=record.id,
        object_name=record.part,
        object_reference=_reference(record),
        changes={'quantity': record.quantity, 'status': record.status},
    )
    logger.info(f"{record.__class__.__name__} {record.id} created for part {record.part} by {request.user.username}")
    return Response(serializer_class(record, context={'request': request}).data, status=status.HTTP_201_CREATED)


def _update(request, record, update_serializer_class, serializer_class):
    """Apply an edit and its stock effect atomically; stock failures roll back both"""
    model = record.__class__
    try:
        with transaction.atomic():
            # Concurrent edits of the same record queue on this row lock
            record = model.objects.select_for_update().get(pk=record.pk)
            if record.is_locked and not is_admin(request.user):
                return Response(
                    {'detail': f'{record.status} records can only be changed by an Admin.'},
                    status=status.HTTP_403_FORBIDDEN
                )

            previous_status = record.status
            serializer = update_serializer_class(record, data=request.data, partial=request.method == 'PATCH')
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
            record = serializer.save()
    except StockError as e:
        logger.warning(f"{model.__name__} {record.pk} update rejected: {e}")
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    record.refresh_from_db()
    create_audit_log(
        request=request,
        action='update',
        model_name=record.__class__.__name__,
        object_id=record.id,
        object_name=record.part,
        object_reference=_reference(record),
        changes={
            'status': {'from': previous_status, 'to': record.status},
            'stock_updated': record.stock_updated,
            'fields': sorted(serializer.validated_data.keys()),
        },
    )
    return Response(serializer_class(record, context={'request': request}).data)


def _delete(request, record):
    """Removes the record only; Report Stock is not touched"""
    create_audit_log(
        request=request,
        action='delete',
        model_name=record.__class__.__name__,
        object_id=record.id,
        object_name=record.part,
        object_reference=_reference(record),
        changes={'quantity': record.quantity, 'status': record.status, 'stock_updated': record.stock_updated},
    )
    record.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


def _daily_bon_queryset(user):
    queryset = DailyBon.objects.select_related('created_by')
    if is_technician_only(user):
        queryset = queryset.filter(teknisi__iexact=technician_name(user))
    return queryset


# Daily Bon views

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, FeaturePermission('dailybon')])
def daily_bon_list_create(request):
    """List daily bons (technicians see their own) or record a new withdrawal"""
    if request.method == 'GET':
        return _list(request, _daily_bon_queryset(request.user), DailyBonFilter, DailyBonSerializer)
    return _create(request, DailyBonCreateSerializer, DailyBonSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, FeaturePermission('dailybon')])
def daily_bon_detail(request, pk):
    bon = get_object_or_404(_daily_bon_queryset(request.user), pk=pk)

    if request.method == 'GET':
        return Response(DailyBonSerializer(bon, context={'request': request}).data)
    elif request.method in ('PUT', 'PATCH'):
        return _update(request, bon, DailyBonUpdateSerializer, DailyBonSerializer)
    else:  # DELETE
        return _delete(request, bon)


# Bon PDS views

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, FeaturePermission('bonpds')])
def bon_pds_list_create(request):
    if request.method == 'GET':
        return _list(request, BonPds.objects.select_related('created_by'), BonPdsFilter, BonPdsSerializer)
    return _create(request, BonPdsCreateSerializer, BonPdsSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, FeaturePermission('bonpds')])
def bon_pds_detail(request, pk):
    bon = get_object_or_404(BonPds, pk=pk)

    if request.method == 'GET':
        return Response(BonPdsSerializer(bon, context={'request': request}).data)
    elif request.method in ('PUT', 'PATCH'):
        return _update(request, bon, BonPdsUpdateSerializer, BonPdsSerializer)
    else:  # DELETE
        return _delete(request, bon)


# MSK views

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, FeaturePermission('msk')])
def msk_list_create(request):
    if request.method == 'GET':
        return _list(request, Msk.objects.select_related('created_by'), MskFilter, MskSerializer)
    return _create(request, MskCreateSerializer, MskSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, FeaturePermission('msk')])
def msk_detail(request, pk):
    msk = get_object_or_404(Msk, pk=pk)

    if request.method == 'GET':
        return Response(MskSerializer(msk, context={'request': request}).data)
    elif request.method in ('PUT', 'PATCH'):
        return _update(request, msk, MskUpdateSerializer, MskSerializer)
    else:  # DELETE
        return _delete(request, msk)
