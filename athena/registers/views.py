from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404

from athena.core.permissions import FeaturePermission
from athena.core.utils import create_audit_log, paginate
from .models import Nr, Tsn, Tsp, Sob
from .serializers import NrSerializer, TsnSerializer, TspSerializer, SobSerializer


def _list_create(request, model, serializer_class):
    if request.method == 'GET':
        queryset = model.objects.all()
        search = request.query_params.get('search', '').strip()
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(keterangan__icontains=search))
        return Response(paginate(request, queryset, serializer_class))

    serializer = serializer_class(data=request.data, context={'request': request})
    if serializer.is_valid():
        entry = serializer.save()
        create_audit_log(
            request=request,
            action='create',
            model_name=model.__name__,
            object_id=entry.id,
            object_name=entry.name,
            changes=serializer.validated_data,
        )
        return Response(serializer_class(entry, context={'request': request}).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


def _detail(request, model, serializer_class, pk):
    entry = get_object_or_404(model, pk=pk)

    if request.method == 'GET':
        return Response(serializer_class(entry, context={'request': request}).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = serializer_class(entry, data=request.data, partial=request.method == 'PATCH', context={'request': request})
        if serializer.is_valid():
            entry = serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name=model.__name__,
                object_id=entry.id,
                object_name=entry.name,
                changes=serializer.validated_data,
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(
            request=request,
            action='delete',
            model_name=model.__name__,
            object_id=entry.id,
            object_name=entry.name,
        )
        entry.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, FeaturePermission('nr')])
def nr_list_create(request):
    return _list_create(request, Nr, NrSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, FeaturePermission('nr')])
def nr_detail(request, pk):
    return _detail(request, Nr, NrSerializer, pk)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, FeaturePermission('tsn')])
def tsn_list_create(request):
    return _list_create(request, Tsn, TsnSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, FeaturePermission('tsn')])
def tsn_detail(request, pk):
    return _detail(request, Tsn, TsnSerializer, pk)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, FeaturePermission('tsp')])
def tsp_list_create(request):
    return _list_create(request, Tsp, TspSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, FeaturePermission('tsp')])
def tsp_detail(request, pk):
    return _detail(request, Tsp, TspSerializer, pk)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, FeaturePermission('sob')])
def sob_list_create(request):
    return _list_create(request, Sob, SobSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, FeaturePermission('sob')])
def sob_detail(request, pk):
    return _detail(request, Sob, SobSerializer, pk)
