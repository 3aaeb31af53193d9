"""
Inventory endpoints: medicines, supplies, stock transactions,
categories and suppliers.

``kind`` in the URL is either ``medicines`` or ``supplies``; both share
the same views and table layout.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import Category
from clinic.serializers.inventory import (
    CategorySerializer,
    InventoryItemSerializer,
    StockAdjustSerializer,
    SupplierSerializer,
)
from clinic.services import tables
from clinic.services.inventory import (
    REPOSITORIES,
    CategoryRepository,
    adjust_stock,
    categories,
    suppliers,
    transactions,
)

from ..permissions import IsAdminRole, IsClinicalRole, is_admin

TABLES = {
    'medicines': tables.MEDICINES,
    'supplies': tables.SUPPLIES,
}


def _repository(kind: str):
    repo = REPOSITORIES.get(kind)
    if repo is None:
        raise NotFound(f'unknown inventory kind: {kind}')
    return repo


# ---------------------------------------------------------------------
# Medicines / supplies
# ---------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def item_list(request, kind: str):
    repo = _repository(kind)
    if request.method == 'POST':
        s = InventoryItemSerializer(data=request.data, item_type=repo.item_type)
        s.is_valid(raise_exception=True)
        record = repo.save(s.to_model_data(), request.user)
        return Response({'ok': True, 'data': record}, status=status.HTTP_201_CREATED)
    return tables.table_response(request, TABLES[kind], repo.get_all())


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def item_detail(request, kind: str, pk: int):
    repo = _repository(kind)
    obj = repo.get_object(pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': repo.to_record(obj)})
    if request.method == 'DELETE':
        if not is_admin(request.user):
            raise PermissionDenied('Only administrators can delete inventory items')
        repo.delete(pk, request.user)
        return Response({'ok': True})
    s = InventoryItemSerializer(obj, data=request.data, partial=True, item_type=repo.item_type)
    s.is_valid(raise_exception=True)
    record = repo.save({**s.to_model_data(), 'id': pk}, request.user)
    return Response({'ok': True, 'data': record})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def item_adjust(request, kind: str, pk: int):
    """Add (positive) or remove (negative) units with a reason."""
    repo = _repository(kind)
    obj = repo.get_object(pk)
    s = StockAdjustSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    txn = adjust_stock(obj, vd['quantity'], vd['reason'], request.user, vd.get('type'))
    return Response({
        'ok': True,
        'data': repo.get(pk),
        'transaction': transactions.to_record(txn),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def item_export(request, kind: str):
    repo = _repository(kind)
    return tables.export_response(request, TABLES[kind], repo.get_all())

item_export.cls.throttle_scope = 'export'


# ---------------------------------------------------------------------
# Stock transactions
# ---------------------------------------------------------------------
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def transaction_list(request):
    return tables.table_response(request, tables.TRANSACTIONS, transactions.get_all())


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def transaction_export(request):
    return tables.export_response(request, tables.TRANSACTIONS, transactions.get_all())

transaction_export.cls.throttle_scope = 'export'


# ---------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def category_list(request):
    if request.method == 'POST':
        s = CategorySerializer(data=request.data)
        s.is_valid(raise_exception=True)
        record = categories.save(s.to_model_data(), request.user)
        return Response({'ok': True, 'data': record}, status=status.HTTP_201_CREATED)
    item_type = request.query_params.get('type')
    if item_type and item_type not in dict(Category.TYPE_CHOICES):
        return Response({'ok': False, 'error': {'code': 'api_error', 'message': f'unknown type: {item_type}'}},
                        status=status.HTTP_400_BAD_REQUEST)
    return Response({'ok': True, 'data': CategoryRepository(item_type).get_all()})


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def category_detail(request, pk: int):
    obj = categories.get_object(pk)
    if request.method == 'DELETE':
        categories.delete(pk, request.user)
        return Response({'ok': True})
    s = CategorySerializer(obj, data=request.data)
    s.is_valid(raise_exception=True)
    record = categories.save({**s.to_model_data(), 'id': pk}, request.user)
    return Response({'ok': True, 'data': record})


# ---------------------------------------------------------------------
# Suppliers
# ---------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def supplier_list(request):
    if request.method == 'POST':
        s = SupplierSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        record = suppliers.save(dict(s.validated_data), request.user)
        return Response({'ok': True, 'data': record}, status=status.HTTP_201_CREATED)
    return Response({'ok': True, 'data': suppliers.get_all()})


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def supplier_detail(request, pk: int):
    obj = suppliers.get_object(pk)
    if request.method == 'DELETE':
        suppliers.delete(pk, request.user)
        return Response({'ok': True})
    s = SupplierSerializer(obj, data=request.data)
    s.is_valid(raise_exception=True)
    record = suppliers.save({**s.validated_data, 'id': pk}, request.user)
    return Response({'ok': True, 'data': record})
