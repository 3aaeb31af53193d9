"""
Reimbursement endpoints.

Every authenticated user can file and browse requests.  The submitter
or an administrator may edit or withdraw a pending request; only
administrators approve or reject.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.serializers.reimbursement import ReimbursementSerializer, ReimbursementStatusSerializer
from clinic.services import tables
from clinic.services.reimbursements import reimbursements

from ..permissions import IsAdminRole, IsOwnerOrAdmin


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def reimbursement_list(request):
    if request.method == 'POST':
        s = ReimbursementSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        record = reimbursements.save(s.validated_data, request.user)
        return Response({'ok': True, 'data': record}, status=status.HTTP_201_CREATED)
    return tables.table_response(request, tables.REIMBURSEMENTS, reimbursements.get_all())


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def reimbursement_detail(request, pk: int):
    obj = reimbursements.get_object(pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': reimbursements.to_record(obj)})
    if not IsOwnerOrAdmin().has_object_permission(request, None, obj):
        raise PermissionDenied('Only the submitter or an administrator can change this request')
    if request.method == 'DELETE':
        reimbursements.delete(pk, request.user)
        return Response({'ok': True})
    s = ReimbursementSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = reimbursements.save({**s.validated_data, 'id': pk}, request.user)
    return Response({'ok': True, 'data': record})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def reimbursement_status(request, pk: int):
    s = ReimbursementStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = reimbursements.set_status(pk, s.validated_data['status'], request.user)
    return Response({'ok': True, 'data': record})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def reimbursement_export(request):
    return tables.export_response(request, tables.REIMBURSEMENTS, reimbursements.get_all())

reimbursement_export.cls.throttle_scope = 'export'
