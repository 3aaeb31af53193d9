"""
Clinic log endpoints.

Nurses and administrators can browse and record clinic visits.  A log
can be edited or deleted by an administrator or by the nurse who wrote
it; exporting the table to CSV is reserved for administrators.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.serializers.clinic_log import ClinicLogSerializer
from clinic.services import tables
from clinic.services.clinic_logs import clinic_logs

from ..permissions import IsAdminRole, IsClinicalRole, IsOwnerOrAdmin


def _check_owner(request, obj):
    if not IsOwnerOrAdmin().has_object_permission(request, None, obj):
        raise PermissionDenied('Only the nurse who recorded this log or an administrator can change it')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def clinic_log_list(request):
    if request.method == 'POST':
        s = ClinicLogSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        record = clinic_logs.save(s.validated_data, request.user)
        return Response({'ok': True, 'data': record}, status=status.HTTP_201_CREATED)
    return tables.table_response(request, tables.CLINIC_LOGS, clinic_logs.get_all())


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def clinic_log_detail(request, pk: int):
    obj = clinic_logs.get_object(pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': clinic_logs.to_record(obj)})
    _check_owner(request, obj)
    if request.method == 'DELETE':
        clinic_logs.delete(pk, request.user)
        return Response({'ok': True})
    s = ClinicLogSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = clinic_logs.save({**s.validated_data, 'id': pk}, request.user)
    return Response({'ok': True, 'data': record})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def clinic_log_export(request):
    return tables.export_response(request, tables.CLINIC_LOGS, clinic_logs.get_all())

clinic_log_export.cls.throttle_scope = 'export'
