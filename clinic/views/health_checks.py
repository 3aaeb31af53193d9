"""
Health-check request endpoints.

Every signed-in user may file a request; the clinic (nurses and
administrators) sees the queue and moves requests along.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.serializers.health_check import HealthCheckRequestSerializer, HealthCheckStatusSerializer
from clinic.services import tables
from clinic.services.health_checks import health_checks, status_counts

from ..permissions import IsClinicalRole


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def health_check_list(request):
    if request.method == 'POST':
        s = HealthCheckRequestSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        record = health_checks.save(s.validated_data, request.user)
        return Response({'ok': True, 'data': record}, status=status.HTTP_201_CREATED)
    if not IsClinicalRole().has_permission(request, None):
        raise PermissionDenied('Only clinic staff can view health check requests')
    response = tables.table_response(request, tables.HEALTH_CHECKS, health_checks.get_all())
    response.data['counts'] = status_counts()
    return response


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def health_check_status(request, pk: int):
    s = HealthCheckStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = health_checks.set_status(pk, s.validated_data['status'], request.user)
    return Response({'ok': True, 'data': record})
