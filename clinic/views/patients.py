"""
Patient directory endpoints.

Nurses and administrators browse the directory (``search`` and the
other table parameters apply), register patients and correct their
details.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.serializers.patient import PatientSerializer
from clinic.services import tables
from clinic.services.patients import patients

from ..permissions import IsClinicalRole


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def patient_list(request):
    if request.method == 'POST':
        s = PatientSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        record = patients.save(s.validated_data, request.user)
        return Response({'ok': True, 'data': record}, status=status.HTTP_201_CREATED)
    return tables.table_response(request, tables.PATIENTS, patients.get_all())


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def patient_detail(request, pk: int):
    obj = patients.get_object(pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': patients.to_record(obj)})
    s = PatientSerializer(obj, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    record = patients.save({**s.validated_data, 'id': pk}, request.user)
    return Response({'ok': True, 'data': record})
