"""
Client and issuer endpoints.

``kind`` is fixed by the route (``clients`` or ``issuers``).  Lists are
returned whole; ``?active=true`` limits them to the entries the clinic
log form offers.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.serializers.directory import NamedEntrySerializer
from clinic.services.directory import REPOSITORIES

from ..permissions import IsClinicalRole

TRUE_VALUES = {'1', 'true', 'yes'}


def _repository(kind: str):
    repo = REPOSITORIES.get(kind)
    if repo is None:
        raise NotFound(f'unknown list: {kind}')
    return repo


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def entry_list(request, kind: str):
    repo = _repository(kind)
    if request.method == 'POST':
        s = NamedEntrySerializer(data=request.data, model=repo.model)
        s.is_valid(raise_exception=True)
        record = repo.save(s.to_model_data(), request.user)
        return Response({'ok': True, 'data': record}, status=status.HTTP_201_CREATED)
    if (request.query_params.get('active') or '').lower() in TRUE_VALUES:
        repo = repo.active()
    return Response({'ok': True, 'data': repo.get_all()})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def entry_detail(request, kind: str, pk: int):
    repo = _repository(kind)
    obj = repo.get_object(pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': repo.to_record(obj)})
    if request.method == 'DELETE':
        repo.delete(pk, request.user)
        return Response({'ok': True})
    s = NamedEntrySerializer(obj, data=request.data, partial=True, model=repo.model)
    s.is_valid(raise_exception=True)
    record = repo.save({**s.to_model_data(), 'id': pk}, request.user)
    return Response({'ok': True, 'data': record})
