"""
Dashboard endpoint.

Totals for clinic logs, issued items, stock alerts and reimbursements
plus the five most recent activities.  Nurses and administrators only.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.serializers.tables import ActivityQuerySerializer
from clinic.services.audit import recent_activities
from clinic.services.dashboard import dashboard_stats, format_activity

from ..permissions import IsClinicalRole

MAX_ACTIVITIES = 100


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinicalRole])
def dashboard(request):
    return Response({'ok': True, 'data': dashboard_stats()})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def activities(request):
    q = ActivityQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    limit = min(q.validated_data['limit'], MAX_ACTIVITIES)
    return Response({'ok': True, 'data': [format_activity(a) for a in recent_activities(limit)]})
