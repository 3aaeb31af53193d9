"""
Health-check requests.

Any signed-in user can ask for an agent to be seen.  The clinic then
moves the request forward: the agent is notified, arrives in the clinic
and the check is completed.  Each step stamps its time and the nurse
handling it.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import Count
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from clinic.models import HealthCheckRequest
from clinic.services.audit import record_activity
from clinic.services.repositories import ModelRepository

logger = logging.getLogger(__name__)

FIELD_MAP = {
    'agentName': 'agent_name',
    'employeeId': 'employee_id',
    'client': 'client',
    'reason': 'reason',
}

# status -> timestamp field set when entering it
STATUS_TIMESTAMPS = {
    HealthCheckRequest.STATUS_NOTIFIED: 'notified_at',
    HealthCheckRequest.STATUS_IN_CLINIC: 'arrived_at',
    HealthCheckRequest.STATUS_COMPLETED: 'completed_at',
}

STATUS_TITLES = {
    HealthCheckRequest.STATUS_NOTIFIED: 'Agent notified',
    HealthCheckRequest.STATUS_IN_CLINIC: 'Agent checked in',
    HealthCheckRequest.STATUS_COMPLETED: 'Health check completed',
}


def _can_transition(current: str, new: str) -> bool:
    """Return True if a request may move from ``current`` to ``new``."""
    transitions = {
        HealthCheckRequest.STATUS_PENDING: [HealthCheckRequest.STATUS_NOTIFIED],
        HealthCheckRequest.STATUS_NOTIFIED: [HealthCheckRequest.STATUS_IN_CLINIC],
        HealthCheckRequest.STATUS_IN_CLINIC: [HealthCheckRequest.STATUS_COMPLETED],
        HealthCheckRequest.STATUS_COMPLETED: [],
    }
    return new in transitions.get(current, [])


class HealthCheckRepository(ModelRepository):
    model = HealthCheckRequest
    label = 'health check request'

    def to_record(self, obj: HealthCheckRequest) -> dict:
        return {
            'id': obj.id,
            'agentName': obj.agent_name,
            'employeeId': obj.employee_id,
            'client': obj.client,
            'reason': obj.reason,
            'status': obj.status,
            'requestedBy': obj.requested_by_id,
            'nurseId': obj.nurse_id,
            'nurseName': obj.nurse_name,
            'requestDate': obj.request_date,
            'notifiedAt': obj.notified_at,
            'arrivedAt': obj.arrived_at,
            'completedAt': obj.completed_at,
        }

    def create(self, data: dict, user):
        obj = HealthCheckRequest.objects.create(
            requested_by=user if getattr(user, 'pk', None) else None,
            **{FIELD_MAP[k]: v for k, v in data.items() if k in FIELD_MAP},
        )
        record_activity(
            user=user, type='health_check',
            title=f'Health check requested: {obj.agent_name}',
            description=obj.client,
            status=obj.status,
            metadata={'healthCheckId': obj.pk},
        )
        return obj

    def set_status(self, id, status: str, user) -> dict:
        with transaction.atomic():
            obj = HealthCheckRequest.objects.select_for_update().filter(pk=id).first()
            if obj is None:
                raise NotFound(f'{self.label} not found')
            previous = obj.status
            if not _can_transition(previous, status):
                raise ValidationError({'status': f'Cannot move a {previous} request to {status}'})
            obj.status = status
            setattr(obj, STATUS_TIMESTAMPS[status], timezone.now())
            fields = ['status', STATUS_TIMESTAMPS[status]]
            if status != HealthCheckRequest.STATUS_NOTIFIED and getattr(user, 'pk', None):
                obj.nurse = user
                obj.nurse_name = user.display_name
                fields += ['nurse', 'nurse_name']
            obj.save(update_fields=fields)
        logger.info('health check %s %s -> %s', obj.pk, previous, status)
        record_activity(
            user=user, type='health_check',
            title=f'{STATUS_TITLES[status]}: {obj.agent_name}',
            status=status,
            metadata={'healthCheckId': obj.pk, 'previousStatus': previous},
        )
        return self.to_record(obj)


health_checks = HealthCheckRepository()


def status_counts() -> dict:
    counts = {code: 0 for code, _ in HealthCheckRequest.STATUS_CHOICES}
    for row in HealthCheckRequest.objects.order_by().values('status').annotate(n=Count('id')):
        counts[row['status']] = row['n']
    return counts
