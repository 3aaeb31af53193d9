"""
Reimbursement requests and their approval.
"""
from __future__ import annotations

import logging
from decimal import Decimal

from django.db.models import Sum
from rest_framework.exceptions import ValidationError

from clinic.models import Reimbursement
from clinic.services.audit import record_activity
from clinic.services.repositories import ModelRepository

logger = logging.getLogger(__name__)

FIELD_MAP = {
    'date': 'date',
    'employeeId': 'employee_id',
    'fullNameEmployee': 'full_name_employee',
    'fullNameDependent': 'full_name_dependent',
    'workLocation': 'work_location',
    'receiptDate': 'receipt_date',
    'amountRequested': 'amount_requested',
    'email': 'email',
}

STATUS_ACTIVITY = {
    Reimbursement.STATUS_APPROVED: 'approval',
    Reimbursement.STATUS_REJECTED: 'rejection',
    Reimbursement.STATUS_PENDING: 'reimbursement',
}


class ReimbursementRepository(ModelRepository):
    model = Reimbursement
    label = 'reimbursement'

    def queryset(self):
        return Reimbursement.objects.select_related('submitted_by')

    def to_record(self, obj: Reimbursement) -> dict:
        return {
            'id': obj.id,
            'date': obj.date,
            'employeeId': obj.employee_id,
            'fullNameEmployee': obj.full_name_employee,
            'fullNameDependent': obj.full_name_dependent,
            'workLocation': obj.work_location,
            'receiptDate': obj.receipt_date,
            'amountRequested': obj.amount_requested,
            'email': obj.email,
            'status': obj.status,
            'submittedBy': obj.submitted_by_id,
            'createdAt': obj.created_at,
            'updatedAt': obj.updated_at,
        }

    def create(self, data: dict, user):
        fields = {FIELD_MAP[k]: v for k, v in data.items() if k in FIELD_MAP}
        obj = Reimbursement.objects.create(
            submitted_by=user if getattr(user, 'pk', None) else None,
            **fields,
        )
        record_activity(
            user=user, type='reimbursement',
            title=f'Reimbursement request: {obj.full_name_employee}',
            description=f'Amount {obj.amount_requested}',
            status=obj.status,
            metadata={'reimbursementId': obj.pk, 'amount': str(obj.amount_requested)},
        )
        return obj

    def update(self, obj: Reimbursement, data: dict, user):
        if obj.status != Reimbursement.STATUS_PENDING:
            raise ValidationError({'status': f'A {obj.status} request can no longer be edited'})
        for k, v in data.items():
            if k in FIELD_MAP:
                setattr(obj, FIELD_MAP[k], v)
        obj.save()
        return obj

    def set_status(self, id, status: str, user) -> dict:
        obj = self.get_object(id)
        previous = obj.status
        obj.status = status
        obj.save(update_fields=['status', 'updated_at'])
        logger.info('reimbursement %s %s -> %s', obj.pk, previous, status)
        record_activity(
            user=user, type=STATUS_ACTIVITY[status],
            title=f'Reimbursement {status}: {obj.full_name_employee}',
            description=f'Amount {obj.amount_requested}',
            status=status,
            metadata={'reimbursementId': obj.pk, 'previousStatus': previous},
        )
        return self.to_record(obj)


reimbursements = ReimbursementRepository()


def totals() -> dict:
    qs = Reimbursement.objects.all()
    return {
        'totalReimbursements': qs.count(),
        'pendingReimbursements': qs.filter(status=Reimbursement.STATUS_PENDING).count(),
        'approvedReimbursements': qs.filter(status=Reimbursement.STATUS_APPROVED).count(),
        'totalReimbursementAmount': qs.aggregate(total=Sum('amount_requested'))['total'] or Decimal('0'),
    }
