"""
Clinic log services.

A clinic log records one visit together with the medicines and supplies
issued.  Lines that refer to an inventory item take their quantity out of
stock when the log is written and put it back when the log is edited or
deleted, so the stock history always explains the current levels.
"""
from __future__ import annotations

import logging
from typing import Iterable

from django.db.models import Sum
from rest_framework.exceptions import ValidationError

from clinic.models import ClinicLog, ClinicLogItem, InventoryItem, InventoryTransaction
from clinic.services.audit import record_activity
from clinic.services.inventory import move_stock
from clinic.services.patients import record_visit
from clinic.services.repositories import ModelRepository

logger = logging.getLogger(__name__)

FIELD_MAP = {
    'date': 'date',
    'lastName': 'last_name',
    'firstName': 'first_name',
    'sex': 'sex',
    'employeeNumber': 'employee_number',
    'client': 'client',
    'chiefComplaint': 'chief_complaint',
    'issuedBy': 'issued_by',
    'status': 'status',
}

LINE_KINDS = (
    ('medicines', ClinicLogItem.KIND_MEDICINE),
    ('supplies', ClinicLogItem.KIND_SUPPLY),
)


def _line_record(line: ClinicLogItem) -> dict:
    return {
        'id': line.id,
        'itemId': line.inventory_item_id,
        'name': line.name,
        'customName': line.custom_name,
        'quantity': line.quantity,
    }


def _resolve_item(kind: str, line: dict):
    item_id = line.get('itemId')
    if item_id:
        item = InventoryItem.objects.filter(pk=item_id, item_type=kind).first()
        if item is None:
            raise ValidationError({'medicines' if kind == 'medicine' else 'supplies': f'Unknown {kind} #{item_id}'})
        return item
    return InventoryItem.objects.filter(item_type=kind, name__iexact=line['name']).first()


class ClinicLogRepository(ModelRepository):
    model = ClinicLog
    label = 'clinic log'

    def queryset(self):
        return ClinicLog.objects.select_related('nurse').prefetch_related('items')

    def to_record(self, obj: ClinicLog) -> dict:
        lines = list(obj.items.all())
        return {
            'id': obj.id,
            'date': obj.date,
            'lastName': obj.last_name,
            'firstName': obj.first_name,
            'sex': obj.sex,
            'employeeNumber': obj.employee_number,
            'client': obj.client,
            'chiefComplaint': obj.chief_complaint,
            'medicines': [_line_record(l) for l in lines if l.kind == ClinicLogItem.KIND_MEDICINE],
            'supplies': [_line_record(l) for l in lines if l.kind == ClinicLogItem.KIND_SUPPLY],
            'issuedBy': obj.issued_by,
            'nurseId': obj.nurse_id,
            'nurseName': obj.nurse_name,
            'status': obj.status,
            'createdAt': obj.created_at,
            'updatedAt': obj.updated_at,
        }

    # ------------------------------------------------------------------
    # Line items and stock
    # ------------------------------------------------------------------
    def _issue_lines(self, log: ClinicLog, data: dict, user) -> int:
        issued = 0
        for key, kind in LINE_KINDS:
            for line in data.get(key) or []:
                item = _resolve_item(kind, line)
                ClinicLogItem.objects.create(
                    clinic_log=log,
                    kind=kind,
                    inventory_item=item,
                    name=line['name'],
                    custom_name=line.get('customName') or '',
                    quantity=line['quantity'],
                )
                if item is not None:
                    move_stock(item, -line['quantity'], type=InventoryTransaction.TYPE_STOCK_OUT,
                               reason=f'Issued for clinic log #{log.pk}', user=user)
                issued += line['quantity']
        return issued

    def _restore_lines(self, lines: Iterable[ClinicLogItem], reason: str, user) -> None:
        for line in lines:
            if line.inventory_item_id is None:
                continue
            move_stock(line.inventory_item, line.quantity, type=InventoryTransaction.TYPE_STOCK_IN,
                       reason=reason, user=user)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create(self, data: dict, user):
        fields = {FIELD_MAP[k]: v for k, v in data.items() if k in FIELD_MAP}
        log = ClinicLog.objects.create(
            nurse=user if getattr(user, 'pk', None) else None,
            nurse_name=user.display_name if getattr(user, 'pk', None) else '',
            **fields,
        )
        issued = self._issue_lines(log, data, user)
        record_visit(log.employee_number, log.date)
        record_activity(
            user=user, type='clinic_log',
            title=f'Clinic log: {log.last_name}, {log.first_name}',
            description=log.chief_complaint,
            status=log.status,
            metadata={'clinicLogId': log.pk, 'itemsIssued': issued},
        )
        return log

    def update(self, obj: ClinicLog, data: dict, user):
        for k, v in data.items():
            if k in FIELD_MAP:
                setattr(obj, FIELD_MAP[k], v)
        obj.save()
        if 'medicines' in data or 'supplies' in data:
            old_lines = list(obj.items.select_related('inventory_item'))
            self._restore_lines(old_lines, f'Clinic log #{obj.pk} updated', user)
            obj.items.all().delete()
            self._issue_lines(obj, data, user)
        record_visit(obj.employee_number, obj.date)
        return obj

    def destroy(self, obj: ClinicLog, user) -> None:
        lines = list(obj.items.select_related('inventory_item'))
        self._restore_lines(lines, f'Clinic log #{obj.pk} deleted', user)
        title = f'Clinic log deleted: {obj.last_name}, {obj.first_name}'
        pk = obj.pk
        obj.delete()
        record_activity(user=user, type='clinic_log', title=title, metadata={'clinicLogId': pk})


clinic_logs = ClinicLogRepository()


def total_items_issued() -> int:
    return ClinicLogItem.objects.aggregate(total=Sum('quantity'))['total'] or 0
