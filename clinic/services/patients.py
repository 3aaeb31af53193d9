"""
Patient directory.

Patients are employees known to the clinic.  They are not accounts: a
patient record only feeds the clinic log form and keeps the date of the
latest visit.
"""
from __future__ import annotations

import logging

from clinic.models import Patient
from clinic.services.repositories import ModelRepository

logger = logging.getLogger(__name__)

FIELD_MAP = {
    'employeeId': 'employee_id',
    'firstName': 'first_name',
    'lastName': 'last_name',
    'email': 'email',
    'birthday': 'birthday',
    'gender': 'gender',
    'company': 'company',
    'medicalHistory': 'medical_history',
}


class PatientRepository(ModelRepository):
    model = Patient
    label = 'patient'

    def to_record(self, obj: Patient) -> dict:
        return {
            'id': obj.id,
            'employeeId': obj.employee_id,
            'firstName': obj.first_name,
            'lastName': obj.last_name,
            'fullName': obj.full_name,
            'email': obj.email,
            'birthday': obj.birthday,
            'gender': obj.gender,
            'company': obj.company,
            'medicalHistory': obj.medical_history,
            'lastVisited': obj.last_visited,
            'createdAt': obj.created_at,
            'updatedAt': obj.updated_at,
        }

    def create(self, data: dict, user):
        return Patient.objects.create(**{FIELD_MAP[k]: v for k, v in data.items() if k in FIELD_MAP})

    def update(self, obj: Patient, data: dict, user):
        fields = [FIELD_MAP[k] for k in data if k in FIELD_MAP]
        for k in data:
            if k in FIELD_MAP:
                setattr(obj, FIELD_MAP[k], data[k])
        obj.save(update_fields=[*fields, 'updated_at'])
        return obj


patients = PatientRepository()


def record_visit(employee_id: str, visit_date) -> int:
    """Move ``last_visited`` forward for the patients with this employee ID."""
    if not employee_id:
        return 0
    updated = 0
    for patient in Patient.objects.filter(employee_id__iexact=employee_id):
        if patient.last_visited is None or patient.last_visited < visit_date:
            patient.last_visited = visit_date
            patient.save(update_fields=['last_visited', 'updated_at'])
            updated += 1
    if updated:
        logger.info('last visit of %s set to %s', employee_id, visit_date)
    return updated
