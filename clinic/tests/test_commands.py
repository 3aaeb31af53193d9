from io import StringIO

import pytest
from django.core.management import call_command

from clinic.models import ClinicLog, InventoryItem, InventoryTransaction, Issuer, Patient, Reimbursement, User

pytestmark = pytest.mark.django_db


def test_ensure_demo_users_is_idempotent():
    call_command('ensure_demo_users', stdout=StringIO())
    call_command('ensure_demo_users', '--password', 'secret99', stdout=StringIO())
    assert User.objects.count() == 3
    nurse = User.objects.get(username='nurse@clinic.local')
    assert nurse.role == 'nurse'
    assert nurse.check_password('secret99')


def test_populate_data_keeps_stock_consistent():
    out = StringIO()
    call_command('populate_data', '--logs', '8', '--reimbursements', '3', '--seed', '7', stdout=out)
    assert 'Sample data created.' in out.getvalue()
    assert ClinicLog.objects.count() == 8
    assert Reimbursement.objects.count() == 3

    # every item's stock is explained by its transaction history
    for item in InventoryItem.objects.all():
        moved = sum(t.quantity for t in InventoryTransaction.objects.filter(item=item))
        assert moved == item.stock


def test_populate_data_seeds_directory_and_visits():
    call_command('populate_data', '--logs', '8', '--reimbursements', '0', '--seed', '3', stdout=StringIO())
    assert Issuer.objects.count() == 2
    assert Patient.objects.count() == 5
    # the sample logs use the patients' employee numbers
    assert not Patient.objects.filter(last_visited__isnull=True).exists()
