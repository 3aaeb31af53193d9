from decimal import Decimal

import pytest
from django.core.cache import cache
from django.urls import reverse

from clinic.models import Activity, Reimbursement
from clinic.services.audit import DASHBOARD_CACHE_KEY, record_activity

pytestmark = pytest.mark.django_db


def reimbursement_payload(**overrides):
    data = {
        'date': '2024-03-01',
        'employeeId': 'EMP-2001',
        'fullNameEmployee': 'Ana Reyes',
        'fullNameDependent': '',
        'workLocation': 'Office',
        'receiptDate': '2024-02-27',
        'amountRequested': '1250.50',
        'email': 'ana.reyes@example.com',
    }
    data.update(overrides)
    return data


def file_request(client, **overrides):
    r = client.post(reverse('reimbursements'), reimbursement_payload(**overrides), format='json')
    assert r.status_code == 201, r.data
    return r.data['data']


# ---------------------------------------------------------------------
# Reimbursements
# ---------------------------------------------------------------------
def test_any_user_can_file_request(client_for, staff):
    record = file_request(client_for(staff))
    assert record['status'] == 'pending'
    assert record['submittedBy'] == staff.id
    assert record['amountRequested'] == Decimal('1250.50')
    activity = Activity.objects.get()
    assert activity.type == 'reimbursement'
    assert activity.user_name == 'John Reyes'


@pytest.mark.parametrize('overrides, field', [
    ({'amountRequested': '0'}, 'amountRequested'),
    ({'email': 'not-an-email'}, 'email'),
    ({'workLocation': 'Beach'}, 'workLocation'),
    ({'employeeId': '   '}, 'employeeId'),
])
def test_request_validation(client_for, staff, overrides, field):
    r = client_for(staff).post(reverse('reimbursements'), reimbursement_payload(**overrides), format='json')
    assert r.status_code == 400
    assert field in r.data['error']['message']


def test_only_admin_sets_status(client_for, staff, clinic_admin):
    record = file_request(client_for(staff))
    url = reverse('reimbursement_status', args=[record['id']])

    r = client_for(staff).post(url, {'status': 'approved'}, format='json')
    assert r.status_code == 403

    r = client_for(clinic_admin).post(url, {'status': 'approved'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['status'] == 'approved'
    assert Activity.objects.filter(type='approval').count() == 1

    r = client_for(clinic_admin).post(url, {'status': 'lost'}, format='json')
    assert r.status_code == 400


def test_rejection_is_recorded(client_for, staff, clinic_admin):
    record = file_request(client_for(staff))
    client_for(clinic_admin).post(reverse('reimbursement_status', args=[record['id']]),
                                  {'status': 'rejected'}, format='json')
    assert Activity.objects.filter(type='rejection').exists()


def test_decided_request_cannot_be_edited(client_for, staff, clinic_admin):
    record = file_request(client_for(staff))
    client_for(clinic_admin).post(reverse('reimbursement_status', args=[record['id']]),
                                  {'status': 'approved'}, format='json')
    r = client_for(staff).put(reverse('reimbursement_detail', args=[record['id']]),
                              reimbursement_payload(amountRequested='9999.00'), format='json')
    assert r.status_code == 400
    assert Reimbursement.objects.get().amount_requested == Decimal('1250.50')


def test_submitter_edits_pending_request(client_for, staff, nurse):
    record = file_request(client_for(staff))
    url = reverse('reimbursement_detail', args=[record['id']])

    r = client_for(nurse).put(url, reimbursement_payload(workLocation='WFH'), format='json')
    assert r.status_code == 403

    r = client_for(staff).put(url, reimbursement_payload(workLocation='WFH'), format='json')
    assert r.status_code == 200
    assert r.data['data']['workLocation'] == 'WFH'

    r = client_for(staff).delete(url)
    assert r.status_code == 200
    assert not Reimbursement.objects.exists()


def test_reimbursement_table_filters(client_for, staff):
    client = client_for(staff)
    file_request(client)
    file_request(client, employeeId='EMP-2002', workLocation='WFH', amountRequested='300.00')
    r = client.get(reverse('reimbursements'), {'workLocation': 'wfh'})
    assert [row['employeeId'] for row in r.data['data']] == ['EMP-2002']
    r = client.get(reverse('reimbursements'), {'sortKey': 'amountRequested'})
    assert [row['amountRequested'] for row in r.data['data']] == [Decimal('300.00'), Decimal('1250.50')]


# ---------------------------------------------------------------------
# Dashboard and activity feed
# ---------------------------------------------------------------------
def test_dashboard_totals(client_for, nurse, clinic_admin, paracetamol, gauze):
    client_for(nurse).post(reverse('clinic_logs'), {
        'date': '2024-01-15', 'lastName': 'Cruz', 'firstName': 'Ben', 'sex': 'Male',
        'employeeNumber': 'EMP-7', 'client': 'Acme BPO', 'chiefComplaint': 'Fever',
        'issuedBy': 'Maria Santos',
        'medicines': [{'name': 'Paracetamol', 'quantity': 16}],
        'supplies': [{'name': 'Gauze Pad', 'quantity': 2}],
    }, format='json')
    record = file_request(client_for(nurse))
    file_request(client_for(nurse), amountRequested='100.00')
    client_for(clinic_admin).post(reverse('reimbursement_status', args=[record['id']]),
                                  {'status': 'approved'}, format='json')

    r = client_for(nurse).get(reverse('dashboard'))
    assert r.status_code == 200
    data = r.data['data']
    assert data['totalClinicLogs'] == 1
    assert data['totalItemsIssued'] == 18
    assert data['lowStockItems'] == 1
    assert data['inventoryItems'] == 2
    assert data['totalReimbursements'] == 2
    assert data['pendingReimbursements'] == 1
    assert data['approvedReimbursements'] == 1
    assert data['totalReimbursementAmount'] == Decimal('1350.50')
    assert [a['type'] for a in data['recentActivity']][:1] == ['approval']
    assert len(data['recentActivity']) == 4


def test_dashboard_cache_is_dropped_on_activity(client_for, nurse, paracetamol):
    client = client_for(nurse)
    assert client.get(reverse('dashboard')).data['data']['totalReimbursements'] == 0
    assert cache.get(DASHBOARD_CACHE_KEY) is not None
    file_request(client)
    assert cache.get(DASHBOARD_CACHE_KEY) is None
    assert client.get(reverse('dashboard')).data['data']['totalReimbursements'] == 1


def test_activity_feed_is_trimmed(settings, nurse):
    settings.CLINIC_ACTIVITY_LIMIT = 5
    for i in range(8):
        record_activity(user=nurse, type='inventory', title=f'entry {i}')
    titles = list(Activity.objects.order_by('-id').values_list('title', flat=True))
    assert titles == [f'entry {i}' for i in range(7, 2, -1)]


def test_activities_endpoint_limit(client_for, staff, nurse):
    for i in range(12):
        record_activity(user=nurse, type='inventory', title=f'entry {i}')
    client = client_for(staff)
    r = client.get(reverse('activities'))
    assert len(r.data['data']) == 10
    assert r.data['data'][0]['title'] == 'entry 11'
    assert r.data['data'][0]['userName'] == 'Maria Santos'
    r = client.get(reverse('activities'), {'limit': 3})
    assert len(r.data['data']) == 3
    r = client.get(reverse('activities'), {'limit': 500})
    assert len(r.data['data']) == 12
    r = client.get(reverse('activities'), {'limit': 0})
    assert r.status_code == 400


# ---------------------------------------------------------------------
# Settings and users
# ---------------------------------------------------------------------
def test_settings_defaults_update_and_reset(client_for, nurse):
    client = client_for(nurse)
    r = client.get(reverse('user_settings'))
    assert r.data['data'] == {
        'theme': 'system', 'language': 'en', 'notifications': True, 'autoSave': True,
        'itemsPerPage': 10, 'dateFormat': 'MM/dd/yyyy', 'currency': 'PHP',
    }

    r = client.post(reverse('user_settings'), {'theme': 'dark', 'itemsPerPage': 25}, format='json')
    assert r.status_code == 200
    assert r.data['data']['theme'] == 'dark'
    assert r.data['data']['itemsPerPage'] == 25
    assert r.data['data']['currency'] == 'PHP'

    r = client.post(reverse('user_settings'), {'itemsPerPage': 7}, format='json')
    assert r.status_code == 400

    r = client.post(reverse('user_settings_reset'))
    assert r.data['data']['theme'] == 'system'
    assert r.data['data']['itemsPerPage'] == 10


def test_internal_users_directory(client_for, nurse, other_nurse, clinic_admin, staff):
    staff.is_active = False
    staff.save()
    r = client_for(nurse).get(reverse('internal_users'), {'role': 'nurse'})
    assert [u['name'] for u in r.data['data']] == ['Liza Cruz', 'Maria Santos']
    assert r.data['data'][1]['nurseId'] == 'RN-001'
    r = client_for(nurse).get(reverse('internal_users'))
    assert r.data['pagination']['total'] == 3


def test_healthz(client):
    r = client.get(reverse('healthz'))
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}
