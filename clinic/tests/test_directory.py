"""
Clients, issuers, patients and health-check requests.
"""
from datetime import date, timedelta

import pytest
from django.urls import reverse
from django.utils import timezone

from clinic.models import Activity, Client, HealthCheckRequest, Issuer, Patient

pytestmark = pytest.mark.django_db


# ---------------------------------------------------------------------
# Clients and issuers
# ---------------------------------------------------------------------
@pytest.mark.parametrize('list_name, detail_name, model', [
    ('clients', 'client_detail', Client),
    ('issuers', 'issuer_detail', Issuer),
])
def test_named_entry_crud(client_for, nurse, list_name, detail_name, model):
    api = client_for(nurse)
    r = api.post(reverse(list_name), {'name': ' Acme BPO '}, format='json')
    assert r.status_code == 201, r.data
    entry = r.data['data']
    assert (entry['name'], entry['isActive']) == ('Acme BPO', True)

    r = api.post(reverse(list_name), {'name': 'acme bpo'}, format='json')
    assert r.status_code == 400
    assert 'name' in r.data['error']['message']

    r = api.put(reverse(detail_name, args=[entry['id']]), {'name': 'Acme Corp'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['name'] == 'Acme Corp'
    assert r.data['data']['isActive'] is True

    r = api.delete(reverse(detail_name, args=[entry['id']]))
    assert r.status_code == 200
    assert not model.objects.exists()


def test_active_filter_lists_only_active_clients(client_for, nurse):
    Client.objects.create(name='Globex')
    old = Client.objects.create(name='Initech')
    api = client_for(nurse)

    r = api.put(reverse('client_detail', args=[old.id]), {'isActive': False}, format='json')
    assert r.status_code == 200
    assert (r.data['data']['name'], r.data['data']['isActive']) == ('Initech', False)

    r = api.get(reverse('clients'))
    assert [c['name'] for c in r.data['data']] == ['Globex', 'Initech']
    r = api.get(reverse('clients'), {'active': 'true'})
    assert [c['name'] for c in r.data['data']] == ['Globex']


def test_blank_issuer_name_is_rejected(client_for, nurse):
    r = client_for(nurse).post(reverse('issuers'), {'name': '<b></b>'}, format='json')
    assert r.status_code == 400
    assert r.data['error']['message']['name'] == ['Issuer name is required']


def test_staff_cannot_manage_clients(client_for, staff):
    api = client_for(staff)
    assert api.get(reverse('clients')).status_code == 403
    assert api.post(reverse('clients'), {'name': 'Globex'}, format='json').status_code == 403


# ---------------------------------------------------------------------
# Patients
# ---------------------------------------------------------------------
def patient_payload(**overrides):
    data = {
        'employeeId': 'emp-001',
        'firstName': 'Juan',
        'lastName': 'Dela Cruz',
        'email': 'Juan.DelaCruz@example.com',
        'birthday': '1990-05-01',
        'gender': 'Male',
        'company': 'Acme BPO',
    }
    data.update(overrides)
    return data


def test_create_patient(client_for, nurse):
    r = client_for(nurse).post(reverse('patients'), patient_payload(), format='json')
    assert r.status_code == 201, r.data
    data = r.data['data']
    assert data['employeeId'] == 'EMP-001'
    assert data['email'] == 'juan.delacruz@example.com'
    assert data['fullName'] == 'Juan Dela Cruz'
    assert data['lastVisited'] is None


@pytest.mark.parametrize('missing', ['email', 'firstName', 'lastName'])
def test_patient_requires_email_and_names(client_for, nurse, missing):
    payload = patient_payload()
    del payload[missing]
    r = client_for(nurse).post(reverse('patients'), payload, format='json')
    assert r.status_code == 400
    assert missing in r.data['error']['message']


def test_patient_email_is_unique_and_birthday_not_in_future(client_for, nurse):
    api = client_for(nurse)
    api.post(reverse('patients'), patient_payload(), format='json')
    r = api.post(reverse('patients'), patient_payload(email='juan.delacruz@EXAMPLE.com'), format='json')
    assert r.status_code == 400
    tomorrow = (timezone.localdate() + timedelta(days=1)).isoformat()
    r = api.post(reverse('patients'), patient_payload(email='other@example.com', birthday=tomorrow), format='json')
    assert r.status_code == 400
    assert 'birthday' in r.data['error']['message']


def test_patient_search_and_update(client_for, nurse):
    Patient.objects.create(first_name='Ana', last_name='Santos', email='ana@example.com', company='Globex')
    Patient.objects.create(first_name='Mark', last_name='Reyes', email='mark@example.com', company='Acme BPO')
    api = client_for(nurse)

    r = api.get(reverse('patients'), {'search': 'globex'})
    assert [p['lastName'] for p in r.data['data']] == ['Santos']
    r = api.get(reverse('patients'), {'sortKey': 'lastName', 'sortDir': 'desc'})
    assert [p['lastName'] for p in r.data['data']] == ['Santos', 'Reyes']
    filters = {f['key']: f for f in r.data['filters']}
    assert [o['value'] for o in filters['company']['options']] == ['Acme BPO', 'Globex']

    mark = Patient.objects.get(email='mark@example.com')
    r = api.put(reverse('patient_detail', args=[mark.id]), {'company': 'Initech', 'email': 'mark@example.com'},
                format='json')
    assert r.status_code == 200, r.data
    assert r.data['data']['company'] == 'Initech'
    assert r.data['data']['firstName'] == 'Mark'
    assert api.get(reverse('patient_detail', args=[999])).status_code == 404


def test_clinic_log_moves_last_visit_forward(client_for, nurse, paracetamol):
    patient = Patient.objects.create(employee_id='EMP-001', first_name='Juan', last_name='Dela Cruz',
                                     email='juan@example.com', last_visited=date(2020, 1, 1))
    api = client_for(nurse)

    def log(day):
        return api.post(reverse('clinic_logs'), {
            'date': day.isoformat(), 'lastName': 'Dela Cruz', 'firstName': 'Juan', 'sex': 'Male',
            'employeeNumber': 'EMP-001', 'client': 'Acme BPO', 'chiefComplaint': 'Headache',
            'issuedBy': 'Maria Santos', 'medicines': [{'name': 'Paracetamol', 'quantity': 1}],
        }, format='json')

    today = timezone.localdate()
    assert log(today).status_code == 201
    patient.refresh_from_db()
    assert patient.last_visited == today

    assert log(today - timedelta(days=10)).status_code == 201
    patient.refresh_from_db()
    assert patient.last_visited == today


# ---------------------------------------------------------------------
# Health-check requests
# ---------------------------------------------------------------------
def file_health_check(api, **overrides):
    data = {'agentName': 'Paolo Garcia', 'employeeId': 'emp-55', 'client': 'Globex'}
    data.update(overrides)
    r = api.post(reverse('health_checks'), data, format='json')
    assert r.status_code == 201, r.data
    return r.data['data']


def test_staff_files_request_and_clinic_sees_queue(client_for, staff, nurse):
    record = file_health_check(client_for(staff))
    assert record['status'] == 'pending'
    assert record['employeeId'] == 'EMP-55'
    assert record['requestedBy'] == staff.id
    assert Activity.objects.filter(type='health_check').count() == 1

    assert client_for(staff).get(reverse('health_checks')).status_code == 403
    r = client_for(nurse).get(reverse('health_checks'))
    assert r.status_code == 200
    assert r.data['pagination']['total'] == 1
    assert r.data['counts'] == {'pending': 1, 'notified': 0, 'in_clinic': 0, 'completed': 0}


def test_health_check_moves_forward_only(client_for, nurse):
    api = client_for(nurse)
    record = file_health_check(api)
    url = reverse('health_check_status', args=[record['id']])

    r = api.post(url, {'status': 'completed'}, format='json')
    assert r.status_code == 400
    assert 'status' in r.data['error']['message']

    r = api.post(url, {'status': 'notified'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['notifiedAt'] is not None
    assert r.data['data']['nurseName'] == ''

    r = api.post(url, {'status': 'in_clinic'}, format='json')
    assert r.data['data']['arrivedAt'] is not None
    assert r.data['data']['nurseName'] == 'Maria Santos'

    r = api.post(url, {'status': 'completed'}, format='json')
    assert r.data['data']['status'] == 'completed'
    assert r.data['data']['completedAt'] is not None

    assert api.post(url, {'status': 'notified'}, format='json').status_code == 400
    assert api.post(url, {'status': 'pending'}, format='json').status_code == 400
    assert HealthCheckRequest.objects.get().status == 'completed'


def test_health_check_status_filter_and_dashboard(client_for, nurse):
    api = client_for(nurse)
    first = file_health_check(api)
    file_health_check(api, agentName='Joy Mendoza', client='Acme BPO')
    api.post(reverse('health_check_status', args=[first['id']]), {'status': 'notified'}, format='json')

    r = api.get(reverse('health_checks'), {'status': 'pending'})
    assert [h['agentName'] for h in r.data['data']] == ['Joy Mendoza']
    assert r.data['counts']['notified'] == 1

    assert api.get(reverse('dashboard')).data['data']['pendingHealthChecks'] == 1


def test_missing_health_check_is_404(client_for, nurse):
    r = client_for(nurse).post(reverse('health_check_status', args=[999]), {'status': 'notified'}, format='json')
    assert r.status_code == 404
