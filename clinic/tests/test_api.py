"""
Integration tests for the clinic log API.

These tests exercise the most critical behaviours of clinic logging:
validation, stock deduction and restoration, and the table query
parameters (search, filters, sort and pagination).
"""
from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone

from clinic.models import Activity, ClinicLog, InventoryTransaction, UserSettings
from clinic.serializers.text import clean_text

pytestmark = pytest.mark.django_db


def log_payload(**overrides):
    data = {
        'date': timezone.localdate().isoformat(),
        'lastName': 'Dela Cruz',
        'firstName': 'Juan',
        'sex': 'Male',
        'employeeNumber': 'EMP-001',
        'client': 'Acme BPO',
        'chiefComplaint': 'Headache',
        'medicines': [{'name': 'Paracetamol', 'quantity': 2}],
        'supplies': [],
        'issuedBy': 'Maria Santos',
    }
    data.update(overrides)
    return data


def create_log(api, **overrides):
    r = api.post(reverse('clinic_logs'), log_payload(**overrides), format='json')
    assert r.status_code == 201, r.data
    return r.data['data']


def test_create_log_deducts_stock_and_records_transaction(client_for, nurse, paracetamol, gauze):
    client = client_for(nurse)
    record = create_log(client, supplies=[{'itemId': gauze.id, 'name': 'Gauze Pad', 'quantity': 3}])

    paracetamol.refresh_from_db()
    gauze.refresh_from_db()
    assert paracetamol.stock == 18
    assert gauze.stock == 7
    assert record['nurseId'] == nurse.id
    assert record['nurseName'] == 'Maria Santos'
    assert [m['itemId'] for m in record['medicines']] == [paracetamol.id]

    txns = InventoryTransaction.objects.filter(type='stock_out').order_by('item_name')
    assert [(t.item_name, t.quantity, t.previous_stock, t.new_stock) for t in txns] == [
        ('Gauze Pad', -3, 10, 7),
        ('Paracetamol', -2, 20, 18),
    ]
    assert Activity.objects.filter(type='clinic_log').count() == 1


def test_unknown_item_is_recorded_without_stock_change(client_for, nurse, paracetamol):
    client = client_for(nurse)
    record = create_log(client, medicines=[{'name': 'Other', 'customName': 'Herbal tea', 'quantity': 1}])
    assert record['medicines'][0]['itemId'] is None
    assert record['medicines'][0]['customName'] == 'Herbal tea'
    assert InventoryTransaction.objects.count() == 0


def test_insufficient_stock_rejects_whole_log(client_for, nurse, paracetamol, gauze):
    client = client_for(nurse)
    r = client.post(reverse('clinic_logs'), log_payload(
        medicines=[{'name': 'Paracetamol', 'quantity': 2}],
        supplies=[{'name': 'Gauze Pad', 'quantity': 11}],
    ), format='json')
    assert r.status_code == 400
    assert r.data['ok'] is False
    assert r.data['error']['code'] == 'insufficient_stock'
    paracetamol.refresh_from_db()
    assert paracetamol.stock == 20
    assert ClinicLog.objects.count() == 0
    assert InventoryTransaction.objects.count() == 0


@pytest.mark.parametrize('overrides, field', [
    ({'date': (timezone.localdate() + timedelta(days=1)).isoformat()}, 'date'),
    ({'lastName': 'J0hn'}, 'lastName'),
    ({'firstName': 'A'}, 'firstName'),
    ({'employeeNumber': 'emp-1'}, 'employeeNumber'),
    ({'employeeNumber': 'E1'}, 'employeeNumber'),
    ({'chiefComplaint': 'ab'}, 'chiefComplaint'),
    ({'sex': 'Other'}, 'sex'),
    ({'medicines': [], 'supplies': []}, 'medicines'),
    ({'medicines': [{'name': 'Paracetamol', 'quantity': 0}]}, 'medicines'),
])
def test_create_log_validation(client_for, nurse, paracetamol, overrides, field):
    r = client_for(nurse).post(reverse('clinic_logs'), log_payload(**overrides), format='json')
    assert r.status_code == 400
    assert field in r.data['error']['message']


def test_names_are_sanitized(client_for, nurse, paracetamol):
    record = create_log(client_for(nurse), chiefComplaint='<b>Dizzy</b> spell')
    assert record['chiefComplaint'] == 'Dizzy spell'


def test_ampersands_are_stored_as_typed(client_for, nurse, paracetamol):
    api = client_for(nurse)
    record = create_log(api, client='Smith & Wesson BPO', chiefComplaint='Cough &amp; colds')
    assert record['client'] == 'Smith & Wesson BPO'
    assert record['chiefComplaint'] == 'Cough & colds'

    r = api.get(reverse('clinic_logs'))
    filters = {f['key']: f for f in r.data['filters']}
    assert [o['value'] for o in filters['client']['options']] == ['Smith & Wesson BPO']


@pytest.mark.parametrize('raw, expected', [
    ('  Fever  ', 'Fever'),
    ('<i>Rash</i> on arm', 'Rash on arm'),
    ('&lt;b&gt;Cough&lt;/b&gt;', 'Cough'),
    ('BP 120 < 140', 'BP 120 < 140'),
    (None, ''),
])
def test_clean_text(raw, expected):
    assert clean_text(raw) == expected


def test_delete_restores_stock(client_for, nurse, paracetamol):
    client = client_for(nurse)
    record = create_log(client)
    r = client.delete(reverse('clinic_log_detail', args=[record['id']]))
    assert r.status_code == 200
    paracetamol.refresh_from_db()
    assert paracetamol.stock == 20
    restore = InventoryTransaction.objects.get(type='stock_in')
    assert (restore.quantity, restore.previous_stock, restore.new_stock) == (2, 18, 20)
    assert not ClinicLog.objects.exists()


def test_update_replaces_lines_and_rebalances_stock(client_for, nurse, paracetamol):
    client = client_for(nurse)
    record = create_log(client)
    r = client.put(reverse('clinic_log_detail', args=[record['id']]),
                   log_payload(medicines=[{'name': 'Paracetamol', 'quantity': 5}]), format='json')
    assert r.status_code == 200, r.data
    paracetamol.refresh_from_db()
    assert paracetamol.stock == 15
    assert r.data['data']['medicines'][0]['quantity'] == 5


def test_anonymous_is_rejected(client):
    r = client.get(reverse('clinic_logs'))
    assert r.status_code == 401


def test_missing_log_is_404(client_for, nurse):
    r = client_for(nurse).get(reverse('clinic_log_detail', args=[999]))
    assert r.status_code == 404


# ---------------------------------------------------------------------
# Table query parameters
# ---------------------------------------------------------------------
@pytest.fixture
def many_logs(client_for, nurse, paracetamol, gauze):
    client = client_for(nurse)
    today = timezone.localdate()
    for i in range(12):
        create_log(
            client,
            date=(today - timedelta(days=i)).isoformat(),
            lastName=f'Person{"abcdefghijkl"[i]}',
            employeeNumber=f'EMP-{100 + i}',
            client='Acme BPO' if i % 3 else 'Globex',
            medicines=[{'name': 'Paracetamol', 'quantity': 1}] if i % 2 else [],
            supplies=[] if i % 2 else [{'name': 'Gauze Pad', 'quantity': 1}],
        )
    return client


def test_list_paginates_with_default_page_size(many_logs):
    r = many_logs.get(reverse('clinic_logs'))
    assert r.status_code == 200
    assert r.data['ok'] is True
    assert len(r.data['data']) == 10
    assert r.data['pagination'] == {
        'total': 12, 'filteredTotal': 12, 'page': 1, 'pageSize': 10,
        'totalPages': 2, 'startIndex': 1, 'endIndex': 10,
    }
    assert {c['key'] for c in r.data['columns']} >= {'date', 'lastName', 'medicines'}


def test_list_page_size_from_user_settings(many_logs, nurse):
    UserSettings.objects.create(user=nurse, items_per_page=5)
    r = many_logs.get(reverse('clinic_logs'))
    assert r.data['pagination']['pageSize'] == 5
    assert r.data['pagination']['totalPages'] == 3


def test_list_second_page_and_out_of_range(many_logs):
    r = many_logs.get(reverse('clinic_logs'), {'page': 2})
    assert len(r.data['data']) == 2
    assert (r.data['pagination']['startIndex'], r.data['pagination']['endIndex']) == (11, 12)
    r = many_logs.get(reverse('clinic_logs'), {'page': 7})
    assert r.data['data'] == []
    assert r.data['pagination']['startIndex'] == 0


def test_list_search_filter_and_sort(many_logs):
    r = many_logs.get(reverse('clinic_logs'), {'search': 'globex'})
    assert r.data['pagination']['filteredTotal'] == 4

    r = many_logs.get(reverse('clinic_logs'), {'client': 'acme bpo', 'medicines': 'paracetamol'})
    rows = r.data['data']
    assert r.data['pagination']['filteredTotal'] == len(rows) == 4
    assert all(row['client'] == 'Acme BPO' for row in rows)
    assert all(row['medicines'][0]['name'] == 'Paracetamol' for row in rows)

    r = many_logs.get(reverse('clinic_logs'), {'client': '__all__', 'sortKey': 'lastName', 'sortDir': 'desc'})
    names = [row['lastName'] for row in r.data['data']]
    assert names == sorted(names, reverse=True)
    assert names[0] == 'Personl'


def test_list_filter_options_come_from_records(many_logs):
    r = many_logs.get(reverse('clinic_logs'))
    filters = {f['key']: f for f in r.data['filters']}
    assert [o['value'] for o in filters['client']['options']] == ['Acme BPO', 'Globex']
    assert [o['value'] for o in filters['supplies']['options']] == ['Gauze Pad']
    assert filters['medicines']['kind'] == 'list'


def test_list_bad_sort_direction_falls_back_to_ascending(many_logs):
    r = many_logs.get(reverse('clinic_logs'), {'sortKey': 'lastName', 'sortDir': 'sideways'})
    assert r.status_code == 200
    names = [row['lastName'] for row in r.data['data']]
    assert names == sorted(names)
    assert names[0] == 'Persona'


def test_list_malformed_paging_falls_back_to_defaults(many_logs):
    r = many_logs.get(reverse('clinic_logs'), {'page': 'abc', 'pageSize': 'x'})
    assert r.status_code == 200
    assert r.data['pagination']['page'] == 1
    assert r.data['pagination']['pageSize'] == 10
    assert len(r.data['data']) == 10

    r = many_logs.get(reverse('clinic_logs'), {'page': '-3', 'pageSize': '0'})
    assert (r.data['pagination']['page'], r.data['pagination']['pageSize']) == (1, 10)
