"""
Table definitions for every list endpoint and the glue between HTTP
query parameters and the table engine.

A :class:`TableConfig` bundles the columns, the filterable fields and
the CSV file prefix of one table.  Filter options that are not fixed
(e.g. the clients seen in clinic logs) are collected from the records
each time the table is rendered.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from django.conf import settings
from rest_framework.response import Response

from clinic.serializers.tables import TableQuerySerializer
from clinic.tables import (
    ALL,
    Column,
    FilterDefinition,
    FilterKind,
    FilterOption,
    SortDirection,
    SortSpec,
    ViewState,
    build_page,
    filtered_records,
    options_from_values,
)
from clinic.tables.export import csv_response


@dataclass(frozen=True)
class TableConfig:
    name: str
    columns: tuple
    filters: tuple = ()
    export_prefix: str = 'export'

    def filters_for(self, records: Sequence[dict]) -> tuple:
        """Fill in the options of filters declared without fixed options."""
        resolved = []
        for f in self.filters:
            if f.options:
                resolved.append(f)
                continue
            if f.kind is FilterKind.LIST:
                values = [
                    sub.get(f.item_key)
                    for r in records
                    for sub in (r.get(f.field) or [])
                ]
            else:
                values = [r.get(f.field) for r in records]
            resolved.append(replace(f, options=options_from_values(values)))
        return tuple(resolved)


# ---------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------
def render_date(value, record) -> str:
    return value.isoformat() if value else ''


def render_datetime(value, record) -> str:
    return value.strftime('%Y-%m-%d %H:%M') if value else ''


def render_money(value, record) -> str:
    return '' if value is None else f'{value:,.2f}'


def render_lines(value, record) -> str:
    """'Paracetamol x2; Gauze x1' for clinic log line items."""
    parts = []
    for line in value or []:
        name = line.get('customName') or line.get('name') or ''
        parts.append(f"{name} x{line.get('quantity')}")
    return '; '.join(parts)


def render_title(value, record) -> str:
    return str(value or '').replace('_', ' ').title()


def _choices(pairs) -> tuple:
    return tuple(FilterOption(value=v, label=l) for v, l in pairs)


# ---------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------
CLINIC_LOGS = TableConfig(
    name='clinic_logs',
    export_prefix='clinic-logs',
    columns=(
        Column('date', 'Date', sortable=True, render=render_date),
        Column('lastName', 'Last Name', sortable=True),
        Column('firstName', 'First Name', sortable=True),
        Column('sex', 'Sex', sortable=True),
        Column('employeeNumber', 'Employee Number', sortable=True),
        Column('client', 'Client', sortable=True),
        Column('chiefComplaint', 'Chief Complaint'),
        Column('medicines', 'Medicines', render=render_lines),
        Column('supplies', 'Supplies', render=render_lines),
        Column('issuedBy', 'Issued By', sortable=True),
        Column('nurseName', 'Nurse', sortable=True),
        Column('status', 'Status', sortable=True, render=render_title),
    ),
    filters=(
        FilterDefinition('sex', 'Sex', options=_choices((('Male', 'Male'), ('Female', 'Female')))),
        FilterDefinition('client', 'Client'),
        FilterDefinition('status', 'Status', options=_choices((('active', 'Active'), ('archived', 'Archived')))),
        FilterDefinition('medicines', 'Medicine', kind=FilterKind.LIST),
        FilterDefinition('supplies', 'Supply', kind=FilterKind.LIST),
    ),
)

STOCK_STATUS_OPTIONS = _choices((
    ('In Stock', 'In Stock'),
    ('Low Stock', 'Low Stock'),
    ('Out of Stock', 'Out of Stock'),
))


def _inventory_table(name: str, prefix: str) -> TableConfig:
    return TableConfig(
        name=name,
        export_prefix=prefix,
        columns=(
            Column('name', 'Name', sortable=True),
            Column('category', 'Category', sortable=True),
            Column('description', 'Description'),
            Column('stock', 'Stock', sortable=True),
            Column('unit', 'Unit'),
            Column('reorderLevel', 'Reorder Level', sortable=True),
            Column('price', 'Price', sortable=True, render=render_money),
            Column('supplier', 'Supplier', sortable=True),
            Column('stockStatus', 'Status', sortable=True),
            Column('updatedAt', 'Last Updated', sortable=True, render=render_datetime),
        ),
        filters=(
            FilterDefinition('category', 'Category'),
            FilterDefinition('supplier', 'Supplier'),
            FilterDefinition('stockStatus', 'Status', options=STOCK_STATUS_OPTIONS),
        ),
    )


MEDICINES = _inventory_table('medicines', 'medicines')
SUPPLIES = _inventory_table('supplies', 'supplies')

TRANSACTIONS = TableConfig(
    name='transactions',
    export_prefix='inventory-transactions',
    columns=(
        Column('createdAt', 'Date', sortable=True, render=render_datetime),
        Column('type', 'Type', sortable=True, render=render_title),
        Column('itemType', 'Item Type', sortable=True, render=render_title),
        Column('itemName', 'Item', sortable=True),
        Column('quantity', 'Quantity', sortable=True),
        Column('previousStock', 'Previous Stock', sortable=True),
        Column('newStock', 'New Stock', sortable=True),
        Column('reason', 'Reason'),
        Column('userName', 'User', sortable=True),
    ),
    filters=(
        FilterDefinition('type', 'Type', options=_choices((
            ('stock_in', 'Stock In'),
            ('stock_out', 'Stock Out'),
            ('adjustment', 'Adjustment'),
        ))),
        FilterDefinition('itemType', 'Item Type', options=_choices((('medicine', 'Medicine'), ('supply', 'Supply')))),
        FilterDefinition('itemName', 'Item'),
    ),
)

REIMBURSEMENTS = TableConfig(
    name='reimbursements',
    export_prefix='reimbursements',
    columns=(
        Column('date', 'Date', sortable=True, render=render_date),
        Column('employeeId', 'Employee ID', sortable=True),
        Column('fullNameEmployee', 'Employee', sortable=True),
        Column('fullNameDependent', 'Dependent', sortable=True),
        Column('workLocation', 'Work Location', sortable=True),
        Column('receiptDate', 'Receipt Date', sortable=True, render=render_date),
        Column('amountRequested', 'Amount', sortable=True, render=render_money),
        Column('email', 'Email'),
        Column('status', 'Status', sortable=True, render=render_title),
    ),
    filters=(
        FilterDefinition('status', 'Status', options=_choices((
            ('pending', 'Pending'),
            ('approved', 'Approved'),
            ('rejected', 'Rejected'),
        ))),
        FilterDefinition('workLocation', 'Work Location', options=_choices((('Office', 'Office'), ('WFH', 'WFH')))),
    ),
)

INTERNAL_USERS = TableConfig(
    name='internal_users',
    export_prefix='internal-users',
    columns=(
        Column('name', 'Name', sortable=True),
        Column('email', 'Email', sortable=True),
        Column('role', 'Role', sortable=True, render=render_title),
        Column('nurseId', 'Nurse ID', sortable=True),
        Column('department', 'Department', sortable=True),
    ),
    filters=(
        FilterDefinition('role', 'Role', options=_choices((
            ('nurse', 'Nurse'),
            ('admin', 'Administrator'),
            ('staff', 'Staff'),
        ))),
        FilterDefinition('department', 'Department'),
    ),
)


PATIENTS = TableConfig(
    name='patients',
    export_prefix='patients',
    columns=(
        Column('lastName', 'Last Name', sortable=True),
        Column('firstName', 'First Name', sortable=True),
        Column('employeeId', 'Employee ID', sortable=True),
        Column('email', 'Email', sortable=True),
        Column('gender', 'Gender', sortable=True),
        Column('birthday', 'Birthday', sortable=True, render=render_date),
        Column('company', 'Company', sortable=True),
        Column('lastVisited', 'Last Visited', sortable=True, render=render_date),
    ),
    filters=(
        FilterDefinition('gender', 'Gender', options=_choices((('Male', 'Male'), ('Female', 'Female')))),
        FilterDefinition('company', 'Company'),
    ),
)

HEALTH_CHECKS = TableConfig(
    name='health_checks',
    export_prefix='health-checks',
    columns=(
        Column('requestDate', 'Requested', sortable=True, render=render_datetime),
        Column('agentName', 'Agent', sortable=True),
        Column('employeeId', 'Employee ID', sortable=True),
        Column('client', 'Client', sortable=True),
        Column('reason', 'Reason'),
        Column('status', 'Status', sortable=True, render=render_title),
        Column('nurseName', 'Nurse', sortable=True),
        Column('notifiedAt', 'Notified', sortable=True, render=render_datetime),
        Column('arrivedAt', 'Arrived', sortable=True, render=render_datetime),
        Column('completedAt', 'Completed', sortable=True, render=render_datetime),
    ),
    filters=(
        FilterDefinition('status', 'Status', options=_choices((
            ('pending', 'Pending'),
            ('notified', 'Notified'),
            ('in_clinic', 'In Clinic'),
            ('completed', 'Completed'),
        ))),
        FilterDefinition('client', 'Client'),
    ),
)


# ---------------------------------------------------------------------
# Request -> view state -> response
# ---------------------------------------------------------------------
def default_page_size(user) -> int:
    user_settings = getattr(user, 'settings', None) if user is not None else None
    if user_settings is not None and user_settings.items_per_page:
        return user_settings.items_per_page
    return getattr(settings, 'CLINIC_DEFAULT_PAGE_SIZE', 10)


def _positive_int(value):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number >= 1 else None


def _sort_direction(value) -> SortDirection:
    try:
        return SortDirection((value or '').lower())
    except ValueError:
        return SortDirection.ASC


def view_state_from_request(request, config: TableConfig) -> ViewState:
    q = TableQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    sort = None
    if vd.get('sortKey'):
        sort = SortSpec(vd['sortKey'], _sort_direction(vd.get('sortDir')))
    page_size = _positive_int(vd.get('pageSize')) or default_page_size(getattr(request, 'user', None))
    page_size = min(page_size, getattr(settings, 'CLINIC_MAX_PAGE_SIZE', 100))
    active = {}
    for f in config.filters:
        value = request.query_params.get(f.field)
        if value is not None and value != ALL:
            active[f.field] = value
    return ViewState(
        search_text=vd.get('search') or '',
        active_filters=active,
        sort=sort,
        current_page=_positive_int(vd.get('page')) or 1,
        items_per_page=page_size,
    )


def table_response(request, config: TableConfig, records: Sequence[dict]) -> Response:
    """Run the engine over ``records`` and wrap the page in the list envelope."""
    state = view_state_from_request(request, config)
    filters = config.filters_for(records)
    page = build_page(records, config.columns, filters, state)
    return Response({
        'ok': True,
        'data': page.records,
        'pagination': page.pagination(),
        'columns': [c.as_dict() for c in config.columns],
        'filters': [f.as_dict() for f in filters],
    })


def export_response(request, config: TableConfig, records: Sequence[dict]):
    """CSV of the whole searched/filtered/sorted collection, ignoring the page."""
    state = view_state_from_request(request, config)
    rows = filtered_records(records, config.columns, config.filters, state)
    return csv_response(rows, config.columns, config.export_prefix)
