"""
URL mappings for the clinic backend API.

This module registers all API endpoints with their corresponding view
functions.  Trailing slashes are deliberately omitted to match the
front-end request paths.  Every route is named so tests and clients can
``reverse()`` them.
"""
from django.urls import path, include

from .auth_views import jwt_logout_view, jwt_refresh_view, login_view, me_view
from .views import health
from .views.clinic_logs import clinic_log_detail, clinic_log_export, clinic_log_list
from .views.dashboard import activities, dashboard
from .views.directory import entry_detail, entry_list
from .views.health_checks import health_check_list, health_check_status
from .views.inventory import (
    category_detail,
    category_list,
    item_adjust,
    item_detail,
    item_export,
    item_list,
    supplier_detail,
    supplier_list,
    transaction_export,
    transaction_list,
)
from .views.patients import patient_detail, patient_list
from .views.reimbursements import (
    reimbursement_detail,
    reimbursement_export,
    reimbursement_list,
    reimbursement_status,
)
from .views.users import internal_user_list, user_settings, user_settings_reset

INVENTORY_KIND = '<str:kind>'

urlpatterns = [
    # django_prometheus serves /metrics
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout'),
    path('api/auth/me', me_view, name='me'),
    # Dashboard / activity feed
    path('api/dashboard', dashboard, name='dashboard'),
    path('api/activities', activities, name='activities'),
    # Clinic logs
    path('api/clinic-logs', clinic_log_list, name='clinic_logs'),
    path('api/clinic-logs/export', clinic_log_export, name='clinic_logs_export'),
    path('api/clinic-logs/<int:pk>', clinic_log_detail, name='clinic_log_detail'),
    # Inventory (fixed paths before the <kind> patterns)
    path('api/inventory/transactions', transaction_list, name='inventory_transactions'),
    path('api/inventory/transactions/export', transaction_export, name='inventory_transactions_export'),
    path('api/inventory/categories', category_list, name='inventory_categories'),
    path('api/inventory/categories/<int:pk>', category_detail, name='inventory_category_detail'),
    path('api/inventory/suppliers', supplier_list, name='inventory_suppliers'),
    path('api/inventory/suppliers/<int:pk>', supplier_detail, name='inventory_supplier_detail'),
    path(f'api/inventory/{INVENTORY_KIND}', item_list, name='inventory_items'),
    path(f'api/inventory/{INVENTORY_KIND}/export', item_export, name='inventory_export'),
    path(f'api/inventory/{INVENTORY_KIND}/<int:pk>', item_detail, name='inventory_item_detail'),
    path(f'api/inventory/{INVENTORY_KIND}/<int:pk>/adjust', item_adjust, name='inventory_item_adjust'),
    # Reimbursements
    path('api/reimbursements', reimbursement_list, name='reimbursements'),
    path('api/reimbursements/export', reimbursement_export, name='reimbursements_export'),
    path('api/reimbursements/<int:pk>', reimbursement_detail, name='reimbursement_detail'),
    path('api/reimbursements/<int:pk>/status', reimbursement_status, name='reimbursement_status'),
    # Clients and issuers offered on the clinic log form
    path('api/clients', entry_list, {'kind': 'clients'}, name='clients'),
    path('api/clients/<int:pk>', entry_detail, {'kind': 'clients'}, name='client_detail'),
    path('api/issuers', entry_list, {'kind': 'issuers'}, name='issuers'),
    path('api/issuers/<int:pk>', entry_detail, {'kind': 'issuers'}, name='issuer_detail'),
    # Patients
    path('api/patients', patient_list, name='patients'),
    path('api/patients/<int:pk>', patient_detail, name='patient_detail'),
    # Health-check requests
    path('api/health-checks', health_check_list, name='health_checks'),
    path('api/health-checks/<int:pk>/status', health_check_status, name='health_check_status'),
    # Users and settings
    path('api/internal-users', internal_user_list, name='internal_users'),
    path('api/settings', user_settings, name='user_settings'),
    path('api/settings/reset', user_settings_reset, name='user_settings_reset'),
]
