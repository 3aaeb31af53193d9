"""
Dashboard statistics.

The totals are cached for ``CLINIC_DASHBOARD_TTL`` seconds; every write
that records an activity drops the cached value.
"""
from __future__ import annotations

from django.conf import settings
from django.core.cache import cache

from clinic.models import ClinicLog, HealthCheckRequest, InventoryItem
from clinic.services.audit import DASHBOARD_CACHE_KEY, recent_activities
from clinic.services.clinic_logs import total_items_issued
from clinic.services.health_checks import status_counts
from clinic.services.inventory import low_stock_count
from clinic.services.reimbursements import totals as reimbursement_totals


def format_activity(a) -> dict:
    return {
        'id': a.id,
        'type': a.type,
        'title': a.title,
        'description': a.description,
        'timestamp': a.created_at,
        'userId': a.user_id,
        'userName': a.user_name,
        'status': a.status,
        'metadata': a.metadata,
    }


def compute_stats() -> dict:
    stats = {
        'totalClinicLogs': ClinicLog.objects.count(),
        'totalItemsIssued': total_items_issued(),
        'lowStockItems': low_stock_count(),
        'inventoryItems': InventoryItem.objects.count(),
        'pendingHealthChecks': status_counts()[HealthCheckRequest.STATUS_PENDING],
    }
    stats.update(reimbursement_totals())
    return stats


def dashboard_stats() -> dict:
    stats = cache.get(DASHBOARD_CACHE_KEY)
    if stats is None:
        stats = compute_stats()
        cache.set(DASHBOARD_CACHE_KEY, stats, getattr(settings, 'CLINIC_DASHBOARD_TTL', 60))
    return {
        **stats,
        'recentActivity': [format_activity(a) for a in recent_activities(5)],
    }
