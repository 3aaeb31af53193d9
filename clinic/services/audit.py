import logging
from typing import Optional, Any, Dict

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import cache

from clinic.models import Activity

User = get_user_model()
logger = logging.getLogger(__name__)

DASHBOARD_CACHE_KEY = 'dashboard:stats'


def record_activity(*, user: Optional[User], type: str, title: str, description: str = '',
                    status: str = '', metadata: Optional[Dict[str, Any]] = None) -> Activity:
    """Append to the activity feed; only the newest entries are kept."""
    real_user = user if isinstance(user, User) or getattr(user, 'id', None) else None
    activity = Activity.objects.create(
        user=real_user,
        user_name=real_user.display_name if real_user else '',
        type=type,
        title=title,
        description=description,
        status=status,
        metadata=metadata or {},
    )
    logger.info('activity %s: %s', type, title)
    _trim(getattr(settings, 'CLINIC_ACTIVITY_LIMIT', 100))
    cache.delete(DASHBOARD_CACHE_KEY)
    return activity


def _trim(limit: int) -> None:
    stale = list(Activity.objects.order_by('-created_at', '-id').values_list('id', flat=True)[limit:])
    if stale:
        Activity.objects.filter(id__in=stale).delete()


def recent_activities(limit: int = 10):
    return list(Activity.objects.order_by('-created_at', '-id')[:limit])
