"""
Per-user preferences (theme, page size, formats).
"""
from __future__ import annotations

import logging

from clinic.models import UserSettings

logger = logging.getLogger(__name__)

FIELD_MAP = {
    'theme': 'theme',
    'language': 'language',
    'notifications': 'notifications',
    'autoSave': 'auto_save',
    'itemsPerPage': 'items_per_page',
    'dateFormat': 'date_format',
    'currency': 'currency',
}


def settings_for(user) -> UserSettings:
    obj, _ = UserSettings.objects.get_or_create(user=user)
    return obj


def to_record(obj: UserSettings) -> dict:
    return {key: getattr(obj, attr) for key, attr in FIELD_MAP.items()}


def update_settings(user, data: dict) -> dict:
    obj = settings_for(user)
    for key, value in data.items():
        setattr(obj, FIELD_MAP[key], value)
    obj.save()
    logger.info('settings updated for %s: %s', user.username, sorted(data))
    return to_record(obj)


def reset_settings(user) -> dict:
    UserSettings.objects.filter(user=user).delete()
    return to_record(settings_for(user))
