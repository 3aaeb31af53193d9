"""
Token authentication for the clinic API.

Kept apart from the views so Django REST framework can import the
authentication class from settings without pulling in view modules.

API tokens expire ``CLINIC_TOKEN_TTL_HOURS`` after they were issued
(0 disables expiry).  An expired token is deleted on first use and the
client has to log in again.
"""
from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from rest_framework import authentication, exceptions
from rest_framework.authtoken.models import Token

logger = logging.getLogger(__name__)


def token_ttl() -> timedelta | None:
    hours = getattr(settings, 'CLINIC_TOKEN_TTL_HOURS', 0)
    return timedelta(hours=hours) if hours else None


def is_expired(token: Token) -> bool:
    ttl = token_ttl()
    return ttl is not None and token.created < timezone.now() - ttl


def issue_token(user) -> Token:
    """Return the user's API token, replacing it when it has expired."""
    token, created = Token.objects.get_or_create(user=user)
    if not created and is_expired(token):
        token.delete()
        token = Token.objects.create(user=user)
    return token


class TokenAuthentication(authentication.TokenAuthentication):
    """``Authorization: Token <key>`` with expiry."""

    keyword = 'Token'

    def authenticate_credentials(self, key):
        user, token = super().authenticate_credentials(key)
        if is_expired(token):
            logger.info('expired token for %s', user.username)
            token.delete()
            raise exceptions.AuthenticationFailed('Token has expired.')
        return user, token
