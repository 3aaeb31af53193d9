"""
Authentication views and helper functions.

This module defines the login endpoint used by the front-end as well
as JWT refresh/logout and the current-user lookup.

When ``CLINIC_DEMO_LOGIN`` is enabled any email/password pair is
accepted: the account is created on first use and is given the admin
role when the email contains "admin", the nurse role otherwise.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import authenticate
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from clinic.serializers.auth import LoginSerializer, user_payload

from .authentication import issue_token
from .models import User

logger = logging.getLogger(__name__)


def _demo_user(account: str) -> User:
    role = 'admin' if 'admin' in account.lower() else 'nurse'
    local = account.split('@', 1)[0]
    user, created = User.objects.get_or_create(
        username=account,
        defaults={
            'email': account if '@' in account else '',
            'first_name': local.replace('.', ' ').title()[:150],
            'role': role,
        },
    )
    if created:
        user.set_unusable_password()
        user.save(update_fields=['password'])
        logger.info('demo login created %s user %s', role, account)
    return user


def _resolve_user(request, account: str, password: str) -> User | None:
    if getattr(settings, 'CLINIC_DEMO_LOGIN', False):
        return _demo_user(account)
    user = authenticate(request, username=account, password=password)
    if user is None and '@' in account:
        match = User.objects.filter(email__iexact=account).first()
        if match:
            user = authenticate(request, username=match.username, password=password)
    return user


# ---------------------------------------------------------------------
# Email/password login
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    Accepts fields:
      - email or username
      - password
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    account = s.validated_data['account']
    password = s.validated_data['password']

    user = _resolve_user(request, account, password)
    if not user or not user.is_active:
        logger.warning('failed login for %s from %s', account, request.META.get('REMOTE_ADDR'))
        return Response({'ok': False, 'error': {'code': 'invalid_credentials',
                                                'message': 'Invalid email or password'}}, status=400)

    logger.info('login %s (%s)', user.username, user.role)

    token_obj = issue_token(user)
    refresh = RefreshToken.for_user(user)

    payload: dict[str, object] = {
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'role': user.role,
        'user': user_payload(user),
    }
    return Response(payload, status=200)

# ScopedRateThrottle reads throttle_scope from the wrapped APIView class
login_view.cls.throttle_scope = 'login'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response({'ok': True, 'data': user_payload(request.user)})


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist current user's refresh tokens (all or a given one) and drop the API token."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
            count = 1
        except TokenError as exc:
            return Response({'ok': False, 'error': {'code': 'invalid_token', 'message': str(exc)}}, status=400)
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    Token.objects.filter(user=request.user).delete()
    logger.info('logout %s (%d refresh tokens blacklisted)', request.user.username, count)
    return Response({'ok': True, 'blacklisted': count})
