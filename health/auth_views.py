"""
Authentication views: login, logout, registration and the role redirect.

Login establishes a Django session for the server-rendered dashboards and
also returns a legacy ``Token`` key plus a JWT pair for API clients.
"""
from __future__ import annotations

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.db import transaction
from django.shortcuts import redirect
from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from health.models import Hospital
from health.serializers.auth import LoginSerializer, RegisterSerializer, clean_text
from health.services.audit import log_action

DASHBOARD_BY_ROLE = {
    'admin': 'admin-dashboard',
    'hospital': 'hospital-dashboard',
    'citizen': 'citizen-dashboard',
}


def _resolve_username(identifier: str) -> str:
    if '@' in identifier:
        user = get_user_model().objects.filter(email__iexact=identifier).only('username').first()
        if user:
            return user.username
    return identifier


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """Username (or email) and password login."""
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    identifier = s.validated_data['identifier']

    user = authenticate(request, username=_resolve_username(identifier), password=s.validated_data['password'])
    if not user:
        log_action(user=None, action='login', object_type='user', object_id=None,
                   detail={'result': 'fail', 'username': identifier, 'ip': request.META.get('REMOTE_ADDR')})
        return Response({'success': False, 'error': 'Invalid credentials'}, status=status.HTTP_400_BAD_REQUEST)

    login(request._request, user)
    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})

    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return Response({
        'success': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'role': user.role,
        'redirect': dashboard_path(user),
        'user': {
            'id': user.id,
            'username': user.username,
            'name': user.get_full_name() or user.username,
            'email': user.email,
            'role': user.role,
            'hospitalId': user.hospital_id,
        },
    })

# ScopedRateThrottle reads throttle_scope from the view class behind the function
login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
@permission_classes([AllowAny])
def register_view(request):
    """Create an account; hospital accounts also create their Hospital."""
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data

    with transaction.atomic():
        user = get_user_model().objects.create_user(
            username=v['username'], email=v['email'], password=v['password'],
            first_name=v['name'], role=v['role'],
        )
        if v['role'] == 'hospital':
            beds = v['beds']
            hospital = Hospital.objects.create(
                name=clean_text(v['hospitalName']),
                ward=clean_text(v['ward']),
                zone=clean_text(v.get('zone', '')),
                address=clean_text(v.get('address', '')),
                contact_number=clean_text(v.get('contactNumber', '')),
                **{
                    f'{kind}_{key}': beds[kind][key]
                    for kind in Hospital.BED_TYPES
                    for key in ('total', 'available')
                },
            )
            user.hospital = hospital
            user.save(update_fields=['hospital'])

    log_action(user=user, action='register', object_type='user', object_id=user.id, detail={'role': user.role})
    return Response(
        {'success': True, 'user': {'id': user.id, 'username': user.username, 'role': user.role}},
        status=status.HTTP_201_CREATED,
    )

register_view.cls.throttle_scope = 'login'


def dashboard_path(user) -> str:
    return reverse(DASHBOARD_BY_ROLE.get(user.role, 'citizen-dashboard'))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_redirect(request):
    return redirect(dashboard_path(request.user))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """End the session and blacklist the user's refresh tokens (all or a given one)."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
            count = 1
        except TokenError:
            return Response({'success': False, 'error': 'Invalid refresh token'}, status=400)
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    Token.objects.filter(user=request.user).delete()
    log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
               detail={'blacklisted': count})
    logout(request._request)
    return Response({'success': True, 'blacklisted': count})


@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from a refresh token."""
    resp = TokenRefreshView.as_view()(request._request)
    data = dict(resp.data)
    if 'access' in data and 'jwt_access' not in data:
        data['jwt_access'] = data.pop('access')
    return Response(data, status=resp.status_code)
