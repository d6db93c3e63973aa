"""
Authentication endpoints.

Tokens are stateless: logout only records the event, and refresh
re-issues a token for the already authenticated account with a fresh
expiry.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from clinic.authentication import issue_token
from clinic.serializers.auth import LoginSerializer, RegisterSerializer
from clinic.services import accounts
from clinic.services.audit import client_ip, log_action


class LoginRateThrottle(AnonRateThrottle):
    scope = 'login'


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user, token = accounts.register(s.validated_data)
    return Response({
        'success': True,
        'message': 'User registered successfully',
        'data': {'user': accounts.format_user(user), 'token': token},
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user, token = accounts.login(
        email=s.validated_data['email'],
        password=s.validated_data['password'],
        ip=client_ip(request),
    )
    return Response({
        'success': True,
        'message': 'Login successful',
        'data': {'user': accounts.format_user(user), 'token': token},
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response({'success': True, 'data': accounts.format_user(request.user)})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
               detail={'ip': client_ip(request)})
    return Response({'success': True, 'message': 'Logout successful'})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def refresh_view(request):
    return Response({
        'success': True,
        'message': 'Token refreshed successfully',
        'data': {'token': issue_token(request.user)},
    })
