"""
Bearer token authentication.

Subclasses simplejwt's ``JWTAuthentication`` so that the project has a
stable import path for its REST framework configuration and so the
failure messages match what the dashboard client expects.  Tokens carry
the account id, email and role and are signed with ``JWT_SECRET``.
"""
from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

User = get_user_model()


def issue_token(user) -> str:
    """Return a signed access token for ``user`` with a fresh expiry."""
    token = AccessToken.for_user(user)
    token['email'] = user.email
    token['role'] = user.role
    return str(token)


class BearerAuthentication(JWTAuthentication):
    """``Authorization: Bearer <jwt>`` resolving to an active account."""

    def get_user(self, validated_token):
        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            raise AuthenticationFailed('Invalid token.', code='token_not_valid')

        user = User.objects.filter(**{api_settings.USER_ID_FIELD: user_id}).first()
        if user is None:
            raise AuthenticationFailed('Invalid token. User not found.', code='user_not_found')
        if not user.is_active:
            raise AuthenticationFailed('Account is deactivated.', code='user_inactive')
        return user
