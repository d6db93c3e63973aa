"""
Account lifecycle: registration, login, profile edits and deactivation.

Accounts are looked up by email for login.  Handles are globally unique
(the auth table enforces it); emails are unique among active accounts.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import AuthenticationFailed, NotFound, PermissionDenied

from clinic.authentication import issue_token
from clinic.exceptions import BadRequest, ConflictError
from clinic.models import User
from clinic.permissions import ADMIN_ROLES
from clinic.services.audit import log_action

logger = logging.getLogger(__name__)


def format_user(user: User) -> dict:
    return {
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'fullName': user.get_full_name(),
        'role': user.role,
        'isActive': user.is_active,
        'lastLogin': user.last_login,
        'createdAt': user.date_joined,
    }


def format_doctor(user: User) -> dict:
    return {
        'id': user.id,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'email': user.email,
    }


def _ensure_unique(*, username: Optional[str], email: Optional[str], exclude_id: Optional[int] = None,
                   active_only: bool = False):
    qs = User.objects.all()
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if email:
        emails = qs.filter(email=email)
        if active_only:
            emails = emails.filter(is_active=True)
        if emails.exists():
            raise ConflictError('User with this email already exists')
    # the auth table keeps handles unique across deactivated rows too
    if username and qs.filter(username=username).exists():
        raise ConflictError('Username already taken')


@transaction.atomic
def create_account(*, username: str, email: str, password: str, first_name: str, last_name: str,
                   role: Optional[str] = None, actor: Optional[User] = None) -> User:
    _ensure_unique(username=username, email=email)
    user = User.objects.create_user(
        username=username, email=email, password=password,
        first_name=first_name, last_name=last_name, role=role or User.ROLE_STAFF,
    )
    log_action(user=actor or user, action='account.create', object_type='user', object_id=user.id,
               detail={'role': user.role, 'self': actor is None})
    logger.info('account %s created with role %s', user.username, user.role)
    return user


def register(validated: dict) -> tuple[User, str]:
    user = create_account(
        username=validated['username'], email=validated['email'], password=validated['password'],
        first_name=validated['firstName'], last_name=validated['lastName'], role=validated.get('role'),
    )
    return user, issue_token(user)


def login(*, email: str, password: str, ip: Optional[str] = None) -> tuple[User, str]:
    """Check credentials and return ``(user, token)``.

    Unknown email and wrong password share one message so the endpoint
    does not reveal which accounts exist.
    """
    user = User.objects.filter(email=email, is_active=True).first()
    if user is None:
        if User.objects.filter(email=email, is_active=False).exists():
            log_action(user=None, action='login', object_type='user',
                       detail={'result': 'inactive', 'email': email, 'ip': ip})
            raise AuthenticationFailed('Account is deactivated')
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'email': email, 'ip': ip})
        raise AuthenticationFailed('Invalid credentials')

    if not user.check_password(password):
        log_action(user=None, action='login', object_type='user', object_id=user.id,
                   detail={'result': 'fail', 'email': email, 'ip': ip})
        raise AuthenticationFailed('Invalid credentials')

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': ip})
    return user, issue_token(user)


def get_active_account(account_id: int) -> User:
    user = User.objects.filter(id=account_id, is_active=True).first()
    if user is None:
        raise NotFound('User not found')
    return user


def list_accounts(*, role: Optional[str] = None, search: Optional[str] = None):
    qs = User.objects.filter(is_active=True)
    if role:
        qs = qs.filter(role=role)
    if search:
        qs = qs.filter(
            Q(first_name__icontains=search) | Q(last_name__icontains=search)
            | Q(email__icontains=search) | Q(username__icontains=search)
        )
    return qs.order_by('-date_joined', '-id')


def list_doctors():
    return User.objects.filter(role=User.ROLE_DOCTOR, is_active=True).order_by('first_name', 'id')


_PROFILE_FIELDS = {
    'username': 'username',
    'email': 'email',
    'firstName': 'first_name',
    'lastName': 'last_name',
    'role': 'role',
}


@transaction.atomic
def update_account(account_id: int, data: dict, *, actor: User) -> User:
    user = get_active_account(account_id)
    if actor.role not in ADMIN_ROLES and actor.id != user.id:
        raise PermissionDenied('Access denied')

    changes = dict(data)
    # only administrators may change roles; others have the key dropped
    if actor.role not in ADMIN_ROLES:
        changes.pop('role', None)

    _ensure_unique(
        username=changes['username'] if changes.get('username', user.username) != user.username else None,
        email=changes['email'] if changes.get('email', user.email) != user.email else None,
        exclude_id=user.id,
        active_only=True,
    )

    for key, attr in _PROFILE_FIELDS.items():
        if key in changes:
            setattr(user, attr, changes[key])
    user.save()
    log_action(user=actor, action='account.update', object_type='user', object_id=user.id,
               detail={'fields': sorted(changes)})
    return user


@transaction.atomic
def deactivate_account(account_id: int, *, actor: User) -> User:
    user = get_active_account(account_id)
    if user.id == actor.id:
        raise BadRequest('Cannot delete your own account')
    user.is_active = False
    user.save(update_fields=['is_active'])
    log_action(user=actor, action='account.deactivate', object_type='user', object_id=user.id)
    logger.info('account %s deactivated by %s', user.username, actor.username)
    return user
