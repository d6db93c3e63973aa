"""
Custom permission classes for role based access control.

Roles: admin, doctor, nurse, staff.  Reads are open to any
authenticated account; writes are limited per resource.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

ADMIN_ROLES = {"admin"}
CLINICAL_ROLES = {"admin", "doctor", "nurse"}
DOCTOR_ROLES = {"doctor", "admin"}

DENIED_MESSAGE = "Insufficient permissions."


def _role(request):
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None
    return getattr(user, "role", None)


class IsAdminRole(BasePermission):
    """Allow access only to users with the admin role."""
    message = DENIED_MESSAGE

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in ADMIN_ROLES


class PatientAccess(BasePermission):
    """Any role may read; admin/doctor/nurse may write; only admin may delete."""
    message = DENIED_MESSAGE

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        role = _role(request)
        if role is None:
            return False
        if request.method in SAFE_METHODS:
            return True
        if request.method == "DELETE":
            return role in ADMIN_ROLES
        return role in CLINICAL_ROLES


class AppointmentAccess(BasePermission):
    """Any role may read; admin/doctor/nurse may create, update and cancel."""
    message = DENIED_MESSAGE

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        role = _role(request)
        if role is None:
            return False
        if request.method in SAFE_METHODS:
            return True
        return role in CLINICAL_ROLES


class AccountAccess(BasePermission):
    """Reads/updates are self-or-admin (checked per object); deactivation is admin only."""
    message = DENIED_MESSAGE

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        role = _role(request)
        if role is None:
            return False
        if request.method == "DELETE":
            return role in ADMIN_ROLES
        return True


def is_self_or_admin(user, account_id: int) -> bool:
    return getattr(user, "role", None) in ADMIN_ROLES or user.id == account_id
