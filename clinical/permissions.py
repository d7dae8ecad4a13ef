"""
Role based permission classes for the clinical API.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import User

CLINICAL_ROLES = {User.ROLE_ADMIN, User.ROLE_DOCTOR, User.ROLE_NURSE}

class IsAdminRole(BasePermission):
    """Allow access only to users with the Admin role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) == User.ROLE_ADMIN)

class IsClinician(BasePermission):
    """Admin, Doctor or Nurse."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) in CLINICAL_ROLES)

class IsStaffMember(BasePermission):
    """Any authenticated user holding a hospital role (Support included)."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None))

class ClinicianOrReadOnly(BasePermission):
    """Reads for every staff member, writes for clinicians only."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        if request.method in SAFE_METHODS:
            return IsStaffMember().has_permission(request, view)
        return IsClinician().has_permission(request, view)

class AdminToDelete(BasePermission):
    """DELETE is reserved for the Admin role; other methods pass through."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        if request.method != "DELETE":
            return True
        return IsAdminRole().has_permission(request, view)
