"""
Role based permission classes for the three portals.
"""
from rest_framework.permissions import BasePermission

from .models import Citizen


def _role(request):
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None
    return getattr(user, "role", None)


class IsAdminRole(BasePermission):
    """Allow access only to city administrators."""
    message = "Admin access required"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) == "admin"


class IsHospitalRole(BasePermission):
    """Hospital staff with a hospital bound to the account."""
    message = "Hospital access required"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) == "hospital" and getattr(request.user, "hospital_id", None) is not None


class IsCitizenRole(BasePermission):
    message = "Citizen access required"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) == "citizen"


class RequiresCompletedProfile(BasePermission):
    """Citizen features gated on a completed profile, read from the Citizen record."""
    message = "Please complete your profile first"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        return Citizen.objects.filter(user=user, profile_completed=True).exists()
