"""
Custom permission classes for role based access control.

The clinic knows three roles: nurses record visits and manage stock,
administrators can additionally approve reimbursements and delete
inventory, staff can only browse.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

ADMIN_ROLES = {"admin"}
CLINICAL_ROLES = {"nurse", "admin"}


def is_admin(user) -> bool:
    return bool(user and user.is_authenticated and getattr(user, "role", None) in ADMIN_ROLES)


class IsAdminRole(BasePermission):
    """Allow access only to users with an administrative role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return is_admin(getattr(request, "user", None))


class IsClinicalRole(BasePermission):
    """Nurses and admins: clinic logs, inventory and the dashboard."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) in CLINICAL_ROLES)


class IsOwnerOrAdmin(BasePermission):
    """Object owner (expects `obj.nurse_id` or `obj.submitted_by_id`) or admin."""
    def has_object_permission(self, request, view, obj) -> bool:
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        if request.method in SAFE_METHODS or is_admin(user):
            return True
        owner_id = getattr(obj, "nurse_id", None)
        if owner_id is None:
            owner_id = getattr(obj, "submitted_by_id", None)
        return owner_id is not None and owner_id == user.id
