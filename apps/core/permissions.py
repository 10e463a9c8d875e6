"""
Shared permission classes.

Every business record (item, customer, booking) carries an ``owner``.
Owners manage their own records; admins manage everyone's.
"""
from rest_framework.permissions import BasePermission


def is_admin_user(user) -> bool:
    """True for users with the admin role or Django staff flag."""
    if not user or not user.is_authenticated:
        return False
    return bool(getattr(user, 'is_admin', False) or user.is_staff)


class IsOwnerOrAdmin(BasePermission):
    """
    Permission to access an owned record.

    Usage:
        permission_classes = [IsAuthenticated, IsOwnerOrAdmin]
    """

    message = 'You do not have permission to access this record.'

    def has_object_permission(self, request, view, obj):
        if is_admin_user(request.user):
            return True
        return obj.owner_id == request.user.id


class IsAdmin(BasePermission):
    """Permission for admin-only operations."""

    message = 'Admin access required.'

    def has_permission(self, request, view):
        return is_admin_user(request.user)
