"""
Plan-based permission classes.

Exports and the community events feed are paid features.
"""
from rest_framework.permissions import BasePermission

from apps.core.permissions import is_admin_user
from .models import Subscription


def user_has_premium_plan(user) -> bool:
    if is_admin_user(user):
        return True
    subscription = Subscription.objects.filter(user=user).first()
    return bool(subscription and subscription.is_premium)


class HasPremiumPlan(BasePermission):
    """
    Allow users on an active Pro or Business plan. Admins always pass.

    Usage:
        def get_permissions(self):
            if self.action == 'export':
                return [IsAuthenticated(), HasPremiumPlan()]
            return super().get_permissions()
    """

    message = 'This feature requires a Pro or Business plan.'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return user_has_premium_plan(request.user)
