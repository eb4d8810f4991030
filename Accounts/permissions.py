from rest_framework import permissions

from .context import ActorContext


class IsAdminRole(permissions.BasePermission):
    """
    Admin-only endpoints. The check runs on the caller's ActorContext so
    views and services agree on what "admin" means.
    """

    message = "Only administrators can perform this action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return ActorContext.from_request(request).can_administer
