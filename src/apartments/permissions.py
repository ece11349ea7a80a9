from rest_framework import permissions


def is_admin(user):
    return bool(user and user.is_authenticated and user.is_staff)


class IsAdmin(permissions.BasePermission):
    """Staff users only."""
    def has_permission(self, request, view):
        return is_admin(request.user)


class IsAdminOrReadOnly(permissions.BasePermission):
    """Read for everyone; write only for staff (catalog management)."""
    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_admin(request.user)
