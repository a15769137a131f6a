from rest_framework.permissions import BasePermission


def is_admin_user(user):
    """Admin role users and superusers can manage users and read the activity log"""
    return bool(user and user.is_authenticated and (user.role == 'admin' or user.is_superuser))


class IsAdminRole(BasePermission):
    message = 'Only administrators can perform this action.'

    def has_permission(self, request, view):
        return is_admin_user(request.user)
