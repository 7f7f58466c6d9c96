# invoicing/api/permissions.py

from rest_framework.permissions import BasePermission


class HasActionPermission(BasePermission):
    """
    Map each viewset action to a Django model permission.

    Usage:
        view.action_permissions = {"list": "invoicing.view_invoice", ...}

    Actions missing from the map are denied.
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "action_permissions", {}).get(getattr(view, "action", None))
        if not required:
            return False
        return user.has_perm(required)
