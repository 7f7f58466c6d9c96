# accounting/api/tenancy.py

"""
Request tenant/branch context.

Tenants and branches are owned by an external platform; the API only
receives their opaque ids:
- X-Tenant-ID header (or ?tenant_id=) : required
- X-Branch-ID header (or ?branch_id=) : optional
"""

from rest_framework.exceptions import ValidationError

TENANT_HEADER = "HTTP_X_TENANT_ID"
BRANCH_HEADER = "HTTP_X_BRANCH_ID"


def get_tenant_id(request) -> str:
    tenant_id = (request.META.get(TENANT_HEADER) or request.query_params.get("tenant_id") or "").strip()
    if not tenant_id:
        raise ValidationError({"detail": "X-Tenant-ID header is required"})
    return tenant_id


def get_branch_id(request, default: str | None = None) -> str | None:
    branch_id = (request.META.get(BRANCH_HEADER) or request.query_params.get("branch_id") or "").strip()
    return branch_id or default
