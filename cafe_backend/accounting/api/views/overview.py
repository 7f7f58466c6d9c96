# accounting/api/views/overview.py

"""
PATH: accounting/api/views/overview.py

ACCOUNTING OVERVIEW DASHBOARD (KPIs)

Read-only, computed live from the ledger.
Defaults to the current year to date.
"""

from __future__ import annotations

from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.tenancy import get_branch_id, get_tenant_id
from accounting.services.exceptions import AccountingServiceError
from accounting.services.overview_service import get_dashboard_summary


@extend_schema(
    tags=["accounting"],
    parameters=[
        OpenApiParameter(name="start_date", type=str, required=False, description="YYYY-MM-DD"),
        OpenApiParameter(name="end_date", type=str, required=False, description="YYYY-MM-DD"),
        OpenApiParameter(name="branch_id", type=str, required=False),
    ],
    responses={200: dict},
)
class AccountingOverviewView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not request.user.has_perm("accounting.view_journalentry"):
            return Response(
                {"detail": "You do not have permission to view accounting overview."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)

        dates = {}
        for key in ("start_date", "end_date"):
            raw = (request.query_params.get(key) or "").strip()
            if not raw:
                continue
            parsed = parse_date(raw)
            if parsed is None:
                return Response(
                    {"detail": f"Invalid {key} format (YYYY-MM-DD)"},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            dates[key] = parsed

        try:
            data = get_dashboard_summary(tenant_id=tenant_id, branch_id=get_branch_id(request), **dates)
        except AccountingServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(data, status=status.HTTP_200_OK)
