"""
PATH: accounting/api/views/trial_balance.py

TRIAL BALANCE API VIEW (READ-ONLY)

- Permission-gated: requires accounting.view_journalentry
- basis=current (default): live stored balances; as_of is echoed only
- basis=replay: opening balance + posted lines with entry_date <= as_of
"""

from __future__ import annotations

from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.tenancy import get_tenant_id
from accounting.services.balance_service import BASES, BASIS_CURRENT
from accounting.services.trial_balance_service import TrialBalanceService


@extend_schema(
    tags=["accounting"],
    parameters=[
        OpenApiParameter(
            name="as_of",
            type=str,
            location=OpenApiParameter.QUERY,
            required=False,
            description="Snapshot date (YYYY-MM-DD).",
        ),
        OpenApiParameter(
            name="basis",
            type=str,
            location=OpenApiParameter.QUERY,
            required=False,
            description="current (default, live balances) or replay (rebuilt from posted lines).",
        ),
    ],
    responses={200: dict},
)
class TrialBalanceView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not request.user.has_perm("accounting.view_journalentry"):
            return Response(
                {"detail": "You do not have permission to view trial balance."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)

        as_of = None
        as_of_param = (request.query_params.get("as_of") or "").strip()
        if as_of_param:
            as_of = parse_date(as_of_param)
            if as_of is None:
                return Response(
                    {"detail": "Invalid as_of (expected YYYY-MM-DD)"},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        basis = (request.query_params.get("basis") or BASIS_CURRENT).strip().lower()
        if basis not in BASES:
            return Response(
                {"detail": f"basis must be one of {sorted(BASES)}"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        data = TrialBalanceService().generate(tenant_id=tenant_id, as_of=as_of, basis=basis)
        return Response(data, status=status.HTTP_200_OK)
