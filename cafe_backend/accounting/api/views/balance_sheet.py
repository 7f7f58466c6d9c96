# accounting/api/views/balance_sheet.py

from __future__ import annotations

from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.tenancy import get_tenant_id
from accounting.services.balance_service import BASES, BASIS_CURRENT
from accounting.services.balance_sheet_service import generate_balance_sheet


@extend_schema(
    tags=["accounting"],
    parameters=[
        OpenApiParameter(name="as_of_date", type=str, required=False, description="YYYY-MM-DD"),
        OpenApiParameter(name="basis", type=str, required=False, description="current | replay"),
    ],
    responses={200: dict},
)
class BalanceSheetView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not request.user.has_perm("accounting.view_journalentry"):
            return Response(
                {"detail": "You do not have permission to view balance sheet."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)

        as_of_date = None
        raw = (request.query_params.get("as_of_date") or "").strip()
        if raw:
            as_of_date = parse_date(raw)
            if as_of_date is None:
                return Response(
                    {"detail": "Invalid as_of_date format (YYYY-MM-DD)"},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        basis = (request.query_params.get("basis") or BASIS_CURRENT).strip().lower()
        if basis not in BASES:
            return Response(
                {"detail": f"basis must be one of {sorted(BASES)}"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        data = generate_balance_sheet(tenant_id=tenant_id, as_of_date=as_of_date, basis=basis)
        return Response(data, status=status.HTTP_200_OK)
