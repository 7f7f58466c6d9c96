# accounting/api/views/income_statement.py

from __future__ import annotations

from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.tenancy import get_branch_id, get_tenant_id
from accounting.services.exceptions import AccountingServiceError
from accounting.services.profit_and_loss_service import get_income_statement


@extend_schema(
    tags=["accounting"],
    parameters=[
        OpenApiParameter(name="start_date", type=str, required=True, description="YYYY-MM-DD"),
        OpenApiParameter(name="end_date", type=str, required=True, description="YYYY-MM-DD"),
        OpenApiParameter(name="branch_id", type=str, required=False),
    ],
    responses={200: dict},
)
class IncomeStatementView(APIView):
    """Income statement over posted entries in [start_date, end_date]."""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not request.user.has_perm("accounting.view_journalentry"):
            return Response(
                {"detail": "You do not have permission to view the income statement."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)

        start_date = parse_date((request.query_params.get("start_date") or "").strip())
        end_date = parse_date((request.query_params.get("end_date") or "").strip())
        if start_date is None or end_date is None:
            return Response(
                {"detail": "start_date and end_date are required (YYYY-MM-DD)"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            data = get_income_statement(
                tenant_id=tenant_id,
                start_date=start_date,
                end_date=end_date,
                branch_id=get_branch_id(request),
            )
        except AccountingServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(data, status=status.HTTP_200_OK)
