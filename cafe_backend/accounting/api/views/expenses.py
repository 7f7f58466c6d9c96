# PATH: accounting/api/views/expenses.py

"""
PATH: accounting/api/views/expenses.py

EXPENSES API

GET  /api/accounting/expenses/                  list (filter: status)
POST /api/accounting/expenses/                  request an expense (pending_approval)
POST /api/accounting/expenses/<id>/approve/     approve + post to ledger (atomic)
POST /api/accounting/expenses/<id>/reject/      reject

Permissions:
- read:    accounting.view_expense
- create:  accounting.add_expense
- decide:  accounting.change_expense
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.serializers.expenses import (
    ExpenseCreateSerializer,
    ExpenseDecisionSerializer,
    ExpenseSerializer,
)
from accounting.api.tenancy import get_branch_id, get_tenant_id
from accounting.models.expense import Expense
from accounting.services.exceptions import AccountingServiceError
from accounting.services.expense_service import (
    approve_expense,
    create_expense,
    reject_expense,
)

EXPENSE_VIEW_PERMISSION = "accounting.view_expense"
EXPENSE_ADD_PERMISSION = "accounting.add_expense"
EXPENSE_DECIDE_PERMISSION = "accounting.change_expense"


class ExpenseListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ExpenseCreateSerializer

    @extend_schema(
        tags=["accounting"],
        parameters=[OpenApiParameter(name="status", type=str, required=False)],
        responses=ExpenseSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        if not request.user.has_perm(EXPENSE_VIEW_PERMISSION):
            return Response(
                {"detail": "You do not have permission to view expenses."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        qs = Expense.objects.filter(tenant_id=tenant_id).select_related(
            "expense_account",
            "journal_entry",
        )

        expense_status = request.query_params.get("status")
        if expense_status:
            qs = qs.filter(status=expense_status)

        branch_id = get_branch_id(request)
        if branch_id:
            qs = qs.filter(branch_id=branch_id)

        qs = qs.order_by("-expense_date", "-created_at")
        return Response(ExpenseSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=ExpenseCreateSerializer,
        responses={201: ExpenseSerializer, 400: dict, 403: dict},
    )
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(EXPENSE_ADD_PERMISSION):
            return Response(
                {"detail": "You do not have permission to create expenses."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            expense = create_expense(
                tenant_id=tenant_id,
                branch_id=get_branch_id(request, default=""),
                requested_by=request.user,
                **s.validated_data,
            )
        except AccountingServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


class ExpenseApproveView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["accounting"], request=None, responses={200: ExpenseSerializer, 400: dict, 403: dict})
    def post(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(EXPENSE_DECIDE_PERMISSION):
            return Response(
                {"detail": "You do not have permission to approve expenses."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        try:
            expense = approve_expense(tenant_id=tenant_id, expense_id=pk, approved_by=request.user)
        except AccountingServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ExpenseSerializer(expense).data, status=status.HTTP_200_OK)


class ExpenseRejectView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ExpenseDecisionSerializer

    @extend_schema(
        tags=["accounting"],
        request=ExpenseDecisionSerializer,
        responses={200: ExpenseSerializer, 400: dict, 403: dict},
    )
    def post(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(EXPENSE_DECIDE_PERMISSION):
            return Response(
                {"detail": "You do not have permission to reject expenses."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            expense = reject_expense(
                tenant_id=tenant_id,
                expense_id=pk,
                rejected_by=request.user,
                reason=s.validated_data.get("reason", ""),
            )
        except AccountingServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ExpenseSerializer(expense).data, status=status.HTTP_200_OK)
