# accounting/api/views/accounts.py

"""
PATH: accounting/api/views/accounts.py

CHART OF ACCOUNTS API

GET  /api/accounting/accounts/             list (filters: account_type, is_active)
POST /api/accounting/accounts/             create an ad-hoc account
GET  /api/accounting/accounts/tree/        parent -> children hierarchy
POST /api/accounting/accounts/initialize/  seed the default cafe chart (idempotent)

Permissions:
- read:  accounting.view_account
- write: accounting.add_account
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.serializers.accounts import AccountCreateSerializer, AccountSerializer
from accounting.api.tenancy import get_tenant_id
from accounting.services.chart_of_accounts import (
    create_account,
    get_account_tree,
    get_accounts,
    initialize_chart_of_accounts,
)
from accounting.services.exceptions import AccountingServiceError

VIEW_PERMISSION = "accounting.view_account"
ADD_PERMISSION = "accounting.add_account"


def _forbidden(message: str) -> Response:
    return Response({"detail": message}, status=status.HTTP_403_FORBIDDEN)


class AccountListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccountCreateSerializer

    @extend_schema(
        tags=["accounting"],
        parameters=[
            OpenApiParameter(name="account_type", type=str, required=False),
            OpenApiParameter(name="is_active", type=bool, required=False),
        ],
        responses=AccountSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        if not request.user.has_perm(VIEW_PERMISSION):
            return _forbidden("You do not have permission to view accounts.")

        tenant_id = get_tenant_id(request)

        is_active = request.query_params.get("is_active")
        if is_active is not None:
            is_active = is_active.strip().lower() in ("1", "true", "yes")

        qs = get_accounts(
            tenant_id=tenant_id,
            account_type=request.query_params.get("account_type") or None,
            is_active=is_active,
        ).select_related("parent")

        return Response(AccountSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=AccountCreateSerializer,
        responses={201: AccountSerializer, 400: dict, 403: dict},
    )
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(ADD_PERMISSION):
            return _forbidden("You do not have permission to create accounts.")

        tenant_id = get_tenant_id(request)
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            account = create_account(tenant_id=tenant_id, **s.validated_data)
        except AccountingServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(AccountSerializer(account).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["accounting"], responses={200: dict})
class AccountTreeView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        if not request.user.has_perm(VIEW_PERMISSION):
            return _forbidden("You do not have permission to view accounts.")

        tenant_id = get_tenant_id(request)
        return Response(get_account_tree(tenant_id=tenant_id), status=status.HTTP_200_OK)


@extend_schema(tags=["accounting"], request=None, responses={200: AccountSerializer(many=True)})
class InitializeChartView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(ADD_PERMISSION):
            return _forbidden("You do not have permission to initialize the chart of accounts.")

        tenant_id = get_tenant_id(request)
        accounts = initialize_chart_of_accounts(tenant_id=tenant_id)
        return Response(AccountSerializer(accounts, many=True).data, status=status.HTTP_200_OK)
