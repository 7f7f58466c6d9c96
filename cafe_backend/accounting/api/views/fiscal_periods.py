# accounting/api/views/fiscal_periods.py

"""
PATH: accounting/api/views/fiscal_periods.py

FISCAL PERIOD API

GET  /api/accounting/fiscal-periods/               list
POST /api/accounting/fiscal-periods/               create (no overlaps)
POST /api/accounting/fiscal-periods/<id>/lock/     open   -> locked
POST /api/accounting/fiscal-periods/<id>/unlock/   locked -> open
POST /api/accounting/fiscal-periods/<id>/close/    any    -> closed (terminal)

Permissions:
- read:  accounting.view_fiscalperiod
- write: accounting.add_fiscalperiod / accounting.change_fiscalperiod
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.serializers.fiscal_periods import (
    FiscalPeriodCreateSerializer,
    FiscalPeriodSerializer,
)
from accounting.api.tenancy import get_tenant_id
from accounting.models.fiscal_period import FiscalPeriod
from accounting.services import period_lock
from accounting.services.exceptions import AccountingServiceError

VIEW_PERMISSION = "accounting.view_fiscalperiod"
ADD_PERMISSION = "accounting.add_fiscalperiod"
CHANGE_PERMISSION = "accounting.change_fiscalperiod"


class FiscalPeriodListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = FiscalPeriodCreateSerializer

    @extend_schema(tags=["accounting"], responses=FiscalPeriodSerializer(many=True))
    def get(self, request, *args, **kwargs):
        if not request.user.has_perm(VIEW_PERMISSION):
            return Response(
                {"detail": "You do not have permission to view fiscal periods."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        qs = FiscalPeriod.objects.filter(tenant_id=tenant_id).order_by("-start_date")
        return Response(FiscalPeriodSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=FiscalPeriodCreateSerializer,
        responses={201: FiscalPeriodSerializer, 400: dict, 403: dict},
    )
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(ADD_PERMISSION):
            return Response(
                {"detail": "You do not have permission to create fiscal periods."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            period = period_lock.create_fiscal_period(tenant_id=tenant_id, **s.validated_data)
        except AccountingServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(FiscalPeriodSerializer(period).data, status=status.HTTP_201_CREATED)


class _FiscalPeriodActionView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    def perform_action(self, *, tenant_id, period_id, user):
        raise NotImplementedError

    @extend_schema(tags=["accounting"], request=None, responses={200: FiscalPeriodSerializer, 400: dict})
    def post(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(CHANGE_PERMISSION):
            return Response(
                {"detail": "You do not have permission to change fiscal periods."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        try:
            period = self.perform_action(tenant_id=tenant_id, period_id=pk, user=request.user)
        except AccountingServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(FiscalPeriodSerializer(period).data, status=status.HTTP_200_OK)


class FiscalPeriodLockView(_FiscalPeriodActionView):
    def perform_action(self, *, tenant_id, period_id, user):
        return period_lock.lock_period(tenant_id=tenant_id, period_id=period_id, locked_by=user)


class FiscalPeriodUnlockView(_FiscalPeriodActionView):
    def perform_action(self, *, tenant_id, period_id, user):
        return period_lock.unlock_period(tenant_id=tenant_id, period_id=period_id)


class FiscalPeriodCloseView(_FiscalPeriodActionView):
    def perform_action(self, *, tenant_id, period_id, user):
        return period_lock.close_period(tenant_id=tenant_id, period_id=period_id, closed_by=user)
