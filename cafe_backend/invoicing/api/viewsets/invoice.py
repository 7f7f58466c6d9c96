# invoicing/api/viewsets/invoice.py

"""
======================================================
PATH: invoicing/api/viewsets/invoice.py
======================================================
INVOICE VIEWSET (STAFF)

Purpose:
- Issue tax invoices (standalone or from a completed order)
- List + retrieve invoices with basic filters
- Record payments / status changes
- Expose the decoded ZATCA QR payload and an SVG rendering

Tenant scoping:
- X-Tenant-ID header (required), X-Branch-ID header (optional)

Security:
- list / retrieve / qr:   invoicing.view_invoice
- create / from_order:    invoicing.add_invoice
- update_status:          invoicing.change_invoice

Invoices are tax records: there is no update or delete route.
======================================================
"""

from __future__ import annotations

from datetime import datetime

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounting.api.tenancy import get_branch_id, get_tenant_id
from invoicing.api.permissions import HasActionPermission
from invoicing.serializers import (
    InvoiceCreateSerializer,
    InvoiceFromOrderSerializer,
    InvoiceSerializer,
    InvoiceStatusUpdateSerializer,
)
from invoicing.services import zatca
from invoicing.services.exceptions import (
    InvoiceNotFoundError,
    InvoicingServiceError,
)
from invoicing.services.invoice_service import (
    create_invoice,
    create_invoice_from_order,
    get_invoice,
    list_invoices,
    update_invoice_status,
)


def _parse_date(s: str):
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        return None


def _error(exc: InvoicingServiceError) -> Response:
    if isinstance(exc, InvoiceNotFoundError):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class InvoiceViewSet(viewsets.GenericViewSet):
    serializer_class = InvoiceSerializer
    permission_classes = [HasActionPermission]

    action_permissions = {
        "list": "invoicing.view_invoice",
        "retrieve": "invoicing.view_invoice",
        "qr": "invoicing.view_invoice",
        "create": "invoicing.add_invoice",
        "from_order": "invoicing.add_invoice",
        "update_status": "invoicing.change_invoice",
    }

    def get_serializer_class(self):
        if self.action == "create":
            return InvoiceCreateSerializer
        if self.action == "from_order":
            return InvoiceFromOrderSerializer
        if self.action == "update_status":
            return InvoiceStatusUpdateSerializer
        return InvoiceSerializer

    # ======================================================
    # READ
    # ======================================================

    @extend_schema(
        tags=["invoicing"],
        parameters=[
            OpenApiParameter(name="status", type=str, required=False),
            OpenApiParameter(name="start_date", type=str, required=False, description="YYYY-MM-DD"),
            OpenApiParameter(name="end_date", type=str, required=False, description="YYYY-MM-DD"),
            OpenApiParameter(name="limit", type=int, required=False),
        ],
        responses=InvoiceSerializer(many=True),
    )
    def list(self, request, *args, **kwargs):
        params = request.query_params

        try:
            limit = int(params.get("limit") or 100)
        except ValueError:
            return Response({"detail": "limit must be an integer"}, status=status.HTTP_400_BAD_REQUEST)

        invoices = list_invoices(
            tenant_id=get_tenant_id(request),
            branch_id=get_branch_id(request),
            status=(params.get("status") or "").strip() or None,
            start_date=_parse_date((params.get("start_date") or "").strip()),
            end_date=_parse_date((params.get("end_date") or "").strip()),
            limit=max(1, min(limit, 500)),
        )
        return Response(InvoiceSerializer(invoices, many=True).data)

    @extend_schema(tags=["invoicing"], responses={200: InvoiceSerializer, 404: dict})
    def retrieve(self, request, pk=None):
        try:
            invoice = get_invoice(tenant_id=get_tenant_id(request), invoice_id=pk)
        except InvoicingServiceError as exc:
            return _error(exc)
        return Response(InvoiceSerializer(invoice).data)

    @extend_schema(
        tags=["invoicing"],
        responses={200: dict, 404: dict},
        description="Decoded TLV fields of the invoice QR plus an SVG rendering.",
    )
    @action(detail=True, methods=["get"], url_path="qr")
    def qr(self, request, pk=None):
        try:
            invoice = get_invoice(tenant_id=get_tenant_id(request), invoice_id=pk)
        except InvoicingServiceError as exc:
            return _error(exc)

        if not invoice.has_qr:
            return Response(
                {"detail": f"Invoice {invoice.invoice_number} has no ZATCA QR code."},
                status=status.HTTP_404_NOT_FOUND,
            )

        payload = zatca.decode_tlv(invoice.zatca_hash)
        return Response(
            {
                "invoice_number": invoice.invoice_number,
                "tlv_base64": invoice.zatca_hash,
                "seller_name": payload.seller_name,
                "vat_number": payload.vat_number,
                "timestamp": payload.timestamp,
                "total_with_vat": payload.total_with_vat,
                "vat_amount": payload.vat_amount,
                "svg": zatca.render_qr_svg(invoice.zatca_hash),
            }
        )

    # ======================================================
    # ISSUE
    # ======================================================

    @extend_schema(
        tags=["invoicing"],
        request=InvoiceCreateSerializer,
        responses={201: InvoiceSerializer, 400: dict},
    )
    def create(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            invoice = create_invoice(
                tenant_id=get_tenant_id(request),
                branch_id=get_branch_id(request, default=""),
                issued_by=request.user,
                **s.validated_data,
            )
        except InvoicingServiceError as exc:
            return _error(exc)

        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["invoicing"],
        request=InvoiceFromOrderSerializer,
        responses={201: InvoiceSerializer, 400: dict, 404: dict},
    )
    @action(detail=False, methods=["post"], url_path="from-order")
    def from_order(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            invoice = create_invoice_from_order(
                tenant_id=get_tenant_id(request),
                order_id=s.validated_data["order_id"],
                branch_id=get_branch_id(request),
                issued_by=request.user,
                customer_tax_number=s.validated_data.get("customer_tax_number", ""),
            )
        except InvoicingServiceError as exc:
            return _error(exc)

        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)

    # ======================================================
    # PAYMENT / STATUS
    # ======================================================

    @extend_schema(
        tags=["invoicing"],
        request=InvoiceStatusUpdateSerializer,
        responses={200: InvoiceSerializer, 400: dict, 404: dict},
    )
    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request, pk=None):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            invoice = update_invoice_status(
                tenant_id=get_tenant_id(request),
                invoice_id=pk,
                status=s.validated_data.get("status"),
                amount_paid=s.validated_data.get("amount_paid"),
            )
        except InvoicingServiceError as exc:
            return _error(exc)

        return Response(InvoiceSerializer(invoice).data)
