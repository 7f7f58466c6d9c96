# invoicing/services/invoice_service.py

"""
======================================================
PATH: invoicing/services/invoice_service.py
======================================================
INVOICE ISSUER

Responsibilities:
- Line arithmetic (discount, taxable base, 15% VAT, line total)
- Gapless INV-<year>-<6 digits> numbering per tenant + branch + year
- ZATCA QR payload (Base64 TLV in zatca_hash, PNG data URL in zatca_qr_code)
- Payment status updates
- Read helpers (list / get)

Rounding:
- Every per-line figure is rounded to 2 decimals (ROUND_HALF_UP) when it is
  computed. Invoice totals are sums of the rounded line figures, so
  grand_total == sum(line_total) and total_tax == sum(tax_amount) exactly.

Seller identity:
- SellerProfile for the tenant, else ZATCA_SELLER_NAME / ZATCA_VAT_NUMBER.
- If neither is configured the invoice is still issued, without a QR
  (a missing tax configuration must never block a sale).
- Seller data the QR cannot encode (a field over 255 bytes) rejects a
  standalone invoice but only drops the QR on an order invoice.

Naive invoice dates are read in the current time zone before numbering
and QR encoding.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from accounting.models.sequence import DocumentSequence
from accounting.services.sequence_service import next_document_number
from invoicing.models.invoice import Invoice, InvoiceLine
from invoicing.models.seller_profile import SellerProfile
from invoicing.services import zatca
from invoicing.services.exceptions import (
    InvoiceNotFoundError,
    InvoiceValidationError,
)

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
TAX_RATE_PERCENT = Decimal("15")
HUNDRED = Decimal("100")

DEFAULT_CUSTOMER_NAME = "عميل نقدي"


def _q2(v: Decimal) -> Decimal:
    return v.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _decimal(value, field: str) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvoiceValidationError(f"Invalid {field}: {value!r}") from exc
    if not amount.is_finite():
        raise InvoiceValidationError(f"Invalid {field}: {value!r}")
    return amount


@dataclass(frozen=True)
class SellerIdentity:
    name: str
    vat_number: str


# ------------------------------------------------------------
# LINE ARITHMETIC
# ------------------------------------------------------------


def compute_line(*, quantity, unit_price, discount_percent=None, tax_rate=None) -> dict:
    """
    Price one invoice line.

    qty 2 @ 20.00 with 10% discount ->
        discount_amount 4.00, taxable_amount 36.00, tax_amount 5.40, line_total 41.40
    """
    qty = _decimal(quantity, "quantity")
    price = _decimal(unit_price, "unit_price")
    pct = _decimal(discount_percent, "discount_percent")

    if qty <= 0:
        raise InvoiceValidationError("quantity must be > 0")
    if price < 0:
        raise InvoiceValidationError("unit_price cannot be negative")
    if pct < 0 or pct > HUNDRED:
        raise InvoiceValidationError("discount_percent must be between 0 and 100")

    if tax_rate not in (None, ""):
        rate = _decimal(tax_rate, "tax_rate")
        if rate != TAX_RATE_PERCENT:
            raise InvoiceValidationError(f"Unsupported tax rate {tax_rate}; only 15% VAT is recognized")

    gross = _q2(qty * price)
    discount_amount = _q2(gross * pct / HUNDRED)
    taxable = gross - discount_amount
    tax_amount = _q2(taxable * TAX_RATE_PERCENT / HUNDRED)

    return {
        "quantity": qty,
        "unit_price": _q2(price),
        "gross_amount": gross,
        "discount_percent": _q2(pct),
        "discount_amount": discount_amount,
        "taxable_amount": taxable,
        "tax_rate": TAX_RATE_PERCENT,
        "tax_amount": tax_amount,
        "line_total": taxable + tax_amount,
    }


def _price_lines(lines) -> tuple[list[dict], dict]:
    if not lines:
        raise InvoiceValidationError("Invoice must contain at least one line")

    priced = []
    for line in lines:
        description = (line.get("description") or "").strip()
        if not description:
            raise InvoiceValidationError("Invoice line description is required")
        computed = compute_line(
            quantity=line.get("quantity", 1),
            unit_price=line.get("unit_price"),
            discount_percent=line.get("discount_percent"),
            tax_rate=line.get("tax_rate"),
        )
        computed["description"] = description
        priced.append(computed)

    zero = Decimal("0.00")
    totals = {
        "subtotal": sum((p["gross_amount"] for p in priced), zero),
        "total_discount": sum((p["discount_amount"] for p in priced), zero),
        "total_tax": sum((p["tax_amount"] for p in priced), zero),
        "grand_total": sum((p["line_total"] for p in priced), zero),
    }
    return priced, totals


# ------------------------------------------------------------
# SELLER / QR
# ------------------------------------------------------------


def resolve_seller(*, tenant_id: str) -> SellerIdentity | None:
    profile = SellerProfile.objects.filter(tenant_id=tenant_id).first()
    if profile is not None:
        return SellerIdentity(name=profile.legal_name, vat_number=profile.vat_number)

    name = getattr(settings, "ZATCA_SELLER_NAME", "")
    vat_number = getattr(settings, "ZATCA_VAT_NUMBER", "")
    if name and vat_number:
        return SellerIdentity(name=name, vat_number=vat_number)
    return None


def _qr_fields(*, seller: SellerIdentity, invoice_date: datetime, grand_total, total_tax) -> dict:
    payload = zatca.encode_tlv(
        seller_name=seller.name,
        vat_number=seller.vat_number,
        timestamp=invoice_date,
        total_with_vat=grand_total,
        vat_amount=total_tax,
    )

    return {
        "seller_name": seller.name,
        "seller_vat_number": seller.vat_number,
        "zatca_hash": payload,
        "zatca_qr_code": zatca.render_qr_data_url(payload),
    }


# ------------------------------------------------------------
# ISSUE
# ------------------------------------------------------------


def _as_aware(value) -> datetime:
    """Naive datetimes are read in the current time zone, as the journal engine reads them."""
    if value is None:
        return timezone.now()
    if not isinstance(value, datetime):
        raise InvoiceValidationError(f"Invalid invoice_date: {value!r}")
    if timezone.is_naive(value):
        return timezone.make_aware(value, timezone.get_current_timezone())
    return value


def _issue(
    *,
    tenant_id: str,
    branch_id: str,
    lines,
    paid: bool,
    issued_by=None,
    invoice_date: datetime | None = None,
    order=None,
    strict_qr: bool = True,
    **fields,
) -> Invoice:
    if not tenant_id:
        raise InvoiceValidationError("tenant_id is required")

    priced, totals = _price_lines(lines)
    invoice_date = _as_aware(invoice_date)
    currency = fields.pop("currency", None) or getattr(settings, "INVOICE_DEFAULT_CURRENCY", "SAR")

    customer_tax_number = "".join((fields.get("customer_tax_number") or "").split())
    if customer_tax_number and not zatca.validate_vat_number(customer_tax_number):
        raise InvoiceValidationError(f"Invalid customer VAT number: {fields.get('customer_tax_number')}")
    fields["customer_tax_number"] = customer_tax_number

    qr = {}
    seller = resolve_seller(tenant_id=tenant_id)
    if seller is not None:
        try:
            qr = _qr_fields(
                seller=seller,
                invoice_date=invoice_date,
                grand_total=totals["grand_total"],
                total_tax=totals["total_tax"],
            )
        except zatca.ZatcaEncodingError as exc:
            if strict_qr:
                raise InvoiceValidationError(str(exc)) from exc
            logger.warning(
                "invoice issued without ZATCA QR: seller data cannot be encoded",
                extra={"tenant_id": tenant_id, "branch_id": branch_id, "error": str(exc)},
            )
    else:
        logger.warning(
            "invoice issued without ZATCA QR: seller VAT info not configured",
            extra={"tenant_id": tenant_id, "branch_id": branch_id},
        )

    number = next_document_number(
        tenant_id=tenant_id,
        kind=DocumentSequence.KIND_INVOICE,
        year=timezone.localtime(invoice_date).year,
        branch_id=branch_id,
    )

    grand_total = totals["grand_total"]
    amount_paid = grand_total if paid else Decimal("0.00")

    invoice = Invoice.objects.create(
        tenant_id=tenant_id,
        branch_id=branch_id,
        invoice_number=number,
        invoice_date=invoice_date,
        zatca_invoice_type=zatca.classify_invoice_type(customer_tax_number),
        status=Invoice.STATUS_PAID if paid else Invoice.STATUS_ISSUED,
        amount_paid=amount_paid,
        amount_due=grand_total - amount_paid,
        currency=currency,
        order=order,
        issued_by=issued_by,
        issued_at=invoice_date,
        paid_at=invoice_date if paid else None,
        **totals,
        **qr,
        **fields,
    )

    InvoiceLine.objects.bulk_create(
        [
            InvoiceLine(
                invoice=invoice,
                line_no=i,
                description=p["description"],
                quantity=p["quantity"],
                unit_price=p["unit_price"],
                discount_percent=p["discount_percent"],
                discount_amount=p["discount_amount"],
                taxable_amount=p["taxable_amount"],
                tax_rate=p["tax_rate"],
                tax_amount=p["tax_amount"],
                line_total=p["line_total"],
            )
            for i, p in enumerate(priced, start=1)
        ]
    )

    logger.info(
        "invoice issued",
        extra={
            "tenant_id": tenant_id,
            "invoice_number": invoice.invoice_number,
            "grand_total": str(grand_total),
            "has_qr": invoice.has_qr,
        },
    )
    return invoice


@transaction.atomic
def create_invoice(
    *,
    tenant_id: str,
    lines: list,
    branch_id: str = "",
    customer_name: str = "",
    customer_phone: str = "",
    customer_email: str = "",
    customer_tax_number: str = "",
    customer_address: str = "",
    payment_method: str = "",
    currency: str | None = None,
    notes: str = "",
    issued_by=None,
    invoice_date: datetime | None = None,
) -> Invoice:
    """
    Issue a standalone invoice (status issued, nothing paid yet).

    lines: [{"description", "quantity", "unit_price", "discount_percent"?, "tax_rate"?}]
    """
    return _issue(
        tenant_id=tenant_id,
        branch_id=branch_id or "",
        lines=lines,
        paid=False,
        issued_by=issued_by,
        invoice_date=invoice_date,
        customer_name=(customer_name or "").strip(),
        customer_phone=(customer_phone or "").strip(),
        customer_email=(customer_email or "").strip(),
        customer_tax_number=customer_tax_number,
        customer_address=(customer_address or "").strip(),
        payment_method=(payment_method or "").strip(),
        currency=currency,
        notes=(notes or "").strip(),
    )


@transaction.atomic
def create_invoice_from_order(
    *,
    tenant_id: str,
    order_id,
    branch_id: str | None = None,
    issued_by=None,
    customer_tax_number: str = "",
) -> Invoice:
    """
    Issue a paid invoice for a completed order.

    Order item prices are treated as net; 15% VAT is added per line.
    """
    from sales.models.order import Order

    order = Order.objects.filter(tenant_id=tenant_id, pk=order_id).prefetch_related("items").first()
    if order is None:
        raise InvoiceNotFoundError(f"Order {order_id} not found")
    if order.status != Order.STATUS_COMPLETED:
        raise InvoiceValidationError(f"Order {order.order_number} is {order.status}; only completed orders are invoiced")
    if Invoice.objects.filter(tenant_id=tenant_id, order=order).exists():
        raise InvoiceValidationError(f"Order {order.order_number} is already invoiced")

    lines = [
        {
            "description": item.name or "منتج",
            "quantity": item.quantity or 1,
            "unit_price": item.unit_price,
        }
        for item in order.items.all()
    ]

    return _issue(
        tenant_id=tenant_id,
        branch_id=branch_id if branch_id is not None else order.branch_id,
        lines=lines,
        paid=True,
        issued_by=issued_by,
        order=order,
        strict_qr=False,
        customer_name=order.customer_name or DEFAULT_CUSTOMER_NAME,
        customer_phone=order.customer_phone,
        customer_tax_number=customer_tax_number,
        payment_method=order.payment_method,
    )


@transaction.atomic
def update_invoice_status(*, tenant_id: str, invoice_id, status: str | None = None, amount_paid=None) -> Invoice:
    """
    Apply a status and/or payment update.

    When amount_paid is given, amount_due is recomputed and the status is
    derived: paid when amount_paid >= grand_total, partially_paid when
    0 < amount_paid < grand_total. Otherwise the given status is applied as is.
    """
    invoice = Invoice.objects.select_for_update().filter(tenant_id=tenant_id, pk=invoice_id).first()
    if invoice is None:
        raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")

    if status:
        if status not in dict(Invoice.STATUS_CHOICES):
            raise InvoiceValidationError(f"Unknown invoice status: {status!r}")
        invoice.status = status

    if amount_paid is not None:
        paid = _q2(_decimal(amount_paid, "amount_paid"))
        if paid < 0:
            raise InvoiceValidationError("amount_paid cannot be negative")

        invoice.amount_paid = paid
        invoice.amount_due = invoice.grand_total - paid
        if paid >= invoice.grand_total:
            invoice.status = Invoice.STATUS_PAID
            invoice.paid_at = timezone.now()
        elif paid > 0:
            invoice.status = Invoice.STATUS_PARTIALLY_PAID

    invoice.save()
    return invoice


# ------------------------------------------------------------
# READ
# ------------------------------------------------------------


def list_invoices(
    *,
    tenant_id: str,
    branch_id: str | None = None,
    status: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    limit: int = 100,
):
    qs = Invoice.objects.filter(tenant_id=tenant_id).prefetch_related("lines")
    if branch_id:
        qs = qs.filter(branch_id=branch_id)
    if status:
        qs = qs.filter(status=status)
    if start_date:
        qs = qs.filter(invoice_date__date__gte=start_date)
    if end_date:
        qs = qs.filter(invoice_date__date__lte=end_date)
    return qs.order_by("-invoice_date", "-id")[: limit or 100]


def get_invoice(*, tenant_id: str, invoice_id) -> Invoice:
    invoice = Invoice.objects.filter(tenant_id=tenant_id, pk=invoice_id).prefetch_related("lines").first()
    if invoice is None:
        raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")
    return invoice
