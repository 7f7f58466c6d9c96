# invoicing/models/invoice.py

"""
======================================================
PATH: invoicing/models/invoice.py
======================================================
TAX INVOICE MODELS

Invoice is a tax record:
- Numbered INV-<year>-<6 digits> per tenant + branch + year
- Customer fields are a snapshot, not a live reference
- Totals are computed once at issue time and never re-derived
- After issue only payment fields (amount_paid / amount_due / status / paid_at) move
- Never deleted (tax record retention)

InvoiceLine is an immutable snapshot of one billed item.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone


class Invoice(models.Model):
    STATUS_ISSUED = "issued"
    STATUS_PARTIALLY_PAID = "partially_paid"
    STATUS_PAID = "paid"
    STATUS_OVERDUE = "overdue"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_ISSUED, "Issued"),
        (STATUS_PARTIALLY_PAID, "Partially paid"),
        (STATUS_PAID, "Paid"),
        (STATUS_OVERDUE, "Overdue"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    TYPE_SALES = "sales"
    TYPE_CHOICES = [
        (TYPE_SALES, "Sales"),
    ]

    ZATCA_STANDARD = "standard"
    ZATCA_SIMPLIFIED = "simplified"
    ZATCA_TYPE_CHOICES = [
        (ZATCA_STANDARD, "Standard (B2B)"),
        (ZATCA_SIMPLIFIED, "Simplified (B2C)"),
    ]

    # Fields that may change after the invoice is issued
    PAYMENT_FIELDS = ("amount_paid", "amount_due", "status", "paid_at")

    tenant_id = models.CharField(max_length=64, db_index=True)
    branch_id = models.CharField(max_length=64, blank=True, default="")

    invoice_number = models.CharField(max_length=32)
    invoice_date = models.DateTimeField(default=timezone.now)
    invoice_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_SALES)
    zatca_invoice_type = models.CharField(
        max_length=20,
        choices=ZATCA_TYPE_CHOICES,
        default=ZATCA_SIMPLIFIED,
    )

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ISSUED)

    # Customer snapshot
    customer_name = models.CharField(max_length=150, blank=True, default="")
    customer_phone = models.CharField(max_length=32, blank=True, default="")
    customer_email = models.EmailField(blank=True, default="")
    customer_tax_number = models.CharField(max_length=20, blank=True, default="")
    customer_address = models.CharField(max_length=255, blank=True, default="")

    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_discount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_tax = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    grand_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    amount_paid = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    amount_due = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    currency = models.CharField(max_length=3, default="SAR")
    exchange_rate = models.DecimalField(max_digits=12, decimal_places=6, default=Decimal("1"))
    payment_method = models.CharField(max_length=32, blank=True, default="")

    order = models.ForeignKey(
        "sales.Order",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="invoices",
    )

    notes = models.TextField(blank=True, default="")

    # Seller identity used for the QR payload (snapshot)
    seller_name = models.CharField(max_length=255, blank=True, default="")
    seller_vat_number = models.CharField(max_length=20, blank=True, default="")

    # zatca_qr_code: rendered PNG data URL; zatca_hash: Base64 TLV payload
    zatca_qr_code = models.TextField(blank=True, default="")
    zatca_hash = models.TextField(blank=True, default="")

    issued_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="invoices_issued",
    )
    issued_at = models.DateTimeField(default=timezone.now)
    paid_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-invoice_date", "-id"]
        verbose_name = "Invoice"
        verbose_name_plural = "Invoices"
        indexes = [
            models.Index(fields=["tenant_id", "invoice_date"], name="inv_tenant_date_idx"),
            models.Index(fields=["tenant_id", "status"], name="inv_tenant_status_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "branch_id", "invoice_number"],
                name="uniq_invoice_tenant_branch_number",
            ),
            models.CheckConstraint(
                condition=Q(grand_total__gte=0) & Q(amount_paid__gte=0),
                name="chk_invoice_amounts_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.invoice_number} | {self.grand_total} {self.currency} ({self.status})"

    @property
    def has_qr(self) -> bool:
        return bool(self.zatca_hash)

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Invoice.objects.filter(pk=self.pk).first()
            if previous is not None:
                for field in self._meta.concrete_fields:
                    name = field.attname
                    if name in self.PAYMENT_FIELDS or name in ("id", "updated_at"):
                        continue
                    if getattr(self, name) != getattr(previous, name):
                        raise ValidationError(
                            f"Invoice is a tax record. Field '{field.name}' cannot be changed after issue."
                        )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Invoices are tax records and cannot be deleted")


class InvoiceLine(models.Model):
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.PROTECT,
        related_name="lines",
    )
    line_no = models.PositiveIntegerField()

    description = models.CharField(max_length=255)
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    unit_price = models.DecimalField(max_digits=14, decimal_places=2)

    discount_percent = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    taxable_amount = models.DecimalField(max_digits=14, decimal_places=2)
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("15.00"))
    tax_amount = models.DecimalField(max_digits=14, decimal_places=2)
    line_total = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        ordering = ["invoice_id", "line_no"]
        constraints = [
            models.UniqueConstraint(
                fields=["invoice", "line_no"],
                name="uniq_invoice_line_no",
            ),
        ]

    def __str__(self):
        return f"{self.description} x{self.quantity} = {self.line_total}"

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("Invoice lines are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Invoice lines cannot be deleted")
