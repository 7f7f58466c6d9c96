"""
======================================================
PATH: invoicing/migrations/0001_initial.py
======================================================
MIGRATION: TAX INVOICES

Creates Invoice / InvoiceLine (immutable tax records) and SellerProfile.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("sales", "0001_initial"),
        ("accounting", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Invoice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tenant_id", models.CharField(db_index=True, max_length=64)),
                ("branch_id", models.CharField(blank=True, default="", max_length=64)),
                ("invoice_number", models.CharField(max_length=32)),
                ("invoice_date", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "invoice_type",
                    models.CharField(choices=[("sales", "Sales")], default="sales", max_length=20),
                ),
                (
                    "zatca_invoice_type",
                    models.CharField(
                        choices=[("standard", "Standard (B2B)"), ("simplified", "Simplified (B2C)")],
                        default="simplified",
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("issued", "Issued"),
                            ("partially_paid", "Partially paid"),
                            ("paid", "Paid"),
                            ("overdue", "Overdue"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="issued",
                        max_length=20,
                    ),
                ),
                ("customer_name", models.CharField(blank=True, default="", max_length=150)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=32)),
                ("customer_email", models.EmailField(blank=True, default="", max_length=254)),
                ("customer_tax_number", models.CharField(blank=True, default="", max_length=20)),
                ("customer_address", models.CharField(blank=True, default="", max_length=255)),
                ("subtotal", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_discount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_tax", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("grand_total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("amount_paid", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("amount_due", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("currency", models.CharField(default="SAR", max_length=3)),
                ("exchange_rate", models.DecimalField(decimal_places=6, default=Decimal("1"), max_digits=12)),
                ("payment_method", models.CharField(blank=True, default="", max_length=32)),
                ("notes", models.TextField(blank=True, default="")),
                ("seller_name", models.CharField(blank=True, default="", max_length=255)),
                ("seller_vat_number", models.CharField(blank=True, default="", max_length=20)),
                ("zatca_qr_code", models.TextField(blank=True, default="")),
                ("zatca_hash", models.TextField(blank=True, default="")),
                ("issued_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "issued_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoices_issued",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoices",
                        to="sales.order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Invoice",
                "verbose_name_plural": "Invoices",
                "ordering": ["-invoice_date", "-id"],
                "indexes": [
                    models.Index(fields=["tenant_id", "invoice_date"], name="inv_tenant_date_idx"),
                    models.Index(fields=["tenant_id", "status"], name="inv_tenant_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("tenant_id", "branch_id", "invoice_number"),
                        name="uniq_invoice_tenant_branch_number",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("grand_total__gte", 0), ("amount_paid__gte", 0)),
                        name="chk_invoice_amounts_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvoiceLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("line_no", models.PositiveIntegerField()),
                ("description", models.CharField(max_length=255)),
                ("quantity", models.DecimalField(decimal_places=3, max_digits=12)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=14)),
                ("discount_percent", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("discount_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("taxable_amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("tax_rate", models.DecimalField(decimal_places=2, default=Decimal("15.00"), max_digits=5)),
                ("tax_amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("line_total", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "invoice",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="lines",
                        to="invoicing.invoice",
                    ),
                ),
            ],
            options={
                "ordering": ["invoice_id", "line_no"],
                "constraints": [
                    models.UniqueConstraint(fields=("invoice", "line_no"), name="uniq_invoice_line_no"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SellerProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tenant_id", models.CharField(max_length=64, unique=True)),
                ("legal_name", models.CharField(max_length=255)),
                ("legal_name_en", models.CharField(blank=True, default="", max_length=255)),
                ("vat_number", models.CharField(max_length=20)),
                ("cr_number", models.CharField(blank=True, default="", max_length=20)),
                ("address", models.CharField(blank=True, default="", max_length=255)),
                ("city", models.CharField(blank=True, default="", max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Seller Profile",
                "verbose_name_plural": "Seller Profiles",
            },
        ),
    ]
