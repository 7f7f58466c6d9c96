"""
======================================================
PATH: sales/migrations/0001_initial.py
======================================================
MIGRATION: ORDER CONTRACT

Creates Order / OrderItem, the inbound records that accounting and
invoicing read.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("tenant_id", models.CharField(db_index=True, max_length=64)),
                ("branch_id", models.CharField(blank=True, default="", max_length=64)),
                ("order_number", models.CharField(max_length=32)),
                (
                    "total_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Amount paid by the customer, VAT inclusive.",
                        max_digits=12,
                    ),
                ),
                (
                    "cost_of_goods",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Pre-computed cost of goods sold for this order.",
                        max_digits=12,
                        null=True,
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(default="cash", help_text="cash/pos/qahwa-card/...", max_length=32),
                ),
                ("customer_name", models.CharField(blank=True, default="", max_length=150)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=32)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="completed",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tenant_id", "created_at"], name="order_tenant_created_idx"),
                    models.Index(fields=["tenant_id", "order_number"], name="order_tenant_number_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=150)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="sales.order",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
