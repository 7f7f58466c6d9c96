"""
======================================================
PATH: accounting/migrations/0001_initial.py
======================================================
MIGRATION: ACCOUNTING LEDGER

Creates:
- Account (tenant chart of accounts)
- JournalEntry / JournalLine (double-entry ledger)
- FiscalPeriod (posting locks)
- DocumentSequence (JE / INV / EXP counters)
- Vendor / Expense
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tenant_id", models.CharField(db_index=True, max_length=64)),
                ("account_number", models.CharField(max_length=20)),
                ("name_ar", models.CharField(max_length=150)),
                ("name_en", models.CharField(blank=True, default="", max_length=150)),
                (
                    "account_type",
                    models.CharField(
                        choices=[
                            ("asset", "Asset"),
                            ("liability", "Liability"),
                            ("equity", "Equity"),
                            ("revenue", "Revenue"),
                            ("expense", "Expense"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "normal_balance",
                    models.CharField(choices=[("debit", "Debit"), ("credit", "Credit")], max_length=6),
                ),
                ("level", models.PositiveSmallIntegerField(default=1)),
                ("path", models.CharField(blank=True, default="", max_length=255)),
                ("opening_balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("current_balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("is_system_account", models.BooleanField(default=False)),
                ("is_bank_account", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="children",
                        to="accounting.account",
                    ),
                ),
            ],
            options={
                "verbose_name": "Account",
                "verbose_name_plural": "Accounts",
                "ordering": ["tenant_id", "account_number"],
                "indexes": [
                    models.Index(fields=["tenant_id", "account_number"], name="acct_tenant_number_idx"),
                    models.Index(fields=["tenant_id", "account_type"], name="acct_tenant_type_idx"),
                    models.Index(fields=["tenant_id", "level"], name="acct_tenant_level_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("tenant_id", "account_number"), name="uniq_account_tenant_number"),
                    models.CheckConstraint(
                        condition=models.Q(("account_number", ""), _negated=True),
                        name="chk_account_number_not_blank",
                    ),
                    models.CheckConstraint(condition=models.Q(("level__gte", 1)), name="chk_account_level_gte_1"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tenant_id", models.CharField(db_index=True, max_length=64)),
                ("entry_number", models.CharField(max_length=32)),
                ("entry_date", models.DateField(default=django.utils.timezone.localdate)),
                ("description", models.TextField(help_text="Narrative description of the journal entry")),
                ("total_debit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_credit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("is_balanced", models.BooleanField(default=False)),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Draft"), ("posted", "Posted")],
                        default="draft",
                        max_length=10,
                    ),
                ),
                ("is_auto_posted", models.BooleanField(default=False)),
                (
                    "reference_type",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("order", "Sales order"),
                            ("invoice", "Invoice"),
                            ("expense", "Expense"),
                            ("payment", "Payment"),
                            ("adjustment", "Manual adjustment"),
                        ],
                        max_length=20,
                        null=True,
                    ),
                ),
                ("reference_id", models.CharField(blank=True, max_length=64, null=True)),
                ("posted_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="journal_entries_created",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "posted_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="journal_entries_posted",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Journal Entry",
                "verbose_name_plural": "Journal Entries",
                "ordering": ["-entry_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["tenant_id", "entry_date"], name="je_tenant_date_idx"),
                    models.Index(fields=["tenant_id", "status"], name="je_tenant_status_idx"),
                    models.Index(fields=["reference_type", "reference_id"], name="je_reference_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("tenant_id", "entry_number"),
                        name="uniq_journal_tenant_entry_number",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("reference_type__isnull", False), ("reference_id__isnull", False)),
                        fields=("tenant_id", "reference_type", "reference_id"),
                        name="uniq_journal_tenant_reference",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("status", "draft"), ("is_balanced", True), _connector="OR"),
                        name="chk_journal_posted_requires_balance",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("line_no", models.PositiveSmallIntegerField()),
                ("account_number", models.CharField(max_length=20)),
                ("account_name", models.CharField(max_length=150)),
                ("debit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("credit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("branch_id", models.CharField(blank=True, db_index=True, default="", max_length=64)),
                ("cost_center_id", models.CharField(blank=True, default="", max_length=64)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="journal_lines",
                        to="accounting.account",
                    ),
                ),
                (
                    "journal_entry",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="lines",
                        to="accounting.journalentry",
                    ),
                ),
            ],
            options={
                "verbose_name": "Journal Line",
                "verbose_name_plural": "Journal Lines",
                "ordering": ["journal_entry_id", "line_no"],
                "indexes": [
                    models.Index(fields=["account"], name="jl_account_idx"),
                    models.Index(fields=["journal_entry", "line_no"], name="jl_entry_line_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("journal_entry", "line_no"), name="uniq_journal_line_no"),
                    models.CheckConstraint(
                        condition=models.Q(("debit__gte", 0), ("credit__gte", 0)),
                        name="chk_journal_line_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="FiscalPeriod",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tenant_id", models.CharField(db_index=True, max_length=64)),
                ("name", models.CharField(max_length=100)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[("open", "Open"), ("locked", "Locked"), ("closed", "Closed")],
                        default="open",
                        max_length=10,
                    ),
                ),
                ("locked_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "locked_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="fiscal_periods_locked",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Fiscal Period",
                "verbose_name_plural": "Fiscal Periods",
                "ordering": ["tenant_id", "-start_date"],
                "indexes": [
                    models.Index(fields=["tenant_id", "start_date", "end_date"], name="fp_tenant_range_idx"),
                    models.Index(fields=["tenant_id", "status"], name="fp_tenant_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_date__gte", models.F("start_date"))),
                        name="chk_fiscal_period_end_gte_start",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DocumentSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tenant_id", models.CharField(max_length=64)),
                ("branch_id", models.CharField(blank=True, default="", max_length=64)),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("journal_entry", "Journal entry"),
                            ("invoice", "Invoice"),
                            ("expense", "Expense"),
                        ],
                        max_length=20,
                    ),
                ),
                ("year", models.PositiveSmallIntegerField()),
                ("last_value", models.PositiveIntegerField(default=0)),
            ],
            options={
                "verbose_name": "Document Sequence",
                "verbose_name_plural": "Document Sequences",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("tenant_id", "branch_id", "kind", "year"),
                        name="uniq_document_sequence_scope",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("last_value__gte", 0)),
                        name="chk_document_sequence_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Vendor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tenant_id", models.CharField(db_index=True, max_length=64)),
                ("code", models.CharField(max_length=32)),
                ("name_ar", models.CharField(max_length=150)),
                ("name_en", models.CharField(blank=True, default="", max_length=150)),
                ("tax_number", models.CharField(blank=True, default="", max_length=20)),
                ("phone", models.CharField(blank=True, default="", max_length=32)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("address", models.CharField(blank=True, default="", max_length=255)),
                ("city", models.CharField(blank=True, default="", max_length=100)),
                ("country", models.CharField(default="SA", max_length=2)),
                ("bank_name", models.CharField(blank=True, default="", max_length=100)),
                ("iban", models.CharField(blank=True, default="", max_length=34)),
                ("payment_terms", models.CharField(blank=True, default="", max_length=100)),
                ("credit_limit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("current_balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Vendor",
                "verbose_name_plural": "Vendors",
                "ordering": ["tenant_id", "name_ar"],
                "constraints": [
                    models.UniqueConstraint(fields=("tenant_id", "code"), name="uniq_vendor_tenant_code"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tenant_id", models.CharField(db_index=True, max_length=64)),
                ("branch_id", models.CharField(blank=True, default="", max_length=64)),
                ("expense_number", models.CharField(max_length=32)),
                ("expense_date", models.DateField(default=django.utils.timezone.localdate)),
                ("category", models.CharField(blank=True, default="", max_length=64)),
                ("description", models.CharField(max_length=255)),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                ("tax_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("cash", "Cash"), ("bank", "Bank"), ("credit", "Credit (Payables)")],
                        default="cash",
                        max_length=10,
                    ),
                ),
                ("vendor_name", models.CharField(blank=True, default="", max_length=150)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending_approval", "Pending approval"),
                            ("approved", "Approved"),
                            ("rejected", "Rejected"),
                        ],
                        default="pending_approval",
                        max_length=20,
                    ),
                ),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "approved_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="expenses_approved",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "expense_account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="expenses",
                        to="accounting.account",
                    ),
                ),
                (
                    "journal_entry",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="expenses",
                        to="accounting.journalentry",
                    ),
                ),
                (
                    "requested_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="expenses_requested",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "vendor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="expenses",
                        to="accounting.vendor",
                    ),
                ),
            ],
            options={
                "verbose_name": "Expense",
                "verbose_name_plural": "Expenses",
                "ordering": ["-expense_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["tenant_id", "status"], name="exp_tenant_status_idx"),
                    models.Index(fields=["tenant_id", "expense_date"], name="exp_tenant_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("tenant_id", "expense_number"), name="uniq_expense_tenant_number"),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("status", "approved"), _negated=True),
                            ("journal_entry__isnull", False),
                            _connector="OR",
                        ),
                        name="chk_expense_approved_requires_journal",
                    ),
                ],
            },
        ),
    ]
