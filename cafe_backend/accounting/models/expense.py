# accounting/models/expense.py

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.models.vendor import Vendor


class Expense(models.Model):
    """
    Operating expense request (business event), posted to the ledger on approval.

    Rule:
    - Created as pending_approval
    - pending_approval -> approved (posts a journal entry) or rejected
    - An approved expense always carries its journal entry
    - Approved expenses cannot be deleted
    """

    STATUS_PENDING = "pending_approval"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending approval"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    ]

    PAYMENT_CASH = "cash"
    PAYMENT_BANK = "bank"
    PAYMENT_CREDIT = "credit"

    PAYMENT_METHODS = [
        (PAYMENT_CASH, "Cash"),
        (PAYMENT_BANK, "Bank"),
        (PAYMENT_CREDIT, "Credit (Payables)"),
    ]

    tenant_id = models.CharField(max_length=64, db_index=True)
    branch_id = models.CharField(max_length=64, blank=True, default="")

    expense_number = models.CharField(max_length=32)
    expense_date = models.DateField(default=timezone.localdate)

    category = models.CharField(max_length=64, blank=True, default="")
    description = models.CharField(max_length=255)

    expense_account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="expenses",
    )

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    tax_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=14, decimal_places=2)

    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHODS, default=PAYMENT_CASH)

    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="expenses",
    )
    vendor_name = models.CharField(max_length=150, blank=True, default="")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="expenses_requested",
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="expenses_approved",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    rejected_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="expenses_rejected",
    )
    rejected_at = models.DateTimeField(null=True, blank=True)

    journal_entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="expenses",
    )

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-expense_date", "-created_at"]
        verbose_name = "Expense"
        verbose_name_plural = "Expenses"
        indexes = [
            models.Index(fields=["tenant_id", "status"], name="exp_tenant_status_idx"),
            models.Index(fields=["tenant_id", "expense_date"], name="exp_tenant_date_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "expense_number"],
                name="uniq_expense_tenant_number",
            ),
            models.CheckConstraint(
                condition=~Q(status="approved") | Q(journal_entry__isnull=False),
                name="chk_expense_approved_requires_journal",
            ),
        ]

    def __str__(self):
        return f"{self.expense_number} - {self.total_amount} ({self.status})"

    def clean(self):
        if self.expense_account_id:
            if self.expense_account.tenant_id != self.tenant_id:
                raise ValidationError({"expense_account": "Account belongs to another tenant"})
            if self.expense_account.account_type != Account.EXPENSE:
                raise ValidationError({"expense_account": "Account must be an expense account"})

        if self.tax_amount is not None and self.tax_amount < 0:
            raise ValidationError({"tax_amount": "tax_amount cannot be negative"})

        if self.status == self.STATUS_APPROVED and self.journal_entry_id is None:
            raise ValidationError("journal_entry is required once an expense is approved")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.status == self.STATUS_APPROVED:
            raise ValidationError("Approved expenses cannot be deleted")
        return super().delete(*args, **kwargs)
