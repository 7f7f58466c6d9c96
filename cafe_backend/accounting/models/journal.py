# accounting/models/journal.py

"""
======================================================
PATH: accounting/models/journal.py
======================================================
JOURNAL ENTRY MODEL

Header of a double-entry accounting transaction.

Guarantees:
- entry_number is unique per tenant (JE-<year>-<6 digits>)
- draft -> posted is one-way; posted entries are immutable and nothing is ever deleted
- One entry per business reference (reference_type + reference_id) per tenant
- entry_date is the accounting effective date (used for period locks and reports)

The status flip itself is done by the journal engine with a conditional
UPDATE (check-and-set), never through save().
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone


class ReferenceType(models.TextChoices):
    ORDER = "order", "Sales order"
    INVOICE = "invoice", "Invoice"
    EXPENSE = "expense", "Expense"
    PAYMENT = "payment", "Payment"
    ADJUSTMENT = "adjustment", "Manual adjustment"


class JournalEntry(models.Model):
    STATUS_DRAFT = "draft"
    STATUS_POSTED = "posted"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_POSTED, "Posted"),
    ]

    tenant_id = models.CharField(max_length=64, db_index=True)

    entry_number = models.CharField(max_length=32)
    entry_date = models.DateField(default=timezone.localdate)
    description = models.TextField(help_text="Narrative description of the journal entry")

    total_debit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_credit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    is_balanced = models.BooleanField(default=False)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    is_auto_posted = models.BooleanField(default=False)

    reference_type = models.CharField(
        max_length=20,
        choices=ReferenceType.choices,
        blank=True,
        null=True,
    )
    reference_id = models.CharField(max_length=64, blank=True, null=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="journal_entries_created",
    )
    posted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="journal_entries_posted",
    )
    posted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-entry_date", "-created_at"]
        indexes = [
            models.Index(fields=["tenant_id", "entry_date"], name="je_tenant_date_idx"),
            models.Index(fields=["tenant_id", "status"], name="je_tenant_status_idx"),
            models.Index(fields=["reference_type", "reference_id"], name="je_reference_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "entry_number"],
                name="uniq_journal_tenant_entry_number",
            ),
            models.UniqueConstraint(
                fields=["tenant_id", "reference_type", "reference_id"],
                condition=Q(reference_type__isnull=False) & Q(reference_id__isnull=False),
                name="uniq_journal_tenant_reference",
            ),
            models.CheckConstraint(
                condition=Q(status="draft") | Q(is_balanced=True),
                name="chk_journal_posted_requires_balance",
            ),
        ]
        verbose_name = "Journal Entry"
        verbose_name_plural = "Journal Entries"

    def __str__(self):
        return f"{self.entry_number} – {self.entry_date} ({self.status})"

    @property
    def is_posted(self) -> bool:
        return self.status == self.STATUS_POSTED

    def clean(self):
        self.description = (self.description or "").strip()
        if not self.description:
            raise ValidationError("Journal entry description is required")

        if bool(self.reference_type) != bool(self.reference_id):
            raise ValidationError("reference_type and reference_id must be set together")

        if self.status == self.STATUS_POSTED and not self.is_balanced:
            raise ValidationError("Only balanced journal entries can be posted")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("JournalEntry records are immutable once created")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("JournalEntry records are immutable and cannot be deleted")
