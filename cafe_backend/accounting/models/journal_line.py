# accounting/models/journal_line.py

"""
======================================================
PATH: accounting/models/journal_line.py
======================================================
JOURNAL LINE MODEL

One debit/credit posting of a JournalEntry against a single Account.

Guarantees:
- Immutable once created (no updates, no deletes)
- debit and credit are never negative
- account_number / account_name are snapshots taken at creation so audit
  output stays stable if the account is renamed later
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounting.models.account import Account
from accounting.models.journal import JournalEntry


class JournalLine(models.Model):
    journal_entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.PROTECT,
        related_name="lines",
    )
    line_no = models.PositiveSmallIntegerField()

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="journal_lines",
    )
    account_number = models.CharField(max_length=20)
    account_name = models.CharField(max_length=150)

    debit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    description = models.CharField(max_length=255, blank=True, default="")
    branch_id = models.CharField(max_length=64, blank=True, default="", db_index=True)
    cost_center_id = models.CharField(max_length=64, blank=True, default="")

    class Meta:
        ordering = ["journal_entry_id", "line_no"]
        verbose_name = "Journal Line"
        verbose_name_plural = "Journal Lines"
        indexes = [
            models.Index(fields=["account"], name="jl_account_idx"),
            models.Index(fields=["journal_entry", "line_no"], name="jl_entry_line_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["journal_entry", "line_no"],
                name="uniq_journal_line_no",
            ),
            models.CheckConstraint(
                condition=Q(debit__gte=0) & Q(credit__gte=0),
                name="chk_journal_line_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.account_number} Dr {self.debit} / Cr {self.credit}"

    def clean(self):
        if self.debit is None or self.credit is None:
            raise ValidationError("debit and credit are required")
        if self.debit < 0 or self.credit < 0:
            raise ValidationError("Debit or credit cannot be negative")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("JournalLine records are immutable and cannot be modified")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("JournalLine records are immutable and cannot be deleted")
