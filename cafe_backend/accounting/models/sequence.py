# accounting/models/sequence.py

from __future__ import annotations

from django.db import models
from django.db.models import Q


class DocumentSequence(models.Model):
    """
    Atomic counter behind human-readable document numbers.

    One row per (tenant, branch, kind, year). Branch is "" for counters that
    are tenant-wide (journal entries, expenses). The row is only ever advanced
    through sequence_service.next_value().
    """

    KIND_JOURNAL_ENTRY = "journal_entry"
    KIND_INVOICE = "invoice"
    KIND_EXPENSE = "expense"

    KIND_CHOICES = [
        (KIND_JOURNAL_ENTRY, "Journal entry"),
        (KIND_INVOICE, "Invoice"),
        (KIND_EXPENSE, "Expense"),
    ]

    tenant_id = models.CharField(max_length=64)
    branch_id = models.CharField(max_length=64, blank=True, default="")
    kind = models.CharField(max_length=20, choices=KIND_CHOICES)
    year = models.PositiveSmallIntegerField()
    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = "Document Sequence"
        verbose_name_plural = "Document Sequences"
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "branch_id", "kind", "year"],
                name="uniq_document_sequence_scope",
            ),
            models.CheckConstraint(
                condition=Q(last_value__gte=0),
                name="chk_document_sequence_non_negative",
            ),
        ]

    def __str__(self):
        scope = f"{self.tenant_id}/{self.branch_id}" if self.branch_id else self.tenant_id
        return f"{self.kind} {self.year} @ {scope}: {self.last_value}"
