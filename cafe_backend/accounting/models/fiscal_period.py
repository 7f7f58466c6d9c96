# accounting/models/fiscal_period.py

"""
======================================================
PATH: accounting/models/fiscal_period.py
======================================================
FISCAL PERIOD MODEL

A tenant-scoped accounting period. Periods are opt-in: a date that falls in
no period is always open for posting.

Status:
- open    -> posting allowed
- locked  -> posting blocked; may be unlocked back to open
- closed  -> posting blocked; terminal

Hard rules:
- end_date >= start_date
- A tenant cannot have overlapping periods
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q


class FiscalPeriod(models.Model):
    STATUS_OPEN = "open"
    STATUS_LOCKED = "locked"
    STATUS_CLOSED = "closed"

    STATUS_CHOICES = [
        (STATUS_OPEN, "Open"),
        (STATUS_LOCKED, "Locked"),
        (STATUS_CLOSED, "Closed"),
    ]

    BLOCKING_STATUSES = frozenset({STATUS_LOCKED, STATUS_CLOSED})

    tenant_id = models.CharField(max_length=64, db_index=True)
    name = models.CharField(max_length=100)

    start_date = models.DateField()
    end_date = models.DateField()

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_OPEN)

    locked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="fiscal_periods_locked",
    )
    locked_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["tenant_id", "-start_date"]
        indexes = [
            models.Index(fields=["tenant_id", "start_date", "end_date"], name="fp_tenant_range_idx"),
            models.Index(fields=["tenant_id", "status"], name="fp_tenant_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(end_date__gte=F("start_date")),
                name="chk_fiscal_period_end_gte_start",
            ),
        ]
        verbose_name = "Fiscal Period"
        verbose_name_plural = "Fiscal Periods"

    def __str__(self):
        return f"{self.name} {self.start_date} → {self.end_date} ({self.status})"

    @property
    def blocks_posting(self) -> bool:
        return self.status in self.BLOCKING_STATUSES

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Period name is required"})

        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({"end_date": "end_date must be >= start_date"})

        if self.tenant_id and self.start_date and self.end_date:
            qs = FiscalPeriod.objects.filter(
                tenant_id=self.tenant_id,
                start_date__lte=self.end_date,
                end_date__gte=self.start_date,
            )
            if self.pk:
                qs = qs.exclude(pk=self.pk)
            if qs.exists():
                raise ValidationError("This period overlaps an existing fiscal period for this tenant.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.status != self.STATUS_OPEN:
            raise ValidationError("Only open fiscal periods can be deleted")
        return super().delete(*args, **kwargs)
