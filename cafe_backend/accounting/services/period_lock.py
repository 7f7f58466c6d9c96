# accounting/services/period_lock.py

"""
======================================================
PATH: accounting/services/period_lock.py
======================================================
FISCAL PERIOD GUARD

Purpose:
- Decide whether a date falls inside a locked (or closed) fiscal period.
- Block posting into such periods.
- Administer periods (create / lock / unlock / close).

Design:
- Periods are opt-in: no period covering a date means posting is allowed.
- Called by journal_entry_service (engine choke-point) for every post.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from accounting.models.fiscal_period import FiscalPeriod
from accounting.services.exceptions import AccountingServiceError

logger = logging.getLogger(__name__)


class PeriodLockedError(AccountingServiceError, ValueError):
    """Raised when attempting to post into a locked or closed accounting period."""

    def __init__(self, period: FiscalPeriod, on_date: date):
        self.period = period
        self.on_date = on_date
        super().__init__(
            f"Posting blocked: {on_date} falls inside fiscal period "
            f"'{period.name}' ({period.start_date} → {period.end_date}) which is {period.status}."
        )


def _to_date(value: datetime | date | None) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        if timezone.is_naive(value):
            value = timezone.make_aware(value, timezone.get_current_timezone())
        return timezone.localtime(value).date()
    if isinstance(value, date):
        return value
    return None


def find_period(*, tenant_id: str, on_date: datetime | date | None) -> FiscalPeriod | None:
    d = _to_date(on_date)
    if d is None:
        return None
    return (
        FiscalPeriod.objects.filter(
            tenant_id=tenant_id,
            start_date__lte=d,
            end_date__gte=d,
        )
        .order_by("start_date")
        .first()
    )


def is_locked(*, tenant_id: str, on_date: datetime | date | None) -> bool:
    period = find_period(tenant_id=tenant_id, on_date=on_date)
    return bool(period and period.blocks_posting)


def assert_period_open(*, tenant_id: str, on_date: datetime | date | None) -> None:
    """
    Raise PeriodLockedError if on_date falls inside a locked/closed period.

    Usage:
        assert_period_open(tenant_id=tenant_id, on_date=entry.entry_date)
    """
    period = find_period(tenant_id=tenant_id, on_date=on_date)
    if period is not None and period.blocks_posting:
        raise PeriodLockedError(period, _to_date(on_date))


# ------------------------------------------------------------
# ADMINISTRATION
# ------------------------------------------------------------


def create_fiscal_period(*, tenant_id: str, name: str, start_date: date, end_date: date) -> FiscalPeriod:
    try:
        return FiscalPeriod.objects.create(
            tenant_id=tenant_id,
            name=name,
            start_date=start_date,
            end_date=end_date,
        )
    except ValidationError as exc:
        raise AccountingServiceError("; ".join(exc.messages)) from exc


def _get_for_update(*, tenant_id: str, period_id) -> FiscalPeriod:
    try:
        return FiscalPeriod.objects.select_for_update().get(tenant_id=tenant_id, pk=period_id)
    except FiscalPeriod.DoesNotExist as exc:
        raise AccountingServiceError(f"Fiscal period {period_id} not found") from exc


@transaction.atomic
def lock_period(*, tenant_id: str, period_id, locked_by=None) -> FiscalPeriod:
    period = _get_for_update(tenant_id=tenant_id, period_id=period_id)
    if period.status != FiscalPeriod.STATUS_OPEN:
        raise AccountingServiceError(f"Only open periods can be locked (period is {period.status})")

    period.status = FiscalPeriod.STATUS_LOCKED
    period.locked_by = locked_by
    period.locked_at = timezone.now()
    period.save()

    logger.info(
        "fiscal period locked",
        extra={"tenant_id": tenant_id, "period_id": period.pk, "period_name": period.name},
    )
    return period


@transaction.atomic
def unlock_period(*, tenant_id: str, period_id) -> FiscalPeriod:
    period = _get_for_update(tenant_id=tenant_id, period_id=period_id)
    if period.status != FiscalPeriod.STATUS_LOCKED:
        raise AccountingServiceError(f"Only locked periods can be unlocked (period is {period.status})")

    period.status = FiscalPeriod.STATUS_OPEN
    period.locked_by = None
    period.locked_at = None
    period.save()

    logger.info(
        "fiscal period unlocked",
        extra={"tenant_id": tenant_id, "period_id": period.pk, "period_name": period.name},
    )
    return period


@transaction.atomic
def close_period(*, tenant_id: str, period_id, closed_by=None) -> FiscalPeriod:
    period = _get_for_update(tenant_id=tenant_id, period_id=period_id)
    if period.status == FiscalPeriod.STATUS_CLOSED:
        raise AccountingServiceError("Fiscal period is already closed")

    period.status = FiscalPeriod.STATUS_CLOSED
    if period.locked_at is None:
        period.locked_by = closed_by
        period.locked_at = timezone.now()
    period.save()

    logger.info(
        "fiscal period closed",
        extra={"tenant_id": tenant_id, "period_id": period.pk, "period_name": period.name},
    )
    return period
