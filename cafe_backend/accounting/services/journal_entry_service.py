# accounting/services/journal_entry_service.py

"""
======================================================
PATH: accounting/services/journal_entry_service.py
======================================================
JOURNAL ENTRY SERVICE (ACCOUNTING ENGINE)

This module is the ONLY place allowed to:
- Create JournalEntry / JournalLine rows
- Enforce debit == credit (within 0.01)
- Flip draft -> posted
- Move Account.current_balance

Everything else (order posting, expenses, API) must pass through here.

Posting discipline:
- The draft -> posted flip is a conditional UPDATE (check-and-set). A second
  post of the same entry, even a concurrent one, matches zero rows and fails.
- Balance deltas are applied with F-expression UPDATEs in the same
  transaction as the flip: every line is applied exactly once, or none are.
- Balance rule: debit-normal accounts move by (debit - credit),
  credit-normal accounts by (credit - debit).
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.journal import JournalEntry, ReferenceType
from accounting.models.journal_line import JournalLine
from accounting.models.sequence import DocumentSequence
from accounting.services.exceptions import (
    AccountResolutionError,
    IdempotencyError,
    JournalEntryCreationError,
    JournalEntryNotFoundError,
    JournalEntryStateError,
    UnbalancedEntryError,
)
from accounting.services.sequence_service import next_document_number

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
BALANCE_TOLERANCE = Decimal("0.01")


def _money(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")

    if isinstance(value, Decimal):
        amt = value
    else:
        try:
            amt = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise JournalEntryCreationError(f"Invalid money value: {value!r}") from exc

    if not amt.is_finite():
        raise JournalEntryCreationError(f"Invalid money value: {value!r}")

    return amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _as_date(value) -> date:
    if value is None:
        return timezone.localdate()
    if isinstance(value, datetime):
        if timezone.is_naive(value):
            value = timezone.make_aware(value, timezone.get_current_timezone())
        return timezone.localtime(value).date()
    if isinstance(value, date):
        return value
    raise JournalEntryCreationError(f"Invalid entry_date: {value!r}")


def _normalize_reference(reference_type, reference_id) -> tuple[str | None, str | None]:
    rt = str(reference_type or "").strip()
    rid = str(reference_id or "").strip()

    if not rt and not rid:
        return None, None
    if not rt or not rid:
        raise JournalEntryCreationError("reference_type and reference_id must be provided together")
    if rt not in ReferenceType.values:
        raise JournalEntryCreationError(f"Unknown reference_type: {rt!r}")
    return rt, rid


def _resolve_account(*, tenant_id: str, line: dict) -> Account:
    account = line.get("account")
    if account is None:
        lookup = {}
        if line.get("account_id"):
            lookup["pk"] = line["account_id"]
        elif line.get("account_number"):
            lookup["account_number"] = str(line["account_number"]).strip()
        else:
            raise JournalEntryCreationError("Journal line missing account")

        account = Account.objects.filter(tenant_id=tenant_id, **lookup).first()
        if account is None:
            raise AccountResolutionError(f"Account not found for journal line: {lookup}")

    if account.tenant_id != tenant_id:
        raise JournalEntryCreationError(
            f"Account {account.account_number} belongs to another tenant"
        )
    if not account.is_active:
        raise JournalEntryCreationError(f"Account {account.account_number} is inactive")

    return account


def _normalize_lines(*, tenant_id: str, lines) -> tuple[list[dict], Decimal, Decimal]:
    if not lines:
        raise JournalEntryCreationError("Journal entry must contain at least one line")

    total_debit = Decimal("0.00")
    total_credit = Decimal("0.00")
    normalized: list[dict] = []

    for line in lines:
        if not isinstance(line, dict):
            raise JournalEntryCreationError("Each journal line must be an object/dict")

        account = _resolve_account(tenant_id=tenant_id, line=line)
        debit = _money(line.get("debit"))
        credit = _money(line.get("credit"))

        if debit < 0 or credit < 0:
            raise JournalEntryCreationError("Debit or credit cannot be negative")
        if debit > 0 and credit > 0:
            raise JournalEntryCreationError("A journal line cannot have both debit and credit")
        if debit == 0 and credit == 0:
            raise JournalEntryCreationError("A journal line must have either debit or credit")

        total_debit += debit
        total_credit += credit

        normalized.append(
            {
                "account": account,
                "debit": debit,
                "credit": credit,
                "description": (line.get("description") or "").strip(),
                "branch_id": (line.get("branch_id") or "").strip(),
                "cost_center_id": (line.get("cost_center_id") or "").strip(),
            }
        )

    return normalized, total_debit, total_credit


def _apply_balances(entry: JournalEntry) -> None:
    """
    Apply one balance delta per line. Must run inside the posting transaction.
    """
    lines = list(entry.lines.select_related("account").order_by("line_no"))

    for line in lines:
        account = line.account
        if account.is_debit_normal:
            delta = line.debit - line.credit
        else:
            delta = line.credit - line.debit

        if delta:
            Account.objects.filter(pk=account.pk).update(
                current_balance=F("current_balance") + delta
            )


@transaction.atomic
def create_journal_entry(
    *,
    tenant_id: str,
    description: str,
    lines: list,
    entry_date=None,
    reference_type=None,
    reference_id=None,
    created_by=None,
    auto_post: bool = False,
) -> JournalEntry:
    """
    Validate and persist a journal entry.

    Returns the entry as draft, or as posted (balances applied) when
    auto_post=True. Raises UnbalancedEntryError if debits and credits differ
    by more than BALANCE_TOLERANCE.
    """
    if not tenant_id:
        raise JournalEntryCreationError("tenant_id is required")

    description = (description or "").strip()
    if not description:
        raise JournalEntryCreationError("Journal entry description is required")

    ref_type, ref_id = _normalize_reference(reference_type, reference_id)
    entry_date = _as_date(entry_date)

    normalized, total_debit, total_credit = _normalize_lines(tenant_id=tenant_id, lines=lines)

    if abs(total_debit - total_credit) > BALANCE_TOLERANCE:
        raise UnbalancedEntryError(total_debit, total_credit)

    if auto_post:
        # Lazy import keeps the guard swappable in tests and avoids import cycles.
        from accounting.services.period_lock import assert_period_open

        assert_period_open(tenant_id=tenant_id, on_date=entry_date)

    if ref_type and JournalEntry.objects.filter(
        tenant_id=tenant_id, reference_type=ref_type, reference_id=ref_id
    ).exists():
        raise IdempotencyError(f"Journal entry already exists for reference {ref_type}:{ref_id}")

    entry_number = next_document_number(
        tenant_id=tenant_id,
        kind=DocumentSequence.KIND_JOURNAL_ENTRY,
        year=entry_date.year,
    )

    now = timezone.now()
    try:
        with transaction.atomic():
            entry = JournalEntry.objects.create(
                tenant_id=tenant_id,
                entry_number=entry_number,
                entry_date=entry_date,
                description=description,
                total_debit=total_debit,
                total_credit=total_credit,
                is_balanced=True,
                status=JournalEntry.STATUS_POSTED if auto_post else JournalEntry.STATUS_DRAFT,
                is_auto_posted=bool(auto_post),
                reference_type=ref_type,
                reference_id=ref_id,
                created_by=created_by,
                posted_by=created_by if auto_post else None,
                posted_at=now if auto_post else None,
            )
    except IntegrityError as exc:
        if ref_type and JournalEntry.objects.filter(
            tenant_id=tenant_id, reference_type=ref_type, reference_id=ref_id
        ).exists():
            raise IdempotencyError(
                f"Journal entry already exists for reference {ref_type}:{ref_id}"
            ) from exc
        raise JournalEntryCreationError(f"Failed to create journal entry: {exc}") from exc

    JournalLine.objects.bulk_create(
        [
            JournalLine(
                journal_entry=entry,
                line_no=i,
                account=line["account"],
                account_number=line["account"].account_number,
                account_name=line["account"].display_name,
                debit=line["debit"],
                credit=line["credit"],
                description=line["description"],
                branch_id=line["branch_id"],
                cost_center_id=line["cost_center_id"],
            )
            for i, line in enumerate(normalized, start=1)
        ]
    )

    if auto_post:
        _apply_balances(entry)

    logger.info(
        "journal entry created",
        extra={
            "tenant_id": tenant_id,
            "entry_number": entry.entry_number,
            "status": entry.status,
            "total": str(total_debit),
        },
    )
    return entry


@transaction.atomic
def post_journal_entry(*, tenant_id: str, entry_id, posted_by=None) -> JournalEntry:
    """
    Flip a draft entry to posted and apply its balance deltas.

    Fails if the entry does not exist for the tenant, is not a draft, or its
    entry_date falls inside a locked/closed fiscal period.
    """
    from accounting.services.period_lock import assert_period_open

    entry = JournalEntry.objects.filter(tenant_id=tenant_id, pk=entry_id).first()
    if entry is None:
        raise JournalEntryNotFoundError(f"Journal entry {entry_id} not found")

    if entry.status != JournalEntry.STATUS_DRAFT:
        raise JournalEntryStateError(
            f"Journal entry {entry.entry_number} is {entry.status} and cannot be posted again"
        )

    assert_period_open(tenant_id=tenant_id, on_date=entry.entry_date)

    posted_at = timezone.now()
    flipped = JournalEntry.objects.filter(
        pk=entry.pk,
        tenant_id=tenant_id,
        status=JournalEntry.STATUS_DRAFT,
        is_balanced=True,
    ).update(
        status=JournalEntry.STATUS_POSTED,
        posted_by=posted_by,
        posted_at=posted_at,
    )
    if flipped != 1:
        raise JournalEntryStateError(
            f"Journal entry {entry.entry_number} was posted concurrently"
        )

    _apply_balances(entry)

    entry.refresh_from_db()
    logger.info(
        "journal entry posted",
        extra={"tenant_id": tenant_id, "entry_number": entry.entry_number},
    )
    return entry
