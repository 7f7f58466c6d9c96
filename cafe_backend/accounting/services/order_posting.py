# accounting/services/order_posting.py

"""
======================================================
PATH: accounting/services/order_posting.py
======================================================
ORDER -> LEDGER ADAPTER

Maps a completed cafe order to a balanced, auto-posted journal entry.

Accounting effect (VAT-inclusive total):
    Dr Petty Cash (1111)        total
    Cr Sales Revenue (4100)     net   = total / 1.15
    Cr VAT Payable (2120)       vat   = total - net
  and, only when cost_of_goods > 0 and both accounts exist:
    Dr COGS (5100)              cost_of_goods
    Cr Inventory (1130)         cost_of_goods

Soft-fail rule:
- A missing accounting configuration must never block a sale. If a required
  account is missing (or posting is switched off) the adapter returns a
  SKIPPED PostingResult with a reason and logs a warning. It never returns None.
- Validation failures (double posting, locked period) still raise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.utils import timezone

from accounting.models.journal import JournalEntry, ReferenceType
from accounting.services import chart_of_accounts as coa
from accounting.services.journal_entry_service import create_journal_entry

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
VAT_DIVISOR = Decimal("1.15")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PostingResult:
    STATUS_POSTED = "posted"
    STATUS_SKIPPED = "skipped"

    REASON_DISABLED = "disabled"
    REASON_ORDER_NOT_FOUND = "order_not_found"
    REASON_ORDER_NOT_COMPLETED = "order_not_completed"
    REASON_NOTHING_TO_POST = "nothing_to_post"
    REASON_MISSING_ACCOUNTS = "missing_accounts"

    status: str
    entry: JournalEntry | None = None
    reason: str = ""
    detail: str = ""

    @property
    def posted(self) -> bool:
        return self.status == self.STATUS_POSTED

    @classmethod
    def success(cls, entry: JournalEntry) -> "PostingResult":
        return cls(status=cls.STATUS_POSTED, entry=entry)

    @classmethod
    def skipped(cls, reason: str, detail: str = "") -> "PostingResult":
        return cls(status=cls.STATUS_SKIPPED, reason=reason, detail=detail)


def split_vat_inclusive(total) -> tuple[Decimal, Decimal]:
    """Return (net, vat) for a VAT-inclusive total; net + vat == total exactly."""
    total = _money(total)
    net = (total / VAT_DIVISOR).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    return net, total - net


def _skip(*, tenant_id: str, order_id, reason: str, detail: str = "") -> PostingResult:
    logger.warning(
        "order journal skipped",
        extra={"tenant_id": tenant_id, "order_id": str(order_id), "reason": reason, "detail": detail},
    )
    return PostingResult.skipped(reason, detail)


def post_order_journal(*, tenant_id: str, order_id, created_by=None) -> PostingResult:
    """
    Post the sales journal entry for a completed order.

    Returns PostingResult(status="posted", entry=...) on success or
    PostingResult(status="skipped", reason=...) on an expected gap.
    Raises IdempotencyError if the order was already posted and
    PeriodLockedError if its date is inside a locked period.
    """
    from sales.models.order import Order

    if not getattr(settings, "ACCOUNTING_ORDER_POSTING_ENABLED", True):
        return _skip(tenant_id=tenant_id, order_id=order_id, reason=PostingResult.REASON_DISABLED)

    order = Order.objects.filter(tenant_id=tenant_id, pk=order_id).prefetch_related("items").first()
    if order is None:
        return _skip(tenant_id=tenant_id, order_id=order_id, reason=PostingResult.REASON_ORDER_NOT_FOUND)

    if order.status != Order.STATUS_COMPLETED:
        return _skip(
            tenant_id=tenant_id,
            order_id=order_id,
            reason=PostingResult.REASON_ORDER_NOT_COMPLETED,
            detail=f"status={order.status}",
        )

    total = _money(order.total_amount)
    if total <= 0:
        return _skip(tenant_id=tenant_id, order_id=order_id, reason=PostingResult.REASON_NOTHING_TO_POST)

    cash = coa.get_account_by_number(tenant_id=tenant_id, account_number=coa.CASH)
    sales = coa.get_account_by_number(tenant_id=tenant_id, account_number=coa.SALES_REVENUE)
    vat_payable = coa.get_account_by_number(tenant_id=tenant_id, account_number=coa.VAT_PAYABLE)

    missing = [
        number
        for number, account in ((coa.CASH, cash), (coa.SALES_REVENUE, sales), (coa.VAT_PAYABLE, vat_payable))
        if account is None
    ]
    if missing:
        return _skip(
            tenant_id=tenant_id,
            order_id=order_id,
            reason=PostingResult.REASON_MISSING_ACCOUNTS,
            detail=",".join(missing),
        )

    net, vat = split_vat_inclusive(total)
    branch_id = order.branch_id or ""
    number = order.order_number

    lines = [
        {"account": cash, "debit": total, "description": f"Sales - order {number}", "branch_id": branch_id},
        {"account": sales, "credit": net, "description": f"Sales revenue - order {number}", "branch_id": branch_id},
    ]
    if vat > 0:
        lines.append(
            {"account": vat_payable, "credit": vat, "description": f"VAT - order {number}", "branch_id": branch_id}
        )

    cogs = _money(order.cost_of_goods)
    if cogs > 0:
        cogs_account = coa.get_account_by_number(tenant_id=tenant_id, account_number=coa.COGS)
        inventory = coa.get_account_by_number(tenant_id=tenant_id, account_number=coa.INVENTORY)
        if cogs_account is not None and inventory is not None:
            lines.append(
                {"account": cogs_account, "debit": cogs, "description": f"COGS - order {number}", "branch_id": branch_id}
            )
            lines.append(
                {"account": inventory, "credit": cogs, "description": f"Inventory - order {number}", "branch_id": branch_id}
            )
        else:
            logger.warning(
                "order COGS not posted: COGS/inventory account missing",
                extra={"tenant_id": tenant_id, "order_id": str(order.pk)},
            )

    created_at = order.created_at or timezone.now()

    entry = create_journal_entry(
        tenant_id=tenant_id,
        entry_date=created_at,
        description=f"Sales entry - order {number}",
        lines=lines,
        reference_type=ReferenceType.ORDER,
        reference_id=str(order.pk),
        created_by=created_by,
        auto_post=True,
    )
    return PostingResult.success(entry)
