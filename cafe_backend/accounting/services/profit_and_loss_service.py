# accounting/services/profit_and_loss_service.py

"""
PROFIT & LOSS SERVICE (INCOME STATEMENT)

Read-only aggregation over posted journal lines.

Key rules:
- Only POSTED entries whose entry_date is in [start_date, end_date] count
- Branch filtering is per LINE (a line tagged with another branch is skipped,
  even when other lines of the same entry match)
- Revenue accounts accumulate credit - debit; expense accounts debit - credit
- The COGS account (5100) is reported on its own, not under expenses
- gross_profit = total_revenue - cogs; net_income = gross_profit - total_expenses
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from accounting.services.chart_of_accounts import COGS
from accounting.services.exceptions import AccountingServiceError


TWOPLACES = Decimal("0.01")


def _q2(amount: Decimal) -> Decimal:
    return (amount or Decimal("0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_major_number(amount: Decimal) -> float:
    return float(_q2(amount))


def _to_minor_int(amount: Decimal) -> int:
    return int((_q2(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def _rows(buckets: dict) -> list[dict]:
    return [
        {
            "account_number": number,
            "account_name": name,
            "amount": _to_major_number(amount),
            "amount_minor": _to_minor_int(amount),
        }
        for (number, name), amount in sorted(buckets.items())
    ]


def get_income_statement(
    *,
    tenant_id: str,
    start_date: date,
    end_date: date,
    branch_id: str | None = None,
) -> dict:
    if start_date and end_date and end_date < start_date:
        raise AccountingServiceError("end_date must be >= start_date")

    lines = (
        JournalLine.objects.filter(
            journal_entry__tenant_id=tenant_id,
            journal_entry__status=JournalEntry.STATUS_POSTED,
            journal_entry__entry_date__gte=start_date,
            journal_entry__entry_date__lte=end_date,
            account__account_type__in=(Account.REVENUE, Account.EXPENSE),
        )
        .select_related("account")
        .order_by("journal_entry__entry_date", "journal_entry_id", "line_no")
    )

    revenue: dict[tuple[str, str], Decimal] = {}
    expenses: dict[tuple[str, str], Decimal] = {}
    cogs = Decimal("0.00")

    for line in lines:
        if branch_id and line.branch_id != branch_id:
            continue

        account = line.account
        key = (account.account_number, account.display_name)

        if account.account_type == Account.REVENUE:
            revenue[key] = revenue.get(key, Decimal("0.00")) + (line.credit - line.debit)
        elif account.account_number == COGS:
            cogs += line.debit - line.credit
        else:
            expenses[key] = expenses.get(key, Decimal("0.00")) + (line.debit - line.credit)

    total_revenue = _q2(sum(revenue.values(), Decimal("0.00")))
    total_expenses = _q2(sum(expenses.values(), Decimal("0.00")))
    cogs = _q2(cogs)
    gross_profit = total_revenue - cogs
    net_income = gross_profit - total_expenses

    return {
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        "branch_id": branch_id or None,
        "revenue": _rows(revenue),
        "expenses": _rows(expenses),
        "total_revenue": _to_major_number(total_revenue),
        "total_expenses": _to_major_number(total_expenses),
        "cogs": _to_major_number(cogs),
        "gross_profit": _to_major_number(gross_profit),
        "net_income": _to_major_number(net_income),
        "total_revenue_minor": _to_minor_int(total_revenue),
        "total_expenses_minor": _to_minor_int(total_expenses),
        "cogs_minor": _to_minor_int(cogs),
        "gross_profit_minor": _to_minor_int(gross_profit),
        "net_income_minor": _to_minor_int(net_income),
    }
