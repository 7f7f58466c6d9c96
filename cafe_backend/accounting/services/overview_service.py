# accounting/services/overview_service.py

"""
ACCOUNTING OVERVIEW KPI SERVICE

Ledger-driven KPI aggregation for dashboards.

Contract:
- Returns numeric JSON-safe values (floats for major units + ints for minor units)
- Period KPIs (revenue, expenses, net income) come from the income statement
- Position KPIs (cash, receivables, payables) are live account balances
- Read-only: no mutations, no postings.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

from accounting.models.account import Account
from accounting.models.expense import Expense
from accounting.services import chart_of_accounts as coa
from accounting.services.profit_and_loss_service import get_income_statement


TWOPLACES = Decimal("0.01")


def _q2(amount: Decimal) -> Decimal:
    return (amount or Decimal("0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_major_number(amount: Decimal) -> float:
    return float(_q2(amount))


def _to_minor_int(amount: Decimal) -> int:
    return int((_q2(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def _balance(*, tenant_id: str, account_number: str) -> Decimal:
    value = (
        Account.objects.filter(tenant_id=tenant_id, account_number=account_number)
        .values_list("current_balance", flat=True)
        .first()
    )
    return value if value is not None else Decimal("0.00")


def get_dashboard_summary(
    *,
    tenant_id: str,
    branch_id: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> dict:
    """
    KPI snapshot for a tenant.

    Defaults to the current year to date when no range is given.
    total_expenses here includes COGS (everything that reduced profit).
    """
    from invoicing.models.invoice import Invoice

    today = timezone.localdate()
    end_date = end_date or today
    start_date = start_date or date(end_date.year, 1, 1)

    statement = get_income_statement(
        tenant_id=tenant_id,
        start_date=start_date,
        end_date=end_date,
        branch_id=branch_id,
    )

    revenue = Decimal(statement["total_revenue_minor"]) / 100
    expenses = Decimal(statement["total_expenses_minor"] + statement["cogs_minor"]) / 100
    net_income = Decimal(statement["net_income_minor"]) / 100

    cash = _balance(tenant_id=tenant_id, account_number=coa.CASH)
    receivables = _balance(tenant_id=tenant_id, account_number=coa.ACCOUNTS_RECEIVABLE)
    payables = _balance(tenant_id=tenant_id, account_number=coa.ACCOUNTS_PAYABLE)

    pending_expenses = Expense.objects.filter(tenant_id=tenant_id, status=Expense.STATUS_PENDING)
    invoices = Invoice.objects.filter(
        tenant_id=tenant_id,
        invoice_date__date__gte=start_date,
        invoice_date__date__lte=end_date,
    )
    if branch_id:
        pending_expenses = pending_expenses.filter(branch_id=branch_id)
        invoices = invoices.filter(branch_id=branch_id)

    return {
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        "branch_id": branch_id or None,
        "total_revenue": _to_major_number(revenue),
        "total_expenses": _to_major_number(expenses),
        "net_income": _to_major_number(net_income),
        "cash_balance": _to_major_number(cash),
        "accounts_receivable": _to_major_number(receivables),
        "accounts_payable": _to_major_number(payables),
        "total_revenue_minor": _to_minor_int(revenue),
        "total_expenses_minor": _to_minor_int(expenses),
        "net_income_minor": _to_minor_int(net_income),
        "cash_balance_minor": _to_minor_int(cash),
        "accounts_receivable_minor": _to_minor_int(receivables),
        "accounts_payable_minor": _to_minor_int(payables),
        "pending_expenses": pending_expenses.count(),
        "invoice_count": invoices.count(),
    }
