# accounting/services/balance_sheet_service.py

"""
BALANCE SHEET SERVICE

Pure accounting read service.

Responsibilities:
- List active leaf-level accounts (level >= 3) with a non-zero balance
- Group them into assets / liabilities / equity with totals

Important:
- Balances are the stored current balances (basis="current"), so as_of_date
  is reported back but not applied. Pass basis="replay" for a historical view.
- Revenue/expense activity is not closed into equity here, so
  total_assets == liabilities_plus_equity only after a period close.

Contract:
- API emits numeric JSON values (not strings)
- Provide both major-unit numbers (floats, 2dp) and minor-unit ints (exact)
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from django.utils import timezone

from accounting.models.account import Account
from accounting.services.balance_service import BASES, BASIS_CURRENT, balances_for
from accounting.services.exceptions import AccountingServiceError

TWOPLACES = Decimal("0.01")
LEAF_LEVEL = 3


def _q2(amount: Decimal) -> Decimal:
    return (amount or Decimal("0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_major_number(amount: Decimal) -> float:
    return float(_q2(amount))


def _to_minor_int(amount: Decimal) -> int:
    return int((_q2(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def generate_balance_sheet(
    *,
    tenant_id: str,
    as_of_date: date | None = None,
    basis: str = BASIS_CURRENT,
) -> dict:
    """
    Args:
        tenant_id: tenant whose ledger is reported.
        as_of_date: report date (defaults to today).
        basis: "current" (stored balances) or "replay".
    """
    if basis not in BASES:
        raise AccountingServiceError(f"Unknown balance basis: {basis!r}")

    as_of_date = as_of_date or timezone.localdate()

    accounts = list(
        Account.objects.filter(
            tenant_id=tenant_id,
            is_active=True,
            level__gte=LEAF_LEVEL,
            account_type__in=(Account.ASSET, Account.LIABILITY, Account.EQUITY),
        ).order_by("account_number")
    )
    balances = balances_for(tenant_id=tenant_id, accounts=accounts, basis=basis, as_of=as_of_date)

    sections = {Account.ASSET: [], Account.LIABILITY: [], Account.EQUITY: []}
    totals = {k: Decimal("0.00") for k in sections}

    for acc in accounts:
        balance = balances.get(acc.id, Decimal("0.00"))
        if balance == 0:
            continue

        sections[acc.account_type].append(
            {
                "account_number": acc.account_number,
                "account_name": acc.display_name,
                "balance": _to_major_number(balance),
                "balance_minor": _to_minor_int(balance),
            }
        )
        totals[acc.account_type] += balance

    total_assets = totals[Account.ASSET]
    total_liabilities = totals[Account.LIABILITY]
    total_equity = totals[Account.EQUITY]

    return {
        "as_of_date": as_of_date.isoformat(),
        "basis": basis,
        "assets": sections[Account.ASSET],
        "liabilities": sections[Account.LIABILITY],
        "equity": sections[Account.EQUITY],
        "totals": {
            "assets": _to_major_number(total_assets),
            "liabilities": _to_major_number(total_liabilities),
            "equity": _to_major_number(total_equity),
            "liabilities_plus_equity": _to_major_number(total_liabilities + total_equity),
            "assets_minor": _to_minor_int(total_assets),
            "liabilities_minor": _to_minor_int(total_liabilities),
            "equity_minor": _to_minor_int(total_equity),
        },
    }
