# accounting/services/trial_balance_service.py

from __future__ import annotations

from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

from accounting.models.account import Account
from accounting.services.balance_service import BASES, BASIS_CURRENT, balances_for
from accounting.services.exceptions import AccountingServiceError


TWOPLACES = Decimal("0.01")


def _q2(amount: Decimal) -> Decimal:
    return (amount or Decimal("0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_major_number(amount: Decimal) -> float:
    return float(_q2(amount))


def _to_minor_int(amount: Decimal) -> int:
    return int((_q2(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


class TrialBalanceService:
    """
    Trial Balance computation service.

    Guarantees:
    - Tenant-scoped, ACTIVE accounts only, ordered by account number
    - Every active account is listed; its balance lands in the debit column
      for debit-normal accounts and the credit column otherwise
    - basis="current" (default) reads stored current balances: as_of is echoed
      but NOT applied. basis="replay" rebuilds balances up to as_of.
    - Returns JSON-safe numeric values (no Decimals)
    """

    def __init__(self, account_model=Account):
        self.Account = account_model

    def generate(self, *, tenant_id: str, as_of: date | None = None, basis: str = BASIS_CURRENT):
        if basis not in BASES:
            raise AccountingServiceError(f"Unknown balance basis: {basis!r}")

        as_of = as_of or timezone.localdate()

        accounts = list(
            self.Account.objects.filter(tenant_id=tenant_id, is_active=True).order_by("account_number")
        )
        balances = balances_for(tenant_id=tenant_id, accounts=accounts, basis=basis, as_of=as_of)

        rows = []
        total_debit = Decimal("0.00")
        total_credit = Decimal("0.00")

        for acc in accounts:
            balance = balances.get(acc.id, Decimal("0.00"))
            debit = balance if acc.is_debit_normal else Decimal("0.00")
            credit = Decimal("0.00") if acc.is_debit_normal else balance

            rows.append(
                {
                    "account_id": acc.id,
                    "account_number": acc.account_number,
                    "account_name": acc.display_name,
                    "account_type": acc.account_type,
                    "debit": _to_major_number(debit),
                    "credit": _to_major_number(credit),
                    "debit_minor": _to_minor_int(debit),
                    "credit_minor": _to_minor_int(credit),
                }
            )

            total_debit += debit
            total_credit += credit

        return {
            "as_of": as_of.isoformat(),
            "basis": basis,
            "accounts": rows,
            "totals": {
                "debit": _to_major_number(total_debit),
                "credit": _to_major_number(total_credit),
                "debit_minor": _to_minor_int(total_debit),
                "credit_minor": _to_minor_int(total_credit),
                "balanced": _to_minor_int(total_debit) == _to_minor_int(total_credit),
            },
        }
