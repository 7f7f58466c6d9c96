# accounting/services/balance_service.py

"""
BALANCE SERVICE (READ-ONLY)

Two ways of reading an account balance:

- current:  Account.current_balance as maintained by the journal engine.
            Cheap; reflects "now" regardless of any as-of date.
- replay:   opening_balance + signed sum of POSTED journal lines whose
            entry_date <= cutoff. Historical, one aggregate query per call.

RULES:
- READ-ONLY: no writes, ever
- Only POSTED journal entries count
- Tenant-scoped: never mix tenants
- Sign convention follows Account.normal_balance
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Sum

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine

TWOPLACES = Decimal("0.01")

BASIS_CURRENT = "current"
BASIS_REPLAY = "replay"
BASES = (BASIS_CURRENT, BASIS_REPLAY)


def _q2(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def signed_amount(account: Account, *, debit, credit) -> Decimal:
    """
    Balance rule:
    - debit-normal (assets, expenses)  -> debit - credit
    - credit-normal (everything else)  -> credit - debit
    """
    debit = _q2(debit)
    credit = _q2(credit)
    return debit - credit if account.is_debit_normal else credit - debit


def replayed_balances(*, tenant_id: str, accounts, as_of: date | None = None) -> dict[int, Decimal]:
    """
    Rebuild balances for `accounts` from posted lines up to `as_of` (inclusive).
    """
    accounts = list(accounts)
    balances = {a.id: _q2(a.opening_balance) for a in accounts}
    if not accounts:
        return balances

    qs = JournalLine.objects.filter(
        account_id__in=list(balances.keys()),
        journal_entry__tenant_id=tenant_id,
        journal_entry__status=JournalEntry.STATUS_POSTED,
    )
    if as_of is not None:
        qs = qs.filter(journal_entry__entry_date__lte=as_of)

    rows = qs.values("account_id").annotate(debit=Sum("debit"), credit=Sum("credit"))
    by_id = {a.id: a for a in accounts}

    for r in rows:
        acc = by_id[r["account_id"]]
        balances[acc.id] += signed_amount(acc, debit=r["debit"], credit=r["credit"])

    return {k: _q2(v) for k, v in balances.items()}


def balances_for(*, tenant_id: str, accounts, basis: str = BASIS_CURRENT, as_of: date | None = None) -> dict[int, Decimal]:
    if basis == BASIS_REPLAY:
        return replayed_balances(tenant_id=tenant_id, accounts=accounts, as_of=as_of)
    return {a.id: _q2(a.current_balance) for a in accounts}
