# accounting/services/chart_of_accounts.py

"""
======================================================
PATH: accounting/services/chart_of_accounts.py
======================================================
ACCOUNT REGISTRY

Responsibilities:
- Seed a tenant's default cafe chart of accounts (idempotent)
- Create ad-hoc accounts (unique number per tenant, level/path from parent)
- List accounts and rebuild the parent -> children tree

Balances are NOT touched here. current_balance only moves through
journal_entry_service.

Well-known system account numbers are exported as constants so posting code
never hardcodes strings.
"""

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from accounting.models.account import Account
from accounting.services.exceptions import (
    AccountResolutionError,
    DuplicateAccountError,
)

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

# System account numbers relied on by auto-posting
CASH = "1111"
BANK = "1112"
ACCOUNTS_RECEIVABLE = "1120"
INVENTORY = "1130"
ACCOUNTS_PAYABLE = "2110"
VAT_PAYABLE = "2120"
CAPITAL = "3100"
RETAINED_EARNINGS = "3200"
SALES_REVENUE = "4100"
COGS = "5100"
WASTE = "5270"

# (number, parent number, name_ar, name_en, type, is_system, is_bank)
DEFAULT_CHART = [
    ("1000", None, "الأصول", "Assets", Account.ASSET, False, False),
    ("1100", "1000", "الأصول المتداولة", "Current Assets", Account.ASSET, False, False),
    ("1110", "1100", "النقدية", "Cash", Account.ASSET, False, False),
    (CASH, "1110", "الصندوق", "Petty Cash", Account.ASSET, True, False),
    (BANK, "1110", "البنك", "Bank", Account.ASSET, False, True),
    (ACCOUNTS_RECEIVABLE, "1100", "الذمم المدينة", "Accounts Receivable", Account.ASSET, True, False),
    (INVENTORY, "1100", "المخزون", "Inventory", Account.ASSET, True, False),
    ("1140", "1100", "المصروفات المدفوعة مقدماً", "Prepaid Expenses", Account.ASSET, False, False),
    ("1200", "1000", "الأصول الثابتة", "Fixed Assets", Account.ASSET, False, False),
    ("1210", "1200", "المعدات", "Equipment", Account.ASSET, False, False),
    ("1220", "1200", "الأثاث", "Furniture", Account.ASSET, False, False),
    ("2000", None, "الخصوم", "Liabilities", Account.LIABILITY, False, False),
    ("2100", "2000", "الخصوم المتداولة", "Current Liabilities", Account.LIABILITY, False, False),
    (ACCOUNTS_PAYABLE, "2100", "الذمم الدائنة", "Accounts Payable", Account.LIABILITY, True, False),
    (VAT_PAYABLE, "2100", "ضريبة القيمة المضافة المستحقة", "VAT Payable", Account.LIABILITY, True, False),
    ("2130", "2100", "الرواتب المستحقة", "Salaries Payable", Account.LIABILITY, False, False),
    ("2200", "2000", "الخصوم طويلة الأجل", "Long-term Liabilities", Account.LIABILITY, False, False),
    ("2210", "2200", "القروض", "Loans", Account.LIABILITY, False, False),
    ("3000", None, "حقوق الملكية", "Equity", Account.EQUITY, False, False),
    (CAPITAL, "3000", "رأس المال", "Capital", Account.EQUITY, True, False),
    (RETAINED_EARNINGS, "3000", "الأرباح المحتجزة", "Retained Earnings", Account.EQUITY, True, False),
    ("4000", None, "الإيرادات", "Revenue", Account.REVENUE, False, False),
    (SALES_REVENUE, "4000", "إيرادات المبيعات", "Sales Revenue", Account.REVENUE, True, False),
    ("4110", SALES_REVENUE, "مبيعات المشروبات", "Beverage Sales", Account.REVENUE, False, False),
    ("4120", SALES_REVENUE, "مبيعات المأكولات", "Food Sales", Account.REVENUE, False, False),
    ("4200", "4000", "إيرادات أخرى", "Other Revenue", Account.REVENUE, False, False),
    ("4210", "4200", "رسوم التوصيل", "Delivery Fees", Account.REVENUE, False, False),
    ("5000", None, "المصروفات", "Expenses", Account.EXPENSE, False, False),
    (COGS, "5000", "تكلفة البضاعة المباعة", "Cost of Goods Sold", Account.EXPENSE, True, False),
    ("5200", "5000", "المصروفات التشغيلية", "Operating Expenses", Account.EXPENSE, False, False),
    ("5210", "5200", "الرواتب والأجور", "Salaries & Wages", Account.EXPENSE, False, False),
    ("5220", "5200", "الإيجار", "Rent", Account.EXPENSE, False, False),
    ("5230", "5200", "المرافق", "Utilities", Account.EXPENSE, False, False),
    ("5240", "5200", "التسويق والإعلان", "Marketing & Advertising", Account.EXPENSE, False, False),
    ("5250", "5200", "الصيانة", "Maintenance", Account.EXPENSE, False, False),
    ("5260", "5200", "المستلزمات", "Supplies", Account.EXPENSE, False, False),
    (WASTE, "5200", "الهدر والتالف", "Waste & Spoilage", Account.EXPENSE, True, False),
    ("5300", "5000", "مصروفات أخرى", "Other Expenses", Account.EXPENSE, False, False),
]


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@transaction.atomic
def initialize_chart_of_accounts(*, tenant_id: str) -> list[Account]:
    """
    Seed the default chart for a tenant.

    Idempotent: a tenant that already has any account is returned unchanged,
    never re-seeded. Parents are resolved from a running number -> Account map,
    so DEFAULT_CHART must list every parent before its children.
    """
    existing = list(Account.objects.filter(tenant_id=tenant_id).order_by("account_number"))
    if existing:
        return existing

    by_number: dict[str, Account] = {}
    for number, parent_number, name_ar, name_en, account_type, is_system, is_bank in DEFAULT_CHART:
        parent = by_number.get(parent_number) if parent_number else None
        account = Account.objects.create(
            tenant_id=tenant_id,
            account_number=number,
            name_ar=name_ar,
            name_en=name_en,
            account_type=account_type,
            normal_balance=Account.normal_balance_for(account_type),
            parent=parent,
            level=(parent.level + 1) if parent else 1,
            path=f"{parent.path}/{number}" if parent else number,
            is_system_account=is_system,
            is_bank_account=is_bank,
        )
        by_number[number] = account

    logger.info(
        "chart of accounts initialized",
        extra={"tenant_id": tenant_id, "account_count": len(by_number)},
    )
    return sorted(by_number.values(), key=lambda a: a.account_number)


@transaction.atomic
def create_account(
    *,
    tenant_id: str,
    account_number: str,
    name_ar: str,
    account_type: str,
    name_en: str = "",
    parent_id=None,
    normal_balance: str | None = None,
    opening_balance=None,
    is_bank_account: bool = False,
    description: str = "",
) -> Account:
    account_number = (account_number or "").strip()

    if Account.objects.filter(tenant_id=tenant_id, account_number=account_number).exists():
        raise DuplicateAccountError(f"Account number {account_number} already exists")

    parent = None
    if parent_id:
        parent = Account.objects.filter(tenant_id=tenant_id, pk=parent_id).first()
        if parent is None:
            raise AccountResolutionError(f"Parent account {parent_id} not found")

    opening = _money(opening_balance)

    try:
        return Account.objects.create(
            tenant_id=tenant_id,
            account_number=account_number,
            name_ar=name_ar,
            name_en=name_en,
            account_type=account_type,
            normal_balance=normal_balance or Account.normal_balance_for(account_type),
            parent=parent,
            level=(parent.level + 1) if parent else 1,
            path=f"{parent.path}/{account_number}" if parent else account_number,
            opening_balance=opening,
            current_balance=opening,
            is_bank_account=is_bank_account,
            description=description,
        )
    except IntegrityError as exc:
        raise DuplicateAccountError(f"Account number {account_number} already exists") from exc
    except ValidationError as exc:
        raise AccountResolutionError("; ".join(exc.messages)) from exc


def get_accounts(*, tenant_id: str, account_type: str | None = None, is_active: bool | None = None):
    qs = Account.objects.filter(tenant_id=tenant_id)
    if account_type:
        qs = qs.filter(account_type=account_type)
    if is_active is not None:
        qs = qs.filter(is_active=is_active)
    return qs.order_by("account_number")


def get_account_by_number(*, tenant_id: str, account_number: str) -> Account | None:
    return Account.objects.filter(
        tenant_id=tenant_id, account_number=account_number, is_active=True
    ).first()


def get_account_tree(*, tenant_id: str) -> list[dict]:
    """
    Rebuild the hierarchy of active accounts in one pass over a flat query.

    Nodes whose parent is missing or inactive are promoted to roots.
    """
    accounts = list(get_accounts(tenant_id=tenant_id, is_active=True))

    nodes = {
        a.id: {
            "id": a.id,
            "account_number": a.account_number,
            "name_ar": a.name_ar,
            "name_en": a.name_en,
            "account_type": a.account_type,
            "normal_balance": a.normal_balance,
            "level": a.level,
            "path": a.path,
            "current_balance": float(a.current_balance),
            "is_system_account": a.is_system_account,
            "children": [],
        }
        for a in accounts
    }

    roots = []
    for a in accounts:
        node = nodes[a.id]
        parent = nodes.get(a.parent_id)
        if parent is not None:
            parent["children"].append(node)
        else:
            roots.append(node)
    return roots
