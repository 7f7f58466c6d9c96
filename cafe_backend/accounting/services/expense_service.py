# PATH: accounting/services/expense_service.py

"""
EXPENSE + VENDOR SERVICE

Responsibilities:
- Create expense requests (EXP-<year>-<6 digits>, status pending_approval)
- Approve (posts to the ledger) or reject pending expenses
- Vendor master data (create / list)

Accounting effect on approval (auto-posted, reference kind "expense"):
- Dr Expense account        amount
- Dr VAT Payable            tax_amount   (input VAT offsets output VAT; only if > 0)
- Cr Petty Cash / Bank / Accounts Payable   total_amount   (by payment method)

Unlike order posting, a missing payment account here is a hard error: the
approval is rolled back and the expense stays pending.
"""

from __future__ import annotations

import logging
from datetime import date as date_type
from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.expense import Expense
from accounting.models.journal import ReferenceType
from accounting.models.sequence import DocumentSequence
from accounting.models.vendor import Vendor
from accounting.services import chart_of_accounts as coa
from accounting.services.exceptions import (
    AccountResolutionError,
    ExpenseWorkflowError,
    VendorError,
)
from accounting.services.journal_entry_service import create_journal_entry
from accounting.services.sequence_service import next_document_number

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

PAYMENT_ACCOUNTS = {
    Expense.PAYMENT_CASH: coa.CASH,
    Expense.PAYMENT_BANK: coa.BANK,
    Expense.PAYMENT_CREDIT: coa.ACCOUNTS_PAYABLE,
}


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _resolve_expense_account(*, tenant_id: str, expense_account_id=None, expense_account_number=None) -> Account:
    qs = Account.objects.filter(tenant_id=tenant_id, is_active=True)
    if expense_account_id:
        account = qs.filter(pk=expense_account_id).first()
    elif expense_account_number:
        account = qs.filter(account_number=str(expense_account_number).strip()).first()
    else:
        raise ExpenseWorkflowError("An expense account is required")

    if account is None:
        raise AccountResolutionError("Expense account not found")
    if account.account_type != Account.EXPENSE:
        raise ExpenseWorkflowError(f"Account {account.account_number} is not an expense account")
    return account


@transaction.atomic
def create_expense(
    *,
    tenant_id: str,
    description: str,
    amount,
    expense_account_id=None,
    expense_account_number: str | None = None,
    branch_id: str = "",
    category: str = "",
    tax_amount=None,
    payment_method: str = Expense.PAYMENT_CASH,
    vendor_id=None,
    vendor_name: str = "",
    expense_date: date_type | None = None,
    requested_by=None,
    notes: str = "",
) -> Expense:
    amt = _money(amount)
    tax = _money(tax_amount)
    if amt <= 0:
        raise ExpenseWorkflowError("Amount must be > 0")
    if tax < 0:
        raise ExpenseWorkflowError("Tax amount cannot be negative")
    if payment_method not in PAYMENT_ACCOUNTS:
        raise ExpenseWorkflowError("Invalid payment_method. Use 'cash', 'bank', or 'credit'.")

    description = (description or "").strip()
    if not description:
        raise ExpenseWorkflowError("Description is required")

    expense_account = _resolve_expense_account(
        tenant_id=tenant_id,
        expense_account_id=expense_account_id,
        expense_account_number=expense_account_number,
    )

    vendor = None
    if vendor_id:
        vendor = Vendor.objects.filter(tenant_id=tenant_id, pk=vendor_id).first()
        if vendor is None:
            raise VendorError(f"Vendor {vendor_id} not found")
        vendor_name = vendor_name or vendor.name_en or vendor.name_ar

    expense_date = expense_date or timezone.localdate()
    number = next_document_number(
        tenant_id=tenant_id,
        kind=DocumentSequence.KIND_EXPENSE,
        year=expense_date.year,
    )

    try:
        return Expense.objects.create(
            tenant_id=tenant_id,
            branch_id=branch_id or "",
            expense_number=number,
            expense_date=expense_date,
            category=(category or "").strip(),
            description=description,
            expense_account=expense_account,
            amount=amt,
            tax_amount=tax,
            total_amount=amt + tax,
            payment_method=payment_method,
            vendor=vendor,
            vendor_name=(vendor_name or "").strip(),
            requested_by=requested_by,
            notes=(notes or "").strip(),
        )
    except ValidationError as exc:
        raise ExpenseWorkflowError("; ".join(exc.messages)) from exc


def _pending_for_update(*, tenant_id: str, expense_id) -> Expense:
    expense = (
        Expense.objects.select_for_update()
        .filter(tenant_id=tenant_id, pk=expense_id)
        .first()
    )
    if expense is None:
        raise ExpenseWorkflowError(f"Expense {expense_id} not found")
    if expense.status != Expense.STATUS_PENDING:
        raise ExpenseWorkflowError(
            f"Expense {expense.expense_number} is {expense.status}; only pending expenses can be decided"
        )
    return expense


@transaction.atomic
def approve_expense(*, tenant_id: str, expense_id, approved_by=None) -> Expense:
    expense = _pending_for_update(tenant_id=tenant_id, expense_id=expense_id)

    payment_number = PAYMENT_ACCOUNTS[expense.payment_method]
    payment_account = coa.get_account_by_number(tenant_id=tenant_id, account_number=payment_number)
    if payment_account is None:
        raise AccountResolutionError(
            f"Payment account {payment_number} for '{expense.payment_method}' is not configured"
        )

    lines = [
        {
            "account": expense.expense_account,
            "debit": expense.amount,
            "description": expense.description,
            "branch_id": expense.branch_id,
        }
    ]
    if expense.tax_amount > 0:
        vat_account = coa.get_account_by_number(tenant_id=tenant_id, account_number=coa.VAT_PAYABLE)
        if vat_account is None:
            raise AccountResolutionError(f"VAT account {coa.VAT_PAYABLE} is not configured")
        lines.append(
            {
                "account": vat_account,
                "debit": expense.tax_amount,
                "description": f"Input VAT - {expense.expense_number}",
                "branch_id": expense.branch_id,
            }
        )
    lines.append(
        {
            "account": payment_account,
            "credit": expense.total_amount,
            "description": expense.vendor_name or expense.description,
            "branch_id": expense.branch_id,
        }
    )

    entry = create_journal_entry(
        tenant_id=tenant_id,
        entry_date=expense.expense_date,
        description=f"Expense {expense.expense_number}: {expense.description}",
        lines=lines,
        reference_type=ReferenceType.EXPENSE,
        reference_id=str(expense.pk),
        created_by=approved_by,
        auto_post=True,
    )

    expense.status = Expense.STATUS_APPROVED
    expense.approved_by = approved_by
    expense.approved_at = timezone.now()
    expense.journal_entry = entry
    expense.save()

    logger.info(
        "expense approved",
        extra={"tenant_id": tenant_id, "expense_number": expense.expense_number, "entry_number": entry.entry_number},
    )
    return expense


@transaction.atomic
def reject_expense(*, tenant_id: str, expense_id, rejected_by=None, reason: str = "") -> Expense:
    expense = _pending_for_update(tenant_id=tenant_id, expense_id=expense_id)
    expense.status = Expense.STATUS_REJECTED
    expense.rejected_by = rejected_by
    expense.rejected_at = timezone.now()
    if reason:
        expense.notes = f"{expense.notes}\n{reason}".strip()
    expense.save()
    return expense


# ------------------------------------------------------------
# VENDORS
# ------------------------------------------------------------


def get_vendors(*, tenant_id: str):
    return Vendor.objects.filter(tenant_id=tenant_id, is_active=True).order_by("name_ar")


def create_vendor(*, tenant_id: str, code: str, name_ar: str, **fields) -> Vendor:
    from invoicing.services.zatca import validate_vat_number

    code = (code or "").strip()
    if Vendor.objects.filter(tenant_id=tenant_id, code=code).exists():
        raise VendorError(f"Vendor code {code} already exists")

    tax_number = (fields.get("tax_number") or "").replace(" ", "")
    if tax_number and not validate_vat_number(tax_number):
        raise VendorError(f"Invalid VAT number: {fields.get('tax_number')}")
    if tax_number:
        fields["tax_number"] = tax_number

    fields.pop("country", None)
    try:
        return Vendor.objects.create(tenant_id=tenant_id, code=code, name_ar=name_ar, country="SA", **fields)
    except ValidationError as exc:
        raise VendorError("; ".join(exc.messages)) from exc
