# accounting/tests/test_expenses.py

from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from accounting.models.account import Account
from accounting.models.expense import Expense
from accounting.models.journal import JournalEntry, ReferenceType
from accounting.services.chart_of_accounts import (
    ACCOUNTS_PAYABLE,
    BANK,
    CASH,
    VAT_PAYABLE,
    initialize_chart_of_accounts,
)
from accounting.services.exceptions import (
    AccountResolutionError,
    ExpenseWorkflowError,
    VendorError,
)
from accounting.services.expense_service import (
    approve_expense,
    create_expense,
    create_vendor,
    get_vendors,
    reject_expense,
)

User = get_user_model()

TENANT = "cafe-1"
RENT = "5220"


def _balance(number: str) -> Decimal:
    return Account.objects.get(tenant_id=TENANT, account_number=number).current_balance


class ExpenseWorkflowTests(TestCase):
    def setUp(self):
        initialize_chart_of_accounts(tenant_id=TENANT)
        self.manager = User.objects.create_user(username="manager", password="pass")

    def _expense(self, **overrides) -> Expense:
        data = {
            "tenant_id": TENANT,
            "description": "March rent",
            "amount": "1000.00",
            "tax_amount": "150.00",
            "expense_account_number": RENT,
            "expense_date": date(2024, 3, 1),
            "payment_method": Expense.PAYMENT_CASH,
        }
        data.update(overrides)
        return create_expense(**data)

    def test_create_expense_is_pending_and_numbered(self):
        expense = self._expense()

        self.assertEqual(expense.status, Expense.STATUS_PENDING)
        self.assertEqual(expense.expense_number, "EXP-2024-000001")
        self.assertEqual(expense.total_amount, Decimal("1150.00"))
        self.assertIsNone(expense.journal_entry)
        self.assertEqual(_balance(CASH), Decimal("0.00"))

    def test_create_expense_validation(self):
        with self.assertRaises(ExpenseWorkflowError):
            self._expense(amount="0")
        with self.assertRaises(ExpenseWorkflowError):
            self._expense(tax_amount="-1")
        with self.assertRaises(ExpenseWorkflowError):
            self._expense(payment_method="barter")
        with self.assertRaises(ExpenseWorkflowError):
            self._expense(expense_account_number=CASH)
        with self.assertRaises(AccountResolutionError):
            self._expense(expense_account_number="5999")

    def test_approve_posts_expense_entry(self):
        expense = self._expense()

        approved = approve_expense(tenant_id=TENANT, expense_id=expense.pk, approved_by=self.manager)

        self.assertEqual(approved.status, Expense.STATUS_APPROVED)
        self.assertEqual(approved.approved_by, self.manager)
        entry = approved.journal_entry
        self.assertEqual(entry.status, JournalEntry.STATUS_POSTED)
        self.assertEqual(entry.reference_type, ReferenceType.EXPENSE)
        self.assertEqual(entry.reference_id, str(expense.pk))

        self.assertEqual(_balance(RENT), Decimal("1000.00"))
        # input VAT reduces the VAT liability
        self.assertEqual(_balance(VAT_PAYABLE), Decimal("-150.00"))
        self.assertEqual(_balance(CASH), Decimal("-1150.00"))

    def test_payment_method_selects_credit_account(self):
        bank = self._expense(payment_method=Expense.PAYMENT_BANK, tax_amount=None)
        credit = self._expense(payment_method=Expense.PAYMENT_CREDIT, tax_amount=None)

        approve_expense(tenant_id=TENANT, expense_id=bank.pk)
        approve_expense(tenant_id=TENANT, expense_id=credit.pk)

        self.assertEqual(_balance(BANK), Decimal("-1000.00"))
        self.assertEqual(_balance(ACCOUNTS_PAYABLE), Decimal("1000.00"))
        self.assertEqual(_balance(VAT_PAYABLE), Decimal("0.00"))

    def test_missing_payment_account_rolls_back(self):
        expense = self._expense()
        Account.objects.filter(tenant_id=TENANT, account_number=CASH).update(is_active=False)

        with self.assertRaises(AccountResolutionError):
            approve_expense(tenant_id=TENANT, expense_id=expense.pk)

        expense.refresh_from_db()
        self.assertEqual(expense.status, Expense.STATUS_PENDING)
        self.assertFalse(JournalEntry.objects.exists())

    def test_only_pending_expenses_can_be_decided(self):
        expense = self._expense()
        approve_expense(tenant_id=TENANT, expense_id=expense.pk)

        with self.assertRaises(ExpenseWorkflowError):
            approve_expense(tenant_id=TENANT, expense_id=expense.pk)
        with self.assertRaises(ExpenseWorkflowError):
            reject_expense(tenant_id=TENANT, expense_id=expense.pk)

    def test_reject_keeps_ledger_untouched(self):
        expense = self._expense()

        rejected = reject_expense(
            tenant_id=TENANT,
            expense_id=expense.pk,
            rejected_by=self.manager,
            reason="Duplicate receipt",
        )

        self.assertEqual(rejected.status, Expense.STATUS_REJECTED)
        self.assertEqual(rejected.rejected_by, self.manager)
        self.assertIsNotNone(rejected.rejected_at)
        self.assertIsNone(rejected.approved_by)
        self.assertIsNone(rejected.approved_at)
        self.assertIn("Duplicate receipt", rejected.notes)
        self.assertFalse(JournalEntry.objects.exists())


class VendorTests(TestCase):
    def test_create_and_list_vendors(self):
        vendor = create_vendor(
            tenant_id=TENANT,
            code="V-001",
            name_ar="مورد البن",
            name_en="Bean Supplier",
            tax_number="300 0000 0000 0003",
        )

        self.assertEqual(vendor.tax_number, "300000000000003")
        self.assertEqual(vendor.country, "SA")
        self.assertEqual(list(get_vendors(tenant_id=TENANT)), [vendor])
        self.assertEqual(list(get_vendors(tenant_id="cafe-2")), [])

    def test_duplicate_code_and_bad_vat_are_rejected(self):
        create_vendor(tenant_id=TENANT, code="V-001", name_ar="مورد")

        with self.assertRaises(VendorError):
            create_vendor(tenant_id=TENANT, code="V-001", name_ar="مورد آخر")
        with self.assertRaises(VendorError):
            create_vendor(tenant_id=TENANT, code="V-002", name_ar="مورد", tax_number="123")

    def test_expense_takes_vendor_name(self):
        initialize_chart_of_accounts(tenant_id=TENANT)
        vendor = create_vendor(tenant_id=TENANT, code="V-001", name_ar="مورد البن", name_en="Bean Supplier")

        expense = create_expense(
            tenant_id=TENANT,
            description="Coffee beans",
            amount="200",
            expense_account_number="5260",
            vendor_id=vendor.pk,
        )
        self.assertEqual(expense.vendor, vendor)
        self.assertEqual(expense.vendor_name, "Bean Supplier")

        with self.assertRaises(VendorError):
            create_expense(
                tenant_id=TENANT,
                description="Ghost vendor",
                amount="10",
                expense_account_number="5260",
                vendor_id=999999,
            )
