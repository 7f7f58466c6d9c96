# accounting/tests/test_chart_of_accounts.py

from decimal import Decimal
from io import StringIO

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import TestCase

from accounting.models.account import Account
from accounting.services.chart_of_accounts import (
    CASH,
    DEFAULT_CHART,
    create_account,
    get_account_by_number,
    get_account_tree,
    initialize_chart_of_accounts,
)
from accounting.services.exceptions import AccountResolutionError, DuplicateAccountError

TENANT = "cafe-1"


class ChartOfAccountsTests(TestCase):
    def test_initialize_seeds_default_chart(self):
        accounts = initialize_chart_of_accounts(tenant_id=TENANT)

        self.assertEqual(len(accounts), len(DEFAULT_CHART))
        self.assertEqual(Account.objects.filter(tenant_id=TENANT).count(), 38)

        cash = Account.objects.get(tenant_id=TENANT, account_number=CASH)
        self.assertEqual(cash.level, 4)
        self.assertEqual(cash.path, "1000/1100/1110/1111")
        self.assertEqual(cash.normal_balance, Account.DEBIT)
        self.assertTrue(cash.is_system_account)

        sales = Account.objects.get(tenant_id=TENANT, account_number="4100")
        self.assertEqual(sales.normal_balance, Account.CREDIT)

    def test_initialize_is_idempotent(self):
        initialize_chart_of_accounts(tenant_id=TENANT)
        again = initialize_chart_of_accounts(tenant_id=TENANT)

        self.assertEqual(len(again), 38)
        self.assertEqual(Account.objects.filter(tenant_id=TENANT).count(), 38)

    def test_charts_are_tenant_scoped(self):
        initialize_chart_of_accounts(tenant_id=TENANT)
        initialize_chart_of_accounts(tenant_id="cafe-2")

        self.assertEqual(Account.objects.filter(account_number=CASH).count(), 2)
        self.assertIsNone(get_account_by_number(tenant_id="cafe-3", account_number=CASH))

    def test_create_account_under_parent(self):
        initialize_chart_of_accounts(tenant_id=TENANT)
        parent = Account.objects.get(tenant_id=TENANT, account_number="5200")

        account = create_account(
            tenant_id=TENANT,
            account_number="5280",
            name_ar="التغليف",
            name_en="Packaging",
            account_type=Account.EXPENSE,
            parent_id=parent.pk,
            opening_balance="12.50",
        )

        self.assertEqual(account.level, parent.level + 1)
        self.assertEqual(account.path, f"{parent.path}/5280")
        self.assertEqual(account.current_balance, Decimal("12.50"))
        self.assertEqual(account.normal_balance, Account.DEBIT)

    def test_create_account_rejects_duplicates_and_missing_parent(self):
        initialize_chart_of_accounts(tenant_id=TENANT)

        with self.assertRaises(DuplicateAccountError):
            create_account(tenant_id=TENANT, account_number=CASH, name_ar="x", account_type=Account.ASSET)
        with self.assertRaises(AccountResolutionError):
            create_account(
                tenant_id=TENANT,
                account_number="1150",
                name_ar="x",
                account_type=Account.ASSET,
                parent_id=999999,
            )

    def test_system_accounts_cannot_be_deleted(self):
        initialize_chart_of_accounts(tenant_id=TENANT)
        cash = Account.objects.get(tenant_id=TENANT, account_number=CASH)

        with self.assertRaises(ValidationError):
            cash.delete()

    def test_tree_nests_children(self):
        initialize_chart_of_accounts(tenant_id=TENANT)
        roots = get_account_tree(tenant_id=TENANT)

        self.assertEqual([r["account_number"] for r in roots], ["1000", "2000", "3000", "4000", "5000"])
        assets = roots[0]
        self.assertEqual([c["account_number"] for c in assets["children"]], ["1100", "1200"])

    def test_seed_command(self):
        out = StringIO()
        call_command("seed_chart_of_accounts", "--tenant", TENANT, stdout=out)
        self.assertIn("Seeded 38 accounts", out.getvalue())

        out = StringIO()
        call_command("seed_chart_of_accounts", "--tenant", TENANT, stdout=out)
        self.assertIn("Nothing seeded", out.getvalue())
        self.assertEqual(Account.objects.filter(tenant_id=TENANT).count(), 38)
