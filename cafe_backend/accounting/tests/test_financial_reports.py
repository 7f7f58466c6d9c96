# accounting/tests/test_financial_reports.py

from datetime import date
from decimal import Decimal

from django.test import TestCase

from accounting.services.balance_service import BASIS_REPLAY
from accounting.services.balance_sheet_service import generate_balance_sheet
from accounting.services.chart_of_accounts import (
    CAPITAL,
    CASH,
    COGS,
    INVENTORY,
    SALES_REVENUE,
    VAT_PAYABLE,
    initialize_chart_of_accounts,
)
from accounting.services.exceptions import AccountingServiceError
from accounting.services.journal_entry_service import create_journal_entry
from accounting.services.overview_service import get_dashboard_summary
from accounting.services.profit_and_loss_service import get_income_statement
from accounting.services.trial_balance_service import TrialBalanceService

TENANT = "cafe-1"


class FinancialReportTests(TestCase):
    def setUp(self):
        initialize_chart_of_accounts(tenant_id=TENANT)

        create_journal_entry(
            tenant_id=TENANT,
            entry_date=date(2024, 1, 1),
            description="Owner capital",
            lines=[
                {"account_number": CASH, "debit": "1000"},
                {"account_number": CAPITAL, "credit": "1000"},
            ],
            auto_post=True,
        )
        create_journal_entry(
            tenant_id=TENANT,
            entry_date=date(2024, 2, 10),
            description="February sales",
            lines=[
                {"account_number": CASH, "debit": "115", "branch_id": "b1"},
                {"account_number": SALES_REVENUE, "credit": "100", "branch_id": "b1"},
                {"account_number": VAT_PAYABLE, "credit": "15", "branch_id": "b1"},
                {"account_number": COGS, "debit": "30", "branch_id": "b1"},
                {"account_number": INVENTORY, "credit": "30", "branch_id": "b1"},
            ],
            auto_post=True,
        )
        create_journal_entry(
            tenant_id=TENANT,
            entry_date=date(2024, 2, 12),
            description="Rent",
            lines=[
                {"account_number": "5220", "debit": "50", "branch_id": "b2"},
                {"account_number": CASH, "credit": "50", "branch_id": "b2"},
            ],
            auto_post=True,
        )
        # draft entries never reach reports
        create_journal_entry(
            tenant_id=TENANT,
            entry_date=date(2024, 2, 15),
            description="Draft",
            lines=[
                {"account_number": CASH, "debit": "999"},
                {"account_number": SALES_REVENUE, "credit": "999"},
            ],
        )

    def test_trial_balance_is_balanced(self):
        report = TrialBalanceService().generate(tenant_id=TENANT)

        self.assertEqual(report["basis"], "current")
        self.assertTrue(report["totals"]["balanced"])
        self.assertEqual(report["totals"]["debit_minor"], report["totals"]["credit_minor"])

        rows = {r["account_number"]: r for r in report["accounts"]}
        self.assertEqual(rows[CASH]["debit"], 1065.0)
        self.assertEqual(rows[CASH]["debit_minor"], 106500)
        self.assertEqual(rows[SALES_REVENUE]["credit"], 100.0)
        self.assertEqual(len(rows), 38)

    def test_trial_balance_replay_respects_as_of(self):
        report = TrialBalanceService().generate(tenant_id=TENANT, as_of=date(2024, 1, 31), basis=BASIS_REPLAY)

        rows = {r["account_number"]: r for r in report["accounts"]}
        self.assertEqual(rows[CASH]["debit"], 1000.0)
        self.assertEqual(rows[SALES_REVENUE]["credit"], 0.0)
        self.assertTrue(report["totals"]["balanced"])

    def test_unknown_basis_is_rejected(self):
        with self.assertRaises(AccountingServiceError):
            TrialBalanceService().generate(tenant_id=TENANT, basis="magic")
        with self.assertRaises(AccountingServiceError):
            generate_balance_sheet(tenant_id=TENANT, basis="magic")

    def test_income_statement(self):
        report = get_income_statement(
            tenant_id=TENANT,
            start_date=date(2024, 2, 1),
            end_date=date(2024, 2, 29),
        )

        self.assertEqual(report["total_revenue"], 100.0)
        self.assertEqual(report["cogs"], 30.0)
        self.assertEqual(report["gross_profit"], 70.0)
        self.assertEqual(report["total_expenses"], 50.0)
        self.assertEqual(report["net_income"], 20.0)
        self.assertEqual(report["net_income_minor"], 2000)
        self.assertEqual([r["account_number"] for r in report["expenses"]], ["5220"])

    def test_income_statement_branch_filter(self):
        report = get_income_statement(
            tenant_id=TENANT,
            start_date=date(2024, 2, 1),
            end_date=date(2024, 2, 29),
            branch_id="b2",
        )
        self.assertEqual(report["total_revenue"], 0.0)
        self.assertEqual(report["net_income"], -50.0)

    def test_income_statement_rejects_inverted_range(self):
        with self.assertRaises(AccountingServiceError):
            get_income_statement(tenant_id=TENANT, start_date=date(2024, 3, 1), end_date=date(2024, 2, 1))

    def test_balance_sheet_lists_non_zero_leaf_accounts(self):
        report = generate_balance_sheet(tenant_id=TENANT, as_of_date=date(2024, 12, 31))

        assets = {r["account_number"]: r["balance"] for r in report["assets"]}
        self.assertEqual(assets, {CASH: 1065.0, INVENTORY: -30.0})
        self.assertEqual(report["totals"]["liabilities"], 15.0)
        # capital (3100) sits at level 2, above the leaf cut-off
        self.assertEqual(report["equity"], [])
        self.assertEqual(report["totals"]["equity"], 0.0)
        self.assertEqual(report["as_of_date"], "2024-12-31")

    def test_dashboard_summary(self):
        summary = get_dashboard_summary(
            tenant_id=TENANT,
            start_date=date(2024, 1, 1),
            end_date=date(2024, 12, 31),
        )

        self.assertEqual(summary["total_revenue"], 100.0)
        self.assertEqual(summary["total_expenses"], 80.0)
        self.assertEqual(summary["net_income"], 20.0)
        self.assertEqual(summary["cash_balance"], 1065.0)
        self.assertEqual(summary["accounts_payable"], 0.0)
        self.assertEqual(summary["pending_expenses"], 0)
        self.assertEqual(summary["invoice_count"], 0)
        self.assertEqual(summary["cash_balance_minor"], 106500)

        self.assertIsInstance(summary["total_revenue"], float)
        self.assertNotIsInstance(summary["cash_balance"], Decimal)
