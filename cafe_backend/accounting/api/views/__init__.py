# accounting/api/views/__init__.py

"""
accounting.api.views package

Expose public API views cleanly without making routing/imports fragile.

Important:
- Do NOT import accounting.api.urls from here to avoid circular imports.
"""

# Master data
from accounting.api.views.accounts import (
    AccountListCreateView,
    AccountTreeView,
    InitializeChartView,
)
from accounting.api.views.vendors import VendorListCreateView

# Ledger
from accounting.api.views.journal_entries import (
    JournalEntryDetailView,
    JournalEntryListCreateView,
    JournalEntryPostView,
)
from accounting.api.views.fiscal_periods import (
    FiscalPeriodCloseView,
    FiscalPeriodListCreateView,
    FiscalPeriodLockView,
    FiscalPeriodUnlockView,
)
from accounting.api.views.order_posting import OrderPostingView
from accounting.api.views.expenses import (
    ExpenseApproveView,
    ExpenseListCreateView,
    ExpenseRejectView,
)

# Read-only reports
from accounting.api.views.trial_balance import TrialBalanceView
from accounting.api.views.income_statement import IncomeStatementView
from accounting.api.views.balance_sheet import BalanceSheetView
from accounting.api.views.overview import AccountingOverviewView

__all__ = [
    "AccountListCreateView",
    "AccountTreeView",
    "InitializeChartView",
    "VendorListCreateView",
    "JournalEntryListCreateView",
    "JournalEntryDetailView",
    "JournalEntryPostView",
    "FiscalPeriodListCreateView",
    "FiscalPeriodLockView",
    "FiscalPeriodUnlockView",
    "FiscalPeriodCloseView",
    "OrderPostingView",
    "ExpenseListCreateView",
    "ExpenseApproveView",
    "ExpenseRejectView",
    "TrialBalanceView",
    "IncomeStatementView",
    "BalanceSheetView",
    "AccountingOverviewView",
]
