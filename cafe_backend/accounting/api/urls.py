# accounting/api/urls.py

from django.urls import path

from accounting.api.views import (
    AccountingOverviewView,
    AccountListCreateView,
    AccountTreeView,
    BalanceSheetView,
    ExpenseApproveView,
    ExpenseListCreateView,
    ExpenseRejectView,
    FiscalPeriodCloseView,
    FiscalPeriodListCreateView,
    FiscalPeriodLockView,
    FiscalPeriodUnlockView,
    IncomeStatementView,
    InitializeChartView,
    JournalEntryDetailView,
    JournalEntryListCreateView,
    JournalEntryPostView,
    OrderPostingView,
    TrialBalanceView,
    VendorListCreateView,
)

urlpatterns = [
    # Chart of accounts
    path("accounts/", AccountListCreateView.as_view(), name="accounts"),
    path("accounts/tree/", AccountTreeView.as_view(), name="account-tree"),
    path("accounts/initialize/", InitializeChartView.as_view(), name="accounts-initialize"),
    # Journal
    path("journal-entries/", JournalEntryListCreateView.as_view(), name="journal-entries"),
    path("journal-entries/<int:pk>/", JournalEntryDetailView.as_view(), name="journal-entry-detail"),
    path("journal-entries/<int:pk>/post/", JournalEntryPostView.as_view(), name="journal-entry-post"),
    path("orders/post/", OrderPostingView.as_view(), name="order-posting"),
    # Fiscal periods
    path("fiscal-periods/", FiscalPeriodListCreateView.as_view(), name="fiscal-periods"),
    path("fiscal-periods/<int:pk>/lock/", FiscalPeriodLockView.as_view(), name="fiscal-period-lock"),
    path("fiscal-periods/<int:pk>/unlock/", FiscalPeriodUnlockView.as_view(), name="fiscal-period-unlock"),
    path("fiscal-periods/<int:pk>/close/", FiscalPeriodCloseView.as_view(), name="fiscal-period-close"),
    # Reports
    path("trial-balance/", TrialBalanceView.as_view(), name="trial-balance"),
    path("income-statement/", IncomeStatementView.as_view(), name="income-statement"),
    path("balance-sheet/", BalanceSheetView.as_view(), name="balance-sheet"),
    path("overview/", AccountingOverviewView.as_view(), name="accounting-overview"),
    # Expenses / vendors
    path("expenses/", ExpenseListCreateView.as_view(), name="expenses"),
    path("expenses/<int:pk>/approve/", ExpenseApproveView.as_view(), name="expense-approve"),
    path("expenses/<int:pk>/reject/", ExpenseRejectView.as_view(), name="expense-reject"),
    path("vendors/", VendorListCreateView.as_view(), name="vendors"),
]
