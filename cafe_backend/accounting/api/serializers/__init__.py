# accounting/api/serializers/__init__.py

from accounting.api.serializers.accounts import AccountCreateSerializer, AccountSerializer
from accounting.api.serializers.expenses import (
    ExpenseCreateSerializer,
    ExpenseDecisionSerializer,
    ExpenseSerializer,
)
from accounting.api.serializers.fiscal_periods import (
    FiscalPeriodCreateSerializer,
    FiscalPeriodSerializer,
)
from accounting.api.serializers.journal_entries import (
    JournalEntryCreateSerializer,
    JournalEntrySerializer,
    JournalLineSerializer,
)
from accounting.api.serializers.order_posting import OrderPostingSerializer
from accounting.api.serializers.vendors import VendorSerializer

__all__ = [
    "AccountSerializer",
    "AccountCreateSerializer",
    "JournalEntrySerializer",
    "JournalEntryCreateSerializer",
    "JournalLineSerializer",
    "FiscalPeriodSerializer",
    "FiscalPeriodCreateSerializer",
    "ExpenseSerializer",
    "ExpenseCreateSerializer",
    "ExpenseDecisionSerializer",
    "VendorSerializer",
    "OrderPostingSerializer",
]
