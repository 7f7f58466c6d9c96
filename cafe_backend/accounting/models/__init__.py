# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Do NOT import services from models anywhere (models must stay pure).
"""

from accounting.models.account import Account
from accounting.models.expense import Expense
from accounting.models.fiscal_period import FiscalPeriod
from accounting.models.journal import JournalEntry, ReferenceType
from accounting.models.journal_line import JournalLine
from accounting.models.sequence import DocumentSequence
from accounting.models.vendor import Vendor

__all__ = [
    "Account",
    "JournalEntry",
    "JournalLine",
    "ReferenceType",
    "FiscalPeriod",
    "DocumentSequence",
    "Vendor",
    "Expense",
]
