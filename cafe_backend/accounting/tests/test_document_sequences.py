# accounting/tests/test_document_sequences.py

from datetime import date

from django.test import TestCase

from accounting.models.sequence import DocumentSequence
from accounting.services.chart_of_accounts import CASH, SALES_REVENUE, initialize_chart_of_accounts
from accounting.services.exceptions import SequenceAllocationError, UnbalancedEntryError
from accounting.services.journal_entry_service import create_journal_entry
from accounting.services.sequence_service import (
    format_number,
    next_document_number,
    next_value,
)

TENANT = "cafe-1"


class DocumentSequenceTests(TestCase):
    def test_numbers_are_sequential_and_zero_padded(self):
        numbers = [
            next_document_number(tenant_id=TENANT, kind=DocumentSequence.KIND_JOURNAL_ENTRY, year=2024)
            for _ in range(3)
        ]
        self.assertEqual(numbers, ["JE-2024-000001", "JE-2024-000002", "JE-2024-000003"])

    def test_counters_are_scoped_by_year_tenant_branch_and_kind(self):
        kind = DocumentSequence.KIND_INVOICE
        self.assertEqual(next_value(tenant_id=TENANT, kind=kind, year=2024, branch_id="b1"), 1)
        self.assertEqual(next_value(tenant_id=TENANT, kind=kind, year=2024, branch_id="b1"), 2)
        self.assertEqual(next_value(tenant_id=TENANT, kind=kind, year=2024, branch_id="b2"), 1)
        self.assertEqual(next_value(tenant_id=TENANT, kind=kind, year=2025, branch_id="b1"), 1)
        self.assertEqual(next_value(tenant_id="cafe-2", kind=kind, year=2024, branch_id="b1"), 1)
        self.assertEqual(next_value(tenant_id=TENANT, kind=DocumentSequence.KIND_EXPENSE, year=2024), 1)

    def test_format(self):
        self.assertEqual(format_number(kind=DocumentSequence.KIND_INVOICE, year=2024, value=42), "INV-2024-000042")
        self.assertEqual(format_number(kind=DocumentSequence.KIND_EXPENSE, year=2025, value=7), "EXP-2025-000007")

    def test_unknown_kind_and_missing_tenant_raise(self):
        with self.assertRaises(SequenceAllocationError):
            next_value(tenant_id=TENANT, kind="receipt", year=2024)
        with self.assertRaises(SequenceAllocationError):
            next_value(tenant_id="", kind=DocumentSequence.KIND_INVOICE, year=2024)

    def test_failed_entry_does_not_consume_a_number(self):
        initialize_chart_of_accounts(tenant_id=TENANT)

        with self.assertRaises(UnbalancedEntryError):
            create_journal_entry(
                tenant_id=TENANT,
                entry_date=date(2024, 5, 1),
                description="Unbalanced",
                lines=[
                    {"account_number": CASH, "debit": "5"},
                    {"account_number": SALES_REVENUE, "credit": "4"},
                ],
            )

        entry = create_journal_entry(
            tenant_id=TENANT,
            entry_date=date(2024, 5, 1),
            description="Balanced",
            lines=[
                {"account_number": CASH, "debit": "5"},
                {"account_number": SALES_REVENUE, "credit": "5"},
            ],
        )
        self.assertEqual(entry.entry_number, "JE-2024-000001")

    def test_entry_year_follows_entry_date(self):
        initialize_chart_of_accounts(tenant_id=TENANT)
        entry = create_journal_entry(
            tenant_id=TENANT,
            entry_date=date(2023, 12, 31),
            description="Year end",
            lines=[
                {"account_number": CASH, "debit": "1"},
                {"account_number": SALES_REVENUE, "credit": "1"},
            ],
        )
        self.assertEqual(entry.entry_number, "JE-2023-000001")
