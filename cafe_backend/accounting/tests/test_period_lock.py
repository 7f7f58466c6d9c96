# accounting/tests/test_period_lock.py

from datetime import date
from decimal import Decimal

from django.test import TestCase

from accounting.models.account import Account
from accounting.models.fiscal_period import FiscalPeriod
from accounting.services.chart_of_accounts import CASH, SALES_REVENUE, initialize_chart_of_accounts
from accounting.services.exceptions import AccountingServiceError
from accounting.services.journal_entry_service import create_journal_entry, post_journal_entry
from accounting.services.period_lock import (
    PeriodLockedError,
    assert_period_open,
    close_period,
    create_fiscal_period,
    is_locked,
    lock_period,
    unlock_period,
)

TENANT = "cafe-1"


class FiscalPeriodGuardTests(TestCase):
    def setUp(self):
        initialize_chart_of_accounts(tenant_id=TENANT)
        self.period = create_fiscal_period(
            tenant_id=TENANT,
            name="January 2024",
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
        )

    def _lines(self):
        return [
            {"account_number": CASH, "debit": "10"},
            {"account_number": SALES_REVENUE, "credit": "10"},
        ]

    def test_dates_outside_any_period_are_open(self):
        self.assertFalse(is_locked(tenant_id=TENANT, on_date=date(2023, 12, 31)))
        assert_period_open(tenant_id=TENANT, on_date=date(2024, 2, 1))

    def test_posting_into_locked_period_fails_then_succeeds_after_unlock(self):
        entry = create_journal_entry(
            tenant_id=TENANT,
            entry_date=date(2024, 1, 15),
            description="January sale",
            lines=self._lines(),
        )
        lock_period(tenant_id=TENANT, period_id=self.period.pk)

        with self.assertRaises(PeriodLockedError):
            post_journal_entry(tenant_id=TENANT, entry_id=entry.pk)

        cash = Account.objects.get(tenant_id=TENANT, account_number=CASH)
        self.assertEqual(cash.current_balance, Decimal("0.00"))

        unlock_period(tenant_id=TENANT, period_id=self.period.pk)
        posted = post_journal_entry(tenant_id=TENANT, entry_id=entry.pk)

        self.assertTrue(posted.is_posted)
        cash.refresh_from_db()
        self.assertEqual(cash.current_balance, Decimal("10.00"))

    def test_auto_post_into_locked_period_creates_nothing(self):
        lock_period(tenant_id=TENANT, period_id=self.period.pk)

        with self.assertRaises(PeriodLockedError):
            create_journal_entry(
                tenant_id=TENANT,
                entry_date=date(2024, 1, 10),
                description="Blocked",
                lines=self._lines(),
                auto_post=True,
            )

    def test_boundaries_are_inclusive(self):
        lock_period(tenant_id=TENANT, period_id=self.period.pk)

        self.assertTrue(is_locked(tenant_id=TENANT, on_date=date(2024, 1, 1)))
        self.assertTrue(is_locked(tenant_id=TENANT, on_date=date(2024, 1, 31)))
        self.assertFalse(is_locked(tenant_id=TENANT, on_date=date(2024, 2, 1)))

    def test_lock_is_tenant_scoped(self):
        lock_period(tenant_id=TENANT, period_id=self.period.pk)
        self.assertFalse(is_locked(tenant_id="cafe-2", on_date=date(2024, 1, 15)))

    def test_closed_period_blocks_and_cannot_be_unlocked(self):
        closed = close_period(tenant_id=TENANT, period_id=self.period.pk)
        self.assertEqual(closed.status, FiscalPeriod.STATUS_CLOSED)
        self.assertTrue(is_locked(tenant_id=TENANT, on_date=date(2024, 1, 20)))

        with self.assertRaises(AccountingServiceError):
            unlock_period(tenant_id=TENANT, period_id=self.period.pk)
        with self.assertRaises(AccountingServiceError):
            close_period(tenant_id=TENANT, period_id=self.period.pk)

    def test_only_open_periods_can_be_locked(self):
        lock_period(tenant_id=TENANT, period_id=self.period.pk)
        with self.assertRaises(AccountingServiceError):
            lock_period(tenant_id=TENANT, period_id=self.period.pk)

    def test_overlapping_or_inverted_periods_are_rejected(self):
        with self.assertRaises(AccountingServiceError):
            create_fiscal_period(
                tenant_id=TENANT,
                name="Overlap",
                start_date=date(2024, 1, 20),
                end_date=date(2024, 2, 10),
            )
        with self.assertRaises(AccountingServiceError):
            create_fiscal_period(
                tenant_id=TENANT,
                name="Backwards",
                start_date=date(2024, 3, 31),
                end_date=date(2024, 3, 1),
            )

    def test_unknown_period_raises(self):
        with self.assertRaises(AccountingServiceError):
            lock_period(tenant_id=TENANT, period_id=999999)
