# accounting/tests/test_order_posting.py

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.journal import JournalEntry, ReferenceType
from accounting.services.chart_of_accounts import (
    CASH,
    COGS,
    INVENTORY,
    SALES_REVENUE,
    VAT_PAYABLE,
    initialize_chart_of_accounts,
)
from accounting.services.exceptions import IdempotencyError
from accounting.services.order_posting import (
    PostingResult,
    post_order_journal,
    split_vat_inclusive,
)
from accounting.services.period_lock import PeriodLockedError, create_fiscal_period, lock_period
from sales.models.order import Order, OrderItem

TENANT = "cafe-1"


def _order(**overrides) -> Order:
    data = {
        "tenant_id": TENANT,
        "branch_id": "riyadh-1",
        "order_number": "ORD-1001",
        "total_amount": Decimal("115.00"),
        "cost_of_goods": Decimal("0.00"),
        "payment_method": "cash",
        "status": Order.STATUS_COMPLETED,
        "created_at": timezone.make_aware(datetime(2024, 3, 10, 12, 0)),
    }
    data.update(overrides)
    order = Order.objects.create(**data)
    OrderItem.objects.create(order=order, name="Latte", quantity=1, unit_price=Decimal("100.00"))
    return order


def _balance(number: str) -> Decimal:
    return Account.objects.get(tenant_id=TENANT, account_number=number).current_balance


class SplitVatTests(TestCase):
    def test_split_is_exact(self):
        self.assertEqual(split_vat_inclusive("115.00"), (Decimal("100.00"), Decimal("15.00")))

        net, vat = split_vat_inclusive("10.00")
        self.assertEqual(net, Decimal("8.70"))
        self.assertEqual(vat, Decimal("1.30"))
        self.assertEqual(net + vat, Decimal("10.00"))


class OrderPostingTests(TestCase):
    def setUp(self):
        initialize_chart_of_accounts(tenant_id=TENANT)

    def test_order_posts_three_line_entry(self):
        order = _order()

        result = post_order_journal(tenant_id=TENANT, order_id=order.pk)

        self.assertIsInstance(result, PostingResult)
        self.assertTrue(result.posted)
        entry = result.entry
        self.assertEqual(entry.status, JournalEntry.STATUS_POSTED)
        self.assertTrue(entry.is_auto_posted)
        self.assertEqual(entry.reference_type, ReferenceType.ORDER)
        self.assertEqual(entry.reference_id, str(order.pk))
        self.assertEqual(entry.entry_date, date(2024, 3, 10))

        lines = {line.account_number: line for line in entry.lines.all()}
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[CASH].debit, Decimal("115.00"))
        self.assertEqual(lines[SALES_REVENUE].credit, Decimal("100.00"))
        self.assertEqual(lines[VAT_PAYABLE].credit, Decimal("15.00"))
        self.assertTrue(all(line.branch_id == "riyadh-1" for line in lines.values()))

        self.assertEqual(_balance(CASH), Decimal("115.00"))
        self.assertEqual(_balance(SALES_REVENUE), Decimal("100.00"))
        self.assertEqual(_balance(VAT_PAYABLE), Decimal("15.00"))

    def test_cost_of_goods_adds_cogs_and_inventory_lines(self):
        order = _order(cost_of_goods=Decimal("40.00"))

        result = post_order_journal(tenant_id=TENANT, order_id=order.pk)

        lines = {line.account_number: line for line in result.entry.lines.all()}
        self.assertEqual(len(lines), 5)
        self.assertEqual(lines[COGS].debit, Decimal("40.00"))
        self.assertEqual(lines[INVENTORY].credit, Decimal("40.00"))
        self.assertEqual(result.entry.total_debit, Decimal("155.00"))
        self.assertEqual(_balance(INVENTORY), Decimal("-40.00"))

    def test_cogs_skipped_when_inventory_account_missing(self):
        Account.objects.filter(tenant_id=TENANT, account_number=INVENTORY).update(is_active=False)
        order = _order(cost_of_goods=Decimal("40.00"))

        result = post_order_journal(tenant_id=TENANT, order_id=order.pk)

        self.assertTrue(result.posted)
        self.assertEqual(result.entry.lines.count(), 3)

    def test_missing_accounts_skip_without_raising(self):
        Account.objects.filter(tenant_id=TENANT, account_number=VAT_PAYABLE).update(is_active=False)
        order = _order()

        with self.assertLogs("accounting.services.order_posting", level="WARNING"):
            result = post_order_journal(tenant_id=TENANT, order_id=order.pk)

        self.assertFalse(result.posted)
        self.assertEqual(result.status, PostingResult.STATUS_SKIPPED)
        self.assertEqual(result.reason, PostingResult.REASON_MISSING_ACCOUNTS)
        self.assertEqual(result.detail, VAT_PAYABLE)
        self.assertFalse(JournalEntry.objects.exists())

    def test_unknown_pending_and_zero_orders_are_skipped(self):
        missing = post_order_journal(tenant_id=TENANT, order_id=uuid.uuid4())
        self.assertEqual(missing.reason, PostingResult.REASON_ORDER_NOT_FOUND)

        pending = _order(order_number="ORD-2", status=Order.STATUS_PENDING)
        self.assertEqual(
            post_order_journal(tenant_id=TENANT, order_id=pending.pk).reason,
            PostingResult.REASON_ORDER_NOT_COMPLETED,
        )

        free = _order(order_number="ORD-3", total_amount=Decimal("0.00"))
        self.assertEqual(
            post_order_journal(tenant_id=TENANT, order_id=free.pk).reason,
            PostingResult.REASON_NOTHING_TO_POST,
        )

    def test_other_tenant_cannot_post_order(self):
        order = _order()
        result = post_order_journal(tenant_id="cafe-2", order_id=order.pk)
        self.assertEqual(result.reason, PostingResult.REASON_ORDER_NOT_FOUND)

    @override_settings(ACCOUNTING_ORDER_POSTING_ENABLED=False)
    def test_disabled_posting_is_skipped(self):
        order = _order()
        result = post_order_journal(tenant_id=TENANT, order_id=order.pk)
        self.assertEqual(result.reason, PostingResult.REASON_DISABLED)

    def test_order_is_posted_once(self):
        order = _order()
        post_order_journal(tenant_id=TENANT, order_id=order.pk)

        with self.assertRaises(IdempotencyError):
            post_order_journal(tenant_id=TENANT, order_id=order.pk)

        self.assertEqual(_balance(CASH), Decimal("115.00"))

    def test_locked_period_raises(self):
        period = create_fiscal_period(
            tenant_id=TENANT,
            name="March 2024",
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 31),
        )
        lock_period(tenant_id=TENANT, period_id=period.pk)
        order = _order()

        with self.assertRaises(PeriodLockedError):
            post_order_journal(tenant_id=TENANT, order_id=order.pk)

    def test_completed_order_financials_are_frozen(self):
        order = _order()
        order.total_amount = Decimal("1.00")
        with self.assertRaises(ValueError):
            order.save()
