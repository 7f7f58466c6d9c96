# invoicing/tests/test_invoice_service.py

from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from invoicing.models.invoice import Invoice, InvoiceLine
from invoicing.models.seller_profile import SellerProfile
from invoicing.services import zatca
from invoicing.services.exceptions import InvoiceNotFoundError, InvoiceValidationError
from invoicing.services.invoice_service import (
    DEFAULT_CUSTOMER_NAME,
    compute_line,
    create_invoice,
    create_invoice_from_order,
    get_invoice,
    list_invoices,
    update_invoice_status,
)
from sales.models.order import Order, OrderItem

TENANT = "cafe-1"
ISSUED = datetime(2024, 5, 1, 12, 0, tzinfo=dt_timezone.utc)

LINES = [
    {"description": "Latte", "quantity": 2, "unit_price": "20.00", "discount_percent": "10"},
    {"description": "Croissant", "quantity": 1, "unit_price": "10.00"},
]


class ComputeLineTests(TestCase):
    def test_discounted_line(self):
        line = compute_line(quantity=2, unit_price=20, discount_percent=10)
        self.assertEqual(line["discount_amount"], Decimal("4.00"))
        self.assertEqual(line["taxable_amount"], Decimal("36.00"))
        self.assertEqual(line["tax_amount"], Decimal("5.40"))
        self.assertEqual(line["line_total"], Decimal("41.40"))

    def test_per_line_rounding(self):
        line = compute_line(quantity=3, unit_price="0.35")
        self.assertEqual(line["taxable_amount"], Decimal("1.05"))
        self.assertEqual(line["tax_amount"], Decimal("0.16"))
        self.assertEqual(line["line_total"], Decimal("1.21"))

    def test_validation(self):
        for kwargs in (
            {"quantity": 0, "unit_price": 10},
            {"quantity": 1, "unit_price": -1},
            {"quantity": 1, "unit_price": 10, "discount_percent": 101},
            {"quantity": 1, "unit_price": "ten"},
        ):
            with self.subTest(kwargs=kwargs), self.assertRaises(InvoiceValidationError):
                compute_line(**kwargs)

    def test_only_fifteen_percent_vat_is_recognized(self):
        self.assertEqual(compute_line(quantity=1, unit_price=10, tax_rate="15")["tax_amount"], Decimal("1.50"))
        with self.assertRaises(InvoiceValidationError):
            compute_line(quantity=1, unit_price=10, tax_rate=5)


@override_settings(ZATCA_SELLER_NAME="", ZATCA_VAT_NUMBER="")
class InvoiceIssueTests(TestCase):
    """
    GUARANTEES:
    - grand_total == sum(line_total), total_tax == sum(tax_amount)
    - INV-<year>-<6 digits>, gapless per tenant + branch + year
    - Missing seller identity never blocks issue (no QR, warning logged)
    - Issued invoices are tax records: only payment fields move, nothing is deleted
    """

    def test_totals_equal_sum_of_lines(self):
        invoice = create_invoice(tenant_id=TENANT, lines=LINES, invoice_date=ISSUED)

        self.assertEqual(invoice.subtotal, Decimal("50.00"))
        self.assertEqual(invoice.total_discount, Decimal("4.00"))
        self.assertEqual(invoice.total_tax, Decimal("6.90"))
        self.assertEqual(invoice.grand_total, Decimal("52.90"))
        self.assertEqual(invoice.amount_due, Decimal("52.90"))
        self.assertEqual(invoice.status, Invoice.STATUS_ISSUED)
        self.assertEqual(invoice.currency, "SAR")

        lines = list(invoice.lines.all())
        self.assertEqual([line.line_no for line in lines], [1, 2])
        self.assertEqual(sum(line.line_total for line in lines), invoice.grand_total)
        self.assertEqual(sum(line.tax_amount for line in lines), invoice.total_tax)

    def test_numbering_per_branch(self):
        first = create_invoice(tenant_id=TENANT, branch_id="b1", lines=LINES, invoice_date=ISSUED)
        second = create_invoice(tenant_id=TENANT, branch_id="b1", lines=LINES, invoice_date=ISSUED)
        other_branch = create_invoice(tenant_id=TENANT, branch_id="b2", lines=LINES, invoice_date=ISSUED)

        self.assertEqual(first.invoice_number, "INV-2024-000001")
        self.assertEqual(second.invoice_number, "INV-2024-000002")
        self.assertEqual(other_branch.invoice_number, "INV-2024-000001")

    def test_failed_issue_consumes_no_number(self):
        with self.assertRaises(InvoiceValidationError):
            create_invoice(tenant_id=TENANT, lines=[{"description": "Bad", "unit_price": "10", "tax_rate": "5"}])
        invoice = create_invoice(tenant_id=TENANT, lines=LINES, invoice_date=ISSUED)
        self.assertEqual(invoice.invoice_number, "INV-2024-000001")

    def test_requires_lines_and_descriptions(self):
        with self.assertRaises(InvoiceValidationError):
            create_invoice(tenant_id=TENANT, lines=[])
        with self.assertRaises(InvoiceValidationError):
            create_invoice(tenant_id=TENANT, lines=[{"description": " ", "unit_price": "1"}])

    def test_missing_seller_skips_qr_with_warning(self):
        with self.assertLogs("invoicing.services.invoice_service", level="WARNING") as logs:
            invoice = create_invoice(tenant_id=TENANT, lines=LINES, invoice_date=ISSUED)

        self.assertFalse(invoice.has_qr)
        self.assertEqual(invoice.zatca_qr_code, "")
        self.assertIn("without ZATCA QR", logs.output[0])

    def test_qr_from_seller_profile(self):
        SellerProfile.objects.create(tenant_id=TENANT, legal_name="مقهى الرياض", vat_number="300000000000003")

        invoice = create_invoice(tenant_id=TENANT, lines=LINES, invoice_date=ISSUED)

        self.assertTrue(invoice.has_qr)
        self.assertTrue(invoice.zatca_qr_code.startswith("data:image/png;base64,"))
        payload = zatca.decode_tlv(invoice.zatca_hash)
        self.assertEqual(payload.seller_name, "مقهى الرياض")
        self.assertEqual(payload.vat_number, "300000000000003")
        self.assertEqual(payload.timestamp, "2024-05-01T12:00:00.000Z")
        self.assertEqual(payload.total_with_vat, "52.90")
        self.assertEqual(payload.vat_amount, "6.90")

    @override_settings(ZATCA_SELLER_NAME="ACME", ZATCA_VAT_NUMBER="311111111111113")
    def test_qr_from_settings_fallback(self):
        invoice = create_invoice(tenant_id=TENANT, lines=LINES, invoice_date=ISSUED)
        self.assertEqual(invoice.seller_name, "ACME")
        self.assertEqual(zatca.decode_tlv(invoice.zatca_hash).vat_number, "311111111111113")

    def test_oversize_seller_name_is_rejected(self):
        SellerProfile.objects.create(tenant_id=TENANT, legal_name="ACME", vat_number="300000000000003")
        SellerProfile.objects.filter(tenant_id=TENANT).update(legal_name="م" * 200)

        with self.assertRaises(InvoiceValidationError):
            create_invoice(tenant_id=TENANT, lines=LINES, invoice_date=ISSUED)
        self.assertFalse(Invoice.objects.exists())

    @override_settings(TIME_ZONE="Asia/Riyadh")
    def test_naive_invoice_date_is_read_in_local_time(self):
        SellerProfile.objects.create(tenant_id=TENANT, legal_name="ACME", vat_number="300000000000003")

        invoice = create_invoice(tenant_id=TENANT, lines=LINES, invoice_date=datetime(2024, 1, 1, 1, 30))

        # 01:30 in Riyadh is still 2023 in UTC; number and QR agree on the instant
        self.assertEqual(invoice.invoice_number, "INV-2024-000001")
        self.assertEqual(invoice.invoice_date, datetime(2023, 12, 31, 22, 30, tzinfo=dt_timezone.utc))
        self.assertEqual(zatca.decode_tlv(invoice.zatca_hash).timestamp, "2023-12-31T22:30:00.000Z")

    def test_invoice_date_must_be_a_datetime(self):
        with self.assertRaises(InvoiceValidationError):
            create_invoice(tenant_id=TENANT, lines=LINES, invoice_date=date(2024, 1, 1))
        self.assertFalse(Invoice.objects.exists())

    def test_customer_vat_number_sets_standard_type(self):
        b2b = create_invoice(tenant_id=TENANT, lines=LINES, customer_tax_number="300 0000 0000 0003")
        self.assertEqual(b2b.customer_tax_number, "300000000000003")
        self.assertEqual(b2b.zatca_invoice_type, Invoice.ZATCA_STANDARD)

        b2c = create_invoice(tenant_id=TENANT, lines=LINES)
        self.assertEqual(b2c.zatca_invoice_type, Invoice.ZATCA_SIMPLIFIED)

        with self.assertRaises(InvoiceValidationError):
            create_invoice(tenant_id=TENANT, lines=LINES, customer_tax_number="12345")

    def test_invoice_is_a_tax_record(self):
        invoice = create_invoice(tenant_id=TENANT, lines=LINES, invoice_date=ISSUED)

        invoice.notes = "edited"
        with self.assertRaises(ValidationError):
            invoice.save()
        with self.assertRaises(ValidationError):
            invoice.delete()

        line = InvoiceLine.objects.filter(invoice=invoice).first()
        line.description = "edited"
        with self.assertRaises(ValidationError):
            line.save()
        with self.assertRaises(ValidationError):
            line.delete()

    def test_seller_profile_requires_valid_vat_number(self):
        with self.assertRaises(ValidationError):
            SellerProfile.objects.create(tenant_id=TENANT, legal_name="ACME", vat_number="12345")


@override_settings(ZATCA_SELLER_NAME="", ZATCA_VAT_NUMBER="")
class InvoicePaymentTests(TestCase):
    def setUp(self):
        self.invoice = create_invoice(tenant_id=TENANT, lines=LINES, invoice_date=ISSUED)

    def test_partial_then_full_payment(self):
        invoice = update_invoice_status(tenant_id=TENANT, invoice_id=self.invoice.pk, amount_paid="20")
        self.assertEqual(invoice.status, Invoice.STATUS_PARTIALLY_PAID)
        self.assertEqual(invoice.amount_due, Decimal("32.90"))
        self.assertIsNone(invoice.paid_at)

        invoice = update_invoice_status(tenant_id=TENANT, invoice_id=self.invoice.pk, amount_paid="52.90")
        self.assertEqual(invoice.status, Invoice.STATUS_PAID)
        self.assertEqual(invoice.amount_due, Decimal("0.00"))
        self.assertIsNotNone(invoice.paid_at)

    def test_overpayment_leaves_negative_amount_due(self):
        invoice = update_invoice_status(tenant_id=TENANT, invoice_id=self.invoice.pk, amount_paid="60")
        self.assertEqual(invoice.status, Invoice.STATUS_PAID)
        self.assertEqual(invoice.amount_due, Decimal("-7.10"))

    def test_explicit_status(self):
        invoice = update_invoice_status(tenant_id=TENANT, invoice_id=self.invoice.pk, status=Invoice.STATUS_CANCELLED)
        self.assertEqual(invoice.status, Invoice.STATUS_CANCELLED)

        with self.assertRaises(InvoiceValidationError):
            update_invoice_status(tenant_id=TENANT, invoice_id=self.invoice.pk, status="archived")
        with self.assertRaises(InvoiceValidationError):
            update_invoice_status(tenant_id=TENANT, invoice_id=self.invoice.pk, amount_paid="-1")

    def test_other_tenant_cannot_see_invoice(self):
        with self.assertRaises(InvoiceNotFoundError):
            update_invoice_status(tenant_id="cafe-2", invoice_id=self.invoice.pk, amount_paid="1")
        with self.assertRaises(InvoiceNotFoundError):
            get_invoice(tenant_id="cafe-2", invoice_id=self.invoice.pk)
        self.assertEqual(list(list_invoices(tenant_id="cafe-2")), [])

    def test_list_filters(self):
        create_invoice(tenant_id=TENANT, branch_id="b1", lines=LINES, invoice_date=datetime(2024, 7, 1, tzinfo=dt_timezone.utc))
        update_invoice_status(tenant_id=TENANT, invoice_id=self.invoice.pk, amount_paid="52.90")

        self.assertEqual(len(list_invoices(tenant_id=TENANT)), 2)
        self.assertEqual(len(list_invoices(tenant_id=TENANT, branch_id="b1")), 1)
        self.assertEqual(len(list_invoices(tenant_id=TENANT, status=Invoice.STATUS_PAID)), 1)
        self.assertEqual(
            len(list_invoices(tenant_id=TENANT, start_date=datetime(2024, 6, 1).date())),
            1,
        )
        self.assertEqual(len(list_invoices(tenant_id=TENANT, limit=1)), 1)


@override_settings(ZATCA_SELLER_NAME="", ZATCA_VAT_NUMBER="")
class InvoiceFromOrderTests(TestCase):
    def setUp(self):
        self.order = Order.objects.create(
            tenant_id=TENANT,
            branch_id="riyadh-1",
            order_number="ORD-100",
            total_amount=Decimal("34.50"),
            payment_method="card",
        )
        OrderItem.objects.create(order=self.order, name="Latte", quantity=2, unit_price=Decimal("10.00"))
        OrderItem.objects.create(order=self.order, name="Cookie", quantity=1, unit_price=Decimal("10.00"))

    def test_paid_invoice_with_vat_added_to_net_prices(self):
        invoice = create_invoice_from_order(tenant_id=TENANT, order_id=self.order.pk)

        self.assertEqual(invoice.status, Invoice.STATUS_PAID)
        self.assertEqual(invoice.subtotal, Decimal("30.00"))
        self.assertEqual(invoice.total_tax, Decimal("4.50"))
        self.assertEqual(invoice.grand_total, Decimal("34.50"))
        self.assertEqual(invoice.amount_paid, Decimal("34.50"))
        self.assertEqual(invoice.amount_due, Decimal("0.00"))
        self.assertIsNotNone(invoice.paid_at)
        self.assertEqual(invoice.branch_id, "riyadh-1")
        self.assertEqual(invoice.payment_method, "card")
        self.assertEqual(invoice.customer_name, DEFAULT_CUSTOMER_NAME)
        self.assertEqual(invoice.order_id, self.order.pk)
        self.assertEqual(invoice.lines.count(), 2)

    def test_unencodable_seller_drops_qr_but_invoices_order(self):
        SellerProfile.objects.create(tenant_id=TENANT, legal_name="ACME", vat_number="300000000000003")
        SellerProfile.objects.filter(tenant_id=TENANT).update(legal_name="م" * 200)

        with self.assertLogs("invoicing.services.invoice_service", level="WARNING") as logs:
            invoice = create_invoice_from_order(tenant_id=TENANT, order_id=self.order.pk)

        self.assertEqual(invoice.status, Invoice.STATUS_PAID)
        self.assertEqual(invoice.grand_total, Decimal("34.50"))
        self.assertFalse(invoice.has_qr)
        self.assertIn("cannot be encoded", logs.output[0])

    def test_order_is_invoiced_only_once(self):
        create_invoice_from_order(tenant_id=TENANT, order_id=self.order.pk)
        with self.assertRaises(InvoiceValidationError):
            create_invoice_from_order(tenant_id=TENANT, order_id=self.order.pk)

    def test_order_must_be_completed(self):
        pending = Order.objects.create(
            tenant_id=TENANT,
            order_number="ORD-101",
            total_amount=Decimal("11.50"),
            status=Order.STATUS_PENDING,
        )
        OrderItem.objects.create(order=pending, name="Tea", quantity=1, unit_price=Decimal("10.00"))

        with self.assertRaises(InvoiceValidationError):
            create_invoice_from_order(tenant_id=TENANT, order_id=pending.pk)

    def test_unknown_or_foreign_order(self):
        with self.assertRaises(InvoiceNotFoundError):
            create_invoice_from_order(tenant_id="cafe-2", order_id=self.order.pk)
