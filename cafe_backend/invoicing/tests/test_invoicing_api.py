# invoicing/tests/test_invoicing_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from invoicing.models.seller_profile import SellerProfile
from sales.models.order import Order, OrderItem

User = get_user_model()

TENANT = "cafe-1"
BASE = "/api/invoicing/invoices"

LINES = [
    {"description": "Latte", "quantity": "2", "unit_price": "20.00", "discount_percent": "10"},
    {"description": "Croissant", "unit_price": "10.00"},
]


@override_settings(ZATCA_SELLER_NAME="", ZATCA_VAT_NUMBER="")
class InvoiceApiTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_superuser(username="owner", password="pass", email="owner@example.com")
        self.client = APIClient()
        self.client.force_authenticate(self.admin)
        self.client.credentials(HTTP_X_TENANT_ID=TENANT)

    def _issue(self, **extra):
        return self.client.post(BASE + "/", {"lines": LINES, **extra}, format="json")

    def test_issue_and_retrieve(self):
        response = self._issue(customer_name="Noura", invoice_date="2024-05-01T12:00:00Z")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["invoice_number"], "INV-2024-000001")
        self.assertEqual(response.data["grand_total"], "52.90")
        self.assertEqual(response.data["total_tax"], "6.90")
        self.assertEqual(response.data["status"], "issued")
        self.assertFalse(response.data["has_qr"])
        self.assertEqual(len(response.data["lines"]), 2)

        detail = self.client.get(f"{BASE}/{response.data['id']}/")
        self.assertEqual(detail.status_code, 200)
        self.assertEqual(detail.data["customer_name"], "Noura")

    def test_branch_header_scopes_numbering(self):
        first = self._issue(invoice_date="2024-05-01T12:00:00Z")
        other = self.client.post(
            BASE + "/",
            {"lines": LINES, "invoice_date": "2024-05-01T12:00:00Z"},
            format="json",
            HTTP_X_BRANCH_ID="b2",
        )
        self.assertEqual(first.data["invoice_number"], "INV-2024-000001")
        self.assertEqual(other.data["invoice_number"], "INV-2024-000001")
        self.assertEqual(other.data["branch_id"], "b2")

    def test_validation_errors(self):
        self.assertEqual(self.client.post(BASE + "/", {"lines": []}, format="json").status_code, 400)

        bad_rate = self.client.post(
            BASE + "/",
            {"lines": [{"description": "Tea", "unit_price": "5", "tax_rate": "5"}]},
            format="json",
        )
        self.assertEqual(bad_rate.status_code, 400)

        bad_vat = self._issue(customer_tax_number="12345")
        self.assertEqual(bad_vat.status_code, 400)

    def test_list_and_filters(self):
        self._issue(invoice_date="2024-05-01T12:00:00Z")
        self._issue(invoice_date="2024-07-01T12:00:00Z")

        self.assertEqual(len(self.client.get(BASE + "/").data), 2)
        self.assertEqual(len(self.client.get(BASE + "/", {"start_date": "2024-06-01"}).data), 1)
        self.assertEqual(len(self.client.get(BASE + "/", {"limit": "1"}).data), 1)
        self.assertEqual(self.client.get(BASE + "/", {"limit": "many"}).status_code, 400)

    def test_status_update(self):
        invoice_id = self._issue().data["id"]

        partial = self.client.post(f"{BASE}/{invoice_id}/status/", {"amount_paid": "20.00"}, format="json")
        self.assertEqual(partial.status_code, 200)
        self.assertEqual(partial.data["status"], "partially_paid")
        self.assertEqual(partial.data["amount_due"], "32.90")

        self.assertEqual(self.client.post(f"{BASE}/{invoice_id}/status/", {}, format="json").status_code, 400)
        self.assertEqual(self.client.post(f"{BASE}/999999/status/", {"status": "paid"}, format="json").status_code, 404)

    def test_from_order(self):
        order = Order.objects.create(tenant_id=TENANT, order_number="ORD-1", total_amount=Decimal("23.00"))
        OrderItem.objects.create(order=order, name="Latte", quantity=2, unit_price=Decimal("10.00"))

        response = self.client.post(BASE + "/from-order/", {"order_id": str(order.pk)}, format="json")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], "paid")
        self.assertEqual(response.data["grand_total"], "23.00")

        again = self.client.post(BASE + "/from-order/", {"order_id": str(order.pk)}, format="json")
        self.assertEqual(again.status_code, 400)

        missing = self.client.post(
            BASE + "/from-order/",
            {"order_id": "00000000-0000-0000-0000-000000000000"},
            format="json",
        )
        self.assertEqual(missing.status_code, 404)

    def test_qr_endpoint(self):
        without_qr = self._issue().data["id"]
        self.assertEqual(self.client.get(f"{BASE}/{without_qr}/qr/").status_code, 404)

        SellerProfile.objects.create(tenant_id=TENANT, legal_name="ACME", vat_number="300000000000003")
        with_qr = self._issue(invoice_date="2024-05-01T12:00:00Z").data["id"]

        response = self.client.get(f"{BASE}/{with_qr}/qr/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["seller_name"], "ACME")
        self.assertEqual(response.data["timestamp"], "2024-05-01T12:00:00.000Z")
        self.assertEqual(response.data["total_with_vat"], "52.90")
        self.assertEqual(response.data["vat_amount"], "6.90")
        self.assertIn("<svg", response.data["svg"])

    def test_tenant_isolation(self):
        invoice_id = self._issue().data["id"]

        other = APIClient()
        other.force_authenticate(self.admin)
        other.credentials(HTTP_X_TENANT_ID="cafe-2")
        self.assertEqual(other.get(f"{BASE}/{invoice_id}/").status_code, 404)
        self.assertEqual(other.get(BASE + "/").data, [])

        no_tenant = APIClient()
        no_tenant.force_authenticate(self.admin)
        self.assertEqual(no_tenant.get(BASE + "/").status_code, 400)

    def test_action_permissions(self):
        clerk = User.objects.create_user(username="clerk", password="pass")
        clerk.user_permissions.add(Permission.objects.get(codename="view_invoice"))
        client = APIClient()
        client.force_authenticate(clerk)
        client.credentials(HTTP_X_TENANT_ID=TENANT)

        self.assertEqual(client.get(BASE + "/").status_code, 200)
        self.assertEqual(client.post(BASE + "/", {"lines": LINES}, format="json").status_code, 403)

        anonymous = APIClient()
        anonymous.credentials(HTTP_X_TENANT_ID=TENANT)
        self.assertIn(anonymous.get(BASE + "/").status_code, (401, 403))
