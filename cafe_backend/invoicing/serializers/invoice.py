# invoicing/serializers/invoice.py

"""
======================================================
PATH: invoicing/serializers/invoice.py
======================================================
INVOICE SERIALIZERS

Output serializers are read-only views of the stored tax record; totals
are never recomputed here. Input serializers only shape the request for
invoice_service, which owns all arithmetic.
"""

from rest_framework import serializers

from invoicing.models import Invoice, InvoiceLine


class InvoiceLineSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceLine
        fields = [
            "line_no",
            "description",
            "quantity",
            "unit_price",
            "discount_percent",
            "discount_amount",
            "taxable_amount",
            "tax_rate",
            "tax_amount",
            "line_total",
        ]
        read_only_fields = fields


class InvoiceSerializer(serializers.ModelSerializer):
    lines = InvoiceLineSerializer(many=True, read_only=True)
    has_qr = serializers.BooleanField(read_only=True)

    class Meta:
        model = Invoice
        fields = [
            "id",
            "invoice_number",
            "invoice_date",
            "branch_id",
            "invoice_type",
            "zatca_invoice_type",
            "status",
            "customer_name",
            "customer_phone",
            "customer_email",
            "customer_tax_number",
            "customer_address",
            "subtotal",
            "total_discount",
            "total_tax",
            "grand_total",
            "amount_paid",
            "amount_due",
            "currency",
            "payment_method",
            "order",
            "notes",
            "seller_name",
            "seller_vat_number",
            "zatca_hash",
            "zatca_qr_code",
            "has_qr",
            "issued_by",
            "issued_at",
            "paid_at",
            "lines",
        ]
        read_only_fields = fields


class InvoiceLineInputSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, default=1)
    unit_price = serializers.DecimalField(max_digits=14, decimal_places=2)
    discount_percent = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        required=False,
        allow_null=True,
        min_value=0,
        max_value=100,
    )
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)


class InvoiceCreateSerializer(serializers.Serializer):
    lines = InvoiceLineInputSerializer(many=True, allow_empty=False)

    customer_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    customer_phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    customer_email = serializers.EmailField(required=False, allow_blank=True, default="")
    customer_tax_number = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    customer_address = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")

    payment_method = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    currency = serializers.CharField(max_length=3, required=False, allow_null=True, default=None)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    invoice_date = serializers.DateTimeField(required=False, allow_null=True, default=None)


class InvoiceFromOrderSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    customer_tax_number = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")


class InvoiceStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Invoice.STATUS_CHOICES, required=False)
    amount_paid = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, min_value=0)

    def validate(self, attrs):
        if "status" not in attrs and "amount_paid" not in attrs:
            raise serializers.ValidationError("status or amount_paid is required")
        return attrs
