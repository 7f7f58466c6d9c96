# accounting/api/serializers/vendors.py

from rest_framework import serializers

from accounting.models.vendor import Vendor


class VendorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vendor
        fields = [
            "id",
            "code",
            "name_ar",
            "name_en",
            "tax_number",
            "phone",
            "email",
            "address",
            "city",
            "country",
            "bank_name",
            "iban",
            "payment_terms",
            "credit_limit",
            "current_balance",
            "is_active",
            "created_at",
        ]
        read_only_fields = ("id", "country", "current_balance", "is_active", "created_at")
