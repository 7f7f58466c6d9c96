# accounting/api/serializers/accounts.py

from rest_framework import serializers

from accounting.models.account import Account


class AccountSerializer(serializers.ModelSerializer):
    parent_number = serializers.CharField(source="parent.account_number", read_only=True, default=None)

    class Meta:
        model = Account
        fields = [
            "id",
            "account_number",
            "name_ar",
            "name_en",
            "account_type",
            "normal_balance",
            "parent",
            "parent_number",
            "level",
            "path",
            "opening_balance",
            "current_balance",
            "is_system_account",
            "is_bank_account",
            "is_active",
            "description",
        ]
        read_only_fields = fields


class AccountCreateSerializer(serializers.Serializer):
    account_number = serializers.CharField(max_length=20)
    name_ar = serializers.CharField(max_length=150)
    name_en = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    account_type = serializers.ChoiceField(choices=Account.ACCOUNT_TYPES)
    normal_balance = serializers.ChoiceField(choices=Account.NORMAL_BALANCES, required=False, allow_null=True)
    parent_id = serializers.IntegerField(required=False, allow_null=True)
    opening_balance = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    is_bank_account = serializers.BooleanField(required=False, default=False)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")

    def validate_account_number(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("account_number is required")
        return v
