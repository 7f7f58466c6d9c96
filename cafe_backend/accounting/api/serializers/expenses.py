# accounting/api/serializers/expenses.py

from rest_framework import serializers

from accounting.models.expense import Expense


class ExpenseSerializer(serializers.ModelSerializer):
    """
    Output serializer (DB truth) - clean, stable contract.
    """

    expense_account_number = serializers.CharField(source="expense_account.account_number", read_only=True)
    expense_account_name = serializers.CharField(source="expense_account.display_name", read_only=True)
    journal_entry_number = serializers.CharField(
        source="journal_entry.entry_number", read_only=True, default=None
    )

    class Meta:
        model = Expense
        fields = [
            "id",
            "expense_number",
            "expense_date",
            "branch_id",
            "category",
            "description",
            "expense_account",
            "expense_account_number",
            "expense_account_name",
            "amount",
            "tax_amount",
            "total_amount",
            "payment_method",
            "vendor",
            "vendor_name",
            "status",
            "requested_by",
            "approved_by",
            "approved_at",
            "rejected_by",
            "rejected_at",
            "journal_entry",
            "journal_entry_number",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class ExpenseCreateSerializer(serializers.Serializer):
    """
    Input serializer (Swagger-visible).
    """

    expense_date = serializers.DateField(required=False)
    description = serializers.CharField(max_length=255)
    category = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    tax_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)

    expense_account_id = serializers.IntegerField(required=False, allow_null=True)
    expense_account_number = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    payment_method = serializers.ChoiceField(choices=Expense.PAYMENT_METHODS, default=Expense.PAYMENT_CASH)

    vendor_id = serializers.IntegerField(required=False, allow_null=True)
    vendor_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("amount must be > 0")
        return value

    def validate(self, attrs):
        if not attrs.get("expense_account_id") and not (attrs.get("expense_account_number") or "").strip():
            raise serializers.ValidationError("expense_account_id or expense_account_number is required")
        return attrs


class ExpenseDecisionSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")
