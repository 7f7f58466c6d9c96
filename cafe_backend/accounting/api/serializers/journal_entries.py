# accounting/api/serializers/journal_entries.py

from decimal import Decimal

from rest_framework import serializers

from accounting.models.journal import JournalEntry, ReferenceType
from accounting.models.journal_line import JournalLine


class JournalLineSerializer(serializers.ModelSerializer):
    class Meta:
        model = JournalLine
        fields = [
            "line_no",
            "account",
            "account_number",
            "account_name",
            "debit",
            "credit",
            "description",
            "branch_id",
            "cost_center_id",
        ]
        read_only_fields = fields


class JournalEntrySerializer(serializers.ModelSerializer):
    lines = JournalLineSerializer(many=True, read_only=True)

    class Meta:
        model = JournalEntry
        fields = [
            "id",
            "entry_number",
            "entry_date",
            "description",
            "total_debit",
            "total_credit",
            "is_balanced",
            "status",
            "is_auto_posted",
            "reference_type",
            "reference_id",
            "created_by",
            "posted_by",
            "posted_at",
            "created_at",
            "lines",
        ]
        read_only_fields = fields


class JournalLineInputSerializer(serializers.Serializer):
    account_id = serializers.IntegerField(required=False)
    account_number = serializers.CharField(required=False)
    debit = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, default=Decimal("0.00"))
    credit = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, default=Decimal("0.00"))
    description = serializers.CharField(required=False, allow_blank=True, default="")
    branch_id = serializers.CharField(required=False, allow_blank=True, default="")
    cost_center_id = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if not attrs.get("account_id") and not (attrs.get("account_number") or "").strip():
            raise serializers.ValidationError("Each line needs account_id or account_number")
        return attrs


class JournalEntryCreateSerializer(serializers.Serializer):
    entry_date = serializers.DateField(required=False)
    description = serializers.CharField()
    lines = JournalLineInputSerializer(many=True)
    reference_type = serializers.ChoiceField(choices=ReferenceType.choices, required=False, allow_null=True)
    reference_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    auto_post = serializers.BooleanField(required=False, default=False)

    def validate_lines(self, value):
        if not value:
            raise serializers.ValidationError("At least one line is required")
        return value
