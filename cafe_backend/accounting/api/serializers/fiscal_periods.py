# accounting/api/serializers/fiscal_periods.py

from rest_framework import serializers

from accounting.models.fiscal_period import FiscalPeriod


class FiscalPeriodSerializer(serializers.ModelSerializer):
    class Meta:
        model = FiscalPeriod
        fields = [
            "id",
            "name",
            "start_date",
            "end_date",
            "status",
            "locked_by",
            "locked_at",
            "created_at",
        ]
        read_only_fields = fields


class FiscalPeriodCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs):
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError("end_date must be >= start_date")
        return attrs
