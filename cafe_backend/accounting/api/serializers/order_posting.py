# accounting/api/serializers/order_posting.py

from rest_framework import serializers


class OrderPostingSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
