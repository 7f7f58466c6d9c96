# sales/models/order.py

import uuid
from decimal import Decimal

from django.db import models
from django.utils import timezone


class Order(models.Model):
    """
    A completed cafe order as handed to accounting and invoicing.

    Order intake, kitchen flow and delivery live outside this project; this
    record is the inbound contract they write.

    GUARANTEES:
    - Financial fields are frozen once the order is completed
    - cost_of_goods is pre-computed upstream (recipe costing is a black box)
    """

    STATUS_PENDING = "pending"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant_id = models.CharField(max_length=64, db_index=True)
    branch_id = models.CharField(max_length=64, blank=True, default="")

    order_number = models.CharField(max_length=32)

    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Amount paid by the customer, VAT inclusive.",
    )
    cost_of_goods = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Pre-computed cost of goods sold for this order.",
    )

    payment_method = models.CharField(
        max_length=32,
        default="cash",
        help_text="cash/pos/qahwa-card/...",
    )

    customer_name = models.CharField(max_length=150, blank=True, default="")
    customer_phone = models.CharField(max_length=32, blank=True, default="")

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_COMPLETED)

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tenant_id", "created_at"], name="order_tenant_created_idx"),
            models.Index(fields=["tenant_id", "order_number"], name="order_tenant_number_idx"),
        ]

    _FROZEN_FIELDS = ("total_amount", "cost_of_goods", "payment_method", "tenant_id", "branch_id")

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Order.objects.filter(pk=self.pk).first()
            if previous is not None and previous.status == self.STATUS_COMPLETED:
                for field in self._FROZEN_FIELDS:
                    if getattr(self, field) != getattr(previous, field):
                        raise ValueError(
                            f"Order is immutable once completed. Field '{field}' cannot be changed."
                        )
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.order_number} | {self.total_amount}"


class OrderItem(models.Model):
    """Line snapshot of an order (name + price as sold)."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )

    name = models.CharField(max_length=150)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} x{self.quantity}"
