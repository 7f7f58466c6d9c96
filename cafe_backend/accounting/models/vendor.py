# accounting/models/vendor.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Vendor(models.Model):
    """Supplier master record. Code is unique per tenant."""

    tenant_id = models.CharField(max_length=64, db_index=True)
    code = models.CharField(max_length=32)

    name_ar = models.CharField(max_length=150)
    name_en = models.CharField(max_length=150, blank=True, default="")

    tax_number = models.CharField(max_length=20, blank=True, default="")
    phone = models.CharField(max_length=32, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    country = models.CharField(max_length=2, default="SA")

    bank_name = models.CharField(max_length=100, blank=True, default="")
    iban = models.CharField(max_length=34, blank=True, default="")
    payment_terms = models.CharField(max_length=100, blank=True, default="")
    credit_limit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    current_balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["tenant_id", "name_ar"]
        verbose_name = "Vendor"
        verbose_name_plural = "Vendors"
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "code"],
                name="uniq_vendor_tenant_code",
            ),
        ]

    def __str__(self):
        return f"{self.code} – {self.name_en or self.name_ar}"

    def clean(self):
        self.code = (self.code or "").strip()
        self.name_ar = (self.name_ar or "").strip()
        if not self.code:
            raise ValidationError({"code": "Vendor code is required"})
        if not self.name_ar:
            raise ValidationError({"name_ar": "Vendor name is required"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
