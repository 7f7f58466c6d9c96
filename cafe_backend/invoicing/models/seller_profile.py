# invoicing/models/seller_profile.py

from django.core.exceptions import ValidationError
from django.db import models


class SellerProfile(models.Model):
    """
    Legal seller identity printed on a tenant's tax invoices.

    Optional: when a tenant has none, the ZATCA_SELLER_NAME / ZATCA_VAT_NUMBER
    settings are used; when neither exists, invoices are issued without a QR.
    """

    tenant_id = models.CharField(max_length=64, unique=True)

    legal_name = models.CharField(max_length=255)
    legal_name_en = models.CharField(max_length=255, blank=True, default="")
    vat_number = models.CharField(max_length=20)
    cr_number = models.CharField(max_length=20, blank=True, default="")
    address = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Seller Profile"
        verbose_name_plural = "Seller Profiles"

    def __str__(self):
        return f"{self.legal_name} ({self.vat_number})"

    def clean(self):
        from invoicing.services.zatca import validate_vat_number

        self.vat_number = "".join((self.vat_number or "").split())
        if not validate_vat_number(self.vat_number):
            raise ValidationError({"vat_number": "VAT number must be 15 digits starting and ending with 3"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
