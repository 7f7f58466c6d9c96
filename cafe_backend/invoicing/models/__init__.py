# invoicing/models/__init__.py

from invoicing.models.invoice import Invoice, InvoiceLine
from invoicing.models.seller_profile import SellerProfile

__all__ = [
    "Invoice",
    "InvoiceLine",
    "SellerProfile",
]
