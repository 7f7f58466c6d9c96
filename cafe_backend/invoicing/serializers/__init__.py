# invoicing/serializers/__init__.py

from .invoice import (
    InvoiceCreateSerializer,
    InvoiceFromOrderSerializer,
    InvoiceLineInputSerializer,
    InvoiceLineSerializer,
    InvoiceSerializer,
    InvoiceStatusUpdateSerializer,
)

__all__ = [
    "InvoiceSerializer",
    "InvoiceLineSerializer",
    "InvoiceLineInputSerializer",
    "InvoiceCreateSerializer",
    "InvoiceFromOrderSerializer",
    "InvoiceStatusUpdateSerializer",
]
