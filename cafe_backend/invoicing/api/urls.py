# invoicing/api/urls.py

"""
INVOICING API URLS

    GET  /api/invoicing/invoices/                 list
    POST /api/invoicing/invoices/                 issue standalone invoice
    POST /api/invoicing/invoices/from-order/      issue invoice for a completed order
    GET  /api/invoicing/invoices/<id>/            retrieve
    POST /api/invoicing/invoices/<id>/status/     payment / status update
    GET  /api/invoicing/invoices/<id>/qr/         decoded QR payload + SVG
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from invoicing.api.viewsets.invoice import InvoiceViewSet

router = DefaultRouter()
router.register(r"invoices", InvoiceViewSet, basename="invoices")

urlpatterns = [
    path("", include(router.urls)),
]
