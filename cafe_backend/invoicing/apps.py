# invoicing/apps.py

"""
INVOICING APP CONFIG

Tax invoices (ZATCA phase-1 QR) issued per tenant + branch.
"""

from django.apps import AppConfig


class InvoicingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "invoicing"
    verbose_name = "Invoicing"
