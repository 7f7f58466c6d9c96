# sales/apps.py

"""
SALES APP CONFIG

Completed cafe orders: the inbound contract for ledger posting and invoicing.
"""

from django.apps import AppConfig


class SalesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "sales"
    verbose_name = "Sales"
