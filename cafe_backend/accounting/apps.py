# accounting/apps.py

"""
ACCOUNTING APP CONFIG

Double-entry ledger:
- Chart of accounts (per tenant)
- Journal engine + fiscal period guard
- Financial reports
- Expenses / vendors
"""

from django.apps import AppConfig


class AccountingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "accounting"
    verbose_name = "Accounting"
