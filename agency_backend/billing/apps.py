# billing/apps.py

"""
BILLING APP CONFIG

Invoices and airline tickets:
- settlement calculator (preview)
- issuance (document + balance draws + ledger rows, atomically)
- status lifecycle
"""

from django.apps import AppConfig


class BillingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "billing"
    verbose_name = "Billing"
