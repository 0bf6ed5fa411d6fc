# parties/apps.py

"""
PARTIES APP CONFIG

Customers, agents and vendors with their deposit/credit balances.
Balance columns are written only by the ledger app.
"""

from django.apps import AppConfig


class PartiesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "parties"
    verbose_name = "Parties"
