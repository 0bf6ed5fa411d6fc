# ledger/apps.py

"""
LEDGER APP CONFIG

Append-only balance transactions for customers, agents and vendors,
plus the only service allowed to move a party balance.
"""

from django.apps import AppConfig


class LedgerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ledger"
    verbose_name = "Ledger"
