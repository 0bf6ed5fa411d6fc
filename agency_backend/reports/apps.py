# reports/apps.py

"""
REPORTS APP CONFIG

Read-only projections over invoices, tickets and party ledgers.
"""

from django.apps import AppConfig


class ReportsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "reports"
    verbose_name = "Reports"
