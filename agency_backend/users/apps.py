# users/apps.py

"""
USERS APP CONFIG

Back-office staff accounts (custom email-first User).
"""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "users"
    verbose_name = "Users"
