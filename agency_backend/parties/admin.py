# parties/admin.py

"""
PARTIES ADMIN

Balances are shown but never editable here; they move only through the
ledger (manual entries via the API or billing draws).
"""

from django.contrib import admin

from parties.models import Agent, Customer, Vendor


class PartyAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "phone", "email", "deposit_balance", "created_at")
    search_fields = ("name", "company", "phone", "email")
    ordering = ("name",)
    readonly_fields = ("deposit_balance", "created_at", "updated_at")


@admin.register(Customer)
class CustomerAdmin(PartyAdmin):
    pass


@admin.register(Agent)
class AgentAdmin(PartyAdmin):
    list_display = PartyAdmin.list_display[:-1] + ("credit_balance", "created_at")
    readonly_fields = ("deposit_balance", "credit_balance", "created_at", "updated_at")


@admin.register(Vendor)
class VendorAdmin(PartyAdmin):
    list_display = PartyAdmin.list_display[:-1] + ("credit_balance", "created_at")
    readonly_fields = ("deposit_balance", "credit_balance", "created_at", "updated_at")

    fieldsets = (
        ("Identity", {"fields": ("name", "company", "logo", "airlines")}),
        ("Contact", {"fields": ("phone", "telephone", "email", "address")}),
        ("Balances (ledger-managed)", {"fields": ("deposit_balance", "credit_balance")}),
        ("System Fields", {"fields": ("created_at", "updated_at")}),
    )
