# ledger/admin.py

from django.contrib import admin

from ledger.models import AgentTransaction, CustomerTransaction, VendorTransaction

# ============================================================
# PARTY LEDGERS (READ-ONLY)
# ============================================================


class BalanceTransactionAdmin(admin.ModelAdmin):
    party_field = ""

    list_filter = ("entry_type", "balance_type", "payment_method", "reference_type")
    search_fields = ("description", "reference_id")
    ordering = ("-created_at",)

    def get_list_display(self, request):
        return (
            "created_at",
            self.party_field,
            "entry_type",
            "balance_type",
            "amount",
            "balance_after",
            "payment_method",
            "reference_type",
            "description",
        )

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(CustomerTransaction)
class CustomerTransactionAdmin(BalanceTransactionAdmin):
    party_field = "customer"


@admin.register(AgentTransaction)
class AgentTransactionAdmin(BalanceTransactionAdmin):
    party_field = "agent"


@admin.register(VendorTransaction)
class VendorTransactionAdmin(BalanceTransactionAdmin):
    party_field = "vendor"
