# billing/admin.py

"""
BILLING ADMIN

Invoices and tickets are issued through the API only (the ledger draws
happen there). Admin is for looking, not editing.
"""

from django.contrib import admin

from billing.models import DocumentCounter, Invoice, InvoiceItem, Ticket


class ReadOnlyAdminMixin:
    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class InvoiceItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = InvoiceItem
    extra = 0
    ordering = ("position",)


@admin.register(Invoice)
class InvoiceAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "invoice_number",
        "customer_type",
        "customer",
        "agent",
        "vendor",
        "total",
        "status",
        "created_at",
    )
    list_filter = ("status", "customer_type", "payment_method")
    search_fields = ("invoice_number", "customer__name", "agent__name", "vendor__name")
    ordering = ("-created_at",)
    inlines = [InvoiceItemInline]


@admin.register(Ticket)
class TicketAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "ticket_number",
        "pnr",
        "route",
        "customer_type",
        "face_value",
        "amount_due",
        "status",
        "created_at",
    )
    list_filter = ("status", "customer_type", "trip_type", "seat_class")
    search_fields = ("ticket_number", "pnr", "route", "passenger_name")
    ordering = ("-created_at",)


@admin.register(DocumentCounter)
class DocumentCounterAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("name", "last_value")
