# billing/serializers/ticket.py

from rest_framework import serializers

from billing.models import Ticket


class TicketSerializer(serializers.ModelSerializer):
    """Issued ticket (read-only). Created through the issuance service."""

    party_id = serializers.UUIDField(read_only=True)
    party_name = serializers.CharField(read_only=True)
    vendor_name = serializers.SerializerMethodField()
    invoice_number = serializers.SerializerMethodField()
    profit = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Ticket
        fields = [
            "id",
            "ticket_number",
            "customer_type",
            "party_id",
            "party_name",
            "vendor",
            "vendor_name",
            "invoice",
            "invoice_number",
            "pnr",
            "trip_type",
            "seat_class",
            "route",
            "airlines",
            "flight_number",
            "travel_date",
            "return_date",
            "passenger_name",
            "passenger_names",
            "passenger_count",
            "vendor_price",
            "airline_price",
            "middle_class_price",
            "face_value",
            "profit",
            "deduct_from_deposit",
            "deposit_deducted",
            "use_agent_credit",
            "agent_credit_used",
            "use_vendor_balance",
            "vendor_balance_deducted",
            "amount_due",
            "notes",
            "status",
            "issued_by",
            "created_at",
        ]
        read_only_fields = fields

    def get_vendor_name(self, obj):
        vendor = getattr(obj, "vendor", None)
        return vendor.name if vendor is not None else None

    def get_invoice_number(self, obj):
        invoice = getattr(obj, "invoice", None)
        return invoice.invoice_number if invoice is not None else None
