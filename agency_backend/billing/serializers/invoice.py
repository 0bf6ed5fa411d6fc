# billing/serializers/invoice.py

from rest_framework import serializers

from billing.models import Invoice, InvoiceItem


class InvoiceItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceItem
        fields = ["id", "position", "description", "quantity", "unit_price", "line_total"]
        read_only_fields = fields


class InvoiceSerializer(serializers.ModelSerializer):
    """Issued invoice (read-only). Created through the issuance service."""

    items = InvoiceItemSerializer(many=True, read_only=True)
    party_id = serializers.UUIDField(read_only=True)
    party_name = serializers.CharField(read_only=True)
    vendor_name = serializers.CharField(source="vendor.name", read_only=True)
    issued_by_email = serializers.SerializerMethodField()
    profit_margin = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Invoice
        fields = [
            "id",
            "invoice_number",
            "customer_type",
            "party_id",
            "party_name",
            "vendor",
            "vendor_name",
            "items",
            "subtotal",
            "discount_percent",
            "discount_amount",
            "use_deposit",
            "deposit_used",
            "use_agent_credit",
            "agent_credit_used",
            "vendor_cost",
            "use_vendor_balance",
            "vendor_balance_deducted",
            "total",
            "profit_margin",
            "payment_method",
            "notes",
            "status",
            "issued_by",
            "issued_by_email",
            "created_at",
        ]
        read_only_fields = fields

    def get_issued_by_email(self, obj):
        user = getattr(obj, "issued_by", None)
        return getattr(user, "email", None)
