# billing/serializers/settlement.py

from rest_framework import serializers

from billing.models import Invoice, Ticket
from billing.services.settlement import VENDOR_BALANCE_NONE, VENDOR_BALANCE_SOURCES
from parties.models import PARTY_AGENT, PARTY_CUSTOMER

MONEY = {"max_digits": 14, "decimal_places": 2}


class LineItemInputSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(min_value=0, **MONEY)


class InvoiceDraftSerializer(serializers.Serializer):
    """
    Invoice draft as submitted by the UI.

    Only inputs are accepted; derived money fields (subtotal, total,
    deposit_used...) are always recomputed server-side.
    """

    customer_type = serializers.ChoiceField(
        choices=[PARTY_CUSTOMER, PARTY_AGENT], default=PARTY_CUSTOMER
    )
    party_id = serializers.UUIDField(required=False, allow_null=True)
    vendor_id = serializers.UUIDField(required=False, allow_null=True)

    items = LineItemInputSerializer(many=True, allow_empty=False)

    discount_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, default=0
    )
    use_deposit = serializers.BooleanField(default=False)
    use_agent_credit = serializers.BooleanField(default=False)

    vendor_cost = serializers.DecimalField(min_value=0, default=0, **MONEY)
    use_vendor_balance = serializers.ChoiceField(
        choices=VENDOR_BALANCE_SOURCES, default=VENDOR_BALANCE_NONE
    )

    payment_method = serializers.ChoiceField(
        choices=[c[0] for c in Invoice.PAYMENT_METHOD_CHOICES],
        default=Invoice.PAYMENT_CASH,
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class TicketDraftSerializer(serializers.Serializer):
    customer_type = serializers.ChoiceField(
        choices=[PARTY_CUSTOMER, PARTY_AGENT], default=PARTY_CUSTOMER
    )
    party_id = serializers.UUIDField(required=False, allow_null=True)
    vendor_id = serializers.UUIDField(required=False, allow_null=True)
    invoice_id = serializers.UUIDField(required=False, allow_null=True)

    pnr = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    trip_type = serializers.ChoiceField(
        choices=[c[0] for c in Ticket.TRIP_TYPE_CHOICES], default=Ticket.TRIP_ONE_WAY
    )
    seat_class = serializers.ChoiceField(
        choices=[c[0] for c in Ticket.SEAT_CLASS_CHOICES], default="economy"
    )
    route = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    airlines = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    flight_number = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    travel_date = serializers.DateField(required=False, allow_null=True)
    return_date = serializers.DateField(required=False, allow_null=True)
    passenger_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    passenger_names = serializers.ListField(
        child=serializers.CharField(max_length=255), required=False, default=list
    )
    passenger_count = serializers.IntegerField(min_value=1, required=False)

    vendor_price = serializers.DecimalField(min_value=0, default=0, **MONEY)
    airline_price = serializers.DecimalField(min_value=0, default=0, **MONEY)
    middle_class_price = serializers.DecimalField(min_value=0, default=0, **MONEY)
    face_value = serializers.DecimalField(min_value=0, required=False, allow_null=True, **MONEY)

    deduct_from_deposit = serializers.BooleanField(default=False)
    use_agent_credit = serializers.BooleanField(default=False)
    use_vendor_balance = serializers.ChoiceField(
        choices=VENDOR_BALANCE_SOURCES, default=VENDOR_BALANCE_NONE
    )

    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        travel, back = attrs.get("travel_date"), attrs.get("return_date")
        if travel and back and back < travel:
            raise serializers.ValidationError({"return_date": "Return date is before travel date."})
        return attrs


class SettlementResultSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(**MONEY)
    discount_percent = serializers.DecimalField(max_digits=5, decimal_places=2)
    discount_amount = serializers.DecimalField(**MONEY)
    deposit_used = serializers.DecimalField(**MONEY)
    agent_credit_used = serializers.DecimalField(**MONEY)
    total = serializers.DecimalField(**MONEY)
    vendor_cost = serializers.DecimalField(**MONEY)
    vendor_balance_deducted = serializers.DecimalField(**MONEY)
    profit_margin = serializers.DecimalField(**MONEY)
    line_totals = serializers.ListField(child=serializers.DecimalField(**MONEY))


class StatusChangeSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=12)
