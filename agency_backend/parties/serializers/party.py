# parties/serializers/party.py

from decimal import Decimal

from rest_framework import serializers

from ledger.services.ledger_service import create_party
from parties.models import Agent, Customer, Vendor

BALANCE_READ_ONLY = {"max_digits": 14, "decimal_places": 2, "read_only": True}


class PartySerializer(serializers.ModelSerializer):
    """
    Party CRUD.

    Balances are read-only here. On create, optional opening_deposit /
    opening_credit are booked through the ledger as "Opening balance".
    """

    opening_deposit = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
        write_only=True,
    )

    deposit_balance = serializers.DecimalField(**BALANCE_READ_ONLY)

    common_fields = [
        "id",
        "name",
        "phone",
        "email",
        "company",
        "address",
        "deposit_balance",
        "opening_deposit",
        "created_at",
        "updated_at",
    ]

    def create(self, validated_data):
        opening_deposit = validated_data.pop("opening_deposit", None) or 0
        opening_credit = validated_data.pop("opening_credit", None) or 0
        return create_party(
            self.Meta.model.party_type,
            validated_data,
            opening_deposit=opening_deposit,
            opening_credit=opening_credit,
        )

    def update(self, instance, validated_data):
        validated_data.pop("opening_deposit", None)
        validated_data.pop("opening_credit", None)
        return super().update(instance, validated_data)


class CustomerSerializer(PartySerializer):
    class Meta:
        model = Customer
        fields = PartySerializer.common_fields
        read_only_fields = ["id", "deposit_balance", "created_at", "updated_at"]


class _CreditPartySerializer(PartySerializer):
    opening_credit = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
        write_only=True,
    )
    credit_balance = serializers.DecimalField(**BALANCE_READ_ONLY)


class AgentSerializer(_CreditPartySerializer):
    class Meta:
        model = Agent
        fields = PartySerializer.common_fields + ["credit_balance", "opening_credit"]
        read_only_fields = ["id", "deposit_balance", "credit_balance", "created_at", "updated_at"]


class VendorSerializer(_CreditPartySerializer):
    airlines = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
    )

    class Meta:
        model = Vendor
        fields = PartySerializer.common_fields + [
            "telephone",
            "logo",
            "airlines",
            "credit_balance",
            "opening_credit",
        ]
        read_only_fields = ["id", "deposit_balance", "credit_balance", "created_at", "updated_at"]
