# ledger/serializers/transaction.py

from decimal import Decimal

from rest_framework import serializers

from ledger.models import BalanceTransaction
from parties.models import BALANCE_TYPE_CHOICES, PARTY_TYPES


class BalanceTransactionSerializer(serializers.Serializer):
    """
    Read-only ledger row, shared by customer/agent/vendor transactions.
    """

    id = serializers.IntegerField(read_only=True)
    party_type = serializers.SerializerMethodField()
    party_id = serializers.UUIDField(read_only=True)
    party_name = serializers.SerializerMethodField()
    entry_type = serializers.CharField(read_only=True)
    balance_type = serializers.CharField(read_only=True)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    signed_amount = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    description = serializers.CharField(read_only=True)
    payment_method = serializers.CharField(read_only=True)
    reference_type = serializers.CharField(read_only=True)
    reference_id = serializers.CharField(read_only=True)
    balance_after = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    created_at = serializers.DateTimeField(read_only=True)

    def get_party_type(self, obj) -> str:
        return obj.party_field

    def get_party_name(self, obj) -> str:
        party = getattr(obj, obj.party_field, None)
        return getattr(party, "name", "")


class TransactionInputSerializer(serializers.Serializer):
    """Manual ledger entry (top-up, refund, correction)."""

    party_type = serializers.ChoiceField(choices=PARTY_TYPES)
    party_id = serializers.UUIDField()
    balance_type = serializers.ChoiceField(choices=[c[0] for c in BALANCE_TYPE_CHOICES])
    entry_type = serializers.ChoiceField(choices=[c[0] for c in BalanceTransaction.ENTRY_TYPES])
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    description = serializers.CharField(max_length=255, allow_blank=True, default="")
    payment_method = serializers.ChoiceField(
        choices=[c[0] for c in BalanceTransaction.PAYMENT_METHODS],
        default=BalanceTransaction.PAYMENT_CASH,
    )


class TransactionQuerySerializer(serializers.Serializer):
    party_type = serializers.ChoiceField(choices=PARTY_TYPES)
    party_id = serializers.UUIDField(required=False)
    balance_type = serializers.ChoiceField(
        choices=[c[0] for c in BALANCE_TYPE_CHOICES], required=False
    )
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get("start"), attrs.get("end")
        if start and end and end < start:
            raise serializers.ValidationError({"end": "end must be on or after start."})
        return attrs


class LedgerResetSerializer(serializers.Serializer):
    confirm = serializers.BooleanField()
    party_types = serializers.ListField(
        child=serializers.ChoiceField(choices=PARTY_TYPES),
        required=False,
        allow_empty=True,
    )

    def validate_confirm(self, value):
        if not value:
            raise serializers.ValidationError("Set confirm=true to reset ledgers.")
        return value
