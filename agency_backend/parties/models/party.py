# parties/models/party.py

"""
======================================================
PATH: parties/models/party.py
======================================================
PARTY BASE MODEL

Shared identity + balance columns for customers, agents and vendors.

GUARANTEES:
- Balances start at zero (opening balances are booked through the ledger)
- save() never writes a balance column on an existing row
- Balances change ONLY via ledger.services.ledger_service.apply_delta,
  which writes the column with a queryset update() next to a ledger row
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


PARTY_CUSTOMER = "customer"
PARTY_AGENT = "agent"
PARTY_VENDOR = "vendor"

PARTY_TYPES = (PARTY_CUSTOMER, PARTY_AGENT, PARTY_VENDOR)

BALANCE_DEPOSIT = "deposit"
BALANCE_CREDIT = "credit"

BALANCE_TYPE_CHOICES = [
    (BALANCE_DEPOSIT, "Deposit"),
    (BALANCE_CREDIT, "Credit"),
]

ZERO = Decimal("0.00")


class PartyBalanceError(ValidationError):
    """Raised when code tries to write a balance column outside the ledger."""


class Party(models.Model):
    party_type: str = ""
    balance_types: tuple[str, ...] = (BALANCE_DEPOSIT,)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    company = models.CharField(max_length=255, blank=True, default="")
    address = models.TextField(blank=True, default="")

    deposit_balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=ZERO,
        editable=False,
        help_text="Money the party has pre-paid. Ledger-managed.",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["name"]

    def __str__(self):
        return self.name

    @classmethod
    def balance_field(cls, balance_type: str) -> str:
        if balance_type not in cls.balance_types:
            raise PartyBalanceError(
                f"{cls.party_type or cls.__name__} has no '{balance_type}' balance."
            )
        return f"{balance_type}_balance"

    @classmethod
    def balance_field_names(cls) -> list[str]:
        return [f"{bt}_balance" for bt in cls.balance_types]

    def get_balance(self, balance_type: str) -> Decimal:
        return getattr(self, self.balance_field(balance_type))

    def _validate_balances(self) -> None:
        if self._state.adding:
            for field in self.balance_field_names():
                if Decimal(getattr(self, field) or 0) != ZERO:
                    raise PartyBalanceError(
                        f"{field} must start at zero; book opening balances through the ledger."
                    )
            return

        stored = (
            type(self)
            .objects.filter(pk=self.pk)
            .values(*self.balance_field_names())
            .first()
        )
        if stored is None:
            return

        for field, value in stored.items():
            if Decimal(getattr(self, field)) != value:
                raise PartyBalanceError(
                    f"{field} is ledger-managed and cannot be edited directly."
                )

    def save(self, *args, **kwargs):
        self._validate_balances()

        if not self._state.adding and kwargs.get("update_fields") is None:
            balance_fields = set(self.balance_field_names())
            kwargs["update_fields"] = [
                f.name
                for f in self._meta.concrete_fields
                if not f.primary_key and f.name not in balance_fields
            ]

        super().save(*args, **kwargs)
