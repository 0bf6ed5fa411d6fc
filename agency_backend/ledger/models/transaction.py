# ledger/models/transaction.py

"""
======================================================
PATH: ledger/models/transaction.py
======================================================
PARTY BALANCE TRANSACTIONS

One row per balance mutation, per party type:
- CustomerTransaction (deposit only)
- AgentTransaction    (deposit | credit)
- VendorTransaction   (deposit | credit)

Guarantees:
- Immutable once created (no updates, no deletes)
- Amount is always positive; direction is via entry_type
- balance_after is the party balance right after this row
- Replay order is (created_at, id)
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from parties.models import BALANCE_CREDIT, BALANCE_DEPOSIT, BALANCE_TYPE_CHOICES


class BalanceTransaction(models.Model):
    CREDIT = "credit"
    DEBIT = "debit"

    ENTRY_TYPES = [
        (CREDIT, "Credit"),
        (DEBIT, "Debit"),
    ]

    PAYMENT_CASH = "cash"
    PAYMENT_CHEQUE = "cheque"
    PAYMENT_BANK_TRANSFER = "bank_transfer"

    PAYMENT_METHODS = [
        (PAYMENT_CASH, "Cash"),
        (PAYMENT_CHEQUE, "Cheque"),
        (PAYMENT_BANK_TRANSFER, "Bank transfer"),
    ]

    # Name of the FK to the owning party on concrete subclasses.
    party_field: str = ""
    allowed_balance_types: tuple[str, ...] = (BALANCE_DEPOSIT, BALANCE_CREDIT)

    entry_type = models.CharField(max_length=6, choices=ENTRY_TYPES)

    balance_type = models.CharField(
        max_length=10,
        choices=BALANCE_TYPE_CHOICES,
        default=BALANCE_DEPOSIT,
    )

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text="Positive monetary value",
    )

    description = models.CharField(max_length=255, blank=True, default="")

    payment_method = models.CharField(
        max_length=20,
        choices=PAYMENT_METHODS,
        default=PAYMENT_CASH,
    )

    reference_type = models.CharField(
        max_length=30,
        blank=True,
        default="",
        help_text="What caused this row, e.g. invoice / ticket / manual / opening",
    )
    reference_id = models.CharField(max_length=64, blank=True, default="")

    balance_after = models.DecimalField(max_digits=14, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.entry_type} {self.amount} {self.balance_type} → {self.balance_after}"

    @property
    def party_id(self):
        return getattr(self, f"{self.party_field}_id")

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.entry_type == self.CREDIT else -self.amount

    def clean(self):
        if self.entry_type not in (self.CREDIT, self.DEBIT):
            raise ValidationError("Invalid entry_type")

        if self.balance_type not in self.allowed_balance_types:
            raise ValidationError(
                f"{type(self).__name__} does not support balance_type '{self.balance_type}'"
            )

        if self.amount is None or self.amount <= 0:
            raise ValidationError("Transaction amount must be > 0")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError(f"{type(self).__name__} records are immutable and cannot be modified")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(f"{type(self).__name__} records are immutable and cannot be deleted")


class CustomerTransaction(BalanceTransaction):
    party_field = "customer"
    allowed_balance_types = (BALANCE_DEPOSIT,)

    customer = models.ForeignKey(
        "parties.Customer",
        on_delete=models.PROTECT,
        related_name="transactions",
    )

    class Meta(BalanceTransaction.Meta):
        verbose_name = "Customer Transaction"
        verbose_name_plural = "Customer Transactions"
        indexes = [
            models.Index(fields=["customer", "balance_type", "created_at"], name="ledger_cust_party_idx"),
            models.Index(fields=["created_at"], name="ledger_cust_created_idx"),
        ]


class AgentTransaction(BalanceTransaction):
    party_field = "agent"

    agent = models.ForeignKey(
        "parties.Agent",
        on_delete=models.PROTECT,
        related_name="transactions",
    )

    class Meta(BalanceTransaction.Meta):
        verbose_name = "Agent Transaction"
        verbose_name_plural = "Agent Transactions"
        indexes = [
            models.Index(fields=["agent", "balance_type", "created_at"], name="ledger_agent_party_idx"),
            models.Index(fields=["created_at"], name="ledger_agent_created_idx"),
        ]


class VendorTransaction(BalanceTransaction):
    party_field = "vendor"

    vendor = models.ForeignKey(
        "parties.Vendor",
        on_delete=models.PROTECT,
        related_name="transactions",
    )

    class Meta(BalanceTransaction.Meta):
        verbose_name = "Vendor Transaction"
        verbose_name_plural = "Vendor Transactions"
        indexes = [
            models.Index(fields=["vendor", "balance_type", "created_at"], name="ledger_vendor_party_idx"),
            models.Index(fields=["created_at"], name="ledger_vendor_created_idx"),
        ]
