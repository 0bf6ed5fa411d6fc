# billing/models/document.py

"""
======================================================
PATH: billing/models/document.py
======================================================
BILLING DOCUMENT BASE

Shared columns for invoices and tickets: who is billed, who issued it,
lifecycle status.

GUARANTEES:
- Financial record: every column except status is frozen after insert
- Status changes go through billing.services.document_lifecycle
- Instances are never deleted (cancel instead)
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from parties.models import PARTY_AGENT, PARTY_CUSTOMER

User = settings.AUTH_USER_MODEL

ZERO = Decimal("0.00")


def money_field(**kwargs):
    kwargs.setdefault("default", ZERO)
    return models.DecimalField(max_digits=14, decimal_places=2, **kwargs)


class BillingDocument(models.Model):
    CUSTOMER_TYPE_CHOICES = [
        (PARTY_CUSTOMER, "Customer"),
        (PARTY_AGENT, "Agent"),
    ]

    VENDOR_BALANCE_CHOICES = [
        ("none", "None"),
        ("credit", "Credit"),
        ("deposit", "Deposit"),
    ]

    MUTABLE_FIELDS = ("status", "updated_at")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    customer_type = models.CharField(
        max_length=10,
        choices=CUSTOMER_TYPE_CHOICES,
        default=PARTY_CUSTOMER,
    )

    customer = models.ForeignKey(
        "parties.Customer",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="%(class)ss",
    )
    agent = models.ForeignKey(
        "parties.Agent",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="%(class)ss",
    )

    issued_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="issued_%(class)ss",
    )

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    # --------------------------------------------------
    # Helpers
    # --------------------------------------------------

    @property
    def party(self):
        return self.agent if self.customer_type == PARTY_AGENT else self.customer

    @property
    def party_id(self):
        return self.agent_id if self.customer_type == PARTY_AGENT else self.customer_id

    @property
    def party_name(self) -> str:
        party = self.party
        return party.name if party is not None else ""

    # --------------------------------------------------
    # Integrity
    # --------------------------------------------------

    def clean(self):
        if self.customer_type == PARTY_AGENT:
            if not self.agent_id or self.customer_id:
                raise ValidationError("Agent documents must reference exactly one agent.")
        elif self.customer_type == PARTY_CUSTOMER:
            if not self.customer_id or self.agent_id:
                raise ValidationError("Customer documents must reference exactly one customer.")
        else:
            raise ValidationError(f"Invalid customer_type '{self.customer_type}'")

    def _validate_immutable(self, previous) -> None:
        for f in self._meta.concrete_fields:
            if f.name in self.MUTABLE_FIELDS:
                continue
            if f.value_from_object(self) != f.value_from_object(previous):
                raise ValidationError(
                    f"{type(self).__name__} is immutable once issued. "
                    f"Field '{f.name}' cannot be changed."
                )

    def save(self, *args, **kwargs):
        if not self._state.adding:
            previous = type(self).objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)
        else:
            self.clean()

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            f"{type(self).__name__} records cannot be deleted; cancel them instead."
        )
