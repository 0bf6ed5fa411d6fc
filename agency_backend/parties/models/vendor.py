# parties/models/vendor.py

from __future__ import annotations

from decimal import Decimal

from django.db import models

from parties.models.party import BALANCE_CREDIT, BALANCE_DEPOSIT, PARTY_VENDOR, Party


class Vendor(Party):
    """
    Consolidator / ticketing supplier the agency buys from.

    Balances are the agency's money held with the vendor and may go
    negative when an operator books a manual debit.
    """

    party_type = PARTY_VENDOR
    balance_types = (BALANCE_DEPOSIT, BALANCE_CREDIT)

    telephone = models.CharField(max_length=50, blank=True, default="")
    logo = models.URLField(blank=True, default="")
    airlines = models.JSONField(
        default=list,
        blank=True,
        help_text="Airline codes/names this vendor issues for.",
    )

    credit_balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        editable=False,
        help_text="Credit held with the vendor. Ledger-managed.",
    )

    class Meta(Party.Meta):
        verbose_name = "Vendor"
        verbose_name_plural = "Vendors"
