# parties/models/customer.py

from __future__ import annotations

from parties.models.party import BALANCE_DEPOSIT, PARTY_CUSTOMER, Party


class Customer(Party):
    """Walk-in or corporate traveller. Carries a deposit balance only."""

    party_type = PARTY_CUSTOMER
    balance_types = (BALANCE_DEPOSIT,)

    class Meta(Party.Meta):
        verbose_name = "Customer"
        verbose_name_plural = "Customers"
