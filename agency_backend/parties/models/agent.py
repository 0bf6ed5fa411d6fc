# parties/models/agent.py

from __future__ import annotations

from decimal import Decimal

from django.db import models

from parties.models.party import BALANCE_CREDIT, BALANCE_DEPOSIT, PARTY_AGENT, Party


class Agent(Party):
    """
    Sub-agent buying on behalf of their own clients.

    deposit_balance: money the agent has pre-paid to the agency
    credit_balance:  credit line the agency extends to the agent
    """

    party_type = PARTY_AGENT
    balance_types = (BALANCE_DEPOSIT, BALANCE_CREDIT)

    credit_balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        editable=False,
        help_text="Credit line extended to the agent. Ledger-managed.",
    )

    class Meta(Party.Meta):
        verbose_name = "Agent"
        verbose_name_plural = "Agents"
