from .party import (
    BALANCE_CREDIT,
    BALANCE_DEPOSIT,
    BALANCE_TYPE_CHOICES,
    PARTY_AGENT,
    PARTY_CUSTOMER,
    PARTY_TYPES,
    PARTY_VENDOR,
    Party,
    PartyBalanceError,
)
from .customer import Customer
from .agent import Agent
from .vendor import Vendor

PARTY_MODELS = {
    PARTY_CUSTOMER: Customer,
    PARTY_AGENT: Agent,
    PARTY_VENDOR: Vendor,
}

__all__ = [
    "BALANCE_CREDIT",
    "BALANCE_DEPOSIT",
    "BALANCE_TYPE_CHOICES",
    "PARTY_AGENT",
    "PARTY_CUSTOMER",
    "PARTY_MODELS",
    "PARTY_TYPES",
    "PARTY_VENDOR",
    "Party",
    "PartyBalanceError",
    "Customer",
    "Agent",
    "Vendor",
]
