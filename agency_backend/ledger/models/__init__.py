from parties.models import PARTY_AGENT, PARTY_CUSTOMER, PARTY_VENDOR

from .transaction import (
    AgentTransaction,
    BalanceTransaction,
    CustomerTransaction,
    VendorTransaction,
)

TRANSACTION_MODELS = {
    PARTY_CUSTOMER: CustomerTransaction,
    PARTY_AGENT: AgentTransaction,
    PARTY_VENDOR: VendorTransaction,
}

__all__ = [
    "AgentTransaction",
    "BalanceTransaction",
    "CustomerTransaction",
    "TRANSACTION_MODELS",
    "VendorTransaction",
]
