# ledger/services/exceptions.py

"""
LEDGER SERVICE ERRORS

Centralized domain errors for the party ledger.
"""


class LedgerError(Exception):
    """Base exception for all ledger failures."""


class LedgerValidationError(LedgerError):
    """Raised for malformed ledger requests (zero amount, unknown balance type...)."""


class InsufficientBalanceError(LedgerError):
    """Raised when a debit would take a balance below zero."""

    def __init__(self, message: str, *, available=None, requested=None):
        super().__init__(message)
        self.available = available
        self.requested = requested


class PartyNotFoundError(LedgerError):
    """Raised when the referenced customer/agent/vendor does not exist."""
