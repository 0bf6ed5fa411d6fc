# billing/services/exceptions.py

"""
BILLING SERVICE ERRORS

Centralized domain errors for invoice/ticket settlement and issuance.
"""


class BillingError(Exception):
    """Base exception for all billing failures."""


class DraftValidationError(BillingError):
    """
    Raised when a draft is malformed or incomplete.

    Always raised before any write. `errors` maps field -> message.
    """

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = {"non_field_errors": errors}
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))


class IssuanceError(BillingError):
    """Raised when a document cannot be issued after all settlement attempts."""


class InvalidStatusTransitionError(BillingError):
    """Raised when a document status change is not allowed."""
