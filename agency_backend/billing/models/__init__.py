from .counter import DocumentCounter
from .document import BillingDocument
from .invoice import Invoice, InvoiceItem
from .ticket import Ticket

__all__ = [
    "BillingDocument",
    "DocumentCounter",
    "Invoice",
    "InvoiceItem",
    "Ticket",
]
