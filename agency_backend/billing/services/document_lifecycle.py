# billing/services/document_lifecycle.py

"""
DOCUMENT LIFECYCLE DOMAIN RULES

The ONLY allowed status transitions for invoices and tickets.

DESIGN PRINCIPLES:
- Status is the only mutable column of an issued document
- Transitions never touch balances or ledgers
- Single source of truth for both the API and the admin
"""

from __future__ import annotations

import logging

from django.db import transaction

from billing.models import Invoice, Ticket
from billing.services.exceptions import InvalidStatusTransitionError

logger = logging.getLogger("billing")

# ============================================================
# STATE DEFINITIONS
# ============================================================

INVOICE_TERMINAL_STATES = {
    Invoice.STATUS_PAID,
    Invoice.STATUS_CANCELLED,
}

INVOICE_TRANSITIONS = {
    Invoice.STATUS_DRAFT: {Invoice.STATUS_ISSUED, Invoice.STATUS_CANCELLED},
    Invoice.STATUS_ISSUED: {
        Invoice.STATUS_PAID,
        Invoice.STATUS_PARTIAL,
        Invoice.STATUS_CANCELLED,
    },
    Invoice.STATUS_PARTIAL: {Invoice.STATUS_PAID, Invoice.STATUS_CANCELLED},
}

TICKET_TERMINAL_STATES = {
    Ticket.STATUS_CANCELLED,
    Ticket.STATUS_REFUNDED,
}

TICKET_TRANSITIONS = {
    Ticket.STATUS_PENDING: {
        Ticket.STATUS_PROCESSING,
        Ticket.STATUS_APPROVED,
        Ticket.STATUS_ISSUED,
        Ticket.STATUS_CANCELLED,
    },
    Ticket.STATUS_PROCESSING: {
        Ticket.STATUS_APPROVED,
        Ticket.STATUS_ISSUED,
        Ticket.STATUS_CANCELLED,
    },
    Ticket.STATUS_APPROVED: {Ticket.STATUS_ISSUED, Ticket.STATUS_CANCELLED},
    Ticket.STATUS_ISSUED: {
        Ticket.STATUS_USED,
        Ticket.STATUS_CANCELLED,
        Ticket.STATUS_REFUNDED,
    },
    Ticket.STATUS_USED: {Ticket.STATUS_REFUNDED},
}


def _rules_for(document):
    if isinstance(document, Invoice):
        return INVOICE_TRANSITIONS, INVOICE_TERMINAL_STATES
    if isinstance(document, Ticket):
        return TICKET_TRANSITIONS, TICKET_TERMINAL_STATES
    raise TypeError(f"Unsupported document type: {type(document).__name__}")


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, document, to_status: str) -> bool:
    transitions, terminal = _rules_for(document)
    if document.status in terminal:
        return False
    return to_status in transitions.get(document.status, set())


def validate_transition(*, document, target_status: str) -> None:
    if not can_transition(document=document, to_status=target_status):
        raise InvalidStatusTransitionError(
            f"{type(document).__name__} {document.pk} cannot transition from "
            f"'{document.status}' to '{target_status}'"
        )


@transaction.atomic
def change_status(*, document, target_status: str, user=None):
    """Lock the document row, validate, and persist the new status."""
    locked = type(document).objects.select_for_update().get(pk=document.pk)
    validate_transition(document=locked, target_status=target_status)

    previous = locked.status
    locked.status = target_status
    locked.save(update_fields=["status", "updated_at"])

    logger.info(
        "Document status changed",
        extra={
            "document_type": type(locked).__name__.lower(),
            "document_id": str(locked.pk),
            "from_status": previous,
            "to_status": target_status,
            "user_id": str(getattr(user, "pk", "") or ""),
        },
    )
    return locked
