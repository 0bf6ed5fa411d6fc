# billing/services/numbering.py

"""
DOCUMENT NUMBERING

Sequential, gap-free human numbers: INV-1001, INV-1002 ... / TKT-1001 ...

Must be called inside the issuance transaction: the counter row is
locked until commit, and a rollback returns the number.
"""

from __future__ import annotations

from django.conf import settings

from billing.models import DocumentCounter

SEQUENCE_INVOICE = "invoice"
SEQUENCE_TICKET = "ticket"

_PREFIXES = {
    SEQUENCE_INVOICE: ("INV", "INVOICE_NUMBER_START"),
    SEQUENCE_TICKET: ("TKT", "TICKET_NUMBER_START"),
}


def next_document_number(sequence: str) -> str:
    prefix, start_setting = _PREFIXES[sequence]
    start = int(getattr(settings, start_setting, 1001))

    counter, _ = DocumentCounter.objects.select_for_update().get_or_create(
        name=sequence,
        defaults={"last_value": start - 1},
    )
    counter.last_value += 1
    counter.save(update_fields=["last_value"])

    return f"{prefix}-{counter.last_value}"
