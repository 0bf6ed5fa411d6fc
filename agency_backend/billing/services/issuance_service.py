# billing/services/issuance_service.py

"""
======================================================
PATH: billing/services/issuance_service.py
======================================================
INVOICE / TICKET ISSUANCE (APPLICATION SERVICE)

Purpose:
- Turn a submitted draft into an issued Invoice or Ticket.
- Draw deposit / agent credit / vendor balance as the settlement
  calculator decides, through the ledger service only.

Hard rules:
- Draft is validated before any write.
- Client-computed money fields are ignored; settlement is recomputed
  from row-locked balances.
- Parties are locked in a fixed order: customer/agent, then vendor.
- Document + items + balance draws + ledger rows commit together or
  roll back together.
- A balance drained between lock and draw (InsufficientBalanceError)
  triggers a full recompute with the current balances; draws shrink,
  issuance is never blocked by a balance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import transaction

from billing.models import Invoice, InvoiceItem, Ticket
from billing.services.exceptions import DraftValidationError, IssuanceError
from billing.services.numbering import (
    SEQUENCE_INVOICE,
    SEQUENCE_TICKET,
    next_document_number,
)
from billing.services.settlement import (
    VENDOR_BALANCE_NONE,
    AvailableBalances,
    SettlementDraft,
    SettlementResult,
    compute_settlement,
    invoice_draft,
    ticket_draft,
    ticket_face_value,
    validate_draft,
)
from ledger.services.exceptions import InsufficientBalanceError, PartyNotFoundError
from ledger.services.ledger_service import apply_delta, get_party
from parties.models import (
    BALANCE_CREDIT,
    BALANCE_DEPOSIT,
    PARTY_AGENT,
    PARTY_VENDOR,
)

logger = logging.getLogger("billing")

REFERENCE_INVOICE = "invoice"
REFERENCE_TICKET = "ticket"


def _max_attempts() -> int:
    return max(1, int(getattr(settings, "BILLING_MAX_ISSUE_ATTEMPTS", 2)))


# ==========================================================
# PARTIES + BALANCES
# ==========================================================


@dataclass(frozen=True)
class _Parties:
    party_type: str
    party: object
    vendor: object | None


def _load_parties(*, party_type: str, party_id, vendor_id, for_update: bool) -> _Parties:
    errors: dict[str, str] = {}
    party = vendor = None

    if party_id:
        try:
            party = get_party(party_type, party_id, for_update=for_update)
        except PartyNotFoundError:
            errors["party_id"] = f"{party_type.capitalize()} not found."

    if vendor_id:
        try:
            vendor = get_party(PARTY_VENDOR, vendor_id, for_update=for_update)
        except PartyNotFoundError:
            errors["vendor_id"] = "Vendor not found."

    if errors:
        raise DraftValidationError(errors)

    return _Parties(party_type=party_type, party=party, vendor=vendor)


def _available_balances(parties: _Parties) -> AvailableBalances:
    party, vendor = parties.party, parties.vendor
    return AvailableBalances(
        deposit=party.deposit_balance if party is not None else 0,
        agent_credit=(
            party.credit_balance
            if party is not None and parties.party_type == PARTY_AGENT
            else 0
        ),
        vendor_credit=vendor.credit_balance if vendor is not None else 0,
        vendor_deposit=vendor.deposit_balance if vendor is not None else 0,
    )


# ==========================================================
# VALIDATION
# ==========================================================


def _validate_invoice_payload(payload: dict) -> SettlementDraft:
    errors: dict[str, str] = {}
    draft = invoice_draft(payload)

    if not payload.get("party_id"):
        errors["party_id"] = "A customer or agent is required."
    if not payload.get("vendor_id"):
        errors["vendor_id"] = "A vendor is required."

    try:
        validate_draft(draft)
    except DraftValidationError as exc:
        errors.update(exc.errors)

    if errors:
        raise DraftValidationError(errors)
    return draft


def _validate_ticket_payload(payload: dict) -> SettlementDraft:
    errors: dict[str, str] = {}
    draft = ticket_draft(payload)

    if not payload.get("party_id"):
        errors["party_id"] = "A customer or agent is required."

    if (
        draft.vendor_balance_source != VENDOR_BALANCE_NONE
        and not payload.get("vendor_id")
    ):
        errors["use_vendor_balance"] = "A vendor is required to draw a vendor balance."

    for name in ("vendor_price", "airline_price", "middle_class_price", "face_value"):
        value = payload.get(name)
        try:
            if value not in (None, "") and Decimal(str(value)) < 0:
                errors[name] = "Cannot be negative."
        except InvalidOperation:
            errors[name] = "Must be a number."

    try:
        validate_draft(draft)
    except DraftValidationError as exc:
        errors.update(exc.errors)

    if errors:
        raise DraftValidationError(errors)
    return draft


# ==========================================================
# BALANCE DRAWS
# ==========================================================


def _draw_balances(
    *,
    label: str,
    reference_type: str,
    document,
    parties: _Parties,
    result: SettlementResult,
    vendor_balance_source: str,
) -> None:
    """One apply_delta (debit) per non-zero deduction."""
    draws = []

    if result.deposit_used > 0:
        draws.append(
            (parties.party_type, parties.party.pk, BALANCE_DEPOSIT, result.deposit_used,
             f"{label} - Deposit used for payment")
        )

    if result.agent_credit_used > 0:
        draws.append(
            (parties.party_type, parties.party.pk, BALANCE_CREDIT, result.agent_credit_used,
             f"{label} - Credit used for payment")
        )

    if result.vendor_balance_deducted > 0:
        draws.append(
            (PARTY_VENDOR, parties.vendor.pk, vendor_balance_source, result.vendor_balance_deducted,
             f"{label} - {vendor_balance_source.capitalize()} used for vendor payment")
        )

    for party_type, party_id, balance_type, amount, description in draws:
        apply_delta(
            party_type=party_type,
            party_id=party_id,
            balance_type=balance_type,
            amount=-amount,
            description=description,
            reference_type=reference_type,
            reference_id=document.pk,
        )


def _issue_with_retry(kind: str, attempt_fn):
    attempts = _max_attempts()
    last_exc = None

    for attempt in range(1, attempts + 1):
        try:
            with transaction.atomic():
                return attempt_fn()
        except InsufficientBalanceError as exc:
            last_exc = exc
            logger.warning(
                "Balance changed during issuance; recomputing",
                extra={
                    "document_type": kind,
                    "attempt": attempt,
                    "available": str(exc.available),
                    "requested": str(exc.requested),
                },
            )

    raise IssuanceError(
        f"Could not issue {kind} after {attempts} settlement attempts"
    ) from last_exc


def _party_fk(party_type: str, party) -> dict:
    if party_type == PARTY_AGENT:
        return {"agent": party, "customer": None}
    return {"customer": party, "agent": None}


# ==========================================================
# PREVIEW (no writes)
# ==========================================================


def _preview(payload: dict, draft: SettlementDraft) -> SettlementResult:
    validate_draft(draft)
    parties = _load_parties(
        party_type=draft.party_type,
        party_id=payload.get("party_id"),
        vendor_id=payload.get("vendor_id"),
        for_update=False,
    )
    return compute_settlement(draft, _available_balances(parties))


def preview_invoice(*, draft: dict) -> SettlementResult:
    """Live settlement preview against current (unlocked) balances."""
    return _preview(draft, invoice_draft(draft))


def preview_ticket(*, draft: dict) -> SettlementResult:
    return _preview(draft, ticket_draft(draft))


# ==========================================================
# ISSUE INVOICE
# ==========================================================


def issue_invoice(*, draft: dict, user=None) -> Invoice:
    settlement_draft = _validate_invoice_payload(draft)

    def attempt() -> Invoice:
        parties = _load_parties(
            party_type=settlement_draft.party_type,
            party_id=draft["party_id"],
            vendor_id=draft["vendor_id"],
            for_update=True,
        )
        result = compute_settlement(settlement_draft, _available_balances(parties))

        invoice = Invoice.objects.create(
            invoice_number=next_document_number(SEQUENCE_INVOICE),
            customer_type=settlement_draft.party_type,
            **_party_fk(settlement_draft.party_type, parties.party),
            vendor=parties.vendor,
            subtotal=result.subtotal,
            discount_percent=result.discount_percent,
            discount_amount=result.discount_amount,
            use_deposit=settlement_draft.use_deposit,
            deposit_used=result.deposit_used,
            use_agent_credit=(
                settlement_draft.use_agent_credit
                and settlement_draft.party_type == PARTY_AGENT
            ),
            agent_credit_used=result.agent_credit_used,
            vendor_cost=result.vendor_cost,
            use_vendor_balance=settlement_draft.vendor_balance_source,
            vendor_balance_deducted=result.vendor_balance_deducted,
            total=result.total,
            payment_method=draft.get("payment_method") or Invoice.PAYMENT_CASH,
            notes=draft.get("notes") or "",
            status=Invoice.STATUS_ISSUED,
            issued_by=user if getattr(user, "pk", None) else None,
        )

        InvoiceItem.objects.bulk_create(
            [
                InvoiceItem(
                    invoice=invoice,
                    position=idx,
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=line_total,
                )
                for idx, (item, line_total) in enumerate(
                    zip(settlement_draft.items, result.line_totals)
                )
            ]
        )

        _draw_balances(
            label=f"Invoice {invoice.invoice_number}",
            reference_type=REFERENCE_INVOICE,
            document=invoice,
            parties=parties,
            result=result,
            vendor_balance_source=settlement_draft.vendor_balance_source,
        )
        return invoice

    invoice = _issue_with_retry(REFERENCE_INVOICE, attempt)

    logger.info(
        "Invoice issued",
        extra={
            "invoice_id": str(invoice.pk),
            "invoice_number": invoice.invoice_number,
            "total": str(invoice.total),
            "deposit_used": str(invoice.deposit_used),
            "agent_credit_used": str(invoice.agent_credit_used),
            "vendor_balance_deducted": str(invoice.vendor_balance_deducted),
        },
    )
    return invoice


# ==========================================================
# ISSUE TICKET
# ==========================================================


def issue_ticket(*, draft: dict, user=None) -> Ticket:
    settlement_draft = _validate_ticket_payload(draft)

    linked_invoice = None
    invoice_id = draft.get("invoice_id")
    if invoice_id:
        linked_invoice = Invoice.objects.filter(pk=invoice_id).first()
        if linked_invoice is None:
            raise DraftValidationError({"invoice_id": "Invoice not found."})

    passenger_names = list(draft.get("passenger_names") or [])
    passenger_count = draft.get("passenger_count") or max(len(passenger_names), 1)

    def attempt() -> Ticket:
        parties = _load_parties(
            party_type=settlement_draft.party_type,
            party_id=draft["party_id"],
            vendor_id=draft.get("vendor_id"),
            for_update=True,
        )
        result = compute_settlement(settlement_draft, _available_balances(parties))

        ticket = Ticket.objects.create(
            ticket_number=next_document_number(SEQUENCE_TICKET),
            customer_type=settlement_draft.party_type,
            **_party_fk(settlement_draft.party_type, parties.party),
            vendor=parties.vendor,
            invoice=linked_invoice,
            pnr=draft.get("pnr") or "",
            trip_type=draft.get("trip_type") or Ticket.TRIP_ONE_WAY,
            seat_class=draft.get("seat_class") or "economy",
            route=draft.get("route") or "",
            airlines=draft.get("airlines") or "",
            flight_number=draft.get("flight_number") or "",
            travel_date=draft.get("travel_date"),
            return_date=draft.get("return_date"),
            passenger_name=draft.get("passenger_name") or "",
            passenger_names=passenger_names,
            passenger_count=passenger_count,
            vendor_price=result.vendor_cost,
            airline_price=draft.get("airline_price") or 0,
            middle_class_price=draft.get("middle_class_price") or 0,
            face_value=ticket_face_value(draft),
            deduct_from_deposit=settlement_draft.use_deposit,
            deposit_deducted=result.deposit_used,
            use_agent_credit=(
                settlement_draft.use_agent_credit
                and settlement_draft.party_type == PARTY_AGENT
            ),
            agent_credit_used=result.agent_credit_used,
            use_vendor_balance=settlement_draft.vendor_balance_source,
            vendor_balance_deducted=result.vendor_balance_deducted,
            amount_due=result.total,
            notes=draft.get("notes") or "",
            status=Ticket.STATUS_ISSUED,
            issued_by=user if getattr(user, "pk", None) else None,
        )

        _draw_balances(
            label=f"Ticket {ticket.ticket_number}",
            reference_type=REFERENCE_TICKET,
            document=ticket,
            parties=parties,
            result=result,
            vendor_balance_source=settlement_draft.vendor_balance_source,
        )
        return ticket

    ticket = _issue_with_retry(REFERENCE_TICKET, attempt)

    logger.info(
        "Ticket issued",
        extra={
            "ticket_id": str(ticket.pk),
            "ticket_number": ticket.ticket_number,
            "face_value": str(ticket.face_value),
            "amount_due": str(ticket.amount_due),
            "deposit_deducted": str(ticket.deposit_deducted),
            "vendor_balance_deducted": str(ticket.vendor_balance_deducted),
        },
    )
    return ticket
