# ledger/services/ledger_service.py

"""
======================================================
PATH: ledger/services/ledger_service.py
======================================================
PARTY LEDGER SERVICE (AUTHORITATIVE)

The ONLY code path allowed to change a party balance.

RULES:
- Every balance change writes the party column AND one ledger row,
  inside one atomic block, under a row lock on the party
- Ledger rows carry balance_after, so replaying rows for
  (party, balance_type) in (created_at, id) order reproduces the balance
- Customer/agent balances never go below zero
- Vendor balances may be overdrawn by a manual debit only
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterator

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from ledger.models import TRANSACTION_MODELS, BalanceTransaction
from ledger.services.exceptions import (
    InsufficientBalanceError,
    LedgerValidationError,
    PartyNotFoundError,
)
from parties.models import (
    BALANCE_CREDIT,
    BALANCE_DEPOSIT,
    PARTY_MODELS,
    PARTY_VENDOR,
    Party,
    PartyBalanceError,
)

logger = logging.getLogger("ledger")

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

REFERENCE_MANUAL = "manual"
REFERENCE_OPENING = "opening"


def _q2(v) -> Decimal:
    try:
        return Decimal(str(v if v is not None else "0.00")).quantize(
            TWOPLACES, rounding=ROUND_HALF_UP
        )
    except (InvalidOperation, ValueError) as exc:
        raise LedgerValidationError(f"Invalid amount: {v!r}") from exc


# ==========================================================
# RESOLUTION
# ==========================================================


def _party_model(party_type: str) -> type[Party]:
    try:
        return PARTY_MODELS[party_type]
    except KeyError:
        raise LedgerValidationError(f"Unknown party_type '{party_type}'") from None


def _transaction_model(party_type: str) -> type[BalanceTransaction]:
    _party_model(party_type)
    return TRANSACTION_MODELS[party_type]


def _balance_field(model: type[Party], balance_type: str) -> str:
    try:
        return model.balance_field(balance_type)
    except PartyBalanceError as exc:
        raise LedgerValidationError(exc.messages[0]) from None


def get_party(party_type: str, party_id, *, for_update: bool = False) -> Party:
    model = _party_model(party_type)
    qs = model.objects.all()
    if for_update:
        qs = qs.select_for_update()

    try:
        return qs.get(pk=party_id)
    except (model.DoesNotExist, DjangoValidationError, ValueError):
        raise PartyNotFoundError(f"{party_type} '{party_id}' not found") from None


def get_balance(party_type: str, party_id, balance_type: str) -> Decimal:
    model = _party_model(party_type)
    field = _balance_field(model, balance_type)
    party = get_party(party_type, party_id)
    return _q2(getattr(party, field))


# ==========================================================
# WRITES
# ==========================================================


@transaction.atomic
def apply_delta(
    *,
    party_type: str,
    party_id,
    balance_type: str,
    amount,
    description: str = "",
    payment_method: str = BalanceTransaction.PAYMENT_CASH,
    reference_type: str = "",
    reference_id="",
    allow_overdraw: bool = False,
) -> BalanceTransaction:
    """
    Move a balance by a signed amount and append the matching ledger row.

    Positive amount -> credit row, negative amount -> debit row.
    Raises InsufficientBalanceError when a debit would leave the balance
    below zero and allow_overdraw is False.
    """
    delta = _q2(amount)
    if delta == ZERO:
        raise LedgerValidationError("Ledger amount must be non-zero")

    model = _party_model(party_type)
    tx_model = _transaction_model(party_type)
    field = _balance_field(model, balance_type)

    party = get_party(party_type, party_id, for_update=True)
    current = _q2(getattr(party, field))
    new_balance = _q2(current + delta)

    if delta < 0 and new_balance < 0 and not allow_overdraw:
        raise InsufficientBalanceError(
            f"{party_type} {balance_type} balance {current} cannot cover {-delta}",
            available=current,
            requested=-delta,
        )

    model.objects.filter(pk=party.pk).update(**{field: new_balance})

    row = tx_model.objects.create(
        **{tx_model.party_field: party},
        entry_type=BalanceTransaction.CREDIT if delta > 0 else BalanceTransaction.DEBIT,
        balance_type=balance_type,
        amount=abs(delta),
        description=(description or "")[:255],
        payment_method=payment_method or BalanceTransaction.PAYMENT_CASH,
        reference_type=reference_type or "",
        reference_id=str(reference_id or ""),
        balance_after=new_balance,
    )

    logger.info(
        "Ledger delta applied",
        extra={
            "party_type": party_type,
            "party_id": str(party.pk),
            "balance_type": balance_type,
            "delta": str(delta),
            "balance_after": str(new_balance),
            "reference": f"{reference_type}:{reference_id}",
        },
    )
    return row


def apply_transaction(
    *,
    party_type: str,
    party_id,
    balance_type: str,
    entry_type: str,
    amount,
    description: str,
    payment_method: str = BalanceTransaction.PAYMENT_CASH,
    reference_type: str = REFERENCE_MANUAL,
    reference_id="",
) -> BalanceTransaction:
    """
    Manual ledger entry (top-ups, refunds, corrections).

    amount is always positive; entry_type decides the direction.
    """
    value = _q2(amount)
    if value <= ZERO:
        raise LedgerValidationError("Transaction amount must be > 0")

    if entry_type not in (BalanceTransaction.CREDIT, BalanceTransaction.DEBIT):
        raise LedgerValidationError(f"Invalid entry_type '{entry_type}'")

    if payment_method not in dict(BalanceTransaction.PAYMENT_METHODS):
        raise LedgerValidationError(f"Invalid payment_method '{payment_method}'")

    signed = value if entry_type == BalanceTransaction.CREDIT else -value

    return apply_delta(
        party_type=party_type,
        party_id=party_id,
        balance_type=balance_type,
        amount=signed,
        description=description,
        payment_method=payment_method,
        reference_type=reference_type,
        reference_id=reference_id,
        allow_overdraw=party_type == PARTY_VENDOR,
    )


@transaction.atomic
def create_party(
    party_type: str,
    data: dict,
    *,
    opening_deposit=ZERO,
    opening_credit=ZERO,
) -> Party:
    """
    Create a party with zero balances, then book any opening balance
    as a credit row so the ledger explains it.
    """
    model = _party_model(party_type)

    openings = []
    for balance_type, opening in ((BALANCE_DEPOSIT, opening_deposit), (BALANCE_CREDIT, opening_credit)):
        value = _q2(opening)
        if value == ZERO:
            continue
        if value < ZERO:
            raise LedgerValidationError("Opening balances cannot be negative")
        _balance_field(model, balance_type)
        openings.append((balance_type, value))

    party = model.objects.create(**data)

    for balance_type, value in openings:
        apply_delta(
            party_type=party_type,
            party_id=party.pk,
            balance_type=balance_type,
            amount=value,
            description="Opening balance",
            reference_type=REFERENCE_OPENING,
        )

    party.refresh_from_db()
    return party


@transaction.atomic
def reset_ledgers(party_types=None) -> dict[str, int]:
    """
    Wipe ledger rows and zero the matching balances together.

    Returns {party_type: rows_deleted}.
    """
    deleted: dict[str, int] = {}

    for party_type in party_types or PARTY_MODELS.keys():
        model = _party_model(party_type)
        tx_model = _transaction_model(party_type)

        # QuerySet.delete() does not route through the per-instance guard.
        count, _ = tx_model.objects.all().delete()
        model.objects.update(**{f: ZERO for f in model.balance_field_names()})
        deleted[party_type] = count

    logger.warning("Ledgers reset", extra={"deleted": deleted})
    return deleted


# ==========================================================
# READS
# ==========================================================


def list_transactions(
    *,
    party_type: str,
    party_id=None,
    balance_type: str | None = None,
    start: date | None = None,
    end: date | None = None,
):
    tx_model = _transaction_model(party_type)
    qs = tx_model.objects.select_related(tx_model.party_field)

    if party_id:
        qs = qs.filter(**{f"{tx_model.party_field}_id": party_id})
    if balance_type:
        qs = qs.filter(balance_type=balance_type)
    if start:
        qs = qs.filter(created_at__date__gte=start)
    if end:
        qs = qs.filter(created_at__date__lte=end)

    return qs.order_by("created_at", "id")


# ==========================================================
# VERIFICATION (replay)
# ==========================================================


@dataclass(frozen=True)
class LedgerMismatch:
    party_type: str
    party_id: str
    balance_type: str
    stored_balance: Decimal
    replayed_balance: Decimal
    detail: str


def replay_balance(*, party_type: str, party_id, balance_type: str) -> Decimal:
    running = ZERO
    for row in list_transactions(
        party_type=party_type, party_id=party_id, balance_type=balance_type
    ):
        running = _q2(running + row.signed_amount)
    return running


def verify_party_ledger(*, party_type: str, party_id) -> list[LedgerMismatch]:
    """
    Replay every ledger row for the party and compare with:
    - each row's balance_after (running total)
    - the stored balance column (final total)
    """
    party = get_party(party_type, party_id)
    mismatches: list[LedgerMismatch] = []

    for balance_type in party.balance_types:
        stored = _q2(party.get_balance(balance_type))
        running = ZERO

        rows = list_transactions(
            party_type=party_type, party_id=party.pk, balance_type=balance_type
        )
        for row in rows:
            running = _q2(running + row.signed_amount)
            if _q2(row.balance_after) != running:
                mismatches.append(
                    LedgerMismatch(
                        party_type=party_type,
                        party_id=str(party.pk),
                        balance_type=balance_type,
                        stored_balance=stored,
                        replayed_balance=running,
                        detail=f"row {row.pk} balance_after {row.balance_after} != running {running}",
                    )
                )

        if running != stored:
            mismatches.append(
                LedgerMismatch(
                    party_type=party_type,
                    party_id=str(party.pk),
                    balance_type=balance_type,
                    stored_balance=stored,
                    replayed_balance=running,
                    detail=f"stored {stored} != replayed {running}",
                )
            )

    return mismatches


def verify_all_ledgers(party_types=None) -> Iterator[LedgerMismatch]:
    for party_type in party_types or PARTY_MODELS.keys():
        model = _party_model(party_type)
        for party_id in model.objects.values_list("pk", flat=True).iterator():
            yield from verify_party_ledger(party_type=party_type, party_id=party_id)
