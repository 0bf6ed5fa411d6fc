# billing/services/settlement.py

"""
======================================================
PATH: billing/services/settlement.py
======================================================
SETTLEMENT CALCULATOR (PURE)

Given a draft (line items, discount, which balances to draw) and the
balances available right now, derive every money field of an invoice
or ticket.

DESIGN PRINCIPLES:
- No database access, no side effects
- Same input -> same output (live preview and issuance share this)
- Every derived amount is rounded half-up to 2dp where it is computed
- Each draw is min(available, still owed); nothing goes negative

Waterfall (each step works on what is still owed):
1. subtotal         = Σ quantity × unit_price
2. discount_amount  = subtotal × round2(clamp(discount_percent, 0, 100)) / 100
3. deposit_used     = min(deposit, remainder)          if use_deposit
4. agent_credit_used= min(agent credit, remainder)     agents + use_agent_credit
5. total            = remainder
6. vendor_balance_deducted = min(vendor balance, vendor_cost)
   (independent: never changes total)
7. profit_margin    = total - vendor_cost   (display only)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from billing.services.exceptions import DraftValidationError
from parties.models import PARTY_AGENT, PARTY_CUSTOMER

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

VENDOR_BALANCE_NONE = "none"
VENDOR_BALANCE_CREDIT = "credit"
VENDOR_BALANCE_DEPOSIT = "deposit"

VENDOR_BALANCE_SOURCES = (
    VENDOR_BALANCE_NONE,
    VENDOR_BALANCE_CREDIT,
    VENDOR_BALANCE_DEPOSIT,
)


def _money(v) -> Decimal:
    if v is None or v == "":
        return ZERO
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _draw(available: Decimal, owed: Decimal) -> Decimal:
    return _money(max(min(max(available, ZERO), max(owed, ZERO)), ZERO))


# ==========================================================
# VALUE OBJECTS
# ==========================================================


@dataclass(frozen=True)
class LineItem:
    description: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return _money(Decimal(self.quantity) * _money(self.unit_price))


@dataclass(frozen=True)
class SettlementDraft:
    items: tuple[LineItem, ...]
    party_type: str = PARTY_CUSTOMER
    discount_percent: Decimal = ZERO
    use_deposit: bool = False
    use_agent_credit: bool = False
    vendor_cost: Decimal = ZERO
    vendor_balance_source: str = VENDOR_BALANCE_NONE


@dataclass(frozen=True)
class AvailableBalances:
    deposit: Decimal = ZERO
    agent_credit: Decimal = ZERO
    vendor_credit: Decimal = ZERO
    vendor_deposit: Decimal = ZERO


@dataclass(frozen=True)
class SettlementResult:
    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    deposit_used: Decimal
    agent_credit_used: Decimal
    total: Decimal
    vendor_cost: Decimal
    vendor_balance_deducted: Decimal
    profit_margin: Decimal
    line_totals: tuple[Decimal, ...] = field(default_factory=tuple)

    def as_dict(self) -> dict:
        data = asdict(self)
        data["line_totals"] = list(self.line_totals)
        return data


# ==========================================================
# VALIDATION (separate from calculation)
# ==========================================================


def validate_draft(draft: SettlementDraft) -> None:
    errors: dict[str, str] = {}

    if not draft.items:
        errors["items"] = "At least one line item is required."

    for idx, item in enumerate(draft.items):
        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int):
            errors[f"items[{idx}].quantity"] = "Quantity must be a whole number."
        elif item.quantity < 1:
            errors[f"items[{idx}].quantity"] = "Quantity must be at least 1."

        try:
            if Decimal(str(item.unit_price)) < 0:
                errors[f"items[{idx}].unit_price"] = "Unit price cannot be negative."
        except InvalidOperation:
            errors[f"items[{idx}].unit_price"] = "Unit price must be a number."

    if draft.party_type not in (PARTY_CUSTOMER, PARTY_AGENT):
        errors["customer_type"] = "Must be 'customer' or 'agent'."

    try:
        pct = Decimal(str(draft.discount_percent))
        if pct < 0 or pct > HUNDRED:
            errors["discount_percent"] = "Discount must be between 0 and 100."
    except InvalidOperation:
        errors["discount_percent"] = "Discount must be a number."

    try:
        if Decimal(str(draft.vendor_cost)) < 0:
            errors["vendor_cost"] = "Vendor cost cannot be negative."
    except InvalidOperation:
        errors["vendor_cost"] = "Vendor cost must be a number."

    if draft.vendor_balance_source not in VENDOR_BALANCE_SOURCES:
        errors["use_vendor_balance"] = "Must be one of: none, credit, deposit."

    if errors:
        raise DraftValidationError(errors)


# ==========================================================
# CALCULATION
# ==========================================================


def compute_settlement(
    draft: SettlementDraft,
    balances: AvailableBalances,
) -> SettlementResult:
    line_totals = tuple(item.line_total for item in draft.items)
    subtotal = _money(sum(line_totals, ZERO))

    # The stored percent is 2dp; the discount must derive from that value.
    pct = _money(min(max(Decimal(str(draft.discount_percent or 0)), ZERO), HUNDRED))
    discount_amount = _money(subtotal * pct / HUNDRED)
    remainder = subtotal - discount_amount

    deposit_used = ZERO
    if draft.use_deposit:
        deposit_used = _draw(_money(balances.deposit), remainder)
        remainder -= deposit_used

    agent_credit_used = ZERO
    if draft.party_type == PARTY_AGENT and draft.use_agent_credit:
        agent_credit_used = _draw(_money(balances.agent_credit), remainder)
        remainder -= agent_credit_used

    total = _money(remainder)

    vendor_cost = _money(draft.vendor_cost)
    vendor_balance_deducted = ZERO
    if vendor_cost > ZERO:
        if draft.vendor_balance_source == VENDOR_BALANCE_CREDIT:
            vendor_balance_deducted = _draw(_money(balances.vendor_credit), vendor_cost)
        elif draft.vendor_balance_source == VENDOR_BALANCE_DEPOSIT:
            vendor_balance_deducted = _draw(_money(balances.vendor_deposit), vendor_cost)

    return SettlementResult(
        subtotal=subtotal,
        discount_percent=pct,
        discount_amount=discount_amount,
        deposit_used=deposit_used,
        agent_credit_used=agent_credit_used,
        total=total,
        vendor_cost=vendor_cost,
        vendor_balance_deducted=vendor_balance_deducted,
        profit_margin=_money(total - vendor_cost),
        line_totals=line_totals,
    )


# ==========================================================
# PAYLOAD -> DRAFT
# ==========================================================


def invoice_draft(payload: dict) -> SettlementDraft:
    """Build a calculator draft from validated invoice input."""
    items = tuple(
        LineItem(
            description=str(item.get("description") or ""),
            quantity=item.get("quantity"),
            unit_price=item.get("unit_price"),
        )
        for item in payload.get("items") or []
    )
    return SettlementDraft(
        items=items,
        party_type=payload.get("customer_type") or PARTY_CUSTOMER,
        discount_percent=payload.get("discount_percent") or ZERO,
        use_deposit=bool(payload.get("use_deposit")),
        use_agent_credit=bool(payload.get("use_agent_credit")),
        vendor_cost=payload.get("vendor_cost") or ZERO,
        vendor_balance_source=payload.get("use_vendor_balance") or VENDOR_BALANCE_NONE,
    )


def ticket_face_value(payload: dict) -> Decimal:
    """Face value defaults to vendor price + agency mark-up."""
    face_value = payload.get("face_value")
    if face_value not in (None, ""):
        return _money(face_value)
    return _money(
        _money(payload.get("vendor_price")) + _money(payload.get("middle_class_price"))
    )


def ticket_draft(payload: dict) -> SettlementDraft:
    """
    A ticket settles as a single line at face value, no discount,
    with the vendor price as the vendor cost.
    """
    return SettlementDraft(
        items=(
            LineItem(
                description=str(payload.get("route") or "Ticket"),
                quantity=1,
                unit_price=ticket_face_value(payload),
            ),
        ),
        party_type=payload.get("customer_type") or PARTY_CUSTOMER,
        discount_percent=ZERO,
        use_deposit=bool(payload.get("deduct_from_deposit")),
        use_agent_credit=bool(payload.get("use_agent_credit")),
        vendor_cost=payload.get("vendor_price") or ZERO,
        vendor_balance_source=payload.get("use_vendor_balance") or VENDOR_BALANCE_NONE,
    )
