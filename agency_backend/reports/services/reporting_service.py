# reports/services/reporting_service.py

"""
REPORTING AGGREGATOR (READ-ONLY)

Projections over invoices, tickets and party ledgers for a period.

RULES:
- READ-ONLY: no writes, ever
- Period filters use the document/row created_at in the local timezone
- Empty result sets give zero counts and 0.00 totals, never None
"""

from __future__ import annotations

import calendar
import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Count, DecimalField, F, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from billing.models import Invoice, Ticket
from ledger.models import BalanceTransaction
from ledger.services.ledger_service import list_transactions
from parties.models import PARTY_AGENT, PARTY_CUSTOMER, Agent, Customer, Vendor
from reports.services.exceptions import ReportError

logger = logging.getLogger("reports")

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

RANGE_TODAY = "today"
RANGE_THIS_WEEK = "this_week"
RANGE_THIS_MONTH = "this_month"
RANGE_THIS_YEAR = "this_year"
RANGE_CUSTOM = "custom"
RANGE_ALL = "all"

RANGE_KEYS = (
    RANGE_TODAY,
    RANGE_THIS_WEEK,
    RANGE_THIS_MONTH,
    RANGE_THIS_YEAR,
    RANGE_CUSTOM,
    RANGE_ALL,
)

_MONEY = DecimalField(max_digits=14, decimal_places=2)


def _q2(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _sum(expr, filter=None):
    return Coalesce(
        Sum(expr, filter=filter, output_field=_MONEY),
        Value(ZERO),
        output_field=_MONEY,
    )


# ==========================================================
# PERIOD
# ==========================================================


@dataclass(frozen=True)
class Period:
    key: str
    start: date | None
    end: date | None

    def as_dict(self) -> dict:
        return {
            "range": self.key,
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
        }


def _parse_date(value, name: str) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ReportError(f"Invalid {name} (expected YYYY-MM-DD)") from None


def resolve_period(range_key: str | None = RANGE_THIS_MONTH, start=None, end=None, today=None) -> Period:
    """
    Turn a range key into inclusive [start, end] dates.

    this_week starts on Sunday.
    """
    key = (range_key or RANGE_THIS_MONTH).strip().lower()
    today = _parse_date(today, "today") or timezone.localdate()

    if key == RANGE_TODAY:
        return Period(key, today, today)

    if key == RANGE_THIS_WEEK:
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
        return Period(key, week_start, week_start + timedelta(days=6))

    if key == RANGE_THIS_MONTH:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return Period(key, today.replace(day=1), today.replace(day=last_day))

    if key == RANGE_THIS_YEAR:
        return Period(key, date(today.year, 1, 1), date(today.year, 12, 31))

    if key == RANGE_CUSTOM:
        start_d = _parse_date(start, "start")
        end_d = _parse_date(end, "end")
        if not start_d or not end_d:
            raise ReportError("Custom range needs both start and end")
        if end_d < start_d:
            raise ReportError("end must be on or after start")
        return Period(key, start_d, end_d)

    if key == RANGE_ALL:
        return Period(key, None, None)

    raise ReportError(f"Unknown range '{range_key}'. Use one of: {', '.join(RANGE_KEYS)}")


def _in_period(qs, period: Period | None):
    if period is None:
        return qs
    if period.start:
        qs = qs.filter(created_at__date__gte=period.start)
    if period.end:
        qs = qs.filter(created_at__date__lte=period.end)
    return qs


def _for_party(qs, party_type: str | None, party_id):
    if party_type:
        if party_type not in (PARTY_CUSTOMER, PARTY_AGENT):
            raise ReportError(f"Unknown party_type '{party_type}'")
        qs = qs.filter(customer_type=party_type)
    if party_id:
        try:
            party_id = uuid.UUID(str(party_id))
        except ValueError:
            raise ReportError(f"Invalid party_id '{party_id}'") from None
        qs = qs.filter(Q(customer_id=party_id) | Q(agent_id=party_id))
    return qs


# ==========================================================
# READ PATHS
# ==========================================================


def list_invoices(*, period: Period | None = None, party_type=None, party_id=None, status=None):
    qs = Invoice.objects.select_related("customer", "agent", "vendor")
    qs = _for_party(_in_period(qs, period), party_type, party_id)
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("-created_at")


def list_tickets(*, period: Period | None = None, party_type=None, party_id=None, status=None):
    qs = Ticket.objects.select_related("customer", "agent", "vendor")
    qs = _for_party(_in_period(qs, period), party_type, party_id)
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("-created_at")


# ==========================================================
# SUMMARIES
# ==========================================================


def invoice_summary(period: Period | None, party_type=None, party_id=None) -> dict:
    """
    invoiced = Σ (subtotal - discount_amount) over every invoice in the period
    paid     = same, status paid
    pending  = same, status not paid / cancelled
    """
    qs = list_invoices(period=period, party_type=party_type, party_id=party_id)
    amount = F("subtotal") - F("discount_amount")

    agg = qs.aggregate(
        count=Count("id"),
        invoiced=_sum(amount),
        amount_due=_sum("total"),
        paid=_sum(amount, filter=Q(status=Invoice.STATUS_PAID)),
        pending=_sum(
            amount,
            filter=~Q(status__in=[Invoice.STATUS_PAID, Invoice.STATUS_CANCELLED]),
        ),
        deposits_used=_sum("deposit_used"),
        agent_credit_used=_sum("agent_credit_used"),
        vendor_cost=_sum("vendor_cost"),
        vendor_balance_deducted=_sum("vendor_balance_deducted"),
    )

    return {
        "count": agg["count"] or 0,
        **{k: _q2(v) for k, v in agg.items() if k != "count"},
    }


def ticket_summary(period: Period | None, party_type=None, party_id=None) -> dict:
    qs = list_tickets(period=period, party_type=party_type, party_id=party_id)

    agg = qs.aggregate(
        count=Count("id"),
        face_value=_sum("face_value"),
        vendor_cost=_sum("vendor_price"),
        amount_due=_sum("amount_due"),
        deposit_deducted=_sum("deposit_deducted"),
        agent_credit_used=_sum("agent_credit_used"),
        vendor_balance_deducted=_sum("vendor_balance_deducted"),
    )

    summary = {
        "count": agg["count"] or 0,
        **{k: _q2(v) for k, v in agg.items() if k != "count"},
    }
    summary["profit"] = _q2(summary["face_value"] - summary["vendor_cost"])
    return summary


def ledger_summary(period: Period | None, party_type: str, party_id=None, balance_type=None) -> dict:
    qs = list_transactions(party_type=party_type, party_id=party_id, balance_type=balance_type)
    qs = _in_period(qs, period)

    agg = qs.aggregate(
        count=Count("id"),
        credits=_sum("amount", filter=Q(entry_type=BalanceTransaction.CREDIT)),
        debits=_sum("amount", filter=Q(entry_type=BalanceTransaction.DEBIT)),
    )

    credits = _q2(agg["credits"])
    debits = _q2(agg["debits"])
    return {
        "count": agg["count"] or 0,
        "credits": credits,
        "debits": debits,
        "net": _q2(credits - debits),
    }


def period_report(period: Period, party_type=None, party_id=None) -> dict:
    report = {
        "period": period.as_dict(),
        "invoices": invoice_summary(period, party_type, party_id),
        "tickets": ticket_summary(period, party_type, party_id),
    }

    if party_type:
        report["ledger"] = ledger_summary(period, party_type, party_id)

    logger.info(
        "Period report built",
        extra={**period.as_dict(), "party_type": party_type or "", "party_id": str(party_id or "")},
    )
    return report


# ==========================================================
# DASHBOARD
# ==========================================================


def _recent_invoice(inv: Invoice) -> dict:
    return {
        "id": str(inv.pk),
        "invoice_number": inv.invoice_number,
        "party_name": inv.party_name,
        "total": _q2(inv.total),
        "status": inv.status,
        "created_at": inv.created_at,
    }


def _recent_ticket(t: Ticket) -> dict:
    return {
        "id": str(t.pk),
        "ticket_number": t.ticket_number,
        "party_name": t.party_name,
        "route": t.route,
        "face_value": _q2(t.face_value),
        "status": t.status,
        "created_at": t.created_at,
    }


def dashboard_metrics(recent: int = 5) -> dict:
    live_invoices = Invoice.objects.exclude(status=Invoice.STATUS_CANCELLED)
    live_tickets = Ticket.objects.exclude(
        status__in=[Ticket.STATUS_CANCELLED, Ticket.STATUS_REFUNDED]
    )

    invoice_agg = live_invoices.aggregate(revenue=_sum("total"))
    pending_agg = Invoice.objects.filter(
        status__in=[Invoice.STATUS_ISSUED, Invoice.STATUS_PARTIAL]
    ).aggregate(pending=_sum("total"))
    ticket_agg = live_tickets.aggregate(face_value=_sum("face_value"))

    return {
        "counts": {
            "customers": Customer.objects.count(),
            "agents": Agent.objects.count(),
            "vendors": Vendor.objects.count(),
            "invoices": Invoice.objects.count(),
            "tickets": Ticket.objects.count(),
        },
        "invoice_revenue": _q2(invoice_agg["revenue"]),
        "ticket_revenue": _q2(ticket_agg["face_value"]),
        "pending_payments": _q2(pending_agg["pending"]),
        "customer_deposits_total": _q2(
            Customer.objects.aggregate(v=_sum("deposit_balance"))["v"]
        ),
        "agent_credits_total": _q2(Agent.objects.aggregate(v=_sum("credit_balance"))["v"]),
        "vendor_credits_total": _q2(Vendor.objects.aggregate(v=_sum("credit_balance"))["v"]),
        "vendor_deposits_total": _q2(Vendor.objects.aggregate(v=_sum("deposit_balance"))["v"]),
        "recent_invoices": [
            _recent_invoice(inv)
            for inv in Invoice.objects.select_related("customer", "agent").order_by("-created_at")[:recent]
        ],
        "recent_tickets": [
            _recent_ticket(t)
            for t in Ticket.objects.select_related("customer", "agent").order_by("-created_at")[:recent]
        ],
    }
