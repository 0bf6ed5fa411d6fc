# billing/api/filters.py

from __future__ import annotations

import django_filters
from django.db.models import Q

from billing.models import Invoice, Ticket


class _DocumentFilter(django_filters.FilterSet):
    """
    Shared query params:
    - ?status=issued
    - ?customer_type=agent
    - ?party=<customer or agent uuid>
    - ?vendor=<vendor uuid>
    - ?date_from=YYYY-MM-DD&date_to=YYYY-MM-DD (inclusive, created_at)
    """

    party = django_filters.UUIDFilter(method="filter_party")
    vendor = django_filters.UUIDFilter(field_name="vendor_id")
    date_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    def filter_party(self, queryset, name, value):
        return queryset.filter(Q(customer_id=value) | Q(agent_id=value))


class InvoiceFilter(_DocumentFilter):
    q = django_filters.CharFilter(field_name="invoice_number", lookup_expr="icontains")

    class Meta:
        model = Invoice
        fields = ["status", "customer_type", "payment_method"]


class TicketFilter(_DocumentFilter):
    q = django_filters.CharFilter(method="filter_q")

    class Meta:
        model = Ticket
        fields = ["status", "customer_type", "trip_type", "seat_class"]

    def filter_q(self, queryset, name, value):
        return queryset.filter(
            Q(ticket_number__icontains=value)
            | Q(pnr__icontains=value)
            | Q(passenger_name__icontains=value)
        )
