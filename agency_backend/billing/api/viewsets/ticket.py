# billing/api/viewsets/ticket.py

"""
======================================================
PATH: billing/api/viewsets/ticket.py
======================================================
TICKET VIEWSET (STAFF)

Same shape as invoices:
- GET  /api/billing/tickets/
- POST /api/billing/tickets/                  issue
- POST /api/billing/tickets/preview/
- POST /api/billing/tickets/<id>/status/
======================================================
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from billing.api.filters import TicketFilter
from billing.api.viewsets._errors import billing_error_response
from billing.models import Ticket
from billing.serializers.settlement import (
    SettlementResultSerializer,
    StatusChangeSerializer,
    TicketDraftSerializer,
)
from billing.serializers.ticket import TicketSerializer
from billing.services import document_lifecycle
from billing.services.exceptions import BillingError
from billing.services.issuance_service import issue_ticket, preview_ticket
from permissions.roles import CAP_BILLING_ISSUE, CAP_BILLING_STATUS, HasWriteCapability


class TicketViewSet(mixins.CreateModelMixin, viewsets.ReadOnlyModelViewSet):
    serializer_class = TicketSerializer
    filterset_class = TicketFilter
    required_capability = CAP_BILLING_ISSUE

    def get_permissions(self):
        if self.action == "change_status":
            self.required_capability = CAP_BILLING_STATUS
        return [IsAuthenticated(), HasWriteCapability()]

    def get_queryset(self):
        return (
            Ticket.objects.all()
            .select_related("customer", "agent", "vendor", "invoice", "issued_by")
            .order_by("-created_at")
        )

    @extend_schema(request=TicketDraftSerializer, responses={201: TicketSerializer})
    def create(self, request, *args, **kwargs):
        ser = TicketDraftSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            ticket = issue_ticket(draft=ser.validated_data, user=request.user)
        except BillingError as exc:
            return billing_error_response(exc)

        ticket = self.get_queryset().get(pk=ticket.pk)
        return Response(TicketSerializer(ticket).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=TicketDraftSerializer,
        responses={200: SettlementResultSerializer},
        description="Compute a ticket's settlement against current balances. Writes nothing.",
    )
    @action(detail=False, methods=["post"], url_path="preview")
    def preview(self, request):
        ser = TicketDraftSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            result = preview_ticket(draft=ser.validated_data)
        except BillingError as exc:
            return billing_error_response(exc)

        return Response(SettlementResultSerializer(result.as_dict()).data)

    @extend_schema(request=StatusChangeSerializer, responses={200: TicketSerializer})
    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        ticket = self.get_object()

        ser = StatusChangeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            document_lifecycle.change_status(
                document=ticket,
                target_status=ser.validated_data["status"],
                user=request.user,
            )
        except BillingError as exc:
            return billing_error_response(exc)

        ticket = self.get_queryset().get(pk=ticket.pk)
        return Response(TicketSerializer(ticket).data)
