# billing/api/viewsets/invoice.py

"""
======================================================
PATH: billing/api/viewsets/invoice.py
======================================================
INVOICE VIEWSET (STAFF)

Endpoints:
- GET  /api/billing/invoices/                 list (django-filter params)
- GET  /api/billing/invoices/<id>/            retrieve
- POST /api/billing/invoices/                 issue (billing.issue)
- POST /api/billing/invoices/preview/         live settlement preview
- POST /api/billing/invoices/<id>/status/     lifecycle transition (billing.status)

Rules:
- Backend is authoritative for every money field.
- Issued invoices are immutable; only status moves.
======================================================
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from billing.api.filters import InvoiceFilter
from billing.api.viewsets._errors import billing_error_response
from billing.models import Invoice
from billing.serializers.invoice import InvoiceSerializer
from billing.serializers.settlement import (
    InvoiceDraftSerializer,
    SettlementResultSerializer,
    StatusChangeSerializer,
)
from billing.services import document_lifecycle
from billing.services.exceptions import BillingError
from billing.services.issuance_service import issue_invoice, preview_invoice
from permissions.roles import CAP_BILLING_ISSUE, CAP_BILLING_STATUS, HasWriteCapability


class InvoiceViewSet(mixins.CreateModelMixin, viewsets.ReadOnlyModelViewSet):
    serializer_class = InvoiceSerializer
    filterset_class = InvoiceFilter
    required_capability = CAP_BILLING_ISSUE

    def get_permissions(self):
        if self.action == "change_status":
            self.required_capability = CAP_BILLING_STATUS
        return [IsAuthenticated(), HasWriteCapability()]

    def get_queryset(self):
        return (
            Invoice.objects.all()
            .select_related("customer", "agent", "vendor", "issued_by")
            .prefetch_related("items")
            .order_by("-created_at")
        )

    # ======================================================
    # ISSUE
    # ======================================================

    @extend_schema(request=InvoiceDraftSerializer, responses={201: InvoiceSerializer})
    def create(self, request, *args, **kwargs):
        ser = InvoiceDraftSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            invoice = issue_invoice(draft=ser.validated_data, user=request.user)
        except BillingError as exc:
            return billing_error_response(exc)

        invoice = self.get_queryset().get(pk=invoice.pk)
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)

    # ======================================================
    # PREVIEW (no writes)
    # ======================================================

    @extend_schema(
        request=InvoiceDraftSerializer,
        responses={200: SettlementResultSerializer},
        description="Compute the settlement for a draft against current balances. Writes nothing.",
    )
    @action(detail=False, methods=["post"], url_path="preview")
    def preview(self, request):
        ser = InvoiceDraftSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            result = preview_invoice(draft=ser.validated_data)
        except BillingError as exc:
            return billing_error_response(exc)

        return Response(SettlementResultSerializer(result.as_dict()).data)

    # ======================================================
    # STATUS
    # ======================================================

    @extend_schema(request=StatusChangeSerializer, responses={200: InvoiceSerializer})
    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        invoice = self.get_object()

        ser = StatusChangeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            document_lifecycle.change_status(
                document=invoice,
                target_status=ser.validated_data["status"],
                user=request.user,
            )
        except BillingError as exc:
            return billing_error_response(exc)

        invoice = self.get_queryset().get(pk=invoice.pk)
        return Response(InvoiceSerializer(invoice).data)
