# parties/api/viewsets.py

"""
======================================================
PATH: parties/api/viewsets.py
======================================================
PARTY VIEWSETS (STAFF)

- /api/parties/customers/
- /api/parties/agents/
- /api/parties/vendors/

Each supports CRUD (balances read-only) plus:
- GET <id>/transactions/?balance_type=&start=&end=   ledger history
- GET <id>/verify/                                   replay check

Search: ?q= matches name, company, phone, email.
======================================================
"""

from __future__ import annotations

from django.db.models import ProtectedError, Q
from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ledger.serializers.transaction import (
    BalanceTransactionSerializer,
    TransactionQuerySerializer,
)
from ledger.services.ledger_service import list_transactions, verify_party_ledger
from parties.models import Agent, Customer, Vendor
from parties.serializers.party import AgentSerializer, CustomerSerializer, VendorSerializer
from permissions.roles import CAP_PARTIES_EDIT, HasWriteCapability


class _PartyViewSet(viewsets.ModelViewSet):
    model = None
    permission_classes = [IsAuthenticated, HasWriteCapability]
    required_capability = CAP_PARTIES_EDIT

    def get_queryset(self):
        qs = self.model.objects.all().order_by("name")

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(name__icontains=q)
                | Q(company__icontains=q)
                | Q(phone__icontains=q)
                | Q(email__icontains=q)
            )
        return qs

    def destroy(self, request, *args, **kwargs):
        party = self.get_object()
        try:
            party.delete()
        except ProtectedError:
            return Response(
                {"detail": f"{party.name} has ledger or billing history and cannot be deleted."},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: BalanceTransactionSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path="transactions")
    def transactions(self, request, pk=None):
        party = self.get_object()

        params = request.query_params.copy()
        params["party_type"] = self.model.party_type
        query = TransactionQuerySerializer(data=params)
        query.is_valid(raise_exception=True)

        filters = dict(query.validated_data)
        filters["party_id"] = party.pk
        qs = list_transactions(**filters)

        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(
                BalanceTransactionSerializer(page, many=True).data
            )
        return Response(BalanceTransactionSerializer(qs, many=True).data)

    @extend_schema(responses={200: serializers.DictField()})
    @action(detail=True, methods=["get"], url_path="verify")
    def verify(self, request, pk=None):
        party = self.get_object()
        mismatches = verify_party_ledger(party_type=self.model.party_type, party_id=party.pk)
        return Response(
            {
                "party_id": str(party.pk),
                "consistent": not mismatches,
                "mismatches": [m.detail for m in mismatches],
            }
        )


class CustomerViewSet(_PartyViewSet):
    model = Customer
    serializer_class = CustomerSerializer


class AgentViewSet(_PartyViewSet):
    model = Agent
    serializer_class = AgentSerializer


class VendorViewSet(_PartyViewSet):
    model = Vendor
    serializer_class = VendorSerializer
