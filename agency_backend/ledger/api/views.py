# ledger/api/views.py

"""
======================================================
PATH: ledger/api/views.py
======================================================
LEDGER TRANSACTIONS API

- GET  /api/ledger/transactions/?party_type=&party_id=&balance_type=&start=&end=
- POST /api/ledger/transactions/   manual entry (ledger.post)
- POST /api/ledger/reset/          wipe ledgers + zero balances (finance.reset)

Manual entries go through ledger_service.apply_transaction, the same
path issuance uses, so balances and rows never diverge.
======================================================
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ledger.serializers.transaction import (
    BalanceTransactionSerializer,
    LedgerResetSerializer,
    TransactionInputSerializer,
    TransactionQuerySerializer,
)
from ledger.services.exceptions import (
    InsufficientBalanceError,
    LedgerError,
    PartyNotFoundError,
)
from ledger.services.ledger_service import apply_transaction, list_transactions, reset_ledgers
from permissions.roles import (
    CAP_FINANCE_RESET,
    CAP_LEDGER_POST,
    HasCapability,
    HasWriteCapability,
)


def ledger_error_response(exc: LedgerError) -> Response:
    if isinstance(exc, PartyNotFoundError):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, InsufficientBalanceError):
        return Response(
            {
                "detail": str(exc),
                "available": str(exc.available),
                "requested": str(exc.requested),
            },
            status=status.HTTP_400_BAD_REQUEST,
        )
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class TransactionListCreateView(generics.GenericAPIView):
    serializer_class = BalanceTransactionSerializer
    permission_classes = [IsAuthenticated, HasWriteCapability]
    required_capability = CAP_LEDGER_POST

    @extend_schema(
        parameters=[
            OpenApiParameter("party_type", str, required=True, enum=["customer", "agent", "vendor"]),
            OpenApiParameter("party_id", str),
            OpenApiParameter("balance_type", str, enum=["deposit", "credit"]),
            OpenApiParameter("start", str, description="YYYY-MM-DD (inclusive)"),
            OpenApiParameter("end", str, description="YYYY-MM-DD (inclusive)"),
        ],
        responses={200: BalanceTransactionSerializer(many=True)},
    )
    def get(self, request):
        query = TransactionQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            qs = list_transactions(**query.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data)

    @extend_schema(request=TransactionInputSerializer, responses={201: BalanceTransactionSerializer})
    def post(self, request):
        ser = TransactionInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            row = apply_transaction(**ser.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            BalanceTransactionSerializer(row).data,
            status=status.HTTP_201_CREATED,
        )


class LedgerResetView(generics.GenericAPIView):
    """
    POST /api/ledger/reset/  {"confirm": true, "party_types": ["vendor"]}

    Wipes ledger rows and zeroes the matching balances (finance.reset).
    """

    serializer_class = LedgerResetSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_FINANCE_RESET

    @extend_schema(request=LedgerResetSerializer, responses={200: dict})
    def post(self, request):
        ser = LedgerResetSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        deleted = reset_ledgers(ser.validated_data.get("party_types") or None)
        return Response({"deleted": deleted})
