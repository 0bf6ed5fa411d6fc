# reports/api/views.py

"""
======================================================
PATH: reports/api/views.py
======================================================
REPORTS API (READ-ONLY)

- GET /api/reports/summary/?range=this_month|today|this_week|this_year|custom|all
                           &start=YYYY-MM-DD&end=YYYY-MM-DD
                           &party_type=customer|agent&party_id=<uuid>
- GET /api/reports/dashboard/

Money is rendered as 2dp strings, same as serializer DecimalFields.
======================================================
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import CAP_REPORTS_VIEW, HasCapability
from reports.services.exceptions import ReportError
from reports.services.reporting_service import (
    RANGE_KEYS,
    dashboard_metrics,
    period_report,
    resolve_period,
)


def _render(value):
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _render(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_render(v) for v in value]
    return value


class ReportSummaryView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(
        tags=["reports"],
        parameters=[
            OpenApiParameter("range", str, enum=list(RANGE_KEYS), description="Defaults to this_month."),
            OpenApiParameter("start", str, description="YYYY-MM-DD, custom range only"),
            OpenApiParameter("end", str, description="YYYY-MM-DD, custom range only"),
            OpenApiParameter("party_type", str, enum=["customer", "agent"]),
            OpenApiParameter("party_id", str),
        ],
        responses={200: dict},
    )
    def get(self, request):
        params = request.query_params

        try:
            period = resolve_period(
                params.get("range"),
                start=params.get("start"),
                end=params.get("end"),
            )
            report = period_report(
                period,
                party_type=params.get("party_type") or None,
                party_id=params.get("party_id") or None,
            )
        except ReportError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(_render(report))


class DashboardView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(
        tags=["reports"],
        parameters=[OpenApiParameter("recent", int, description="Recent documents to list (1-50)")],
        responses={200: dict},
    )
    def get(self, request):
        try:
            recent = int(request.query_params.get("recent", 5))
        except (TypeError, ValueError):
            return Response(
                {"detail": "recent must be an integer"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        recent = min(max(recent, 1), 50)
        return Response(_render(dashboard_metrics(recent=recent)))
