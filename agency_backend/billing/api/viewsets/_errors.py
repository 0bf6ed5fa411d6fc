# billing/api/viewsets/_errors.py

from rest_framework import status
from rest_framework.response import Response

from billing.services.exceptions import (
    DraftValidationError,
    InvalidStatusTransitionError,
    IssuanceError,
)


def billing_error_response(exc) -> Response:
    """Map billing domain errors to HTTP responses."""
    if isinstance(exc, DraftValidationError):
        return Response(
            {"detail": "Invalid draft.", "errors": exc.errors},
            status=status.HTTP_400_BAD_REQUEST,
        )
    if isinstance(exc, InvalidStatusTransitionError):
        return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, IssuanceError):
        return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
