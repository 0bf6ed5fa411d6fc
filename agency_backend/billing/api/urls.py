# billing/api/urls.py

"""
BILLING API URLS

- /api/billing/invoices/ (+ preview/, <id>/status/)
- /api/billing/tickets/  (+ preview/, <id>/status/)
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from billing.api.viewsets.invoice import InvoiceViewSet
from billing.api.viewsets.ticket import TicketViewSet

router = DefaultRouter()
router.register(r"invoices", InvoiceViewSet, basename="invoices")
router.register(r"tickets", TicketViewSet, basename="tickets")

urlpatterns = [
    path("", include(router.urls)),
]
