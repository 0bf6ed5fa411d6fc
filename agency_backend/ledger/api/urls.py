# ledger/api/urls.py

from django.urls import path

from ledger.api.views import LedgerResetView, TransactionListCreateView

urlpatterns = [
    path("transactions/", TransactionListCreateView.as_view(), name="ledger-transactions"),
    path("reset/", LedgerResetView.as_view(), name="ledger-reset"),
]
