# reports/api/urls.py

from django.urls import path

from reports.api.views import DashboardView, ReportSummaryView

urlpatterns = [
    path("summary/", ReportSummaryView.as_view(), name="reports-summary"),
    path("dashboard/", DashboardView.as_view(), name="reports-dashboard"),
]
