from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from billing.services.document_lifecycle import change_status
from billing.services.issuance_service import issue_invoice, issue_ticket
from ledger.services.ledger_service import create_party
from reports.services.exceptions import ReportError
from reports.services.reporting_service import (
    dashboard_metrics,
    invoice_summary,
    ledger_summary,
    period_report,
    resolve_period,
    ticket_summary,
)

User = get_user_model()
D = Decimal


class ResolvePeriodTests(SimpleTestCase):
    # 2026-10-14 is a Wednesday
    today = date(2026, 10, 14)

    def test_today(self):
        p = resolve_period("today", today=self.today)
        self.assertEqual((p.start, p.end), (self.today, self.today))

    def test_week_starts_on_sunday(self):
        p = resolve_period("this_week", today=self.today)
        self.assertEqual(p.start, date(2026, 10, 11))
        self.assertEqual(p.end, date(2026, 10, 17))

    def test_week_on_a_sunday(self):
        p = resolve_period("this_week", today=date(2026, 10, 11))
        self.assertEqual(p.start, date(2026, 10, 11))

    def test_month_and_year(self):
        p = resolve_period("this_month", today=date(2028, 2, 10))
        self.assertEqual((p.start, p.end), (date(2028, 2, 1), date(2028, 2, 29)))

        p = resolve_period("this_year", today=self.today)
        self.assertEqual((p.start, p.end), (date(2026, 1, 1), date(2026, 12, 31)))

    def test_default_is_this_month(self):
        self.assertEqual(resolve_period(None, today=self.today).key, "this_month")

    def test_custom(self):
        p = resolve_period("custom", start="2026-01-05", end="2026-02-01")
        self.assertEqual((p.start, p.end), (date(2026, 1, 5), date(2026, 2, 1)))

    def test_custom_errors(self):
        with self.assertRaises(ReportError):
            resolve_period("custom", start="2026-01-05")
        with self.assertRaises(ReportError):
            resolve_period("custom", start="2026-02-05", end="2026-01-01")
        with self.assertRaises(ReportError):
            resolve_period("custom", start="05/01/2026", end="2026-02-01")

    def test_all_and_unknown(self):
        p = resolve_period("all")
        self.assertIsNone(p.start)
        self.assertIsNone(p.end)

        with self.assertRaises(ReportError):
            resolve_period("fortnight")


class ReportingServiceTests(TestCase):
    def setUp(self):
        self.customer = create_party("customer", {"name": "Mona Fares"}, opening_deposit=D("100"))
        self.agent = create_party("agent", {"name": "Nile Tours"}, opening_credit=D("500"))
        self.vendor = create_party("vendor", {"name": "Air Arabia Desk"}, opening_credit=D("50"))
        self.period = resolve_period("all")

    def _invoice(self, party_type, party, amount, **extra):
        draft = {
            "customer_type": party_type,
            "party_id": party.pk,
            "vendor_id": self.vendor.pk,
            "items": [{"description": "Service", "quantity": 1, "unit_price": D(amount)}],
        }
        draft.update(extra)
        return issue_invoice(draft=draft)

    def test_empty_summaries_are_zero(self):
        summary = invoice_summary(self.period)
        self.assertEqual(summary["count"], 0)
        self.assertEqual(summary["invoiced"], D("0.00"))
        self.assertEqual(summary["paid"], D("0.00"))

        tickets = ticket_summary(self.period)
        self.assertEqual(tickets["count"], 0)
        self.assertEqual(tickets["profit"], D("0.00"))

    def test_invoice_summary(self):
        paid = self._invoice("customer", self.customer, "1000", discount_percent=D("10"), use_deposit=True)
        self._invoice("agent", self.agent, "400", use_agent_credit=True)
        cancelled = self._invoice("customer", self.customer, "60")

        change_status(document=paid, target_status="paid")
        change_status(document=cancelled, target_status="cancelled")

        summary = invoice_summary(self.period)
        self.assertEqual(summary["count"], 3)
        self.assertEqual(summary["invoiced"], D("1360.00"))
        self.assertEqual(summary["paid"], D("900.00"))
        self.assertEqual(summary["pending"], D("400.00"))
        self.assertEqual(summary["deposits_used"], D("100.00"))
        self.assertEqual(summary["agent_credit_used"], D("400.00"))

        agent_only = invoice_summary(self.period, party_type="agent")
        self.assertEqual(agent_only["count"], 1)

        one_party = invoice_summary(self.period, party_id=self.customer.pk)
        self.assertEqual(one_party["count"], 2)

    def test_ticket_summary_profit(self):
        issue_ticket(
            draft={
                "customer_type": "customer",
                "party_id": self.customer.pk,
                "vendor_price": D("300"),
                "middle_class_price": D("45"),
            }
        )

        summary = ticket_summary(self.period)
        self.assertEqual(summary["count"], 1)
        self.assertEqual(summary["face_value"], D("345.00"))
        self.assertEqual(summary["profit"], D("45.00"))

    def test_ledger_summary(self):
        self._invoice("agent", self.agent, "120", use_agent_credit=True)

        summary = ledger_summary(self.period, "agent", self.agent.pk)
        self.assertEqual(summary["count"], 2)
        self.assertEqual(summary["credits"], D("500.00"))
        self.assertEqual(summary["debits"], D("120.00"))
        self.assertEqual(summary["net"], D("380.00"))

    def test_period_report_filters_by_date(self):
        self._invoice("customer", self.customer, "10")

        report = period_report(resolve_period("custom", start="2000-01-01", end="2000-12-31"))
        self.assertEqual(report["invoices"]["count"], 0)
        self.assertNotIn("ledger", report)

        report = period_report(resolve_period("today"), party_type="customer", party_id=self.customer.pk)
        self.assertEqual(report["invoices"]["count"], 1)
        self.assertIn("ledger", report)

    def test_bad_party_filters(self):
        with self.assertRaises(ReportError):
            invoice_summary(self.period, party_type="vendor")
        with self.assertRaises(ReportError):
            invoice_summary(self.period, party_id="nope")

    def test_dashboard(self):
        self._invoice("customer", self.customer, "250")

        metrics = dashboard_metrics()
        self.assertEqual(metrics["counts"]["invoices"], 1)
        self.assertEqual(metrics["counts"]["vendors"], 1)
        self.assertEqual(metrics["invoice_revenue"], D("250.00"))
        self.assertEqual(metrics["pending_payments"], D("250.00"))
        self.assertEqual(metrics["customer_deposits_total"], D("100.00"))
        self.assertEqual(metrics["agent_credits_total"], D("500.00"))
        self.assertEqual(metrics["vendor_credits_total"], D("50.00"))
        self.assertEqual(len(metrics["recent_invoices"]), 1)
        self.assertEqual(metrics["recent_invoices"][0]["party_name"], "Mona Fares")


class ReportsApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.staff = User.objects.create_user(email="manager@example.com", password="pass", role="staff")
        self.client.force_authenticate(self.staff)

    def test_summary_empty(self):
        res = self.client.get("/api/reports/summary/", {"range": "this_year"})
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["period"]["range"], "this_year")
        self.assertEqual(res.data["invoices"]["invoiced"], "0.00")
        self.assertEqual(res.data["tickets"]["count"], 0)

    def test_summary_bad_range(self):
        res = self.client.get("/api/reports/summary/", {"range": "custom", "start": "2026-02-01"})
        self.assertEqual(res.status_code, 400)

    def test_dashboard(self):
        res = self.client.get("/api/reports/dashboard/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["invoice_revenue"], "0.00")
        self.assertEqual(res.data["recent_tickets"], [])

    def test_anonymous_denied(self):
        self.client.force_authenticate(None)
        self.assertEqual(self.client.get("/api/reports/dashboard/").status_code, 401)
