from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from ledger.models import CustomerTransaction
from ledger.services.ledger_service import create_party

User = get_user_model()


class LedgerApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.staff = User.objects.create_user(email="accounts@example.com", password="pass", role="staff")
        self.client.force_authenticate(self.staff)

        self.customer = create_party("customer", {"name": "Sara Nasser"}, opening_deposit=Decimal("50"))
        self.vendor = create_party("vendor", {"name": "Saudia Desk"})

    def test_post_manual_credit(self):
        res = self.client.post(
            "/api/ledger/transactions/",
            {
                "party_type": "customer",
                "party_id": str(self.customer.pk),
                "balance_type": "deposit",
                "entry_type": "credit",
                "amount": "200.00",
                "description": "Top-up",
                "payment_method": "bank_transfer",
            },
            format="json",
        )

        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["balance_after"], "250.00")
        self.assertEqual(res.data["party_type"], "customer")
        self.assertEqual(res.data["party_name"], "Sara Nasser")

        self.customer.refresh_from_db()
        self.assertEqual(self.customer.deposit_balance, Decimal("250.00"))

    def test_overdraw_returns_400_with_amounts(self):
        res = self.client.post(
            "/api/ledger/transactions/",
            {
                "party_type": "customer",
                "party_id": str(self.customer.pk),
                "balance_type": "deposit",
                "entry_type": "debit",
                "amount": "80",
            },
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["available"], "50.00")
        self.assertEqual(res.data["requested"], "80.00")
        self.assertEqual(CustomerTransaction.objects.count(), 1)

    def test_unknown_party_returns_404(self):
        res = self.client.post(
            "/api/ledger/transactions/",
            {
                "party_type": "vendor",
                "party_id": "00000000-0000-0000-0000-000000000000",
                "balance_type": "credit",
                "entry_type": "credit",
                "amount": "10",
            },
            format="json",
        )
        self.assertEqual(res.status_code, 404)

    def test_wrong_balance_type_returns_400(self):
        res = self.client.post(
            "/api/ledger/transactions/",
            {
                "party_type": "customer",
                "party_id": str(self.customer.pk),
                "balance_type": "credit",
                "entry_type": "credit",
                "amount": "10",
            },
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_list_requires_party_type(self):
        res = self.client.get("/api/ledger/transactions/")
        self.assertEqual(res.status_code, 400)

        res = self.client.get("/api/ledger/transactions/", {"party_type": "customer"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["description"], "Opening balance")

    def test_reset_is_admin_only(self):
        body = {"confirm": True}

        res = self.client.post("/api/ledger/reset/", body, format="json")
        self.assertEqual(res.status_code, 403)

        admin = User.objects.create_user(email="owner@example.com", password="pass", role="admin")
        self.client.force_authenticate(admin)

        res = self.client.post("/api/ledger/reset/", {"confirm": False}, format="json")
        self.assertEqual(res.status_code, 400)

        res = self.client.post("/api/ledger/reset/", body, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["deleted"]["customer"], 1)

        self.customer.refresh_from_db()
        self.assertEqual(self.customer.deposit_balance, Decimal("0.00"))
        self.assertFalse(CustomerTransaction.objects.exists())
