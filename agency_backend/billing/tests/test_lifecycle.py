from decimal import Decimal

from django.test import TestCase

from billing.models import Invoice, Ticket
from billing.services.document_lifecycle import can_transition, change_status
from billing.services.exceptions import InvalidStatusTransitionError
from billing.services.issuance_service import issue_invoice, issue_ticket
from ledger.models import CustomerTransaction
from ledger.services.ledger_service import create_party


class DocumentLifecycleTests(TestCase):
    """
    GUARANTEES:
    - Only whitelisted transitions are allowed
    - Terminal states are final
    - Status changes never move balances
    """

    def setUp(self):
        self.customer = create_party("customer", {"name": "Nadia Karim"}, opening_deposit=Decimal("100"))
        self.vendor = create_party("vendor", {"name": "Emirates Desk"})

        self.invoice = issue_invoice(
            draft={
                "customer_type": "customer",
                "party_id": self.customer.pk,
                "vendor_id": self.vendor.pk,
                "items": [{"description": "Visa", "quantity": 1, "unit_price": Decimal("250")}],
                "use_deposit": True,
            }
        )
        self.ticket = issue_ticket(
            draft={
                "customer_type": "customer",
                "party_id": self.customer.pk,
                "route": "DXB-BEY",
                "face_value": Decimal("300"),
            }
        )

    def test_invoice_issued_to_paid(self):
        invoice = change_status(document=self.invoice, target_status=Invoice.STATUS_PAID)
        self.assertEqual(invoice.status, Invoice.STATUS_PAID)

        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, Invoice.STATUS_PAID)

    def test_invoice_partial_then_paid(self):
        change_status(document=self.invoice, target_status=Invoice.STATUS_PARTIAL)
        invoice = change_status(document=self.invoice, target_status=Invoice.STATUS_PAID)
        self.assertEqual(invoice.status, Invoice.STATUS_PAID)

    def test_terminal_invoice_cannot_move(self):
        change_status(document=self.invoice, target_status=Invoice.STATUS_CANCELLED)

        with self.assertRaises(InvalidStatusTransitionError):
            change_status(document=self.invoice, target_status=Invoice.STATUS_ISSUED)

    def test_unknown_status_is_rejected(self):
        with self.assertRaises(InvalidStatusTransitionError):
            change_status(document=self.invoice, target_status="archived")

    def test_cancel_does_not_refund_balances(self):
        rows_before = CustomerTransaction.objects.count()

        change_status(document=self.invoice, target_status=Invoice.STATUS_CANCELLED)

        self.customer.refresh_from_db()
        self.assertEqual(self.customer.deposit_balance, Decimal("0.00"))
        self.assertEqual(CustomerTransaction.objects.count(), rows_before)

    def test_ticket_transitions(self):
        self.assertTrue(can_transition(document=self.ticket, to_status=Ticket.STATUS_USED))
        self.assertFalse(can_transition(document=self.ticket, to_status=Ticket.STATUS_PENDING))

        change_status(document=self.ticket, target_status=Ticket.STATUS_USED)
        ticket = change_status(document=self.ticket, target_status=Ticket.STATUS_REFUNDED)
        self.assertEqual(ticket.status, Ticket.STATUS_REFUNDED)

        with self.assertRaises(InvalidStatusTransitionError):
            change_status(document=ticket, target_status=Ticket.STATUS_ISSUED)
