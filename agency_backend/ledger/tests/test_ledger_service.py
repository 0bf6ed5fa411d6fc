from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from ledger.models import AgentTransaction, CustomerTransaction, VendorTransaction
from ledger.services.exceptions import (
    InsufficientBalanceError,
    LedgerValidationError,
    PartyNotFoundError,
)
from ledger.services.ledger_service import (
    apply_delta,
    apply_transaction,
    create_party,
    get_balance,
    list_transactions,
    replay_balance,
    reset_ledgers,
    verify_all_ledgers,
    verify_party_ledger,
)
from parties.models import Agent, Customer, Vendor

D = Decimal


class LedgerServiceTests(TestCase):
    """
    GUARANTEES:
    - Every balance change appends exactly one row with balance_after
    - Replaying rows reproduces the stored balance
    - Customer/agent balances never go negative
    - Rows are append-only
    """

    def setUp(self):
        self.customer = create_party("customer", {"name": "Hana Yousef"})
        self.agent = create_party("agent", {"name": "Blue Sky Tours"})
        self.vendor = create_party("vendor", {"name": "FlyDubai Desk"})

    def test_manual_vendor_deposit_credit(self):
        row = apply_transaction(
            party_type="vendor",
            party_id=self.vendor.pk,
            balance_type="deposit",
            entry_type="credit",
            amount=D("500"),
            description="advance payment",
        )

        self.vendor.refresh_from_db()
        self.assertEqual(self.vendor.deposit_balance, D("500.00"))
        self.assertEqual(row.balance_after, D("500.00"))
        self.assertEqual(row.entry_type, "credit")
        self.assertEqual(row.reference_type, "manual")
        self.assertEqual(VendorTransaction.objects.count(), 1)

        apply_transaction(
            party_type="vendor",
            party_id=self.vendor.pk,
            balance_type="deposit",
            entry_type="credit",
            amount=D("250.25"),
            description="second advance",
        )
        self.assertEqual(get_balance("vendor", self.vendor.pk, "deposit"), D("750.25"))
        last = list_transactions(party_type="vendor", party_id=self.vendor.pk).last()
        self.assertEqual(last.balance_after, D("750.25"))

    def test_customer_cannot_go_negative(self):
        apply_delta(party_type="customer", party_id=self.customer.pk, balance_type="deposit", amount=D("100"))

        with self.assertRaises(InsufficientBalanceError) as ctx:
            apply_transaction(
                party_type="customer",
                party_id=self.customer.pk,
                balance_type="deposit",
                entry_type="debit",
                amount=D("150"),
                description="refund",
            )

        self.assertEqual(ctx.exception.available, D("100.00"))
        self.assertEqual(ctx.exception.requested, D("150.00"))
        self.assertEqual(get_balance("customer", self.customer.pk, "deposit"), D("100.00"))
        self.assertEqual(CustomerTransaction.objects.count(), 1)

    def test_agent_credit_cannot_go_negative(self):
        with self.assertRaises(InsufficientBalanceError):
            apply_transaction(
                party_type="agent",
                party_id=self.agent.pk,
                balance_type="credit",
                entry_type="debit",
                amount=D("1"),
                description="",
            )
        self.assertFalse(AgentTransaction.objects.exists())

    def test_vendor_manual_debit_may_overdraw(self):
        row = apply_transaction(
            party_type="vendor",
            party_id=self.vendor.pk,
            balance_type="credit",
            entry_type="debit",
            amount=D("75"),
            description="correction",
        )
        self.assertEqual(row.balance_after, D("-75.00"))
        self.assertEqual(get_balance("vendor", self.vendor.pk, "credit"), D("-75.00"))

    def test_vendor_system_draw_cannot_overdraw(self):
        with self.assertRaises(InsufficientBalanceError):
            apply_delta(party_type="vendor", party_id=self.vendor.pk, balance_type="credit", amount=D("-10"))

    def test_customer_has_no_credit_balance(self):
        with self.assertRaises(LedgerValidationError):
            apply_delta(party_type="customer", party_id=self.customer.pk, balance_type="credit", amount=D("10"))

    def test_invalid_inputs(self):
        with self.assertRaises(LedgerValidationError):
            apply_delta(party_type="customer", party_id=self.customer.pk, balance_type="deposit", amount=0)
        with self.assertRaises(LedgerValidationError):
            apply_delta(party_type="airline", party_id=self.customer.pk, balance_type="deposit", amount=1)
        with self.assertRaises(LedgerValidationError):
            apply_transaction(
                party_type="customer",
                party_id=self.customer.pk,
                balance_type="deposit",
                entry_type="credit",
                amount=D("-5"),
                description="",
            )
        with self.assertRaises(LedgerValidationError):
            apply_transaction(
                party_type="customer",
                party_id=self.customer.pk,
                balance_type="deposit",
                entry_type="sideways",
                amount=D("5"),
                description="",
            )

    def test_unknown_party(self):
        with self.assertRaises(PartyNotFoundError):
            apply_delta(
                party_type="customer",
                party_id="00000000-0000-0000-0000-000000000000",
                balance_type="deposit",
                amount=D("10"),
            )
        with self.assertRaises(PartyNotFoundError):
            get_balance("customer", "not-a-uuid", "deposit")

    def test_amounts_round_half_up(self):
        row = apply_delta(
            party_type="customer", party_id=self.customer.pk, balance_type="deposit", amount="10.005"
        )
        self.assertEqual(row.amount, D("10.01"))

    def test_rows_are_append_only(self):
        row = apply_delta(party_type="customer", party_id=self.customer.pk, balance_type="deposit", amount=D("10"))

        row.amount = D("999")
        with self.assertRaises(ValidationError):
            row.save()
        with self.assertRaises(ValidationError):
            row.delete()

    def test_replay_and_verify(self):
        for amount in ("100", "-30", "45.50", "-15.50"):
            apply_delta(
                party_type="customer", party_id=self.customer.pk, balance_type="deposit", amount=D(amount)
            )

        self.assertEqual(replay_balance(party_type="customer", party_id=self.customer.pk, balance_type="deposit"), D("100.00"))
        self.assertEqual(get_balance("customer", self.customer.pk, "deposit"), D("100.00"))
        self.assertEqual(verify_party_ledger(party_type="customer", party_id=self.customer.pk), [])
        self.assertEqual(list(verify_all_ledgers()), [])

    def test_verify_detects_out_of_band_balance_write(self):
        apply_delta(party_type="customer", party_id=self.customer.pk, balance_type="deposit", amount=D("100"))
        Customer.objects.filter(pk=self.customer.pk).update(deposit_balance=D("150"))

        mismatches = verify_party_ledger(party_type="customer", party_id=self.customer.pk)
        self.assertEqual(len(mismatches), 1)
        self.assertEqual(mismatches[0].stored_balance, D("150.00"))
        self.assertEqual(mismatches[0].replayed_balance, D("100.00"))

    def test_list_transactions_filters(self):
        apply_delta(party_type="vendor", party_id=self.vendor.pk, balance_type="deposit", amount=D("10"))
        apply_delta(party_type="vendor", party_id=self.vendor.pk, balance_type="credit", amount=D("20"))

        self.assertEqual(list_transactions(party_type="vendor").count(), 2)
        self.assertEqual(
            list_transactions(party_type="vendor", party_id=self.vendor.pk, balance_type="credit").count(), 1
        )

    def test_reset_ledgers(self):
        apply_delta(party_type="customer", party_id=self.customer.pk, balance_type="deposit", amount=D("10"))
        apply_delta(party_type="vendor", party_id=self.vendor.pk, balance_type="credit", amount=D("20"))

        deleted = reset_ledgers()

        self.assertEqual(deleted["customer"], 1)
        self.assertEqual(deleted["vendor"], 1)
        self.assertEqual(get_balance("customer", self.customer.pk, "deposit"), D("0.00"))
        self.assertEqual(get_balance("vendor", self.vendor.pk, "credit"), D("0.00"))
        self.assertEqual(list(verify_all_ledgers()), [])


class CreatePartyTests(TestCase):
    def test_opening_balances_are_booked_as_credits(self):
        agent = create_party(
            "agent",
            {"name": "Atlas Agency"},
            opening_deposit=D("200"),
            opening_credit=D("1000"),
        )

        self.assertEqual(agent.deposit_balance, D("200.00"))
        self.assertEqual(agent.credit_balance, D("1000.00"))

        rows = list(AgentTransaction.objects.filter(agent=agent))
        self.assertEqual(len(rows), 2)
        self.assertTrue(all(r.description == "Opening balance" for r in rows))
        self.assertTrue(all(r.reference_type == "opening" for r in rows))
        self.assertEqual(verify_party_ledger(party_type="agent", party_id=agent.pk), [])

    def test_zero_openings_write_no_rows(self):
        customer = create_party("customer", {"name": "Walk-in"})
        self.assertEqual(customer.deposit_balance, D("0.00"))
        self.assertFalse(CustomerTransaction.objects.exists())

    def test_negative_opening_rejected_before_create(self):
        with self.assertRaises(LedgerValidationError):
            create_party("customer", {"name": "Broken"}, opening_deposit=D("-1"))
        self.assertFalse(Customer.objects.exists())

    def test_credit_opening_for_customer_rejected(self):
        with self.assertRaises(LedgerValidationError):
            create_party("customer", {"name": "Broken"}, opening_credit=D("10"))
        self.assertFalse(Customer.objects.exists())

    def test_vendor_fields(self):
        vendor = create_party(
            "vendor",
            {"name": "Oman Air GSA", "telephone": "+968 1234", "airlines": ["WY"]},
        )
        self.assertEqual(Vendor.objects.get(pk=vendor.pk).airlines, ["WY"])
        self.assertEqual(Agent.objects.count(), 0)
