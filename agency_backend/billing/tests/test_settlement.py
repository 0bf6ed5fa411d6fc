from decimal import Decimal

from django.test import SimpleTestCase

from billing.services.exceptions import DraftValidationError
from billing.services.settlement import (
    VENDOR_BALANCE_CREDIT,
    VENDOR_BALANCE_DEPOSIT,
    AvailableBalances,
    LineItem,
    SettlementDraft,
    compute_settlement,
    invoice_draft,
    ticket_draft,
    ticket_face_value,
    validate_draft,
)
from parties.models import PARTY_AGENT, PARTY_CUSTOMER

D = Decimal


def _draft(amount="1000.00", **kwargs):
    kwargs.setdefault("party_type", PARTY_CUSTOMER)
    return SettlementDraft(
        items=(LineItem(description="Package", quantity=1, unit_price=D(amount)),),
        **kwargs,
    )


class SettlementCalculatorTests(SimpleTestCase):
    """
    Settlement waterfall:
    subtotal -> discount -> deposit -> agent credit -> total,
    with the vendor draw computed on the side.
    """

    def test_discount_then_deposit(self):
        result = compute_settlement(
            _draft("1000", discount_percent=D("10"), use_deposit=True),
            AvailableBalances(deposit=D("300")),
        )

        self.assertEqual(result.subtotal, D("1000.00"))
        self.assertEqual(result.discount_amount, D("100.00"))
        self.assertEqual(result.deposit_used, D("300.00"))
        self.assertEqual(result.total, D("600.00"))

    def test_agent_credit_without_deposit(self):
        result = compute_settlement(
            _draft("500", party_type=PARTY_AGENT, use_agent_credit=True),
            AvailableBalances(deposit=D("999"), agent_credit=D("50")),
        )

        self.assertEqual(result.deposit_used, D("0.00"))
        self.assertEqual(result.agent_credit_used, D("50.00"))
        self.assertEqual(result.total, D("450.00"))

    def test_vendor_credit_draw_does_not_touch_total(self):
        without = compute_settlement(_draft("700", vendor_cost=D("200")), AvailableBalances())
        result = compute_settlement(
            _draft("700", vendor_cost=D("200"), vendor_balance_source=VENDOR_BALANCE_CREDIT),
            AvailableBalances(vendor_credit=D("80")),
        )

        self.assertEqual(result.vendor_balance_deducted, D("80.00"))
        self.assertEqual(result.total, without.total)
        self.assertEqual(result.total, D("700.00"))

    def test_vendor_deposit_draw_capped_at_cost(self):
        result = compute_settlement(
            _draft("700", vendor_cost=D("200"), vendor_balance_source=VENDOR_BALANCE_DEPOSIT),
            AvailableBalances(vendor_deposit=D("5000")),
        )
        self.assertEqual(result.vendor_balance_deducted, D("200.00"))

    def test_deposit_clamps_to_available(self):
        result = compute_settlement(
            _draft("1000", use_deposit=True),
            AvailableBalances(deposit=D("100")),
        )

        self.assertEqual(result.deposit_used, D("100.00"))
        self.assertEqual(result.total, D("900.00"))

    def test_deposit_clamps_to_amount_owed(self):
        result = compute_settlement(
            _draft("250", use_deposit=True),
            AvailableBalances(deposit=D("1000")),
        )

        self.assertEqual(result.deposit_used, D("250.00"))
        self.assertEqual(result.total, D("0.00"))

    def test_deposit_then_agent_credit_share_the_remainder(self):
        result = compute_settlement(
            _draft("1000", party_type=PARTY_AGENT, use_deposit=True, use_agent_credit=True),
            AvailableBalances(deposit=D("400"), agent_credit=D("900")),
        )

        self.assertEqual(result.deposit_used, D("400.00"))
        self.assertEqual(result.agent_credit_used, D("600.00"))
        self.assertEqual(result.total, D("0.00"))

    def test_agent_credit_ignored_for_customers(self):
        result = compute_settlement(
            _draft("100", use_agent_credit=True),
            AvailableBalances(agent_credit=D("100")),
        )
        self.assertEqual(result.agent_credit_used, D("0.00"))
        self.assertEqual(result.total, D("100.00"))

    def test_flags_off_draw_nothing(self):
        result = compute_settlement(
            _draft("100", vendor_cost=D("60")),
            AvailableBalances(deposit=D("100"), agent_credit=D("100"), vendor_credit=D("100")),
        )
        self.assertEqual(result.deposit_used, D("0.00"))
        self.assertEqual(result.vendor_balance_deducted, D("0.00"))
        self.assertEqual(result.profit_margin, D("40.00"))

    def test_negative_balances_are_treated_as_empty(self):
        result = compute_settlement(
            _draft("100", use_deposit=True, vendor_cost=D("50"), vendor_balance_source=VENDOR_BALANCE_CREDIT),
            AvailableBalances(deposit=D("-20"), vendor_credit=D("-300")),
        )
        self.assertEqual(result.deposit_used, D("0.00"))
        self.assertEqual(result.vendor_balance_deducted, D("0.00"))

    def test_discount_over_100_is_clamped(self):
        result = compute_settlement(_draft("80", discount_percent=D("150")), AvailableBalances())
        self.assertEqual(result.discount_amount, D("80.00"))
        self.assertEqual(result.total, D("0.00"))

    def test_rounding_is_half_up(self):
        draft = SettlementDraft(
            items=(LineItem(description="x", quantity=3, unit_price=D("3.335")),),
            discount_percent=D("12.5"),
        )
        result = compute_settlement(draft, AvailableBalances())

        # 3.335 -> 3.34, x3 = 10.02; 12.5% of 10.02 = 1.2525 -> 1.25
        self.assertEqual(result.subtotal, D("10.02"))
        self.assertEqual(result.discount_amount, D("1.25"))
        self.assertEqual(result.total, D("8.77"))

    def test_discount_uses_the_rounded_percent(self):
        result = compute_settlement(_draft("1000", discount_percent=D("12.345")), AvailableBalances())

        self.assertEqual(result.discount_percent, D("12.35"))
        self.assertEqual(result.discount_amount, D("123.50"))
        self.assertEqual(result.total, D("876.50"))

    def test_multi_line_subtotal(self):
        draft = SettlementDraft(
            items=(
                LineItem(description="Flight", quantity=2, unit_price=D("450.00")),
                LineItem(description="Visa", quantity=1, unit_price=D("120.50")),
            ),
        )
        result = compute_settlement(draft, AvailableBalances())

        self.assertEqual(result.line_totals, (D("900.00"), D("120.50")))
        self.assertEqual(result.subtotal, D("1020.50"))

    def test_draws_never_exceed_available_or_owed(self):
        cases = [
            ("1000", "10", "300", "50"),
            ("50", "0", "1000", "1000"),
            ("0", "0", "100", "100"),
            ("333.33", "33.33", "12.34", "500"),
        ]
        for amount, pct, deposit, credit in cases:
            with self.subTest(amount=amount, pct=pct):
                balances = AvailableBalances(deposit=D(deposit), agent_credit=D(credit))
                result = compute_settlement(
                    _draft(
                        amount,
                        party_type=PARTY_AGENT,
                        discount_percent=D(pct),
                        use_deposit=True,
                        use_agent_credit=True,
                    ),
                    balances,
                )
                owed = result.subtotal - result.discount_amount

                self.assertLessEqual(result.deposit_used, balances.deposit)
                self.assertLessEqual(result.deposit_used, owed)
                self.assertLessEqual(result.agent_credit_used, balances.agent_credit)
                self.assertLessEqual(result.agent_credit_used, owed - result.deposit_used)
                self.assertGreaterEqual(result.total, D("0.00"))
                self.assertLessEqual(
                    abs(
                        result.total
                        - (
                            result.subtotal
                            - result.discount_amount
                            - result.deposit_used
                            - result.agent_credit_used
                        )
                    ),
                    D("0.01"),
                )

    def test_same_input_same_output(self):
        draft = _draft("1234.56", discount_percent=D("7.5"), use_deposit=True)
        balances = AvailableBalances(deposit=D("100"))

        self.assertEqual(compute_settlement(draft, balances), compute_settlement(draft, balances))
        self.assertEqual(balances.deposit, D("100"))


class DraftValidationTests(SimpleTestCase):
    def test_empty_items_rejected(self):
        with self.assertRaises(DraftValidationError) as ctx:
            validate_draft(SettlementDraft(items=()))
        self.assertIn("items", ctx.exception.errors)

    def test_bad_quantity_price_and_discount_collected_together(self):
        draft = SettlementDraft(
            items=(LineItem(description="x", quantity=0, unit_price=D("-1")),),
            discount_percent=D("120"),
            vendor_cost=D("-5"),
        )
        with self.assertRaises(DraftValidationError) as ctx:
            validate_draft(draft)

        errors = ctx.exception.errors
        self.assertIn("items[0].quantity", errors)
        self.assertIn("items[0].unit_price", errors)
        self.assertIn("discount_percent", errors)
        self.assertIn("vendor_cost", errors)

    def test_unknown_party_type_and_vendor_source(self):
        draft = SettlementDraft(
            items=(LineItem(description="x", quantity=1, unit_price=D("1")),),
            party_type="vendor",
            vendor_balance_source="wallet",
        )
        with self.assertRaises(DraftValidationError) as ctx:
            validate_draft(draft)

        self.assertIn("customer_type", ctx.exception.errors)
        self.assertIn("use_vendor_balance", ctx.exception.errors)

    def test_valid_draft_passes(self):
        validate_draft(_draft("10"))


class DraftBuilderTests(SimpleTestCase):
    def test_invoice_draft_from_payload(self):
        draft = invoice_draft(
            {
                "customer_type": "agent",
                "items": [{"description": "Hotel", "quantity": 2, "unit_price": D("75.00")}],
                "discount_percent": D("5"),
                "use_agent_credit": True,
                "vendor_cost": D("100"),
                "use_vendor_balance": "deposit",
            }
        )

        self.assertEqual(draft.party_type, PARTY_AGENT)
        self.assertEqual(len(draft.items), 1)
        self.assertTrue(draft.use_agent_credit)
        self.assertEqual(draft.vendor_balance_source, "deposit")

    def test_ticket_face_value_defaults_to_vendor_plus_markup(self):
        self.assertEqual(
            ticket_face_value({"vendor_price": D("400"), "middle_class_price": D("55.5")}),
            D("455.50"),
        )
        self.assertEqual(
            ticket_face_value({"vendor_price": D("400"), "face_value": D("500")}),
            D("500.00"),
        )

    def test_ticket_draft_is_single_line_at_face_value(self):
        draft = ticket_draft(
            {
                "route": "DXB-LHR",
                "vendor_price": D("400"),
                "middle_class_price": D("50"),
                "deduct_from_deposit": True,
            }
        )

        self.assertEqual(len(draft.items), 1)
        self.assertEqual(draft.items[0].line_total, D("450.00"))
        self.assertEqual(draft.vendor_cost, D("400"))
        self.assertTrue(draft.use_deposit)
