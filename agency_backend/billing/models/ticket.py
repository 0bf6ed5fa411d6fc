# billing/models/ticket.py

from __future__ import annotations

from django.db import models

from billing.models.document import BillingDocument, money_field


class Ticket(BillingDocument):
    """
    Airline ticket sold to a customer or agent.

    Settles like a one-line invoice at face_value:
        amount_due = face_value - deposit_deducted - agent_credit_used
    vendor may be empty when the ticket is bought straight from the airline.
    """

    STATUS_PENDING = "pending"
    STATUS_PROCESSING = "processing"
    STATUS_APPROVED = "approved"
    STATUS_ISSUED = "issued"
    STATUS_USED = "used"
    STATUS_CANCELLED = "cancelled"
    STATUS_REFUNDED = "refunded"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_ISSUED, "Issued"),
        (STATUS_USED, "Used"),
        (STATUS_CANCELLED, "Cancelled"),
        (STATUS_REFUNDED, "Refunded"),
    ]

    TRIP_ONE_WAY = "one_way"
    TRIP_ROUND_TRIP = "round_trip"

    TRIP_TYPE_CHOICES = [
        (TRIP_ONE_WAY, "One way"),
        (TRIP_ROUND_TRIP, "Round trip"),
    ]

    SEAT_CLASS_CHOICES = [
        ("economy", "Economy"),
        ("business", "Business"),
        ("first", "First"),
    ]

    ticket_number = models.CharField(max_length=32, unique=True)

    vendor = models.ForeignKey(
        "parties.Vendor",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="tickets",
    )
    invoice = models.ForeignKey(
        "billing.Invoice",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="tickets",
    )

    # -------- travel --------
    pnr = models.CharField(max_length=20, blank=True, default="")
    trip_type = models.CharField(max_length=12, choices=TRIP_TYPE_CHOICES, default=TRIP_ONE_WAY)
    seat_class = models.CharField(max_length=10, choices=SEAT_CLASS_CHOICES, default="economy")
    route = models.CharField(max_length=255, blank=True, default="")
    airlines = models.CharField(max_length=255, blank=True, default="")
    flight_number = models.CharField(max_length=20, blank=True, default="")
    travel_date = models.DateField(null=True, blank=True)
    return_date = models.DateField(null=True, blank=True)
    passenger_name = models.CharField(max_length=255, blank=True, default="")
    passenger_names = models.JSONField(default=list, blank=True)
    passenger_count = models.PositiveIntegerField(default=1)

    # -------- pricing --------
    vendor_price = money_field(help_text="What the agency pays the vendor")
    airline_price = money_field()
    middle_class_price = money_field(help_text="Agency mark-up")
    face_value = money_field(help_text="Price charged to the customer/agent")

    # -------- settlement --------
    deduct_from_deposit = models.BooleanField(default=False)
    deposit_deducted = money_field()
    use_agent_credit = models.BooleanField(default=False)
    agent_credit_used = money_field()
    use_vendor_balance = models.CharField(
        max_length=10,
        choices=BillingDocument.VENDOR_BALANCE_CHOICES,
        default="none",
    )
    vendor_balance_deducted = money_field()
    amount_due = money_field()

    status = models.CharField(
        max_length=12,
        choices=STATUS_CHOICES,
        default=STATUS_ISSUED,
    )

    class Meta(BillingDocument.Meta):
        indexes = [
            models.Index(fields=["created_at"], name="billing_tkt_created_idx"),
            models.Index(fields=["status"], name="billing_tkt_status_idx"),
            models.Index(fields=["pnr"], name="billing_tkt_pnr_idx"),
        ]

    def __str__(self):
        return f"{self.ticket_number} | {self.route}"

    @property
    def profit(self):
        return self.face_value - self.vendor_price
