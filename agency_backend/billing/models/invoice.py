# billing/models/invoice.py

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from billing.models.document import ZERO, BillingDocument, money_field


class Invoice(BillingDocument):
    """
    Customer/agent invoice.

    Money columns are the settlement calculator's output at issuance:
        total = subtotal - discount_amount - deposit_used - agent_credit_used
    vendor_balance_deducted is what was offset against the agency's
    balance with the vendor; it never reduces total.
    """

    STATUS_DRAFT = "draft"
    STATUS_ISSUED = "issued"
    STATUS_PAID = "paid"
    STATUS_PARTIAL = "partial"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_ISSUED, "Issued"),
        (STATUS_PAID, "Paid"),
        (STATUS_PARTIAL, "Partial"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    PAYMENT_CASH = "cash"
    PAYMENT_CARD = "card"
    PAYMENT_CREDIT = "credit"

    PAYMENT_METHOD_CHOICES = [
        (PAYMENT_CASH, "Cash"),
        (PAYMENT_CARD, "Card"),
        (PAYMENT_CREDIT, "Credit"),
    ]

    invoice_number = models.CharField(max_length=32, unique=True)

    vendor = models.ForeignKey(
        "parties.Vendor",
        on_delete=models.PROTECT,
        related_name="invoices",
    )

    subtotal = money_field()
    discount_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=ZERO,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    discount_amount = money_field()

    use_deposit = models.BooleanField(default=False)
    deposit_used = money_field()

    use_agent_credit = models.BooleanField(default=False)
    agent_credit_used = money_field()

    vendor_cost = money_field()
    use_vendor_balance = models.CharField(
        max_length=10,
        choices=BillingDocument.VENDOR_BALANCE_CHOICES,
        default="none",
    )
    vendor_balance_deducted = money_field()

    total = money_field(help_text="Amount due from the customer/agent")

    payment_method = models.CharField(
        max_length=10,
        choices=PAYMENT_METHOD_CHOICES,
        default=PAYMENT_CASH,
    )

    status = models.CharField(
        max_length=12,
        choices=STATUS_CHOICES,
        default=STATUS_ISSUED,
    )

    class Meta(BillingDocument.Meta):
        indexes = [
            models.Index(fields=["created_at"], name="billing_inv_created_idx"),
            models.Index(fields=["status"], name="billing_inv_status_idx"),
            models.Index(fields=["customer_type", "created_at"], name="billing_inv_ctype_idx"),
        ]

    def __str__(self):
        return f"{self.invoice_number} | {self.total}"

    @property
    def invoiced_amount(self):
        return self.subtotal - self.discount_amount

    @property
    def profit_margin(self):
        return self.total - self.vendor_cost


class InvoiceItem(models.Model):
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name="items",
    )
    position = models.PositiveIntegerField(default=0)
    description = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = money_field()
    line_total = money_field()

    class Meta:
        ordering = ["position", "id"]

    def __str__(self):
        return f"{self.description} x{self.quantity}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Invoice items are immutable once issued.")
        super().save(*args, **kwargs)
