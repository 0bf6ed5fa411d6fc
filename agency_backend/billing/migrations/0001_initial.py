import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _money(**kwargs):
    kwargs.setdefault("default", Decimal("0.00"))
    return models.DecimalField(decimal_places=2, max_digits=14, **kwargs)


def _document_fields(related):
    return [
        ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        (
            "customer_type",
            models.CharField(
                choices=[("customer", "Customer"), ("agent", "Agent")],
                default="customer",
                max_length=10,
            ),
        ),
        ("notes", models.TextField(blank=True, default="")),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        (
            "customer",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.PROTECT,
                related_name=related,
                to="parties.customer",
            ),
        ),
        (
            "agent",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.PROTECT,
                related_name=related,
                to="parties.agent",
            ),
        ),
        (
            "issued_by",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name=f"issued_{related}",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]


VENDOR_BALANCE_CHOICES = [("none", "None"), ("credit", "Credit"), ("deposit", "Deposit")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("parties", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DocumentCounter",
            fields=[
                ("name", models.CharField(max_length=20, primary_key=True, serialize=False)),
                ("last_value", models.PositiveIntegerField(default=0)),
            ],
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=_document_fields("invoices")
            + [
                ("invoice_number", models.CharField(max_length=32, unique=True)),
                ("subtotal", _money()),
                (
                    "discount_percent",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(100),
                        ],
                    ),
                ),
                ("discount_amount", _money()),
                ("use_deposit", models.BooleanField(default=False)),
                ("deposit_used", _money()),
                ("use_agent_credit", models.BooleanField(default=False)),
                ("agent_credit_used", _money()),
                ("vendor_cost", _money()),
                (
                    "use_vendor_balance",
                    models.CharField(choices=VENDOR_BALANCE_CHOICES, default="none", max_length=10),
                ),
                ("vendor_balance_deducted", _money()),
                ("total", _money(help_text="Amount due from the customer/agent")),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("cash", "Cash"), ("card", "Card"), ("credit", "Credit")],
                        default="cash",
                        max_length=10,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("issued", "Issued"),
                            ("paid", "Paid"),
                            ("partial", "Partial"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="issued",
                        max_length=12,
                    ),
                ),
                (
                    "vendor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoices",
                        to="parties.vendor",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["created_at"], name="billing_inv_created_idx"),
                    models.Index(fields=["status"], name="billing_inv_status_idx"),
                    models.Index(fields=["customer_type", "created_at"], name="billing_inv_ctype_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvoiceItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveIntegerField(default=0)),
                ("description", models.CharField(max_length=255)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("unit_price", _money()),
                ("line_total", _money()),
                (
                    "invoice",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="billing.invoice",
                    ),
                ),
            ],
            options={
                "ordering": ["position", "id"],
            },
        ),
        migrations.CreateModel(
            name="Ticket",
            fields=_document_fields("tickets")
            + [
                ("ticket_number", models.CharField(max_length=32, unique=True)),
                ("pnr", models.CharField(blank=True, default="", max_length=20)),
                (
                    "trip_type",
                    models.CharField(
                        choices=[("one_way", "One way"), ("round_trip", "Round trip")],
                        default="one_way",
                        max_length=12,
                    ),
                ),
                (
                    "seat_class",
                    models.CharField(
                        choices=[("economy", "Economy"), ("business", "Business"), ("first", "First")],
                        default="economy",
                        max_length=10,
                    ),
                ),
                ("route", models.CharField(blank=True, default="", max_length=255)),
                ("airlines", models.CharField(blank=True, default="", max_length=255)),
                ("flight_number", models.CharField(blank=True, default="", max_length=20)),
                ("travel_date", models.DateField(blank=True, null=True)),
                ("return_date", models.DateField(blank=True, null=True)),
                ("passenger_name", models.CharField(blank=True, default="", max_length=255)),
                ("passenger_names", models.JSONField(blank=True, default=list)),
                ("passenger_count", models.PositiveIntegerField(default=1)),
                ("vendor_price", _money(help_text="What the agency pays the vendor")),
                ("airline_price", _money()),
                ("middle_class_price", _money(help_text="Agency mark-up")),
                ("face_value", _money(help_text="Price charged to the customer/agent")),
                ("deduct_from_deposit", models.BooleanField(default=False)),
                ("deposit_deducted", _money()),
                ("use_agent_credit", models.BooleanField(default=False)),
                ("agent_credit_used", _money()),
                (
                    "use_vendor_balance",
                    models.CharField(choices=VENDOR_BALANCE_CHOICES, default="none", max_length=10),
                ),
                ("vendor_balance_deducted", _money()),
                ("amount_due", _money()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("processing", "Processing"),
                            ("approved", "Approved"),
                            ("issued", "Issued"),
                            ("used", "Used"),
                            ("cancelled", "Cancelled"),
                            ("refunded", "Refunded"),
                        ],
                        default="issued",
                        max_length=12,
                    ),
                ),
                (
                    "vendor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tickets",
                        to="parties.vendor",
                    ),
                ),
                (
                    "invoice",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="tickets",
                        to="billing.invoice",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["created_at"], name="billing_tkt_created_idx"),
                    models.Index(fields=["status"], name="billing_tkt_status_idx"),
                    models.Index(fields=["pnr"], name="billing_tkt_pnr_idx"),
                ],
            },
        ),
    ]
