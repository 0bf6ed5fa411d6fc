import uuid
from decimal import Decimal

from django.db import migrations, models


def _party_fields():
    return [
        ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ("name", models.CharField(max_length=255)),
        ("phone", models.CharField(blank=True, default="", max_length=50)),
        ("email", models.EmailField(blank=True, default="", max_length=254)),
        ("company", models.CharField(blank=True, default="", max_length=255)),
        ("address", models.TextField(blank=True, default="")),
        (
            "deposit_balance",
            models.DecimalField(
                decimal_places=2,
                default=Decimal("0.00"),
                editable=False,
                help_text="Money the party has pre-paid. Ledger-managed.",
                max_digits=14,
            ),
        ),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=_party_fields(),
            options={
                "verbose_name": "Customer",
                "verbose_name_plural": "Customers",
                "ordering": ["name"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Agent",
            fields=_party_fields()
            + [
                (
                    "credit_balance",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        editable=False,
                        help_text="Credit line extended to the agent. Ledger-managed.",
                        max_digits=14,
                    ),
                ),
            ],
            options={
                "verbose_name": "Agent",
                "verbose_name_plural": "Agents",
                "ordering": ["name"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Vendor",
            fields=_party_fields()
            + [
                ("telephone", models.CharField(blank=True, default="", max_length=50)),
                ("logo", models.URLField(blank=True, default="")),
                (
                    "airlines",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="Airline codes/names this vendor issues for.",
                    ),
                ),
                (
                    "credit_balance",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        editable=False,
                        help_text="Credit held with the vendor. Ledger-managed.",
                        max_digits=14,
                    ),
                ),
            ],
            options={
                "verbose_name": "Vendor",
                "verbose_name_plural": "Vendors",
                "ordering": ["name"],
                "abstract": False,
            },
        ),
    ]
