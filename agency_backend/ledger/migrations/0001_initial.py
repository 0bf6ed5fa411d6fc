from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


def _transaction_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("entry_type", models.CharField(choices=[("credit", "Credit"), ("debit", "Debit")], max_length=6)),
        (
            "balance_type",
            models.CharField(
                choices=[("deposit", "Deposit"), ("credit", "Credit")],
                default="deposit",
                max_length=10,
            ),
        ),
        (
            "amount",
            models.DecimalField(
                decimal_places=2,
                help_text="Positive monetary value",
                max_digits=14,
                validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
            ),
        ),
        ("description", models.CharField(blank=True, default="", max_length=255)),
        (
            "payment_method",
            models.CharField(
                choices=[("cash", "Cash"), ("cheque", "Cheque"), ("bank_transfer", "Bank transfer")],
                default="cash",
                max_length=20,
            ),
        ),
        (
            "reference_type",
            models.CharField(
                blank=True,
                default="",
                help_text="What caused this row, e.g. invoice / ticket / manual / opening",
                max_length=30,
            ),
        ),
        ("reference_id", models.CharField(blank=True, default="", max_length=64)),
        ("balance_after", models.DecimalField(decimal_places=2, max_digits=14)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("parties", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="CustomerTransaction",
            fields=_transaction_fields()
            + [
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="parties.customer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Customer Transaction",
                "verbose_name_plural": "Customer Transactions",
                "ordering": ["created_at", "id"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["customer", "balance_type", "created_at"], name="ledger_cust_party_idx"),
                    models.Index(fields=["created_at"], name="ledger_cust_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AgentTransaction",
            fields=_transaction_fields()
            + [
                (
                    "agent",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="parties.agent",
                    ),
                ),
            ],
            options={
                "verbose_name": "Agent Transaction",
                "verbose_name_plural": "Agent Transactions",
                "ordering": ["created_at", "id"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["agent", "balance_type", "created_at"], name="ledger_agent_party_idx"),
                    models.Index(fields=["created_at"], name="ledger_agent_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="VendorTransaction",
            fields=_transaction_fields()
            + [
                (
                    "vendor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="parties.vendor",
                    ),
                ),
            ],
            options={
                "verbose_name": "Vendor Transaction",
                "verbose_name_plural": "Vendor Transactions",
                "ordering": ["created_at", "id"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["vendor", "balance_type", "created_at"], name="ledger_vendor_party_idx"),
                    models.Index(fields=["created_at"], name="ledger_vendor_created_idx"),
                ],
            },
        ),
    ]
