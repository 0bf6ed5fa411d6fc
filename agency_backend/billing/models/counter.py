# billing/models/counter.py

from __future__ import annotations

from django.db import models


class DocumentCounter(models.Model):
    """
    Last number handed out per document sequence ("invoice", "ticket").

    Incremented under select_for_update inside the issuance transaction,
    so a rolled-back issuance also rolls back its number.
    """

    name = models.CharField(max_length=20, primary_key=True)
    last_value = models.PositiveIntegerField(default=0)

    def __str__(self):
        return f"{self.name}: {self.last_value}"
