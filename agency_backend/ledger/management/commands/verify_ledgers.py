# ledger/management/commands/verify_ledgers.py

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from ledger.services.ledger_service import verify_all_ledgers
from parties.models import PARTY_TYPES


class Command(BaseCommand):
    help = (
        "Replay every party ledger and compare running totals with balance_after "
        "and the stored balance columns. Exits non-zero on any mismatch."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--party-type",
            action="append",
            choices=PARTY_TYPES,
            dest="party_types",
            help="Limit to one party type (repeatable). Default: all.",
        )

    def handle(self, *args, **options):
        party_types = options.get("party_types") or None

        mismatches = 0
        for mismatch in verify_all_ledgers(party_types):
            mismatches += 1
            self.stdout.write(
                self.style.ERROR(
                    f"{mismatch.party_type} {mismatch.party_id} [{mismatch.balance_type}] "
                    f"{mismatch.detail}"
                )
            )

        if mismatches:
            raise CommandError(f"{mismatches} ledger mismatch(es) found")

        self.stdout.write(self.style.SUCCESS("All ledgers consistent."))
