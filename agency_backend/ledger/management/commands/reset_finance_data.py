# ledger/management/commands/reset_finance_data.py

"""
Hard reset for TESTING / staging.

--finance   wipe every party ledger and zero all balances
--invoices  delete invoices (+ items) and restart INV numbering
--tickets   delete tickets and restart TKT numbering

Deleting documents does NOT give drawn balances back; combine with
--finance for a clean slate.
"""

from __future__ import annotations

from django.core.management.base import BaseCommand
from django.db import transaction

from billing.models import DocumentCounter, Invoice, Ticket
from billing.services.numbering import SEQUENCE_INVOICE, SEQUENCE_TICKET
from ledger.services.ledger_service import reset_ledgers


class Command(BaseCommand):
    help = "Reset ledgers/balances and optionally wipe issued invoices and tickets."

    def add_arguments(self, parser):
        parser.add_argument(
            "--i-am-sure",
            action="store_true",
            help="Required safety flag. Without this, the command will not run.",
        )
        parser.add_argument("--finance", action="store_true", help="Wipe ledgers + zero balances.")
        parser.add_argument("--invoices", action="store_true", help="Delete all invoices.")
        parser.add_argument("--tickets", action="store_true", help="Delete all tickets.")

    @transaction.atomic
    def handle(self, *args, **options):
        if not options.get("i_am_sure"):
            self.stdout.write(self.style.ERROR("Refusing to run without --i-am-sure"))
            self.stdout.write(
                "Example: python manage.py reset_finance_data --i-am-sure --finance --invoices --tickets"
            )
            return

        do_finance = bool(options.get("finance"))
        do_invoices = bool(options.get("invoices"))
        do_tickets = bool(options.get("tickets"))

        if not (do_finance or do_invoices or do_tickets):
            self.stdout.write(self.style.WARNING("Nothing selected. Use --finance, --invoices and/or --tickets."))
            return

        self.stdout.write(self.style.WARNING("RESETTING FINANCE DATA..."))

        # QuerySet.delete() skips the per-instance immutability guard.
        # Tickets first: they may point at invoices.
        if do_tickets:
            count, _ = Ticket.objects.all().delete()
            DocumentCounter.objects.filter(name=SEQUENCE_TICKET).delete()
            self.stdout.write(f"Deleted tickets: {count}")

        if do_invoices:
            count, _ = Invoice.objects.all().delete()
            DocumentCounter.objects.filter(name=SEQUENCE_INVOICE).delete()
            self.stdout.write(f"Deleted invoices (+ items): {count}")

        if do_finance:
            deleted = reset_ledgers()
            for party_type, count in deleted.items():
                self.stdout.write(f"Deleted {party_type} ledger rows: {count}")

        self.stdout.write(self.style.SUCCESS("Finance data reset complete."))
