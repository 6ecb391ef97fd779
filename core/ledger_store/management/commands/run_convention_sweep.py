from datetime import date

from django.core.management.base import BaseCommand, CommandError

from core.ledger_store.errors import LedgerError
from core.ledger_store.wiring import build_inventory_service


class Command(BaseCommand):
    help = "Release items still tagged to an event once its release date has passed"

    def add_arguments(self, parser):
        parser.add_argument(
            "--event-end",
            required=True,
            help="Event end date, YYYY-MM-DD",
        )

    def handle(self, *args, **options):
        try:
            event_end = date.fromisoformat(options["event_end"])
        except ValueError:
            raise CommandError(
                f"--event-end must be YYYY-MM-DD, got {options['event_end']!r}"
            )

        service = build_inventory_service()
        try:
            released = service.run_convention_sweep(event_end)
        except LedgerError as exc:
            raise CommandError(f"Convention sweep failed: {exc}")

        if not released:
            self.stdout.write("No items due for release.")
            return

        for item in released:
            self.stdout.write(f"Released {item.item_id} ({item.name})")
        self.stdout.write(
            self.style.SUCCESS(f"Released {len(released)} item(s) from event.")
        )
