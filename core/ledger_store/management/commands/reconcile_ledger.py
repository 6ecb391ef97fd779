from django.core.management.base import BaseCommand, CommandError

from core.ledger_store.errors import LedgerError
from core.ledger_store.wiring import build_inventory_service


class Command(BaseCommand):
    help = "Compare cash on hand with ledger history and report unrecorded transitions"

    def handle(self, *args, **options):
        service = build_inventory_service()
        try:
            report = service.adjuster.reconcile()
            unrecorded = service.find_unrecorded_transitions()
        except LedgerError as exc:
            raise CommandError(f"Reconciliation failed: {exc}")

        self.stdout.write(f"Cash on hand:   {report.stored_balance}")
        self.stdout.write(f"Ledger history: {report.ledger_sum} ({report.entry_count} entries)")
        self.stdout.write(f"Drift:          {report.drift}")

        for finding in unrecorded:
            self.stdout.write(self.style.WARNING(
                f"Missing {finding.idempotency_key}: expected "
                f"{finding.expected_delta:+}"
            ))

        if not report.is_consistent or unrecorded:
            raise CommandError(
                f"Ledger inconsistent: drift {report.drift}, "
                f"{len(unrecorded)} unrecorded transition(s)"
            )
        self.stdout.write(self.style.SUCCESS("Ledger consistent."))
