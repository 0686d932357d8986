import logging

from django.core.management.base import BaseCommand

from infrastructure.container import container

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Finishes interrupted request completions and optionally retries failed payouts."

    def add_arguments(self, parser):
        parser.add_argument(
            "--payouts",
            action="store_true",
            help="Also retry payouts that failed with a retryable gateway error",
        )

    def handle(self, *args, **options):
        service = container.request_ledger_service()

        self.stdout.write(self.style.SUCCESS("Starting request recovery sweep..."))
        result = service.recover_migrations()
        if not result.ok:
            self.stderr.write(self.style.ERROR(f"Recovery failed: {result.error_detail}"))
            return
        self.stdout.write(f"Repaired {result.value} request(s).")

        if options["payouts"]:
            payouts = service.retry_failed_payouts()
            if not payouts.ok:
                self.stderr.write(self.style.ERROR(f"Payout retry failed: {payouts.error_detail}"))
                return
            self.stdout.write(f"Completed {payouts.value} request(s) on payout retry.")

        self.stdout.write(self.style.SUCCESS("Recovery finished."))
