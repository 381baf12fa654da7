"""Management command to retry failed wallet pass updates."""

from django.core.management.base import BaseCommand

from volta.contrib.wallet.retry import RetryQueue


class Command(BaseCommand):
    help = "Retry wallet pass updates whose next attempt is due"

    def add_arguments(self, parser):
        parser.add_argument(
            "--stats",
            action="store_true",
            help="Only print queue statistics",
        )
        parser.add_argument(
            "--clear",
            action="store_true",
            help="Remove every queued item",
        )

    def handle(self, *args, **options):
        if options["clear"]:
            removed = RetryQueue.clear()
            self.stdout.write(self.style.SUCCESS(f"Removed {removed} queued wallet updates."))
            return

        if not options["stats"]:
            counts = RetryQueue.process_due()
            self.stdout.write(
                self.style.SUCCESS(
                    f"Processed {counts['processed']} wallet updates: "
                    f"{counts['succeeded']} succeeded, {counts['rescheduled']} rescheduled, "
                    f"{counts['failed']} failed."
                )
            )

        stats = RetryQueue.stats()
        self.stdout.write(
            f"Queue: {stats['total']} total, {stats['pending']} pending, {stats['failed']} failed."
        )
