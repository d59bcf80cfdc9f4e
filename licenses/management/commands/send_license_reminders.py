"""
Django management command to send license renewal reminders.

This command should be run daily (e.g., via cron or celery beat).
"""
from django.core.management.base import BaseCommand

from licenses.infrastructure.services import get_sweep_service


class Command(BaseCommand):
    """Command to email reminders for licenses about to expire."""

    help = "Send renewal reminders for plugin licenses about to expire"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - don't send emails or flag licenses",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        dry_run = options["dry_run"]
        service = get_sweep_service()

        if dry_run:
            licenses = service.license_manager.get_remindable_licenses()
            self.stdout.write(f"Found {len(licenses)} license(s) to remind")
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            for license in licenses[:10]:  # Show first 10
                self.stdout.write(f"  - License {license.id} expires on {license.expires_on}")
            return

        result = service.send_reminders()
        self.stdout.write(f"Found {result.found} license(s) to remind")
        if result.failed:
            # pylint: disable=no-member
            self.stdout.write(self.style.ERROR(f"Failed to remind {result.failed} license(s)"))
        self.stdout.write(
            # pylint: disable=no-member
            self.style.SUCCESS(f"Successfully sent {result.processed} reminder(s)")
        )
