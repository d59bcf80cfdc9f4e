"""
Django management command to mark expired plugin licenses.

This command should be run periodically (e.g., via cron or celery beat).
"""
from django.core.management.base import BaseCommand

from licenses.infrastructure.services import get_sweep_service


class Command(BaseCommand):
    """Command to flag plugin licenses past their expiry date."""

    help = "Check and mark expired plugin licenses"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - don't actually update licenses",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        dry_run = options["dry_run"]
        service = get_sweep_service()

        if dry_run:
            licenses = service.license_manager.get_freshly_expired_licenses()
            self.stdout.write(f"Found {len(licenses)} expired license(s)")
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            for license in licenses[:10]:  # Show first 10
                self.stdout.write(f"  - License {license.id} expired at {license.expires_on}")
            return

        result = service.expire_licenses()
        self.stdout.write(f"Found {result.found} expired license(s)")
        if not result.found:
            # pylint: disable=no-member
            self.stdout.write(self.style.SUCCESS("No expired licenses to update"))
            return

        self.stdout.write(
            # pylint: disable=no-member
            self.style.SUCCESS(f"Successfully marked {result.processed} license(s) as expired")
        )
