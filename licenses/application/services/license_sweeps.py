"""
LicenseSweepService.

Scheduled sweeps over plugin licenses: renewal reminders and expiry
flagging. Both flags only ever go from False to True.
"""
import logging
from dataclasses import dataclass

from django.core.mail import send_mail
from django.db import transaction

from licenses.application.services.plugin_license_manager import PluginLicenseManager
from licenses.conf import get_setting
from licenses.domain.license import PluginLicense

logger = logging.getLogger(__name__)

REMINDER_SUBJECT = "Your plugin license is about to expire"


@dataclass
class SweepResult:
    """Outcome of a sweep."""

    found: int = 0
    processed: int = 0
    skipped: int = 0
    failed: int = 0


class LicenseSweepService:
    """Service running the reminder and expiry sweeps."""

    def __init__(self, license_manager: PluginLicenseManager):
        """Initialize service with the license manager."""
        self.license_manager = license_manager

    def send_reminders(self, dry_run: bool = False) -> SweepResult:
        """
        Email a renewal reminder for every remindable license.

        A failure for one license is logged and the sweep moves on;
        the license stays unflagged so the next sweep retries it.

        Args:
            dry_run: Find licenses without sending or flagging anything

        Returns:
            SweepResult
        """
        licenses = self.license_manager.get_remindable_licenses()
        result = SweepResult(found=len(licenses))
        if dry_run:
            return result

        for license in licenses:
            if not license.email:
                result.skipped += 1
                continue
            try:
                # The flag is claimed before sending; a failed send rolls it back.
                with transaction.atomic():
                    if not self.license_manager.mark_reminded(license):
                        result.skipped += 1
                        continue
                    send_mail(
                        REMINDER_SUBJECT,
                        self._reminder_body(license),
                        get_setting("REMINDER_FROM_EMAIL"),
                        [license.email],
                    )
                result.processed += 1
            except Exception as e:  # pylint: disable=broad-exception-caught
                result.failed += 1
                logger.error(
                    "Error sending reminder for license %s: %s",
                    license.id,
                    e,
                    exc_info=True,
                )

        logger.info(
            "Reminder sweep finished: %d sent, %d skipped, %d failed",
            result.processed,
            result.skipped,
            result.failed,
        )
        return result

    def expire_licenses(self, dry_run: bool = False) -> SweepResult:
        """
        Flag every freshly expired license as expired.

        Args:
            dry_run: Find licenses without flagging anything

        Returns:
            SweepResult
        """
        licenses = self.license_manager.get_freshly_expired_licenses()
        result = SweepResult(found=len(licenses))
        if dry_run:
            return result

        for license in licenses:
            try:
                if self.license_manager.mark_expired(license):
                    result.processed += 1
                    logger.info("Marked license %s as expired", license.id)
                else:
                    result.skipped += 1
            except Exception as e:  # pylint: disable=broad-exception-caught
                result.failed += 1
                logger.error(
                    "Error marking license %s as expired: %s",
                    license.id,
                    e,
                    exc_info=True,
                )
        return result

    @staticmethod
    def _reminder_body(license: PluginLicense) -> str:
        expires_on = license.expires_on.date().isoformat() if license.expires_on else "soon"
        return (
            f"Your license for {license.plugin_handle} ({license.edition_handle}), "
            f"key {license.short_key}..., expires on {expires_on}.\n\n"
            "Renew it to keep receiving updates."
        )
