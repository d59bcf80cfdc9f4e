"""
PluginLicenseManager.

Application service for looking up, saving, claiming, projecting and
deleting plugin licenses.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from django.db import transaction
from django.utils import timezone

from core.domain.exceptions import (
    InvalidEditionHandleError,
    InvalidKeyFormatError,
    InvalidPluginHandleError,
    LicenseAlreadyClaimedError,
    LicenseNotFoundError,
    LicensePersistenceError,
    LicenseValidationError,
)
from core.domain.value_objects import Account
from core.metrics import (
    licenses_claimed_total,
    licenses_deleted_total,
    licenses_expired_total,
    licenses_reminded_total,
    licenses_saved_total,
)
from licenses.application.dto.license_dto import (
    CmsLicenseDTO,
    CmsLicenseFullDTO,
    CmsLicenseRedactedDTO,
    EditionDTO,
    FullLicenseView,
    HistoryEntryDTO,
    LicensePage,
    LicenseView,
    PluginSummaryDTO,
    RedactedLicenseView,
)
from licenses.application.queries.list_licenses import LicenseQueryOptions
from licenses.conf import get_setting
from licenses.domain.history import LicenseHistoryEntry
from licenses.domain.license import PluginLicense
from licenses.domain.license_key import normalize_key
from licenses.domain.services import get_expiry_date_options
from licenses.ports.cms_license_repository import CmsLicenseRepository
from licenses.ports.license_repository import LicenseRepository
from plugins.ports.plugin_repository import PluginRepository

logger = logging.getLogger(__name__)

_NOT_FOUND_MESSAGE = "No license exists with that key"


def _midnight(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


class PluginLicenseManager:
    """Service for plugin license lookups and state transitions."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        plugin_repository: PluginRepository,
        cms_license_repository: CmsLicenseRepository,
    ):
        """Initialize manager with repositories."""
        self.license_repository = license_repository
        self.plugin_repository = plugin_repository
        self.cms_license_repository = cms_license_repository

    # Lookups

    @staticmethod
    def normalize_key(key: str) -> str:
        """
        Normalize a license key by removing dashes and trimming whitespace.

        Raises:
            InvalidKeyFormatError: If the normalized key isn't 24 characters long
        """
        return normalize_key(key)

    def get_license_by_key(
        self, key: str, plugin_handle: Optional[str] = None, any_status: bool = False
    ) -> PluginLicense:
        """
        Return a license by its key.

        A malformed key is reported exactly like an unknown one.

        Args:
            key: License key in any accepted shape
            plugin_handle: Only match licenses for this plugin
            any_status: Include licenses for disabled plugins/editions

        Returns:
            PluginLicense entity

        Raises:
            InvalidPluginHandleError: If no plugin has the given handle
            LicenseNotFoundError: If no license matches
        """
        try:
            key = normalize_key(key)
        except InvalidKeyFormatError as e:
            raise LicenseNotFoundError(_NOT_FOUND_MESSAGE) from e

        license = self.license_repository.find_by_key(key, plugin_handle, any_status)
        if license is None:
            if plugin_handle is not None and not self.plugin_repository.exists_by_handle(
                plugin_handle
            ):
                raise InvalidPluginHandleError(f"Invalid plugin handle: {plugin_handle}")
            raise LicenseNotFoundError(_NOT_FOUND_MESSAGE)
        return license

    def get_license_by_id(self, license_id: int, any_status: bool = False) -> PluginLicense:
        """
        Return a license by its ID.

        Raises:
            LicenseNotFoundError: If no license matches
        """
        license = self.license_repository.find_by_id(license_id, any_status)
        if license is None:
            raise LicenseNotFoundError(f"No license exists with the ID: {license_id}")
        return license

    # Listings

    def get_licenses_by_owner(
        self, owner: Account, options: Optional[LicenseQueryOptions] = None
    ) -> LicensePage[LicenseView]:
        """
        Return a page of an account's licenses, projected for that account.

        Args:
            owner: Owning account
            options: Search, sort and pagination options

        Returns:
            LicensePage of license views; ``total`` ignores pagination
        """
        options = options or LicenseQueryOptions()
        licenses, total = self.license_repository.find_by_owner(owner.id, options)
        return LicensePage(
            items=self.transform_licenses_for_owner(licenses, owner),
            total=total,
            page=options.page,
            limit=options.per_page,
        )

    def get_total_licenses_by_owner(self, owner: Account, search: Optional[str] = None) -> int:
        """Return the number of licenses an account owns."""
        return self.license_repository.count_by_owner(owner.id, search)

    def get_licenses_by_order(self, order_id: int) -> List[PluginLicense]:
        """Return the licenses purchased or renewed by an order."""
        return self.license_repository.find_by_order(order_id)

    def get_licenses_by_cms_license(self, cms_license_id: int) -> List[PluginLicense]:
        """Return the licenses attached to a CMS license, ordered by plugin handle."""
        return self.license_repository.find_by_cms_license(cms_license_id)

    def get_licenses_by_developer(
        self, developer_id: int, options: Optional[LicenseQueryOptions] = None
    ) -> LicensePage[PluginLicense]:
        """
        Return a page of licenses for plugins made by a developer.

        Args:
            developer_id: Developer account ID
            options: Search, sort, pagination and extra condition

        Returns:
            LicensePage of license entities; ``total`` ignores pagination
        """
        options = options or LicenseQueryOptions()
        licenses, total = self.license_repository.find_by_developer(developer_id, options)
        return LicensePage(items=licenses, total=total, page=options.page, limit=options.per_page)

    def get_renewable_licenses(self, owner_id: int) -> List[PluginLicense]:
        """Return an account's licenses expiring within the renewal window."""
        before = timezone.now() + timedelta(days=get_setting("RENEWAL_WINDOW_DAYS"))
        return self.license_repository.find_expiring_before(owner_id, before)

    def get_remindable_licenses(self) -> List[PluginLicense]:
        """
        Return licenses that should get a renewal reminder.

        These are expirable, not yet reminded, and expire within the
        reminder window counted from today's midnight (inclusive).
        """
        start_days, end_days = get_setting("REMINDER_WINDOW_DAYS")
        today = _midnight(timezone.now())
        return self.license_repository.find_remindable(
            today + timedelta(days=start_days), today + timedelta(days=end_days)
        )

    def get_freshly_expired_licenses(self) -> List[PluginLicense]:
        """Return expirable licenses that expire before tomorrow but aren't flagged yet."""
        tomorrow = _midnight(timezone.now()) + timedelta(days=1)
        return self.license_repository.find_freshly_expired(tomorrow)

    def get_expiring_licenses_total(self, owner: Account) -> int:
        """
        Return how many of an account's licenses need renewing soon.

        Auto-renewing and already expired licenses are not counted.
        """
        until = timezone.now() + timedelta(days=get_setting("RENEWAL_WINDOW_DAYS"))
        return self.license_repository.count_expiring(owner.id, until)

    # Writes

    def save_license(self, license: PluginLicense, run_validation: bool = True) -> bool:
        """
        Save a license.

        Args:
            license: License entity; its ID is set after an insert
            run_validation: Validate the license first

        Returns:
            False if validation failed (errors are left on the license)

        Raises:
            InvalidPluginHandleError: If the plugin handle doesn't resolve
            InvalidEditionHandleError: If the edition handle doesn't resolve
            LicensePersistenceError: If the store rejected the write
        """
        if run_validation and not license.validate():
            logger.info(
                "License not saved due to validation errors: %s",
                "; ".join(license.error_summary()),
            )
            return False

        if not license.plugin_id:
            license.plugin_id = self.plugin_repository.find_id_by_handle(license.plugin_handle)
            if license.plugin_id is None:
                raise InvalidPluginHandleError(f"Invalid plugin handle: {license.plugin_handle}")

        if not license.edition_id:
            license.edition_id = self.plugin_repository.find_edition_id(
                license.plugin_id, license.edition_handle
            )
            if license.edition_id is None:
                raise InvalidEditionHandleError(
                    f"Invalid plugin edition: {license.edition_handle}"
                )

        if license.expirable:
            if license.renewal_price is None:
                edition = self.plugin_repository.find_edition_by_id(license.edition_id)
                license.renewal_price = edition.renewal_price if edition else None
        else:
            license.renewal_price = None

        if license.date_created is None:
            license.date_created = timezone.now()

        if license.id is None:
            license.id = self.license_repository.insert(license)
            licenses_saved_total.labels(operation="insert").inc()
            logger.info("Created license %s", license.short_key)
        else:
            if not self.license_repository.update(license):
                raise LicensePersistenceError(
                    f"License validated but didn't save: {license.id}"
                )
            licenses_saved_total.labels(operation="update").inc()
            logger.info("Updated license %s", license.short_key)
        return True

    def add_history(
        self, license_id: int, note: str, timestamp: Optional[datetime] = None
    ) -> LicenseHistoryEntry:
        """
        Append a note to a license's history.

        Args:
            license_id: License ID
            note: History note
            timestamp: When it happened (defaults to now)

        Returns:
            The stored history entry
        """
        entry = LicenseHistoryEntry(
            license_id=license_id, note=note, timestamp=timestamp or timezone.now()
        )
        self.license_repository.add_history(entry)
        return entry

    def get_history(self, license_id: int) -> List[LicenseHistoryEntry]:
        """Return a license's history, oldest first."""
        return self.license_repository.find_history(license_id)

    def claim_license(self, user: Account, key: str) -> PluginLicense:
        """
        Claim an unowned license for an account.

        The ownership check and the write happen in a single conditional
        update, so at most one of several concurrent claims succeeds.

        Args:
            user: Claiming account
            key: License key in any accepted shape

        Returns:
            The claimed license

        Raises:
            LicenseNotFoundError: If the key is malformed or unknown
            LicenseAlreadyClaimedError: If the license already has an owner
            LicenseValidationError: If the claimed license would be invalid
        """
        license = self.get_license_by_key(key)

        if license.is_claimed:
            raise LicenseAlreadyClaimedError()

        license.owner_id = user.id
        license.email = user.email

        if not license.validate():
            raise LicenseValidationError(
                "; ".join(license.error_summary()), errors=license.errors
            )

        with transaction.atomic():
            if not self.license_repository.claim(license.id, user.id, user.email):
                raise LicenseAlreadyClaimedError()
            self.add_history(license.id, f"claimed by {user.email}")

        licenses_claimed_total.labels(method="key").inc()
        logger.info("License %s claimed by account %s", license.short_key, user.id)
        return license

    def claim_licenses(self, user: Account, email: Optional[str] = None) -> int:
        """
        Claim every unowned license whose email matches.

        Args:
            user: Claiming account
            email: Email to match case-insensitively (defaults to the account's)

        Returns:
            Number of licenses claimed
        """
        claimed = self.license_repository.claim_by_email(user.id, email or user.email)
        if claimed:
            licenses_claimed_total.labels(method="email").inc(claimed)
            logger.info("Account %s claimed %d license(s) by email", user.id, claimed)
        return claimed

    def mark_reminded(self, license: PluginLicense) -> bool:
        """
        Flag a license as reminded.

        The flag and its history note are written in one transaction.

        Returns:
            False if the license was already flagged
        """
        with transaction.atomic():
            if not self.license_repository.mark_reminded(license.id):
                return False
            self.add_history(license.id, "renewal reminder sent")
        license.reminded = True
        licenses_reminded_total.inc()
        return True

    def mark_expired(self, license: PluginLicense) -> bool:
        """
        Flag a license as expired.

        Returns:
            False if the license was already flagged
        """
        with transaction.atomic():
            if not self.license_repository.mark_expired(license.id):
                return False
            self.add_history(license.id, "expired")
        license.expired = True
        licenses_expired_total.inc()
        return True

    def delete_license_by_id(self, license_id: int) -> None:
        """
        Delete a license by ID.

        Raises:
            LicenseNotFoundError: If no license was deleted
        """
        if not self.license_repository.delete_by_id(license_id):
            raise LicenseNotFoundError(f"No license exists with the ID: {license_id}")
        licenses_deleted_total.inc()
        logger.info("Deleted license %s", license_id)

    def delete_license_by_key(self, key: str) -> None:
        """
        Delete a license by key.

        Raises:
            LicenseNotFoundError: If the key is malformed or no license was deleted
        """
        try:
            key = normalize_key(key)
        except InvalidKeyFormatError as e:
            raise LicenseNotFoundError(_NOT_FOUND_MESSAGE) from e

        if not self.license_repository.delete_by_key(key):
            raise LicenseNotFoundError(_NOT_FOUND_MESSAGE)
        licenses_deleted_total.inc()
        logger.info("Deleted license %s", key[:10])

    # Projection

    def transform_license_for_owner(
        self, license: PluginLicense, owner: Optional[Account]
    ) -> LicenseView:
        """
        Project a license for a viewer.

        Only the owner sees the full key, email and notes. Everyone else
        gets the short key, with the same history, edition, plugin and
        CMS license details. Private notes are never projected.

        Args:
            license: License entity
            owner: Viewing account

        Returns:
            FullLicenseView or RedactedLicenseView
        """
        viewer_id = owner.id if owner else None
        history = [
            HistoryEntryDTO(note=entry.note, timestamp=entry.timestamp)
            for entry in self.get_history(license.id)
        ]
        edition = self._edition_dto(license.edition_id)
        plugin = self._plugin_dto(license.plugin_id)
        cms_license = self._cms_license_dto(license.cms_license_id, viewer_id)

        if not license.is_owned_by(viewer_id):
            return RedactedLicenseView(
                short_key=license.short_key,
                history=history,
                edition=edition,
                plugin=plugin,
                cms_license=cms_license,
            )

        expiry_date_options = None
        if license.expires_on is not None:
            expiry_date_options = {
                option.key: option.date
                for option in get_expiry_date_options(license.expires_on, timezone.now())
            }

        return FullLicenseView(
            id=license.id,
            edition_id=license.edition_id,
            key=license.key,
            cms_license_id=license.cms_license_id,
            email=license.email,
            notes=license.notes,
            auto_renew=license.auto_renew,
            expirable=license.expirable,
            expired=license.expired,
            expires_on=license.expires_on,
            date_created=license.date_created,
            history=history,
            edition=edition,
            expiry_date_options=expiry_date_options,
            plugin=plugin,
            cms_license=cms_license,
        )

    def transform_licenses_for_owner(
        self, licenses: List[PluginLicense], owner: Optional[Account]
    ) -> List[LicenseView]:
        """Project several licenses for a viewer."""
        return [self.transform_license_for_owner(license, owner) for license in licenses]

    def _edition_dto(self, edition_id: Optional[int]) -> Optional[EditionDTO]:
        edition = self.plugin_repository.find_edition_by_id(edition_id) if edition_id else None
        if edition is None:
            return None
        return EditionDTO(
            id=edition.id,
            name=edition.name,
            handle=str(edition.handle),
            price=edition.price,
            renewal_price=edition.renewal_price,
        )

    def _plugin_dto(self, plugin_id: Optional[int]) -> Optional[PluginSummaryDTO]:
        plugin = self.plugin_repository.find_by_id(plugin_id) if plugin_id else None
        if plugin is None:
            return None
        return PluginSummaryDTO(
            name=plugin.name,
            handle=str(plugin.handle),
            has_multiple_editions=plugin.has_multiple_editions,
        )

    def _cms_license_dto(
        self, cms_license_id: Optional[int], viewer_id: Optional[int]
    ) -> Optional[CmsLicenseDTO]:
        if not cms_license_id:
            return None
        cms_license = self.cms_license_repository.find_by_id(cms_license_id)
        if cms_license is None:
            return None
        if cms_license.is_owned_by(viewer_id):
            return CmsLicenseFullDTO(key=cms_license.key, edition_handle=cms_license.edition_handle)
        return CmsLicenseRedactedDTO(short_key=cms_license.short_key)
