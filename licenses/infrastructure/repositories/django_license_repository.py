"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from django.db import DatabaseError, transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from core.domain.exceptions import LicensePersistenceError
from licenses.application.queries.list_licenses import LicenseQueryOptions
from licenses.domain.history import LicenseHistoryEntry
from licenses.domain.license import PluginLicense
from licenses.infrastructure.models import PluginLicense as PluginLicenseModel
from licenses.infrastructure.models import PluginLicenseHistory as HistoryModel
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to row values
    3. Implements repository interface
    """

    def _to_domain(self, model: PluginLicenseModel) -> PluginLicense:
        """
        Convert Django model to domain entity.

        Args:
            model: Django PluginLicense model

        Returns:
            PluginLicense domain entity
        """
        return PluginLicense(
            id=model.id,
            plugin_id=model.plugin_id,
            edition_id=model.edition_id,
            owner_id=model.owner_id,
            cms_license_id=model.cms_license_id,
            plugin_handle=model.plugin_handle,
            edition_handle=model.edition_handle,
            expirable=model.expirable,
            expired=model.expired,
            auto_renew=model.auto_renew,
            reminded=model.reminded,
            renewal_price=model.renewal_price,
            email=model.email,
            key=model.key,
            notes=model.notes,
            private_notes=model.private_notes,
            last_version=model.last_version,
            last_allowed_version=model.last_allowed_version,
            last_activity_on=model.last_activity_on,
            last_renewed_on=model.last_renewed_on,
            expires_on=model.expires_on,
            date_created=model.date_created,
            date_updated=model.date_updated,
        )

    def _to_row(self, license: PluginLicense) -> Dict[str, Any]:
        """
        Convert domain entity to column values.

        Args:
            license: PluginLicense domain entity

        Returns:
            Mapping of model field name to value
        """
        return {
            "plugin_id": license.plugin_id,
            "edition_id": license.edition_id,
            "owner_id": license.owner_id,
            "cms_license_id": license.cms_license_id,
            "plugin_handle": license.plugin_handle,
            "edition_handle": license.edition_handle,
            "expirable": license.expirable,
            "expired": license.expired,
            "auto_renew": license.auto_renew,
            "reminded": license.reminded,
            "renewal_price": license.renewal_price,
            "email": license.email,
            "key": license.key,
            "notes": license.notes,
            "private_notes": license.private_notes,
            "last_version": license.last_version,
            "last_allowed_version": license.last_allowed_version,
            "last_activity_on": license.last_activity_on,
            "last_renewed_on": license.last_renewed_on,
            "expires_on": license.expires_on,
            "date_created": license.date_created,
        }

    def _history_to_domain(self, model: HistoryModel) -> LicenseHistoryEntry:
        return LicenseHistoryEntry(
            license_id=model.license_id,
            note=model.note,
            timestamp=model.timestamp,
        )

    def _queryset(self, any_status: bool = False) -> QuerySet:
        """
        Base queryset for license lookups.

        Args:
            any_status: Include licenses for disabled plugins/editions

        Returns:
            PluginLicense queryset
        """
        queryset = PluginLicenseModel.objects.all()  # pylint: disable=no-member
        if not any_status:
            queryset = queryset.filter(plugin__enabled=True, edition__enabled=True)
        return queryset

    @staticmethod
    def _apply_search(queryset: QuerySet, search: Optional[str]) -> QuerySet:
        if not search:
            return queryset
        return queryset.filter(
            Q(key__icontains=search)
            | Q(notes__icontains=search)
            | Q(plugin_handle__icontains=search)
            | Q(email__icontains=search)
        )

    @staticmethod
    def _apply_ordering(
        queryset: QuerySet, options: LicenseQueryOptions, default: Optional[str] = None
    ) -> QuerySet:
        if options.order_by:
            prefix = "" if options.ascending else "-"
            # id keeps pages stable when the sort column has duplicates
            return queryset.order_by(f"{prefix}{options.order_by}", f"{prefix}id")
        if default:
            return queryset.order_by(default, "id")
        return queryset

    def _page(
        self, queryset: QuerySet, options: LicenseQueryOptions
    ) -> Tuple[List[PluginLicense], int]:
        total = queryset.count()
        start = options.offset
        models = queryset[start : start + options.per_page]
        return [self._to_domain(model) for model in models], total

    def find_by_id(self, license_id: int, any_status: bool = False) -> Optional[PluginLicense]:
        """
        Find a license by ID.

        Args:
            license_id: License ID
            any_status: Include licenses for disabled plugins/editions

        Returns:
            PluginLicense entity or None if not found
        """
        model = self._queryset(any_status).filter(id=license_id).first()
        return self._to_domain(model) if model else None

    def find_by_key(
        self, key: str, plugin_handle: Optional[str] = None, any_status: bool = False
    ) -> Optional[PluginLicense]:
        """
        Find a license by its normalized key.

        Args:
            key: Normalized license key
            plugin_handle: Only match licenses for this plugin
            any_status: Include licenses for disabled plugins/editions

        Returns:
            PluginLicense entity or None if not found
        """
        queryset = self._queryset(any_status).filter(key=key)
        if plugin_handle is not None:
            queryset = queryset.filter(plugin__handle=plugin_handle)
        model = queryset.first()
        return self._to_domain(model) if model else None

    def find_by_owner(
        self, owner_id: int, options: LicenseQueryOptions
    ) -> Tuple[List[PluginLicense], int]:
        """
        Find a page of licenses owned by an account.

        Args:
            owner_id: Owner account ID
            options: Search, sort and pagination options

        Returns:
            Tuple of (licenses on the page, total matching licenses)
        """
        queryset = self._apply_search(self._queryset().filter(owner_id=owner_id), options.search)
        return self._page(self._apply_ordering(queryset, options), options)

    def count_by_owner(self, owner_id: int, search: Optional[str] = None) -> int:
        """
        Count licenses owned by an account.

        Args:
            owner_id: Owner account ID
            search: Optional search text

        Returns:
            Number of matching licenses
        """
        return self._apply_search(self._queryset().filter(owner_id=owner_id), search).count()

    def find_by_order(self, order_id: int) -> List[PluginLicense]:
        """
        Find licenses purchased or renewed by an order.

        Args:
            order_id: Order ID

        Returns:
            List of PluginLicense entities
        """
        queryset = self._queryset().filter(line_items__order_id=order_id).distinct().order_by("id")
        return [self._to_domain(model) for model in queryset]

    def find_by_cms_license(self, cms_license_id: int) -> List[PluginLicense]:
        """
        Find licenses attached to a CMS license, ordered by plugin handle.

        Args:
            cms_license_id: CMS license ID

        Returns:
            List of PluginLicense entities
        """
        queryset = self._queryset().filter(cms_license_id=cms_license_id).order_by(
            "plugin_handle", "id"
        )
        return [self._to_domain(model) for model in queryset]

    def find_by_developer(
        self, developer_id: int, options: LicenseQueryOptions
    ) -> Tuple[List[PluginLicense], int]:
        """
        Find a page of licenses for plugins made by a developer.

        Args:
            developer_id: Developer account ID
            options: Search, sort, pagination and extra condition

        Returns:
            Tuple of (licenses on the page, total matching licenses)
        """
        queryset = self._queryset().filter(plugin__developer_id=developer_id)
        if options.condition is not None:
            queryset = queryset.filter(options.condition)
        queryset = self._apply_search(queryset, options.search)
        return self._page(self._apply_ordering(queryset, options, default="date_created"), options)

    def find_expiring_before(self, owner_id: int, before: datetime) -> List[PluginLicense]:
        """
        Find an owner's licenses that expire before a date.

        Args:
            owner_id: Owner account ID
            before: Exclusive upper bound for expires_on

        Returns:
            List of PluginLicense entities
        """
        queryset = self._queryset().filter(owner_id=owner_id, expires_on__lt=before)
        return [self._to_domain(model) for model in queryset.order_by("expires_on", "id")]

    def find_remindable(self, range_start: datetime, range_end: datetime) -> List[PluginLicense]:
        """
        Find expirable, not yet reminded licenses expiring within a range.

        Args:
            range_start: Inclusive lower bound for expires_on
            range_end: Inclusive upper bound for expires_on

        Returns:
            List of PluginLicense entities
        """
        queryset = self._queryset().filter(
            expirable=True,
            reminded=False,
            expires_on__range=(range_start, range_end),
        )
        return [self._to_domain(model) for model in queryset.order_by("expires_on", "id")]

    def find_freshly_expired(self, before: datetime) -> List[PluginLicense]:
        """
        Find expirable licenses past their expiry date but not yet flagged expired.

        Args:
            before: Exclusive upper bound for expires_on

        Returns:
            List of PluginLicense entities
        """
        queryset = self._queryset().filter(
            expirable=True,
            expired=False,
            expires_on__isnull=False,
            expires_on__lt=before,
        )
        return [self._to_domain(model) for model in queryset.order_by("expires_on", "id")]

    def count_expiring(self, owner_id: int, until: datetime) -> int:
        """
        Count an owner's unexpired, non-auto-renewing licenses expiring by a date.

        Args:
            owner_id: Owner account ID
            until: Inclusive upper bound for expires_on

        Returns:
            Number of matching licenses
        """
        return (
            self._queryset()
            .filter(
                owner_id=owner_id,
                expired=False,
                auto_renew=False,
                expires_on__isnull=False,
                expires_on__lte=until,
            )
            .count()
        )

    def insert(self, license: PluginLicense) -> int:
        """
        Insert a new license.

        Args:
            license: License entity without an ID

        Returns:
            The generated license ID

        Raises:
            LicensePersistenceError: If the database rejects the row
        """
        try:
            with transaction.atomic():
                # pylint: disable=no-member
                model = PluginLicenseModel.objects.create(**self._to_row(license))
        except DatabaseError as e:
            logger.error("Failed to insert license %s: %s", license.short_key, e)
            raise LicensePersistenceError("License validated but didn't save") from e
        return model.id

    def update(self, license: PluginLicense) -> int:
        """
        Update an existing license.

        Args:
            license: License entity with an ID

        Returns:
            Number of rows updated

        Raises:
            LicensePersistenceError: If the database rejects the row
        """
        try:
            with transaction.atomic():
                # pylint: disable=no-member
                return PluginLicenseModel.objects.filter(id=license.id).update(
                    date_updated=timezone.now(), **self._to_row(license)
                )
        except DatabaseError as e:
            logger.error("Failed to update license %s: %s", license.id, e)
            raise LicensePersistenceError("License validated but didn't save") from e

    def claim(self, license_id: int, owner_id: int, email: str) -> bool:
        """
        Assign an owner to a license if, and only if, it has none.

        The ownership check and the write are a single UPDATE, so two
        concurrent claims can never both succeed.

        Args:
            license_id: License ID
            owner_id: New owner account ID
            email: New contact email

        Returns:
            True if the license was claimed, False if it already had an owner
        """
        # pylint: disable=no-member
        rows = PluginLicenseModel.objects.filter(id=license_id, owner__isnull=True).update(
            owner_id=owner_id, email=email, date_updated=timezone.now()
        )
        return rows == 1

    def claim_by_email(self, owner_id: int, email: str) -> int:
        """
        Assign an owner to every unowned license with a matching email.

        Args:
            owner_id: New owner account ID
            email: Email to match, case-insensitively

        Returns:
            Number of licenses claimed
        """
        # pylint: disable=no-member
        return PluginLicenseModel.objects.filter(owner__isnull=True, email__iexact=email).update(
            owner_id=owner_id, date_updated=timezone.now()
        )

    def mark_reminded(self, license_id: int) -> bool:
        """
        Flag a license as reminded.

        Returns:
            True if the flag changed, False if it was already set
        """
        # pylint: disable=no-member
        rows = PluginLicenseModel.objects.filter(id=license_id, reminded=False).update(
            reminded=True, date_updated=timezone.now()
        )
        return rows == 1

    def mark_expired(self, license_id: int) -> bool:
        """
        Flag a license as expired.

        Returns:
            True if the flag changed, False if it was already set
        """
        # pylint: disable=no-member
        rows = PluginLicenseModel.objects.filter(id=license_id, expired=False).update(
            expired=True, date_updated=timezone.now()
        )
        return rows == 1

    def _delete(self, **lookup) -> int:
        # pylint: disable=no-member
        _, deleted = PluginLicenseModel.objects.filter(**lookup).delete()
        # delete() also counts cascaded history and line items
        return deleted.get(PluginLicenseModel._meta.label, 0)  # pylint: disable=protected-access

    def delete_by_id(self, license_id: int) -> int:
        """
        Delete a license by ID.

        Returns:
            Number of licenses deleted
        """
        return self._delete(id=license_id)

    def delete_by_key(self, key: str) -> int:
        """
        Delete a license by its normalized key.

        Returns:
            Number of licenses deleted
        """
        return self._delete(key=key)

    def add_history(self, entry: LicenseHistoryEntry) -> None:
        """
        Append an entry to a license's history.

        Args:
            entry: History entry
        """
        HistoryModel.objects.create(  # pylint: disable=no-member
            license_id=entry.license_id,
            note=entry.note,
            timestamp=entry.timestamp,
        )

    def find_history(self, license_id: int) -> List[LicenseHistoryEntry]:
        """
        Return a license's history in chronological order.

        Args:
            license_id: License ID

        Returns:
            List of LicenseHistoryEntry
        """
        # pylint: disable=no-member
        models = HistoryModel.objects.filter(license_id=license_id).order_by("timestamp", "id")
        return [self._history_to_domain(model) for model in models]
