"""
License repository port (interface).

This defines the contract for plugin license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from licenses.application.queries.list_licenses import LicenseQueryOptions
from licenses.domain.history import LicenseHistoryEntry
from licenses.domain.license import PluginLicense


class LicenseRepository(ABC):
    """
    Abstract repository for PluginLicense entities and their history.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.

    Unless a method takes ``any_status``, lookups only see licenses whose
    plugin and edition are both enabled.
    """

    @abstractmethod
    def find_by_id(self, license_id: int, any_status: bool = False) -> Optional[PluginLicense]:
        """
        Find a license by ID.

        Args:
            license_id: License ID
            any_status: Include licenses for disabled plugins/editions

        Returns:
            PluginLicense entity or None if not found
        """
        pass

    @abstractmethod
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
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    def count_by_owner(self, owner_id: int, search: Optional[str] = None) -> int:
        """
        Count licenses owned by an account.

        Args:
            owner_id: Owner account ID
            search: Optional search text

        Returns:
            Number of matching licenses
        """
        pass

    @abstractmethod
    def find_by_order(self, order_id: int) -> List[PluginLicense]:
        """
        Find licenses purchased or renewed by an order.

        Args:
            order_id: Order ID

        Returns:
            List of PluginLicense entities
        """
        pass

    @abstractmethod
    def find_by_cms_license(self, cms_license_id: int) -> List[PluginLicense]:
        """
        Find licenses attached to a CMS license, ordered by plugin handle.

        Args:
            cms_license_id: CMS license ID

        Returns:
            List of PluginLicense entities
        """
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    def find_expiring_before(self, owner_id: int, before: datetime) -> List[PluginLicense]:
        """
        Find an owner's licenses that expire before a date.

        Args:
            owner_id: Owner account ID
            before: Exclusive upper bound for expires_on

        Returns:
            List of PluginLicense entities
        """
        pass

    @abstractmethod
    def find_remindable(self, range_start: datetime, range_end: datetime) -> List[PluginLicense]:
        """
        Find expirable, not yet reminded licenses expiring within a range.

        Args:
            range_start: Inclusive lower bound for expires_on
            range_end: Inclusive upper bound for expires_on

        Returns:
            List of PluginLicense entities
        """
        pass

    @abstractmethod
    def find_freshly_expired(self, before: datetime) -> List[PluginLicense]:
        """
        Find expirable licenses past their expiry date but not yet flagged expired.

        Args:
            before: Exclusive upper bound for expires_on

        Returns:
            List of PluginLicense entities
        """
        pass

    @abstractmethod
    def count_expiring(self, owner_id: int, until: datetime) -> int:
        """
        Count an owner's unexpired, non-auto-renewing licenses expiring by a date.

        Args:
            owner_id: Owner account ID
            until: Inclusive upper bound for expires_on

        Returns:
            Number of matching licenses
        """
        pass

    @abstractmethod
    def insert(self, license: PluginLicense) -> int:
        """
        Insert a new license.

        Args:
            license: License entity without an ID

        Returns:
            The generated license ID
        """
        pass

    @abstractmethod
    def update(self, license: PluginLicense) -> int:
        """
        Update an existing license.

        Args:
            license: License entity with an ID

        Returns:
            Number of rows updated
        """
        pass

    @abstractmethod
    def claim(self, license_id: int, owner_id: int, email: str) -> bool:
        """
        Assign an owner to a license if, and only if, it has none.

        Args:
            license_id: License ID
            owner_id: New owner account ID
            email: New contact email

        Returns:
            True if the license was claimed, False if it already had an owner
        """
        pass

    @abstractmethod
    def claim_by_email(self, owner_id: int, email: str) -> int:
        """
        Assign an owner to every unowned license with a matching email.

        Args:
            owner_id: New owner account ID
            email: Email to match, case-insensitively

        Returns:
            Number of licenses claimed
        """
        pass

    @abstractmethod
    def mark_reminded(self, license_id: int) -> bool:
        """
        Flag a license as reminded.

        Returns:
            True if the flag changed, False if it was already set
        """
        pass

    @abstractmethod
    def mark_expired(self, license_id: int) -> bool:
        """
        Flag a license as expired.

        Returns:
            True if the flag changed, False if it was already set
        """
        pass

    @abstractmethod
    def delete_by_id(self, license_id: int) -> int:
        """
        Delete a license by ID.

        Returns:
            Number of licenses deleted
        """
        pass

    @abstractmethod
    def delete_by_key(self, key: str) -> int:
        """
        Delete a license by its normalized key.

        Returns:
            Number of licenses deleted
        """
        pass

    @abstractmethod
    def add_history(self, entry: LicenseHistoryEntry) -> None:
        """
        Append an entry to a license's history.

        Args:
            entry: History entry
        """
        pass

    @abstractmethod
    def find_history(self, license_id: int) -> List[LicenseHistoryEntry]:
        """
        Return a license's history in chronological order.

        Args:
            license_id: License ID

        Returns:
            List of LicenseHistoryEntry
        """
        pass
