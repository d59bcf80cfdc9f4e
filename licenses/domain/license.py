"""
PluginLicense domain entity.

This is the core domain entity representing a plugin license.
It contains business logic and is independent of infrastructure.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from licenses.domain.license_key import generate_license_key, short_key


@dataclass
class PluginLicense:
    """
    PluginLicense domain entity.

    Grants an account the right to use one edition of a plugin,
    optionally for a limited time. Unlike most entities here this one
    is mutable: saving assigns the ID, claiming assigns the owner, and
    validation leaves its errors on the record for the caller.
    """

    key: str
    plugin_handle: str
    edition_handle: str
    email: str
    id: Optional[int] = None
    plugin_id: Optional[int] = None
    edition_id: Optional[int] = None
    owner_id: Optional[int] = None
    cms_license_id: Optional[int] = None
    expirable: bool = False
    expires_on: Optional[datetime] = None
    expired: bool = False
    auto_renew: bool = False
    reminded: bool = False
    renewal_price: Optional[Decimal] = None
    notes: Optional[str] = None
    private_notes: Optional[str] = None
    last_version: Optional[str] = None
    last_allowed_version: Optional[str] = None
    last_activity_on: Optional[datetime] = None
    last_renewed_on: Optional[datetime] = None
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None
    errors: Dict[str, List[str]] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def create(
        cls,
        plugin_handle: str,
        edition_handle: str,
        email: str,
        expires_on: Optional[datetime] = None,
        owner_id: Optional[int] = None,
        cms_license_id: Optional[int] = None,
        notes: Optional[str] = None,
        key: Optional[str] = None,
    ) -> "PluginLicense":
        """
        Create a new, unsaved PluginLicense.

        Args:
            plugin_handle: Handle of the licensed plugin
            edition_handle: Handle of the licensed edition
            email: Contact email
            expires_on: Expiry date; licenses without one never expire
            owner_id: Owning account, if already known
            cms_license_id: Parent CMS license, if any
            notes: Public notes
            key: Key to use (generated if not provided)

        Returns:
            PluginLicense entity instance
        """
        return cls(
            key=key or generate_license_key(),
            plugin_handle=plugin_handle,
            edition_handle=edition_handle,
            email=email,
            owner_id=owner_id,
            cms_license_id=cms_license_id,
            expirable=expires_on is not None,
            expires_on=expires_on,
            notes=notes,
            date_created=datetime.now(timezone.utc),
        )

    @property
    def short_key(self) -> str:
        """First 10 characters of the key."""
        return short_key(self.key)

    @property
    def is_claimed(self) -> bool:
        """Whether the license has an owner."""
        return self.owner_id is not None

    def is_owned_by(self, account_id: Optional[int]) -> bool:
        """Whether the given account owns this license."""
        return self.owner_id is not None and self.owner_id == account_id

    def validate(self) -> bool:
        """
        Validate the license, storing any errors on the record.

        Returns:
            True if the license is valid
        """
        from licenses.domain.services import LicenseValidator

        self.errors = LicenseValidator.validate(self)
        return not self.errors

    def has_errors(self) -> bool:
        """Whether the last validation produced errors."""
        return bool(self.errors)

    def error_summary(self) -> List[str]:
        """Flatten validation errors into a list of messages."""
        return [message for messages in self.errors.values() for message in messages]
