"""
CmsLicense domain entity.

A parent platform license that plugin licenses can be attached to.
Only the fields needed to cross-link plugin licenses are modelled here.
"""
from dataclasses import dataclass
from typing import Optional

from licenses.domain.license_key import short_key


@dataclass(frozen=True)
class CmsLicense:
    """CmsLicense domain entity."""

    id: int
    key: str
    edition_handle: str
    owner_id: Optional[int] = None
    email: Optional[str] = None

    def __post_init__(self):
        """Validate CMS license entity."""
        if not self.key:
            raise ValueError("CMS license key cannot be empty")

    @property
    def short_key(self) -> str:
        """First 10 characters of the key."""
        return short_key(self.key)

    def is_owned_by(self, account_id: Optional[int]) -> bool:
        """Whether the given account owns this CMS license."""
        return self.owner_id is not None and self.owner_id == account_id
