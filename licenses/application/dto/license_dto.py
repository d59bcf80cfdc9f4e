"""
License DTOs for API responses.

A license is projected either as a FullLicenseView (the viewer owns it)
or as a RedactedLicenseView (anyone else). The redacted view never carries
the full key, the email or any notes.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Generic, List, Optional, TypeVar, Union


@dataclass
class HistoryEntryDTO:
    """DTO for a license history entry."""

    note: str
    timestamp: datetime


@dataclass
class EditionDTO:
    """DTO for plugin edition details."""

    id: int
    name: str
    handle: str
    price: Decimal
    renewal_price: Decimal


@dataclass
class PluginSummaryDTO:
    """DTO for the plugin a license belongs to."""

    name: str
    handle: str
    has_multiple_editions: bool


@dataclass
class CmsLicenseFullDTO:
    """CMS license as seen by its owner."""

    key: str
    edition_handle: str


@dataclass
class CmsLicenseRedactedDTO:
    """CMS license as seen by anyone else."""

    short_key: str


CmsLicenseDTO = Union[CmsLicenseFullDTO, CmsLicenseRedactedDTO]


@dataclass
class FullLicenseView:
    """License as seen by its owner."""

    id: int
    edition_id: Optional[int]
    key: str
    cms_license_id: Optional[int]
    email: str
    notes: Optional[str]
    auto_renew: bool
    expirable: bool
    expired: bool
    expires_on: Optional[datetime]
    date_created: Optional[datetime]
    history: List[HistoryEntryDTO] = field(default_factory=list)
    edition: Optional[EditionDTO] = None
    expiry_date_options: Optional[Dict[str, date]] = None
    plugin: Optional[PluginSummaryDTO] = None
    cms_license: Optional[CmsLicenseDTO] = None


@dataclass
class RedactedLicenseView:
    """License as seen by someone who does not own it."""

    short_key: str
    history: List[HistoryEntryDTO] = field(default_factory=list)
    edition: Optional[EditionDTO] = None
    plugin: Optional[PluginSummaryDTO] = None
    cms_license: Optional[CmsLicenseDTO] = None


LicenseView = Union[FullLicenseView, RedactedLicenseView]

T = TypeVar("T")


@dataclass
class LicensePage(Generic[T]):
    """DTO for one page of a license listing."""

    items: List[T]
    total: int
    page: int
    limit: int
