"""
LicenseQueryOptions.

Search, sort and pagination options shared by the license listings.
"""
from dataclasses import dataclass
from typing import Optional

from django.db.models import Q

from licenses.conf import get_setting

SORTABLE_FIELDS = frozenset(
    {
        "id",
        "key",
        "plugin_handle",
        "edition_handle",
        "email",
        "notes",
        "expirable",
        "expired",
        "auto_renew",
        "expires_on",
        "last_activity_on",
        "last_renewed_on",
        "date_created",
    }
)


@dataclass
class LicenseQueryOptions:
    """
    Options for a paginated license listing.

    Every field is optional; leaving one out means "no filter" or
    "natural database order".

    Attributes:
        search: Case-insensitive text matched against key, notes,
            plugin handle or email
        order_by: License field to sort by (see SORTABLE_FIELDS)
        ascending: Sort direction when order_by is set
        limit: Page size (defaults to DEFAULT_PAGE_SIZE)
        page: 1-based page number
        condition: Extra filter for developer listings
    """

    search: Optional[str] = None
    order_by: Optional[str] = None
    ascending: bool = True
    limit: Optional[int] = None
    page: int = 1
    condition: Optional[Q] = None

    def __post_init__(self):
        """Validate options."""
        if self.search is not None:
            self.search = self.search.strip() or None
        if self.page < 1:
            raise ValueError("Page must be at least 1")
        if self.limit is not None and self.limit < 1:
            raise ValueError("Limit must be at least 1")
        if self.order_by is not None and self.order_by not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort licenses by: {self.order_by}")

    @property
    def per_page(self) -> int:
        """Number of licenses per page."""
        return self.limit or get_setting("DEFAULT_PAGE_SIZE")

    @property
    def offset(self) -> int:
        """Number of licenses skipped before this page."""
        return (self.page - 1) * self.per_page
