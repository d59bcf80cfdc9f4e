"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from core.domain.value_objects import Email
from licenses.domain.license import PluginLicense
from licenses.domain.license_key import KEY_LENGTH

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9]+$")

EXPIRY_OPTION_YEARS = 5


class LicenseValidator:
    """Domain service for license validation."""

    @staticmethod
    def validate(license: PluginLicense) -> Dict[str, List[str]]:
        """
        Validate a license's fields before it is persisted.

        Args:
            license: License entity to validate

        Returns:
            Mapping of field name to error messages (empty if valid)
        """
        errors: Dict[str, List[str]] = {}

        def add(attribute: str, message: str) -> None:
            errors.setdefault(attribute, []).append(message)

        if not license.plugin_id and not license.plugin_handle:
            add("plugin_handle", "Plugin handle cannot be blank.")
        if not license.edition_id and not license.edition_handle:
            add("edition_handle", "Edition cannot be blank.")

        if not license.email:
            add("email", "Email cannot be blank.")
        else:
            try:
                Email(license.email)
            except ValueError:
                add("email", "Email is not a valid email address.")

        if not license.key:
            add("key", "Key cannot be blank.")
        elif len(license.key) != KEY_LENGTH or not _KEY_PATTERN.match(license.key):
            add("key", f"Key should contain {KEY_LENGTH} alphanumeric characters.")

        if license.expirable and license.expires_on is None:
            add("expires_on", "Expiry date cannot be blank for an expirable license.")

        if license.renewal_price is not None and license.renewal_price < 0:
            add("renewal_price", "Renewal price cannot be negative.")

        return errors


@dataclass(frozen=True)
class ExpiryDateOption:
    """A renewal choice offered for an expirable license."""

    key: str
    date: date


def _add_years(value: date, years: int) -> date:
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        # Feb 29 -> Feb 28 in non-leap years
        return value.replace(year=value.year + years, day=28)


def get_expiry_date_options(
    expires_on: datetime, current_time: Optional[datetime] = None
) -> List[ExpiryDateOption]:
    """
    Build the 1-5 year renewal options for a license.

    Renewals extend from the current expiry date, or from today if the
    license has already lapsed.

    Args:
        expires_on: Current expiry date of the license
        current_time: Current time (defaults to now, UTC)

    Returns:
        List of ExpiryDateOption, one per year
    """
    now = current_time or datetime.now(timezone.utc)
    start = expires_on if expires_on >= now else now
    start_date = start.date()
    return [
        ExpiryDateOption(key=f"{years}y", date=_add_years(start_date, years))
        for years in range(1, EXPIRY_OPTION_YEARS + 1)
    ]
