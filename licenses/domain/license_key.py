"""
License key helpers.

Keys are stored in a canonical 24-character form. Customers paste them
in all sorts of shapes (dashed, grouped, with stray whitespace), so every
keyed lookup goes through normalize_key first.
"""
import re
import secrets
import string

from core.domain.exceptions import InvalidKeyFormatError

KEY_LENGTH = 24
SHORT_KEY_LENGTH = 10
KEY_ALPHABET = string.ascii_uppercase + string.digits

_DASHES = re.compile(r"-+")


def normalize_key(key: str) -> str:
    """
    Normalize a license key by removing dashes and trimming whitespace.

    Args:
        key: Raw license key, e.g. ``XXXX-XXXX-XXXX-XXXX-XXXX-XXXX``

    Returns:
        The canonical 24-character key

    Raises:
        InvalidKeyFormatError: If the normalized key isn't 24 characters long
    """
    normalized = _DASHES.sub("", key or "").strip()
    if len(normalized) != KEY_LENGTH:
        raise InvalidKeyFormatError(f"Invalid license key: {key}")
    return normalized


def generate_license_key() -> str:
    """
    Generate a new canonical license key.

    Returns:
        24 random characters from A-Z and 0-9
    """
    return "".join(secrets.choice(KEY_ALPHABET) for _ in range(KEY_LENGTH))


def short_key(key: str) -> str:
    """Return the truncated form shown to anyone who doesn't own the license."""
    return (key or "")[:SHORT_KEY_LENGTH]


def format_key(key: str) -> str:
    """
    Format a canonical key for display in groups of four.

    Args:
        key: License key in any accepted shape

    Returns:
        Dashed key, e.g. ``ABCD-EFGH-IJKL-MNOP-QRST-UVWX``
    """
    normalized = normalize_key(key)
    return "-".join(normalized[i : i + 4] for i in range(0, KEY_LENGTH, 4))
