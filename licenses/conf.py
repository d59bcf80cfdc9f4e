"""
License settings.

Read from ``settings.PLUGIN_LICENSES``; any key left out falls back to
the defaults below.
"""
from django.conf import settings

DEFAULTS = {
    "DEFAULT_PAGE_SIZE": 30,
    "RENEWAL_WINDOW_DAYS": 45,
    "REMINDER_WINDOW_DAYS": (14, 30),
    "REMINDER_FROM_EMAIL": None,
}


def get_setting(name: str):
    """
    Return a license setting.

    Args:
        name: Setting name, one of DEFAULTS

    Returns:
        The configured value or its default
    """
    if name not in DEFAULTS:
        raise KeyError(f"Unknown license setting: {name}")
    return getattr(settings, "PLUGIN_LICENSES", {}).get(name, DEFAULTS[name])
