"""
Model registry for the licenses app.
"""
from licenses.infrastructure.models import (  # noqa: F401
    CmsLicense,
    PluginLicense,
    PluginLicenseHistory,
    PluginLicenseLineItem,
)
