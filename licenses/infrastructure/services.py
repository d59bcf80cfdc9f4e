"""
Wiring for the license application services.

Builds services on top of the Django repositories.
"""
from licenses.application.services.license_sweeps import LicenseSweepService
from licenses.application.services.plugin_license_manager import PluginLicenseManager
from licenses.infrastructure.repositories.django_cms_license_repository import (
    DjangoCmsLicenseRepository,
)
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from plugins.infrastructure.repositories.django_plugin_repository import DjangoPluginRepository


def get_license_manager() -> PluginLicenseManager:
    """Return a PluginLicenseManager backed by the Django ORM."""
    return PluginLicenseManager(
        license_repository=DjangoLicenseRepository(),
        plugin_repository=DjangoPluginRepository(),
        cms_license_repository=DjangoCmsLicenseRepository(),
    )


def get_sweep_service() -> LicenseSweepService:
    """Return a LicenseSweepService backed by the Django ORM."""
    return LicenseSweepService(get_license_manager())
