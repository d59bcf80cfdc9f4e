"""
Pytest configuration and shared fixtures.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from core.domain.value_objects import Account
from licenses.application.services.plugin_license_manager import PluginLicenseManager
from licenses.domain.license import PluginLicense
from licenses.domain.license_key import generate_license_key
from licenses.infrastructure.models import CmsLicense as CmsLicenseModel
from licenses.infrastructure.repositories.django_cms_license_repository import (
    DjangoCmsLicenseRepository,
)
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from plugins.infrastructure.models import Plugin as PluginModel
from plugins.infrastructure.models import PluginEdition as PluginEditionModel
from plugins.infrastructure.repositories.django_plugin_repository import DjangoPluginRepository


@pytest.fixture
def license_repository():
    """Fixture for LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def plugin_repository():
    """Fixture for PluginRepository."""
    return DjangoPluginRepository()


@pytest.fixture
def cms_license_repository():
    """Fixture for CmsLicenseRepository."""
    return DjangoCmsLicenseRepository()


@pytest.fixture
def license_manager(license_repository, plugin_repository, cms_license_repository):
    """Fixture for PluginLicenseManager."""
    return PluginLicenseManager(
        license_repository=license_repository,
        plugin_repository=plugin_repository,
        cms_license_repository=cms_license_repository,
    )


@pytest.fixture
def make_user(db):
    """Factory for users saved in database."""

    def _make(username: str, email: str = None):
        return get_user_model().objects.create_user(
            username=username,
            email=email or f"{username}@example.com",
            password="password",
        )

    return _make


@pytest.fixture
def developer(make_user):
    """Fixture for the plugin developer."""
    return make_user("developer")


@pytest.fixture
def owner(make_user):
    """Fixture for a license holder."""
    return make_user("owner")


@pytest.fixture
def other_user(make_user):
    """Fixture for a user owning nothing."""
    return make_user("stranger")


@pytest.fixture
def owner_account(owner):
    """Fixture for the license holder as an Account."""
    return Account.from_user(owner)


@pytest.fixture
def other_account(other_user):
    """Fixture for the stranger as an Account."""
    return Account.from_user(other_user)


@pytest.fixture
def plugin(developer):
    """Fixture for an enabled plugin with two editions."""
    return PluginModel.objects.create(developer=developer, name="SEOmatic", handle="seomatic")


@pytest.fixture
def edition(plugin):
    """Fixture for the plugin's lite edition."""
    return PluginEditionModel.objects.create(
        plugin=plugin,
        name="Lite",
        handle="lite",
        price=Decimal("49"),
        renewal_price=Decimal("29"),
    )


@pytest.fixture
def pro_edition(plugin):
    """Fixture for the plugin's pro edition."""
    return PluginEditionModel.objects.create(
        plugin=plugin,
        name="Pro",
        handle="pro",
        price=Decimal("99"),
        renewal_price=Decimal("59"),
    )


@pytest.fixture
def cms_license(owner):
    """Fixture for a CMS license held by the owner."""
    return CmsLicenseModel.objects.create(
        key="CMS" + "X" * 60,
        edition_handle="pro",
        owner=owner,
        email=owner.email,
    )


@pytest.fixture
def make_license(license_manager, plugin, edition):
    """Factory for licenses saved through the manager."""

    def _make(**fields):
        data = {
            "key": generate_license_key(),
            "plugin_handle": plugin.handle,
            "edition_handle": edition.handle,
            "email": "buyer@example.com",
        }
        data.update(fields)
        if data.get("expires_on") is not None:
            data.setdefault("expirable", True)
        license = PluginLicense(**data)
        assert license_manager.save_license(license), license.errors
        return license

    return _make


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def owner_client(api_client, owner):
    """Fixture for an API client authenticated as the owner."""
    api_client.force_authenticate(user=owner)
    return api_client
