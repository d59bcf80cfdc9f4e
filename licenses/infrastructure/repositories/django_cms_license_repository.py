"""
Django implementation of CmsLicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
from typing import Optional

from licenses.domain.cms_license import CmsLicense
from licenses.infrastructure.models import CmsLicense as CmsLicenseModel
from licenses.ports.cms_license_repository import CmsLicenseRepository


class DjangoCmsLicenseRepository(CmsLicenseRepository):
    """Django ORM implementation of CmsLicenseRepository."""

    def _to_domain(self, model: CmsLicenseModel) -> CmsLicense:
        """
        Convert Django model to domain entity.

        Args:
            model: Django CmsLicense model

        Returns:
            CmsLicense domain entity
        """
        return CmsLicense(
            id=model.id,
            key=model.key,
            edition_handle=model.edition_handle,
            owner_id=model.owner_id,
            email=model.email or None,
        )

    def find_by_id(self, cms_license_id: int) -> Optional[CmsLicense]:
        """
        Find a CMS license by ID.

        Args:
            cms_license_id: CMS license ID

        Returns:
            CmsLicense entity or None if not found
        """
        try:
            model = CmsLicenseModel.objects.get(id=cms_license_id)  # pylint: disable=no-member
            return self._to_domain(model)
        except CmsLicenseModel.DoesNotExist:  # pylint: disable=no-member
            return None
