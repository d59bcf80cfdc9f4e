"""
CMS license repository port (interface).

This defines the contract for CMS license lookups.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Optional

from licenses.domain.cms_license import CmsLicense


class CmsLicenseRepository(ABC):
    """Abstract repository for CmsLicense entities."""

    @abstractmethod
    def find_by_id(self, cms_license_id: int) -> Optional[CmsLicense]:
        """
        Find a CMS license by ID.

        Args:
            cms_license_id: CMS license ID

        Returns:
            CmsLicense entity or None if not found
        """
        pass
