"""
Django implementation of PluginRepository port.

This adapter converts between domain entities and Django ORM models.
"""
from typing import Optional

from django.db.models import Count

from core.domain.value_objects import PluginHandle
from plugins.domain.plugin import Plugin, PluginEdition
from plugins.infrastructure.models import Plugin as PluginModel
from plugins.infrastructure.models import PluginEdition as PluginEditionModel
from plugins.ports.plugin_repository import PluginRepository


class DjangoPluginRepository(PluginRepository):
    """
    Django ORM implementation of PluginRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Resolves handles to IDs
    3. Implements repository interface
    """

    def _to_domain(self, model: PluginModel) -> Plugin:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Plugin model annotated with ``edition_count``

        Returns:
            Plugin domain entity
        """
        return Plugin(
            id=model.id,
            developer_id=model.developer_id,
            name=model.name,
            handle=PluginHandle(model.handle),
            enabled=model.enabled,
            edition_count=getattr(model, "edition_count", 0),
        )

    def _edition_to_domain(self, model: PluginEditionModel) -> PluginEdition:
        """
        Convert Django model to domain entity.

        Args:
            model: Django PluginEdition model

        Returns:
            PluginEdition domain entity
        """
        return PluginEdition(
            id=model.id,
            plugin_id=model.plugin_id,
            name=model.name,
            handle=PluginHandle(model.handle),
            enabled=model.enabled,
            price=model.price,
            renewal_price=model.renewal_price,
        )

    def find_by_id(self, plugin_id: int) -> Optional[Plugin]:
        """
        Find a plugin by ID, regardless of its status.

        Args:
            plugin_id: Plugin ID

        Returns:
            Plugin entity or None if not found
        """
        try:
            # pylint: disable=no-member
            model = PluginModel.objects.annotate(edition_count=Count("editions")).get(
                id=plugin_id
            )
            return self._to_domain(model)
        except PluginModel.DoesNotExist:  # pylint: disable=no-member
            return None

    def find_id_by_handle(self, handle: str, enabled_only: bool = True) -> Optional[int]:
        """
        Resolve a plugin handle to its ID.

        Args:
            handle: Plugin handle
            enabled_only: Only consider enabled plugins

        Returns:
            Plugin ID or None if no plugin matches
        """
        if not handle:
            return None
        queryset = PluginModel.objects.filter(handle=handle)  # pylint: disable=no-member
        if enabled_only:
            queryset = queryset.filter(enabled=True)
        return queryset.values_list("id", flat=True).first()

    def exists_by_handle(self, handle: str) -> bool:
        """
        Check if any plugin (of any status) has the given handle.

        Args:
            handle: Plugin handle

        Returns:
            True if a plugin exists, False otherwise
        """
        return PluginModel.objects.filter(handle=handle).exists()  # pylint: disable=no-member

    def find_edition_by_id(self, edition_id: int) -> Optional[PluginEdition]:
        """
        Find an edition by ID, regardless of its status.

        Args:
            edition_id: Edition ID

        Returns:
            PluginEdition entity or None if not found
        """
        try:
            # pylint: disable=no-member
            model = PluginEditionModel.objects.get(id=edition_id)
            return self._edition_to_domain(model)
        except PluginEditionModel.DoesNotExist:  # pylint: disable=no-member
            return None

    def find_edition_id(
        self, plugin_id: int, handle: str, enabled_only: bool = True
    ) -> Optional[int]:
        """
        Resolve an edition handle within a plugin to its ID.

        Args:
            plugin_id: Plugin ID
            handle: Edition handle
            enabled_only: Only consider enabled editions

        Returns:
            Edition ID or None if no edition matches
        """
        if not handle:
            return None
        # pylint: disable=no-member
        queryset = PluginEditionModel.objects.filter(plugin_id=plugin_id, handle=handle)
        if enabled_only:
            queryset = queryset.filter(enabled=True)
        return queryset.values_list("id", flat=True).first()
