"""
Plugin repository port (interface).

This defines the contract for plugin and edition lookups.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Optional

from plugins.domain.plugin import Plugin, PluginEdition


class PluginRepository(ABC):
    """
    Abstract repository for Plugin and PluginEdition entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    def find_by_id(self, plugin_id: int) -> Optional[Plugin]:
        """
        Find a plugin by ID, regardless of its status.

        Args:
            plugin_id: Plugin ID

        Returns:
            Plugin entity or None if not found
        """
        pass

    @abstractmethod
    def find_id_by_handle(
        self, handle: str, enabled_only: bool = True
    ) -> Optional[int]:
        """
        Resolve a plugin handle to its ID.

        Args:
            handle: Plugin handle
            enabled_only: Only consider enabled plugins

        Returns:
            Plugin ID or None if no plugin matches
        """
        pass

    @abstractmethod
    def exists_by_handle(self, handle: str) -> bool:
        """
        Check if any plugin (of any status) has the given handle.

        Args:
            handle: Plugin handle

        Returns:
            True if a plugin exists, False otherwise
        """
        pass

    @abstractmethod
    def find_edition_by_id(self, edition_id: int) -> Optional[PluginEdition]:
        """
        Find an edition by ID, regardless of its status.

        Args:
            edition_id: Edition ID

        Returns:
            PluginEdition entity or None if not found
        """
        pass

    @abstractmethod
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
        pass
