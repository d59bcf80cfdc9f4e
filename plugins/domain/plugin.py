"""
Plugin and PluginEdition domain entities.

A plugin is sold in one or more editions. Licenses are issued
per edition, and an edition carries the price a license renews at.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from core.domain.value_objects import PluginHandle


@dataclass(frozen=True)
class Plugin:
    """
    Plugin domain entity.

    Represents a plugin listed in the store by a developer.
    """

    id: int
    developer_id: int
    name: str
    handle: PluginHandle
    enabled: bool = True
    edition_count: int = 0

    def __post_init__(self):
        """Validate plugin entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Plugin name cannot be empty")
        if len(self.name) > 255:
            raise ValueError("Plugin name too long")

    @property
    def has_multiple_editions(self) -> bool:
        """Whether the plugin is sold in more than one edition."""
        return self.edition_count > 1


@dataclass(frozen=True)
class PluginEdition:
    """
    PluginEdition domain entity.

    Represents a purchasable tier of a plugin.
    """

    id: int
    plugin_id: int
    name: str
    handle: PluginHandle
    enabled: bool = True
    price: Optional[Decimal] = None
    renewal_price: Optional[Decimal] = None

    def __post_init__(self):
        """Validate edition entity."""
        if not self.plugin_id:
            raise ValueError("Plugin ID is required")
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Edition name cannot be empty")
        if self.renewal_price is not None and self.renewal_price < 0:
            raise ValueError("Renewal price cannot be negative")
