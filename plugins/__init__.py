"""
Plugins module - Plugin and edition catalog.

This module handles:
- Plugin entity and domain logic
- PluginEdition entity and domain logic
- Plugin repository (port)
- Plugin infrastructure (Django ORM adapters)
"""
