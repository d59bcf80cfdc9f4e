"""
Model registry for the plugins app.
"""
from plugins.infrastructure.models import Plugin, PluginEdition  # noqa: F401
