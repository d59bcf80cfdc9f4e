"""
Django admin configuration for plugins app.
"""
from django.contrib import admin
from django.utils.html import format_html

from plugins.infrastructure.models import Plugin, PluginEdition


class PluginEditionInline(admin.TabularInline):
    """Inline editions on the plugin page."""

    model = PluginEdition
    extra = 0
    fields = ["name", "handle", "enabled", "price", "renewal_price"]


@admin.register(Plugin)
class PluginAdmin(admin.ModelAdmin):
    """Admin interface for Plugin model."""

    list_display = ["name", "handle", "developer", "enabled_display", "date_created"]
    list_filter = ["enabled", "date_created"]
    search_fields = ["name", "handle", "developer__email"]
    readonly_fields = ["id", "date_created", "date_updated"]
    inlines = [PluginEditionInline]

    def enabled_display(self, obj):
        """Display enabled status with color coding."""
        color = "green" if obj.enabled else "gray"
        label = "ENABLED" if obj.enabled else "DISABLED"
        return format_html('<span style="color: {}; font-weight: bold;">{}</span>', color, label)

    enabled_display.short_description = "Status"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("developer")


@admin.register(PluginEdition)
class PluginEditionAdmin(admin.ModelAdmin):
    """Admin interface for PluginEdition model."""

    list_display = ["name", "handle", "plugin", "enabled", "price", "renewal_price"]
    list_filter = ["enabled", "plugin"]
    search_fields = ["name", "handle", "plugin__handle"]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("plugin")
