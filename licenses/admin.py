"""
Django admin configuration for licenses app.
"""
from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import (
    CmsLicense,
    PluginLicense,
    PluginLicenseHistory,
    PluginLicenseLineItem,
)


class PluginLicenseHistoryInline(admin.TabularInline):
    """Read-only history on the license page."""

    model = PluginLicenseHistory
    extra = 0
    fields = ["timestamp", "note"]
    readonly_fields = ["timestamp", "note"]
    can_delete = False

    def has_add_permission(self, request, obj=None):
        """History is append-only and written by the application."""
        return False


class PluginLicenseLineItemInline(admin.TabularInline):
    """Order line items on the license page."""

    model = PluginLicenseLineItem
    extra = 0


@admin.register(PluginLicense)
class PluginLicenseAdmin(admin.ModelAdmin):
    """Admin interface for PluginLicense model."""

    list_display = [
        "short_key",
        "plugin_handle",
        "edition_handle",
        "email",
        "owner",
        "status_display",
        "expires_on",
        "date_created",
    ]
    list_filter = ["expirable", "expired", "auto_renew", "reminded", "plugin"]
    search_fields = ["key", "email", "notes", "plugin_handle"]
    readonly_fields = ["id", "date_updated"]
    raw_id_fields = ["owner", "cms_license"]
    inlines = [PluginLicenseHistoryInline, PluginLicenseLineItemInline]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "key", "plugin", "edition", "plugin_handle", "edition_handle"),
            },
        ),
        (
            "Ownership",
            {
                "fields": ("owner", "email", "cms_license"),
            },
        ),
        (
            "Expiration",
            {
                "fields": (
                    "expirable",
                    "expires_on",
                    "expired",
                    "auto_renew",
                    "reminded",
                    "renewal_price",
                ),
            },
        ),
        (
            "Notes",
            {
                "fields": ("notes", "private_notes"),
            },
        ),
        (
            "Activity",
            {
                "fields": (
                    "last_version",
                    "last_allowed_version",
                    "last_activity_on",
                    "last_renewed_on",
                    "date_created",
                    "date_updated",
                ),
                "classes": ("collapse",),
            },
        ),
    )

    def short_key(self, obj):
        """Display the truncated key."""
        return obj.key[:10]

    short_key.short_description = "Key"

    def status_display(self, obj):
        """Display expiry status with color coding."""
        if obj.expired:
            color, label = "red", "EXPIRED"
        elif obj.expirable:
            color, label = "orange", "EXPIRABLE"
        else:
            color, label = "green", "PERPETUAL"
        return format_html('<span style="color: {}; font-weight: bold;">{}</span>', color, label)

    status_display.short_description = "Status"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("owner", "plugin", "edition")


@admin.register(CmsLicense)
class CmsLicenseAdmin(admin.ModelAdmin):
    """Admin interface for CmsLicense model."""

    list_display = ["key", "edition_handle", "owner", "email", "date_created"]
    search_fields = ["key", "email"]
    raw_id_fields = ["owner"]
    readonly_fields = ["date_created", "date_updated"]
