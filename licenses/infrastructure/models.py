"""
PluginLicense, PluginLicenseHistory, PluginLicenseLineItem and CmsLicense models.
"""
from django.conf import settings
from django.db import models


class CmsLicense(models.Model):
    """
    A platform license that plugin licenses can be attached to.
    """

    key = models.CharField(max_length=250, unique=True, db_index=True)
    edition_handle = models.CharField(max_length=100)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="cms_licenses",
    )
    email = models.EmailField(blank=True, default="")
    date_created = models.DateTimeField(auto_now_add=True)
    date_updated = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "licenses"
        db_table = "cms_licenses"
        ordering = ["-date_created"]

    def __str__(self):
        return self.key[:10]


class PluginLicense(models.Model):
    """
    A license for one edition of a plugin.
    Unclaimed licenses have no owner until someone claims them by key or email.
    """

    plugin = models.ForeignKey(
        "plugins.Plugin", on_delete=models.CASCADE, related_name="licenses"
    )
    edition = models.ForeignKey(
        "plugins.PluginEdition", on_delete=models.CASCADE, related_name="licenses"
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="plugin_licenses",
    )
    cms_license = models.ForeignKey(
        CmsLicense,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="plugin_licenses",
    )
    plugin_handle = models.CharField(max_length=100, db_index=True)
    edition_handle = models.CharField(max_length=100)
    expirable = models.BooleanField(default=False)
    expired = models.BooleanField(default=False)
    auto_renew = models.BooleanField(default=False)
    reminded = models.BooleanField(default=False)
    renewal_price = models.DecimalField(max_digits=14, decimal_places=4, null=True, blank=True)
    email = models.EmailField()
    key = models.CharField(max_length=24, unique=True, db_index=True)
    notes = models.TextField(null=True, blank=True)
    private_notes = models.TextField(null=True, blank=True)
    last_version = models.CharField(max_length=50, null=True, blank=True)
    last_allowed_version = models.CharField(max_length=50, null=True, blank=True)
    last_activity_on = models.DateTimeField(null=True, blank=True)
    last_renewed_on = models.DateTimeField(null=True, blank=True)
    expires_on = models.DateTimeField(null=True, blank=True, db_index=True)
    date_created = models.DateTimeField()
    date_updated = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "licenses"
        db_table = "plugin_licenses"
        indexes = [
            models.Index(fields=["owner", "expires_on"], name="plugin_lice_owner_i_3a9c1e_idx"),
            models.Index(fields=["expirable", "reminded", "expires_on"], name="plugin_lice_expirab_7b41d2_idx"),
            models.Index(fields=["expirable", "expired", "expires_on"], name="plugin_lice_expirab_c5e803_idx"),
        ]

    def __str__(self):
        return f"{self.plugin_handle} - {self.key[:10]}"


class PluginLicenseHistory(models.Model):
    """
    Append-only history of a plugin license.
    """

    license = models.ForeignKey(PluginLicense, on_delete=models.CASCADE, related_name="history")
    note = models.TextField()
    timestamp = models.DateTimeField(db_index=True)

    class Meta:
        app_label = "licenses"
        db_table = "plugin_license_history"
        ordering = ["timestamp", "id"]

    def __str__(self):
        return f"{self.license_id}: {self.note}"


class PluginLicenseLineItem(models.Model):
    """
    Links a license to the order line item that purchased or renewed it.
    Orders live in the commerce system, so only their IDs are stored.
    """

    license = models.ForeignKey(PluginLicense, on_delete=models.CASCADE, related_name="line_items")
    order_id = models.PositiveBigIntegerField(db_index=True)
    line_item_id = models.PositiveBigIntegerField()

    class Meta:
        app_label = "licenses"
        db_table = "plugin_license_line_items"
        unique_together = [["license", "line_item_id"]]

    def __str__(self):
        return f"order {self.order_id} / line item {self.line_item_id}"
