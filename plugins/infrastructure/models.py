"""
Plugin and PluginEdition models.
"""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Plugin(models.Model):
    """
    A plugin listed in the store (e.g., SEOmatic, Commerce).
    Plugins belong to a developer account.
    """

    developer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="plugins",
    )
    name = models.CharField(max_length=255, help_text="Plugin display name")
    handle = models.SlugField(max_length=100, unique=True, help_text="Plugin handle")
    enabled = models.BooleanField(default=True, db_index=True)
    date_created = models.DateTimeField(auto_now_add=True)
    date_updated = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "plugins"
        db_table = "plugins"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["developer", "enabled"], name="plugins_develop_5f3c1a_idx"),
        ]

    def clean(self):
        """Validate plugin fields."""
        from django.core.exceptions import ValidationError

        if not self.handle:
            raise ValidationError("Handle is required")
        if self.handle != self.handle.lower():
            raise ValidationError("Handle must be lowercase")

    def save(self, *args, **kwargs):
        """Save plugin with validation."""
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name


class PluginEdition(models.Model):
    """
    A purchasable edition of a plugin (e.g., Lite, Pro).
    """

    plugin = models.ForeignKey(Plugin, on_delete=models.CASCADE, related_name="editions")
    name = models.CharField(max_length=255)
    handle = models.SlugField(max_length=100)
    enabled = models.BooleanField(default=True, db_index=True)
    price = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    renewal_price = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Price charged when a license for this edition renews",
    )
    date_created = models.DateTimeField(auto_now_add=True)
    date_updated = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "plugins"
        db_table = "plugin_editions"
        unique_together = [["plugin", "handle"]]
        ordering = ["plugin", "price"]
        indexes = [
            models.Index(fields=["plugin", "handle"], name="plugin_edit_plugin__8d2e4b_idx"),
        ]

    def save(self, *args, **kwargs):
        """Save edition with validation."""
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.plugin.name} - {self.name}"
