from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Plugin",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Plugin display name", max_length=255)),
                ("handle", models.SlugField(help_text="Plugin handle", max_length=100, unique=True)),
                ("enabled", models.BooleanField(db_index=True, default=True)),
                ("date_created", models.DateTimeField(auto_now_add=True)),
                ("date_updated", models.DateTimeField(auto_now=True)),
                (
                    "developer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="plugins",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "plugins",
                "ordering": ["name"],
                "indexes": [models.Index(fields=["developer", "enabled"], name="plugins_develop_5f3c1a_idx")],
            },
        ),
        migrations.CreateModel(
            name="PluginEdition",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("handle", models.SlugField(max_length=100)),
                ("enabled", models.BooleanField(db_index=True, default=True)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                (
                    "renewal_price",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        help_text="Price charged when a license for this edition renews",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                ("date_created", models.DateTimeField(auto_now_add=True)),
                ("date_updated", models.DateTimeField(auto_now=True)),
                (
                    "plugin",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="editions",
                        to="plugins.plugin",
                    ),
                ),
            ],
            options={
                "db_table": "plugin_editions",
                "ordering": ["plugin", "price"],
                "unique_together": {("plugin", "handle")},
                "indexes": [models.Index(fields=["plugin", "handle"], name="plugin_edit_plugin__8d2e4b_idx")],
            },
        ),
    ]
