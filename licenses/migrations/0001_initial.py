import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("plugins", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="CmsLicense",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(db_index=True, max_length=250, unique=True)),
                ("edition_handle", models.CharField(max_length=100)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("date_created", models.DateTimeField(auto_now_add=True)),
                ("date_updated", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="cms_licenses",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "cms_licenses",
                "ordering": ["-date_created"],
            },
        ),
        migrations.CreateModel(
            name="PluginLicense",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("plugin_handle", models.CharField(db_index=True, max_length=100)),
                ("edition_handle", models.CharField(max_length=100)),
                ("expirable", models.BooleanField(default=False)),
                ("expired", models.BooleanField(default=False)),
                ("auto_renew", models.BooleanField(default=False)),
                ("reminded", models.BooleanField(default=False)),
                ("renewal_price", models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True)),
                ("email", models.EmailField(max_length=254)),
                ("key", models.CharField(db_index=True, max_length=24, unique=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("private_notes", models.TextField(blank=True, null=True)),
                ("last_version", models.CharField(blank=True, max_length=50, null=True)),
                ("last_allowed_version", models.CharField(blank=True, max_length=50, null=True)),
                ("last_activity_on", models.DateTimeField(blank=True, null=True)),
                ("last_renewed_on", models.DateTimeField(blank=True, null=True)),
                ("expires_on", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("date_created", models.DateTimeField()),
                ("date_updated", models.DateTimeField(auto_now=True)),
                (
                    "cms_license",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="plugin_licenses",
                        to="licenses.cmslicense",
                    ),
                ),
                (
                    "edition",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="licenses",
                        to="plugins.pluginedition",
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="plugin_licenses",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "plugin",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="licenses",
                        to="plugins.plugin",
                    ),
                ),
            ],
            options={
                "db_table": "plugin_licenses",
                "indexes": [
                    models.Index(fields=["owner", "expires_on"], name="plugin_lice_owner_i_3a9c1e_idx"),
                    models.Index(fields=["expirable", "reminded", "expires_on"], name="plugin_lice_expirab_7b41d2_idx"),
                    models.Index(fields=["expirable", "expired", "expires_on"], name="plugin_lice_expirab_c5e803_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PluginLicenseHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("note", models.TextField()),
                ("timestamp", models.DateTimeField(db_index=True)),
                (
                    "license",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="history",
                        to="licenses.pluginlicense",
                    ),
                ),
            ],
            options={
                "db_table": "plugin_license_history",
                "ordering": ["timestamp", "id"],
            },
        ),
        migrations.CreateModel(
            name="PluginLicenseLineItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_id", models.PositiveBigIntegerField(db_index=True)),
                ("line_item_id", models.PositiveBigIntegerField()),
                (
                    "license",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="line_items",
                        to="licenses.pluginlicense",
                    ),
                ),
            ],
            options={
                "db_table": "plugin_license_line_items",
                "unique_together": {("license", "line_item_id")},
            },
        ),
    ]
