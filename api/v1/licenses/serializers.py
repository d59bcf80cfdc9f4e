"""
Serializers for the license API endpoints.
"""

from rest_framework import serializers

from licenses.application.dto.license_dto import (
    CmsLicenseFullDTO,
    FullLicenseView,
    LicenseView,
)
from licenses.application.queries.list_licenses import SORTABLE_FIELDS, LicenseQueryOptions


class LicenseListQuerySerializer(serializers.Serializer):
    """Serializer for listing query parameters."""

    q = serializers.CharField(required=False, allow_blank=True, max_length=255)
    page = serializers.IntegerField(required=False, default=1, min_value=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100)
    orderBy = serializers.ChoiceField(  # noqa: N815
        choices=sorted(SORTABLE_FIELDS), required=False
    )
    ascending = serializers.BooleanField(required=False, default=True)

    def to_options(self) -> LicenseQueryOptions:
        """Build query options from validated data."""
        data = self.validated_data
        return LicenseQueryOptions(
            search=data.get("q"),
            order_by=data.get("orderBy"),
            ascending=data["ascending"],
            limit=data.get("limit"),
            page=data["page"],
        )


class LicenseLookupQuerySerializer(serializers.Serializer):
    """Serializer for key lookup query parameters."""

    handle = serializers.CharField(required=False, max_length=255)


class ClaimLicenseRequestSerializer(serializers.Serializer):
    """Serializer for claim license request."""

    key = serializers.CharField(required=True, max_length=64)


class ClaimByEmailRequestSerializer(serializers.Serializer):
    """Serializer for claim-by-email request."""

    email = serializers.EmailField(required=False)


class ClaimByEmailResponseSerializer(serializers.Serializer):
    """Serializer for claim-by-email response."""

    claimed = serializers.IntegerField()


class TotalResponseSerializer(serializers.Serializer):
    """Serializer for count responses."""

    total = serializers.IntegerField()


class HistoryEntrySerializer(serializers.Serializer):
    """Serializer for HistoryEntryDTO."""

    note = serializers.CharField()
    timestamp = serializers.DateTimeField()


class EditionSerializer(serializers.Serializer):
    """Serializer for EditionDTO."""

    id = serializers.IntegerField()
    name = serializers.CharField()
    handle = serializers.CharField()
    price = serializers.DecimalField(max_digits=14, decimal_places=2)
    renewal_price = serializers.DecimalField(max_digits=14, decimal_places=2)


class PluginSummarySerializer(serializers.Serializer):
    """Serializer for PluginSummaryDTO."""

    name = serializers.CharField()
    handle = serializers.CharField()
    has_multiple_editions = serializers.BooleanField()


def _cms_license_data(cms_license):
    if cms_license is None:
        return None
    if isinstance(cms_license, CmsLicenseFullDTO):
        return {"key": cms_license.key, "edition_handle": cms_license.edition_handle}
    return {"short_key": cms_license.short_key}


class RedactedLicenseViewSerializer(serializers.Serializer):
    """Serializer for RedactedLicenseView."""

    short_key = serializers.CharField()
    history = HistoryEntrySerializer(many=True)
    edition = EditionSerializer(allow_null=True)
    plugin = PluginSummarySerializer(allow_null=True)
    cms_license = serializers.SerializerMethodField()

    def get_cms_license(self, obj):
        """Serialize the CMS license in whichever form the view carries."""
        return _cms_license_data(obj.cms_license)


class FullLicenseViewSerializer(serializers.Serializer):
    """Serializer for FullLicenseView."""

    id = serializers.IntegerField()
    edition_id = serializers.IntegerField(allow_null=True)
    key = serializers.CharField()
    cms_license_id = serializers.IntegerField(allow_null=True)
    email = serializers.EmailField()
    notes = serializers.CharField(allow_null=True)
    auto_renew = serializers.BooleanField()
    expirable = serializers.BooleanField()
    expired = serializers.BooleanField()
    expires_on = serializers.DateTimeField(allow_null=True)
    date_created = serializers.DateTimeField(allow_null=True)
    history = HistoryEntrySerializer(many=True)
    edition = EditionSerializer(allow_null=True)
    expiry_date_options = serializers.DictField(child=serializers.DateField(), allow_null=True)
    plugin = PluginSummarySerializer(allow_null=True)
    cms_license = serializers.SerializerMethodField()

    def get_cms_license(self, obj):
        """Serialize the CMS license in whichever form the view carries."""
        return _cms_license_data(obj.cms_license)


def serialize_license_view(view: LicenseView) -> dict:
    """Serialize a full or redacted license view."""
    if isinstance(view, FullLicenseView):
        return FullLicenseViewSerializer(view).data
    return RedactedLicenseViewSerializer(view).data


class DeveloperLicenseSerializer(serializers.Serializer):
    """Serializer for licenses in a developer listing."""

    id = serializers.IntegerField()
    key = serializers.CharField()
    plugin_handle = serializers.CharField()
    edition_handle = serializers.CharField()
    email = serializers.EmailField()
    owner_id = serializers.IntegerField(allow_null=True)
    expirable = serializers.BooleanField()
    expired = serializers.BooleanField()
    auto_renew = serializers.BooleanField()
    expires_on = serializers.DateTimeField(allow_null=True)
    last_version = serializers.CharField(allow_null=True)
    last_activity_on = serializers.DateTimeField(allow_null=True)
    date_created = serializers.DateTimeField(allow_null=True)
