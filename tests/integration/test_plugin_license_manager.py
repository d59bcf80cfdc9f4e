"""
Integration tests for PluginLicenseManager.
"""

import dataclasses
from datetime import timedelta
from decimal import Decimal

import pytest
from django.db import DatabaseError
from django.db.models import Q
from django.utils import timezone

from core.domain.exceptions import (
    InvalidEditionHandleError,
    InvalidPluginHandleError,
    LicenseAlreadyClaimedError,
    LicenseNotFoundError,
    LicensePersistenceError,
)
from licenses.application.dto.license_dto import (
    CmsLicenseFullDTO,
    CmsLicenseRedactedDTO,
    FullLicenseView,
    RedactedLicenseView,
)
from licenses.application.queries.list_licenses import LicenseQueryOptions
from licenses.domain.license import PluginLicense
from licenses.domain.license_key import format_key
from licenses.infrastructure.models import PluginLicense as PluginLicenseModel


def midnight_today():
    """Today's midnight, UTC."""
    return timezone.now().replace(hour=0, minute=0, second=0, microsecond=0)


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseLookup:
    """Tests for license lookups."""

    def test_lookup_by_dashed_key(self, license_manager, make_license):
        """Test keys match regardless of formatting."""
        license = make_license()

        found = license_manager.get_license_by_key(f"  {format_key(license.key)} ")

        assert found.id == license.id

    def test_malformed_key_is_not_found(self, license_manager, make_license):
        """Test a malformed key is reported as not found."""
        make_license()

        with pytest.raises(LicenseNotFoundError):
            license_manager.get_license_by_key("ABC-123")

    def test_unknown_key_is_not_found(self, license_manager, make_license):
        """Test an unknown key is reported as not found."""
        make_license()

        with pytest.raises(LicenseNotFoundError):
            license_manager.get_license_by_key("Z" * 24)

    def test_unknown_plugin_handle(self, license_manager, make_license):
        """Test an unknown plugin handle is reported distinctly."""
        license = make_license()

        with pytest.raises(InvalidPluginHandleError):
            license_manager.get_license_by_key(license.key, plugin_handle="nope")

    def test_other_plugin_handle_is_not_found(self, license_manager, make_license, developer):
        """Test a real handle of another plugin gives not found."""
        from plugins.infrastructure.models import Plugin

        Plugin.objects.create(developer=developer, name="Commerce", handle="commerce")
        license = make_license()

        with pytest.raises(LicenseNotFoundError):
            license_manager.get_license_by_key(license.key, plugin_handle="commerce")
        assert license_manager.get_license_by_key(license.key, plugin_handle="seomatic")

    def test_disabled_plugin_hidden(self, license_manager, make_license, plugin):
        """Test licenses of disabled plugins need any_status."""
        license = make_license()
        plugin.enabled = False
        plugin.save()

        with pytest.raises(LicenseNotFoundError):
            license_manager.get_license_by_key(license.key)
        assert license_manager.get_license_by_key(license.key, any_status=True).id == license.id

    def test_get_license_by_id(self, license_manager, make_license):
        """Test lookup by ID."""
        license = make_license()

        assert license_manager.get_license_by_id(license.id).key == license.key
        with pytest.raises(LicenseNotFoundError):
            license_manager.get_license_by_id(999999)


@pytest.mark.django_db
@pytest.mark.integration
class TestSaveLicense:
    """Tests for saving licenses."""

    def test_insert_resolves_handles(self, license_manager, plugin, edition):
        """Test saving resolves plugin and edition IDs and assigns an ID."""
        license = PluginLicense.create(
            plugin_handle="seomatic", edition_handle="lite", email="buyer@example.com"
        )

        assert license_manager.save_license(license) is True

        assert license.id is not None
        assert license.plugin_id == plugin.id
        assert license.edition_id == edition.id
        assert PluginLicenseModel.objects.filter(id=license.id).exists()

    def test_validation_failure_is_soft(self, license_manager, plugin, edition):
        """Test invalid licenses aren't saved and keep their errors."""
        license = PluginLicense.create(
            plugin_handle="seomatic", edition_handle="lite", email="not-an-email"
        )

        assert license_manager.save_license(license) is False

        assert license.id is None
        assert "email" in license.errors
        assert PluginLicenseModel.objects.count() == 0

    def test_invalid_plugin_handle(self, license_manager, plugin, edition):
        """Test an unknown plugin handle raises."""
        license = PluginLicense.create(
            plugin_handle="nope", edition_handle="lite", email="buyer@example.com"
        )

        with pytest.raises(InvalidPluginHandleError):
            license_manager.save_license(license)

    def test_invalid_edition_handle(self, license_manager, plugin, edition):
        """Test an unknown edition handle raises."""
        license = PluginLicense.create(
            plugin_handle="seomatic", edition_handle="enterprise", email="buyer@example.com"
        )

        with pytest.raises(InvalidEditionHandleError):
            license_manager.save_license(license)

    def test_expirable_takes_edition_renewal_price(self, license_manager, make_license):
        """Test expirable licenses default to the edition's renewal price."""
        license = make_license(expires_on=timezone.now() + timedelta(days=365))

        assert license.renewal_price == Decimal("29")

    def test_explicit_renewal_price_kept(self, license_manager, make_license):
        """Test an explicit renewal price isn't overwritten."""
        license = make_license(
            expires_on=timezone.now() + timedelta(days=365), renewal_price=Decimal("10")
        )

        assert license.renewal_price == Decimal("10")

    def test_non_expirable_clears_renewal_price(self, license_manager, make_license):
        """Test non-expirable licenses have no renewal price."""
        license = make_license(renewal_price=Decimal("10"))

        assert license.renewal_price is None
        assert PluginLicenseModel.objects.get(id=license.id).renewal_price is None

    def test_update(self, license_manager, make_license):
        """Test saving an existing license updates it."""
        license = make_license()
        license.notes = "Renewed by phone"

        assert license_manager.save_license(license) is True

        assert license_manager.get_license_by_id(license.id).notes == "Renewed by phone"
        assert PluginLicenseModel.objects.count() == 1

    def test_update_of_deleted_license(self, license_manager, make_license):
        """Test updating a license that's gone is a persistence failure."""
        license = make_license()
        PluginLicenseModel.objects.filter(id=license.id).delete()

        with pytest.raises(LicensePersistenceError):
            license_manager.save_license(license)


@pytest.mark.django_db
@pytest.mark.integration
class TestClaimLicense:
    """Tests for claiming licenses."""

    def test_claim(self, license_manager, make_license, owner_account):
        """Test claiming sets owner and email and records one history entry."""
        license = make_license()

        claimed = license_manager.claim_license(owner_account, format_key(license.key))

        stored = license_manager.get_license_by_id(license.id)
        assert claimed.owner_id == owner_account.id
        assert stored.owner_id == owner_account.id
        assert stored.email == owner_account.email

        history = license_manager.get_history(license.id)
        assert len(history) == 1
        assert owner_account.email in history[0].note

    def test_second_claim_fails(self, license_manager, make_license, owner_account, other_account):
        """Test a claimed license can't be claimed again."""
        license = make_license()
        license_manager.claim_license(owner_account, license.key)

        with pytest.raises(LicenseAlreadyClaimedError):
            license_manager.claim_license(other_account, license.key)
        with pytest.raises(LicenseAlreadyClaimedError):
            license_manager.claim_license(owner_account, license.key)

        assert license_manager.get_license_by_id(license.id).owner_id == owner_account.id
        assert len(license_manager.get_history(license.id)) == 1

    def test_concurrent_claims(
        self, license_manager, license_repository, make_license, owner_account, other_account,
        monkeypatch,
    ):
        """Test only one of two racing claims wins."""
        license = make_license()
        # Both claimants read the license while it was still unowned
        stale = license_manager.get_license_by_key(license.key)
        monkeypatch.setattr(
            license_repository, "find_by_key", lambda *args, **kwargs: dataclasses.replace(stale)
        )

        license_manager.claim_license(owner_account, license.key)
        with pytest.raises(LicenseAlreadyClaimedError):
            license_manager.claim_license(other_account, license.key)

        stored = license_repository.find_by_id(license.id)
        assert stored.owner_id == owner_account.id
        assert stored.email == owner_account.email
        assert len(license_manager.get_history(license.id)) == 1

    def test_claim_malformed_key(self, license_manager, owner_account):
        """Test claiming with a malformed key is not found."""
        with pytest.raises(LicenseNotFoundError):
            license_manager.claim_license(owner_account, "nope")

    def test_claim_unknown_key(self, license_manager, owner_account, plugin, edition):
        """Test claiming an unknown key is not found."""
        with pytest.raises(LicenseNotFoundError):
            license_manager.claim_license(owner_account, "Q" * 24)

    def test_claim_by_email(self, license_manager, make_license, owner_account, other_account):
        """Test claiming every unowned license sent to the account's email."""
        make_license(email=owner_account.email.upper())
        make_license(email=owner_account.email)
        make_license(email="someone@example.com")
        make_license(email=owner_account.email, owner_id=other_account.id)

        assert license_manager.claim_licenses(owner_account) == 2
        assert license_manager.get_total_licenses_by_owner(owner_account) == 2
        assert license_manager.claim_licenses(owner_account) == 0

    def test_claim_by_other_email(self, license_manager, make_license, owner_account):
        """Test claiming by an explicit email."""
        make_license(email="old-address@example.com")

        assert license_manager.claim_licenses(owner_account, "old-address@example.com") == 1


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseListings:
    """Tests for license listings."""

    def test_pagination(self, license_manager, make_license, owner_account):
        """Test page 2 of size 10 returns records 11-20 and the full total."""
        ids = [make_license(owner_id=owner_account.id).id for _ in range(25)]
        make_license()

        page = license_manager.get_licenses_by_owner(
            owner_account, LicenseQueryOptions(limit=10, page=2, order_by="id")
        )

        assert page.total == 25
        assert [view.id for view in page.items] == ids[10:20]
        assert all(isinstance(view, FullLicenseView) for view in page.items)

    def test_default_page_size(self, license_manager, make_license, owner_account):
        """Test the default page size is 30."""
        for _ in range(32):
            make_license(owner_id=owner_account.id)

        page = license_manager.get_licenses_by_owner(owner_account)

        assert page.total == 32
        assert len(page.items) == 30
        assert page.limit == 30

    def test_descending_order(self, license_manager, make_license, owner_account):
        """Test descending sort."""
        ids = [make_license(owner_id=owner_account.id).id for _ in range(3)]

        page = license_manager.get_licenses_by_owner(
            owner_account, LicenseQueryOptions(order_by="id", ascending=False)
        )

        assert [view.id for view in page.items] == list(reversed(ids))

    def test_search(self, license_manager, make_license, owner_account):
        """Test search narrows the total too."""
        make_license(owner_id=owner_account.id, notes="Client: Acme")
        make_license(owner_id=owner_account.id)

        page = license_manager.get_licenses_by_owner(
            owner_account, LicenseQueryOptions(search="acme", limit=1)
        )

        assert page.total == 1
        assert page.items[0].notes == "Client: Acme"

    def test_developer_listing(self, license_manager, make_license, developer):
        """Test developer listing defaults to creation order and applies conditions."""
        now = timezone.now()
        newer = make_license(date_created=now)
        older = make_license(date_created=now - timedelta(days=3), auto_renew=True)

        page = license_manager.get_licenses_by_developer(developer.id)
        assert [license.id for license in page.items] == [older.id, newer.id]
        assert page.total == 2

        page = license_manager.get_licenses_by_developer(
            developer.id, LicenseQueryOptions(condition=Q(auto_renew=True))
        )
        assert [license.id for license in page.items] == [older.id]

    def test_licenses_by_cms_license(self, license_manager, make_license, cms_license):
        """Test listing licenses attached to a CMS license."""
        attached = make_license(cms_license_id=cms_license.id)
        make_license()

        licenses = license_manager.get_licenses_by_cms_license(cms_license.id)

        assert [license.id for license in licenses] == [attached.id]

    def test_licenses_by_order(self, license_manager, make_license):
        """Test listing licenses of an order."""
        from licenses.infrastructure.models import PluginLicenseLineItem

        license = make_license()
        PluginLicenseLineItem.objects.create(license_id=license.id, order_id=42, line_item_id=1)

        assert [found.id for found in license_manager.get_licenses_by_order(42)] == [license.id]
        assert license_manager.get_licenses_by_order(43) == []

    def test_renewable(self, license_manager, make_license, owner_account):
        """Test renewable licenses expire within 45 days."""
        now = timezone.now()
        soon = make_license(owner_id=owner_account.id, expires_on=now + timedelta(days=44))
        make_license(owner_id=owner_account.id, expires_on=now + timedelta(days=46))
        make_license(owner_id=owner_account.id)
        lapsed = make_license(
            owner_id=owner_account.id, expires_on=now - timedelta(days=2), auto_renew=True
        )

        renewable = license_manager.get_renewable_licenses(owner_account.id)

        assert {license.id for license in renewable} == {soon.id, lapsed.id}

    def test_expiring_total(self, license_manager, make_license, owner_account):
        """Test expiring total excludes expired, auto-renewing and perpetual licenses."""
        now = timezone.now()
        make_license(owner_id=owner_account.id, expires_on=now + timedelta(days=10))
        make_license(owner_id=owner_account.id, expires_on=now + timedelta(days=44))
        make_license(owner_id=owner_account.id, expires_on=now + timedelta(days=46))
        make_license(
            owner_id=owner_account.id, expires_on=now + timedelta(days=10), auto_renew=True
        )
        make_license(owner_id=owner_account.id, expires_on=now - timedelta(days=1), expired=True)
        make_license(owner_id=owner_account.id)
        make_license(expires_on=now + timedelta(days=10))

        assert license_manager.get_expiring_licenses_total(owner_account) == 2

    def test_remindable_window(self, license_manager, make_license):
        """Test remindable licenses expire 14 to 30 days from today, inclusive."""
        today = midnight_today()
        make_license(expires_on=today + timedelta(days=13))
        at_start = make_license(expires_on=today + timedelta(days=14))
        inside = make_license(expires_on=today + timedelta(days=20))
        at_end = make_license(expires_on=today + timedelta(days=30))
        make_license(expires_on=today + timedelta(days=31))
        make_license(expires_on=today + timedelta(days=20), reminded=True)
        make_license(expires_on=today + timedelta(days=20), expirable=False)

        remindable = license_manager.get_remindable_licenses()

        assert {license.id for license in remindable} == {at_start.id, inside.id, at_end.id}

    def test_freshly_expired(self, license_manager, make_license, plugin, edition):
        """Test freshly expired licenses expire before tomorrow and aren't flagged."""
        today = midnight_today()
        yesterday = make_license(expires_on=today - timedelta(days=1))
        later_today = make_license(expires_on=today + timedelta(hours=23))
        make_license(expires_on=today + timedelta(days=1, hours=1))
        make_license(expires_on=today - timedelta(days=1), expired=True)
        make_license(expires_on=today - timedelta(days=1), expirable=False)
        no_expiry = PluginLicense(
            key="NULLEXPIRY00000000000000",
            plugin_handle=plugin.handle,
            edition_handle=edition.handle,
            email="buyer@example.com",
            expirable=True,
        )
        assert license_manager.save_license(no_expiry, run_validation=False)

        expired = license_manager.get_freshly_expired_licenses()

        assert {license.id for license in expired} == {yesterday.id, later_today.id}
        assert no_expiry.id not in {license.id for license in expired}


@pytest.mark.django_db
@pytest.mark.integration
class TestTransformLicenseForOwner:
    """Tests for owner-aware license projection."""

    def test_owner_gets_full_view(
        self, license_manager, make_license, owner_account, pro_edition
    ):
        """Test the owner sees key, email, notes and expiry options."""
        license = make_license(
            owner_id=owner_account.id,
            email=owner_account.email,
            notes="Client: Acme",
            private_notes="Paid by wire",
            expires_on=timezone.now() + timedelta(days=100),
        )
        license_manager.add_history(license.id, "created")

        view = license_manager.transform_license_for_owner(license, owner_account)

        assert isinstance(view, FullLicenseView)
        assert view.key == license.key
        assert view.email == owner_account.email
        assert view.notes == "Client: Acme"
        assert not hasattr(view, "private_notes")
        assert [entry.note for entry in view.history] == ["created"]
        assert view.edition.handle == "lite"
        assert view.plugin.handle == "seomatic"
        assert view.plugin.has_multiple_editions is True
        assert sorted(view.expiry_date_options) == ["1y", "2y", "3y", "4y", "5y"]

    def test_no_expiry_options_without_expiry(self, license_manager, make_license, owner_account):
        """Test perpetual licenses have no expiry options."""
        license = make_license(owner_id=owner_account.id)

        view = license_manager.transform_license_for_owner(license, owner_account)

        assert view.expiry_date_options is None
        assert view.plugin.has_multiple_editions is False

    def test_non_owner_gets_redacted_view(
        self, license_manager, make_license, owner_account, other_account
    ):
        """Test anyone else sees only the short key and enrichment."""
        license = make_license(
            owner_id=owner_account.id,
            email=owner_account.email,
            notes="Client: Acme",
            private_notes="Paid by wire",
        )
        license_manager.add_history(license.id, "created")

        view = license_manager.transform_license_for_owner(license, other_account)

        assert isinstance(view, RedactedLicenseView)
        assert view.short_key == license.key[:10]
        assert len(view.short_key) == 10
        for field in ("key", "email", "notes", "private_notes"):
            assert not hasattr(view, field)
        flattened = repr(dataclasses.asdict(view))
        assert license.key not in flattened
        assert owner_account.email not in flattened
        assert "Paid by wire" not in flattened
        assert [entry.note for entry in view.history] == ["created"]
        assert view.edition.handle == "lite"
        assert view.plugin.name == "SEOmatic"

    def test_unclaimed_license_is_redacted(self, license_manager, make_license, owner_account):
        """Test an unclaimed license isn't shown in full to anyone."""
        license = make_license()

        view = license_manager.transform_license_for_owner(license, owner_account)

        assert isinstance(view, RedactedLicenseView)

    def test_plugin_shown_when_disabled(self, license_manager, make_license, owner_account, plugin):
        """Test plugin details are shown whatever the plugin's status."""
        license = make_license(owner_id=owner_account.id)
        plugin.enabled = False
        plugin.save()

        view = license_manager.transform_license_for_owner(license, owner_account)

        assert view.plugin.handle == "seomatic"

    def test_cms_license_visibility(
        self, license_manager, make_license, owner_account, other_account, cms_license
    ):
        """Test the CMS license is shown in full only to its own owner."""
        license = make_license(owner_id=other_account.id, cms_license_id=cms_license.id)

        license_owner_view = license_manager.transform_license_for_owner(license, other_account)
        cms_owner_view = license_manager.transform_license_for_owner(license, owner_account)

        assert isinstance(license_owner_view, FullLicenseView)
        assert license_owner_view.cms_license == CmsLicenseRedactedDTO(
            short_key=cms_license.key[:10]
        )
        assert isinstance(cms_owner_view, RedactedLicenseView)
        assert cms_owner_view.cms_license == CmsLicenseFullDTO(
            key=cms_license.key, edition_handle="pro"
        )

    def test_transform_many(self, license_manager, make_license, owner_account):
        """Test projecting several licenses."""
        mine = make_license(owner_id=owner_account.id)
        theirs = make_license()

        views = license_manager.transform_licenses_for_owner([mine, theirs], owner_account)

        assert [type(view) for view in views] == [FullLicenseView, RedactedLicenseView]


@pytest.mark.django_db
@pytest.mark.integration
class TestDeleteAndFlags:
    """Tests for deletes and sweep flags."""

    def test_delete_by_id(self, license_manager, make_license):
        """Test deleting by ID removes the license."""
        license = make_license()

        license_manager.delete_license_by_id(license.id)

        with pytest.raises(LicenseNotFoundError):
            license_manager.get_license_by_id(license.id)
        with pytest.raises(LicenseNotFoundError):
            license_manager.delete_license_by_id(license.id)

    def test_delete_by_key(self, license_manager, make_license):
        """Test deleting by key removes the license."""
        license = make_license()
        license_manager.add_history(license.id, "created")

        license_manager.delete_license_by_key(format_key(license.key))

        with pytest.raises(LicenseNotFoundError):
            license_manager.get_license_by_key(license.key)
        with pytest.raises(LicenseNotFoundError):
            license_manager.delete_license_by_key(license.key)

    def test_delete_nonexistent(self, license_manager):
        """Test deleting something that isn't there."""
        with pytest.raises(LicenseNotFoundError):
            license_manager.delete_license_by_id(999999)
        with pytest.raises(LicenseNotFoundError):
            license_manager.delete_license_by_key("W" * 24)
        with pytest.raises(LicenseNotFoundError):
            license_manager.delete_license_by_key("bad-key")

    def test_mark_reminded(self, license_manager, make_license):
        """Test flagging a license as reminded once."""
        license = make_license(expires_on=midnight_today() + timedelta(days=20))

        assert license_manager.mark_reminded(license) is True
        assert license_manager.mark_reminded(license) is False

        assert license_manager.get_license_by_id(license.id).reminded is True
        assert len(license_manager.get_history(license.id)) == 1

    def test_mark_expired(self, license_manager, make_license):
        """Test flagging a license as expired once."""
        license = make_license(expires_on=midnight_today() - timedelta(days=1))

        assert license_manager.mark_expired(license) is True
        assert license_manager.mark_expired(license) is False

        assert license.expired is True
        assert license_manager.get_license_by_id(license.id).expired is True

    def test_mark_expired_rolls_back_when_history_fails(
        self, license_manager, license_repository, make_license, monkeypatch
    ):
        """Test the expired flag is not kept when its history note can't be written."""
        license = make_license(expires_on=midnight_today() - timedelta(days=1))

        def failing_add_history(entry):
            raise DatabaseError("history table unavailable")

        monkeypatch.setattr(license_repository, "add_history", failing_add_history)

        with pytest.raises(DatabaseError):
            license_manager.mark_expired(license)

        monkeypatch.undo()
        assert license.expired is False
        assert license_repository.find_by_id(license.id).expired is False
        assert license_manager.get_history(license.id) == []
        assert [found.id for found in license_manager.get_freshly_expired_licenses()] == [license.id]

    def test_mark_reminded_rolls_back_when_history_fails(
        self, license_manager, license_repository, make_license, monkeypatch
    ):
        """Test the reminded flag is not kept when its history note can't be written."""
        license = make_license(expires_on=midnight_today() + timedelta(days=20))

        def failing_add_history(entry):
            raise DatabaseError("history table unavailable")

        monkeypatch.setattr(license_repository, "add_history", failing_add_history)

        with pytest.raises(DatabaseError):
            license_manager.mark_reminded(license)

        monkeypatch.undo()
        assert license.reminded is False
        assert license_repository.find_by_id(license.id).reminded is False
        assert license_manager.get_history(license.id) == []
