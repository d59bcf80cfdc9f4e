"""
Unit tests for core value objects.
"""
from types import SimpleNamespace

import pytest

from core.domain.value_objects import Account, Email, PluginHandle


class TestEmail:
    """Tests for Email value object."""

    def test_valid_email(self):
        """Test valid email creation."""
        email = Email("test@example.com")
        assert str(email) == "test@example.com"
        assert email.value == "test@example.com"

    def test_normalized(self):
        """Test normalized email is lowercase."""
        assert Email("Test@Example.COM").normalized == "test@example.com"

    def test_invalid_email_no_at(self):
        """Test invalid email without @."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("invalid-email")

    def test_invalid_email_empty(self):
        """Test invalid empty email."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("")

    def test_equality(self):
        """Test emails compare by value."""
        assert Email("a@example.com") == Email("a@example.com")
        assert Email("a@example.com") != Email("b@example.com")
        assert len({Email("a@example.com"), Email("a@example.com")}) == 1


class TestPluginHandle:
    """Tests for PluginHandle value object."""

    @pytest.mark.parametrize("handle", ["seomatic", "commerce-stripe", "feed_me", "2fa"])
    def test_valid_handle(self, handle):
        """Test valid handle creation."""
        assert str(PluginHandle(handle)) == handle

    def test_empty_handle(self):
        """Test empty handle is rejected."""
        with pytest.raises(ValueError, match="cannot be empty"):
            PluginHandle("")

    @pytest.mark.parametrize("handle", ["SEOmatic", "-seomatic", "seo matic", "seo.matic"])
    def test_invalid_handle(self, handle):
        """Test malformed handles are rejected."""
        with pytest.raises(ValueError, match="Invalid handle format"):
            PluginHandle(handle)


class TestAccount:
    """Tests for Account value object."""

    def test_from_user(self):
        """Test building an account from a user object."""
        account = Account.from_user(SimpleNamespace(id=5, email="owner@example.com"))
        assert account == Account(id=5, email="owner@example.com")

    def test_id_required(self):
        """Test an account needs an id."""
        with pytest.raises(ValueError):
            Account(id=None, email="owner@example.com")
