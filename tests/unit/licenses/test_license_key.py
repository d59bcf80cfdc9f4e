"""
Unit tests for license key helpers.
"""

import pytest

from core.domain.exceptions import InvalidKeyFormatError
from licenses.domain.license_key import (
    KEY_ALPHABET,
    KEY_LENGTH,
    format_key,
    generate_license_key,
    normalize_key,
    short_key,
)

CANONICAL = "AAAABBBBCCCCDDDDEEEEFFFF"


class TestNormalizeKey:
    """Tests for normalize_key."""

    def test_dashed_key(self):
        """Test dashes are stripped."""
        assert normalize_key("AAAA-BBBB-CCCC-DDDD-EEEE-FFFF") == CANONICAL

    def test_canonical_key_unchanged(self):
        """Test an already canonical key passes through."""
        assert normalize_key(CANONICAL) == CANONICAL

    def test_surrounding_whitespace(self):
        """Test surrounding whitespace is trimmed."""
        assert normalize_key("  AAAA-BBBB-CCCC-DDDD-EEEE-FFFF\n") == CANONICAL

    def test_repeated_dashes(self):
        """Test runs of dashes are stripped."""
        assert normalize_key("AAAA--BBBB---CCCCDDDD-EEEEFFFF-") == CANONICAL

    @pytest.mark.parametrize(
        "key",
        [
            "AAAA-BBBB-CCCC-DDDD-EEEE-FFFF",
            " AAAABBBBCCCCDDDDEEEEFFFF ",
            "-AAAABBBBCCCCDDDDEEEEFFFF-",
        ],
    )
    def test_idempotent(self, key):
        """Test normalizing twice gives the same key."""
        once = normalize_key(key)
        assert normalize_key(once) == once

    @pytest.mark.parametrize(
        "key",
        [
            "",
            "AAAA-BBBB-CCCC-DDDD-EEEE-FF",
            "AAAABBBBCCCCDDDDEEEEFFFFG",
            "AAAA BBBB CCCC DDDD EEEE FFFF",
            "----",
        ],
    )
    def test_wrong_length_rejected(self, key):
        """Test keys that don't normalize to 24 characters are rejected."""
        with pytest.raises(InvalidKeyFormatError) as exc_info:
            normalize_key(key)
        assert exc_info.value.code == "INVALID_KEY_FORMAT"

    def test_none_rejected(self):
        """Test a missing key is rejected."""
        with pytest.raises(InvalidKeyFormatError):
            normalize_key(None)


class TestGenerateLicenseKey:
    """Tests for generate_license_key."""

    def test_length_and_alphabet(self):
        """Test generated keys are canonical."""
        key = generate_license_key()
        assert len(key) == KEY_LENGTH
        assert set(key) <= set(KEY_ALPHABET)
        assert normalize_key(key) == key

    def test_keys_differ(self):
        """Test keys are random."""
        assert generate_license_key() != generate_license_key()


class TestKeyFormatting:
    """Tests for short_key and format_key."""

    def test_short_key(self):
        """Test short key is the first 10 characters."""
        assert short_key(CANONICAL) == "AAAABBBBCC"

    def test_short_key_empty(self):
        """Test short key of an empty key."""
        assert short_key("") == ""

    def test_format_key(self):
        """Test keys are grouped in fours."""
        assert format_key(CANONICAL) == "AAAA-BBBB-CCCC-DDDD-EEEE-FFFF"

    def test_format_key_rejects_bad_key(self):
        """Test formatting validates the key."""
        with pytest.raises(InvalidKeyFormatError):
            format_key("ABC")
