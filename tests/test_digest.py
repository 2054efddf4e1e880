"""
Tests for HMAC computation and constant-time comparison.
"""

import pytest

from signet.digest import (
    SUPPORTED_DIGESTS,
    constant_time_equal,
    digest_size,
    mac,
    resolve_digest,
)
from signet.error_handling import ConfigurationError


class TestResolveDigest:
    """Test digest identifier normalization."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("SHA1", "sha1"),
            ("sha1", "sha1"),
            ("SHA256", "sha256"),
            ("sha-256", "sha256"),
            ("SHA_512", "sha512"),
            ("md5", "md5"),
        ],
    )
    def test_known_names(self, name, expected):
        assert resolve_digest(name) == expected

    def test_unknown_digest_raises(self):
        with pytest.raises(ConfigurationError, match="Unsupported digest"):
            resolve_digest("WHIRLPOOL")

    def test_non_string_raises(self):
        with pytest.raises(ConfigurationError):
            resolve_digest(None)

    def test_digest_sizes(self):
        assert digest_size("SHA1") == 20
        assert digest_size("SHA256") == 32
        assert digest_size("SHA384") == 48
        assert digest_size("SHA512") == 64


class TestMac:
    """Test MAC computation against published HMAC vectors."""

    def test_rfc2202_sha1(self):
        result = mac(b"Jefe", "SHA1", b"what do ya want for nothing?")
        assert result.hex() == "effcdf6ae5eb2fa2d27416d5f184df9c259a7c79"

    def test_rfc4231_sha256(self):
        result = mac(b"Jefe", "SHA256", b"what do ya want for nothing?")
        assert result.hex() == (
            "5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843"
        )

    @pytest.mark.parametrize("name", sorted(SUPPORTED_DIGESTS))
    def test_mac_length_matches_digest_size(self, name):
        assert len(mac(b"key", name, b"message")) == digest_size(name)

    def test_different_secrets_give_different_macs(self):
        assert mac(b"one", "SHA256", b"message") != mac(b"two", "SHA256", b"message")


class TestConstantTimeEqual:
    """Test MAC comparison."""

    def test_equal(self):
        assert constant_time_equal(b"\x00\x01\x02", b"\x00\x01\x02")

    def test_first_byte_differs(self):
        assert not constant_time_equal(b"\xff\x01\x02", b"\x00\x01\x02")

    def test_last_byte_differs(self):
        assert not constant_time_equal(b"\x00\x01\x02", b"\x00\x01\x03")

    def test_length_mismatch_returns_false(self):
        assert not constant_time_equal(b"\x00\x01", b"\x00\x01\x02")
        assert not constant_time_equal(b"", b"\x00")

    def test_non_bytes_returns_false(self):
        assert not constant_time_equal(None, b"\x00")
        assert not constant_time_equal("abc", "abc")
