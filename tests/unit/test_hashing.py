"""
Module 01 - Hashing Unit Tests
Tests for authpath/crypto/hashing.py

Tests:
- HashAlgorithm mixing, ZERO and word digests for SHA-256 and SHA-512
- hash_canonical stability for dict key ordering differences
- to_hex/from_hex validation
"""
import hashlib
import pytest

from authpath.crypto.hashing import (
    SHA256,
    SHA512,
    get_hash_algorithm,
    hash_canonical,
    sha256,
    sha512,
    to_hex,
    from_hex,
)
from authpath.schemas.errors import ConfigException, CanonicalizationException


class TestRawHashes:
    """Tests for sha256() / sha512()."""

    def test_sha256_known_value(self):
        """sha256 matches hashlib."""
        assert sha256(b"hello") == hashlib.sha256(b"hello").digest()
        assert len(sha256(b"hello")) == 32

    def test_sha512_known_value(self):
        """sha512 matches hashlib."""
        assert sha512(b"hello") == hashlib.sha512(b"hello").digest()
        assert len(sha512(b"hello")) == 64


class TestHashAlgorithm:
    """Tests for the digest mixer."""

    def test_zero_digest_sizes(self):
        assert SHA256.zero() == bytes(32)
        assert SHA512.zero() == bytes(64)

    def test_mix_is_hash_of_concatenation(self):
        a, b = SHA256.word_digest(1), SHA256.word_digest(2)
        assert SHA256.mix(a, b) == hashlib.sha256(a + b).digest()

    def test_mix_order_matters(self):
        a, b = SHA256.word_digest(1), SHA256.word_digest(2)
        assert SHA256.mix(a, b) != SHA256.mix(b, a)

    def test_sha512_mix(self):
        a, b = SHA512.word_digest(3), SHA512.zero()
        assert SHA512.mix(a, b) == hashlib.sha512(a + b).digest()

    def test_word_digest_sha256_layout(self):
        """First 32-bit word carries the value, big-endian."""
        d = SHA256.word_digest(5)
        assert d == bytes([0, 0, 0, 5]) + bytes(28)

    def test_word_digest_sha512_layout(self):
        """First 64-bit word carries the value."""
        d = SHA512.word_digest(258)
        assert d[:8] == (258).to_bytes(8, "big")
        assert d[8:] == bytes(56)

    def test_word_digest_zero_is_zero_digest(self):
        assert SHA256.word_digest(0) == SHA256.zero()

    def test_word_digest_out_of_range(self):
        with pytest.raises(ValueError, match="does not fit"):
            SHA256.word_digest(1 << 32)
        with pytest.raises(ValueError):
            SHA256.word_digest(-1)

    def test_is_digest(self):
        assert SHA256.is_digest(bytes(32))
        assert not SHA256.is_digest(bytes(64))
        assert not SHA256.is_digest("00" * 32)

    def test_get_hash_algorithm(self):
        assert get_hash_algorithm("sha256") is SHA256
        assert get_hash_algorithm("SHA512") is SHA512

    def test_get_hash_algorithm_unknown(self):
        with pytest.raises(ConfigException) as exc_info:
            get_hash_algorithm("md5")
        assert exc_info.value.details["supported"] == ["sha256", "sha512"]


class TestHashCanonical:
    """Tests for hash_canonical() function."""

    def test_hash_canonical_stable_for_key_order(self):
        """Dict key insertion order doesn't affect the commitment."""
        dict1 = {"zebra": 1, "apple": 2, "mango": 3}
        dict2 = {"apple": 2, "mango": 3, "zebra": 1}

        assert hash_canonical(dict1) == hash_canonical(dict2)

    def test_hash_canonical_list_preserves_order(self):
        assert hash_canonical({"items": [3, 1, 2]}) != hash_canonical({"items": [1, 2, 3]})

    def test_hash_canonical_matches_rule(self):
        """leaf = H(canonical json)."""
        obj = {"b": 2, "a": 1}
        assert hash_canonical(obj) == sha256(b'{"a":1,"b":2}')

    def test_hash_canonical_sized_by_algorithm(self):
        assert len(hash_canonical({"k": "v"}, SHA512)) == 64

    def test_hash_canonical_rejects_nan(self):
        with pytest.raises(CanonicalizationException):
            hash_canonical({"x": float("nan")})


class TestHexConversion:
    """Tests for to_hex() and from_hex() functions."""

    def test_to_hex_format(self):
        assert to_hex(bytes.fromhex("deadbeef")) == "0xdeadbeef"

    def test_from_hex_valid(self):
        assert from_hex("0xdeadbeef") == bytes.fromhex("deadbeef")

    def test_from_hex_missing_prefix(self):
        with pytest.raises(ValueError, match="must start with '0x'"):
            from_hex("deadbeef")

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_chars(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xgg")

    def test_hex_of_digest(self):
        value = SHA256.mix(SHA256.zero(), SHA256.zero())
        hex_str = to_hex(value)
        assert from_hex(hex_str) == value
        assert len(hex_str) == 2 + 64


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
