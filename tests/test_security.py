"""
Tests for secure key generation.
"""

import string

import pytest

from bridge.security import generate_secure_key


def test_default_key_is_64_hex_characters():
    key = generate_secure_key()

    assert len(key) == 64
    assert set(key) <= set(string.hexdigits.lower())


def test_keys_are_distinct():
    assert generate_secure_key(32) != generate_secure_key(32)


def test_custom_length():
    assert len(generate_secure_key(16)) == 32


@pytest.mark.parametrize("length", [0, -8])
def test_non_positive_length_is_rejected(length):
    with pytest.raises(ValueError):
        generate_secure_key(length)
