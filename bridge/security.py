"""Helpers for operators seeding secret values."""

import secrets

DEFAULT_KEY_BYTES = 32


def generate_secure_key(length: int = DEFAULT_KEY_BYTES) -> str:
    """
    Generate a hex-encoded random key suitable for ``ENCRYPTION_KEY`` or
    ``SESSION_SECRET``.

    Args:
        length: Number of random bytes; the result has twice as many
            hex characters.

    Raises:
        ValueError: If *length* is smaller than 1.
    """
    if length < 1:
        raise ValueError(f"Key length must be a positive number of bytes, got {length}")
    return secrets.token_hex(length)
