"""Security utilities.

Re-exports all security-related functions for convenience.
"""

from src.vitelis.core.security.crypto import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    decode_token,
    hash_password,
    secrets_match,
    verify_password,
)

__all__ = [
    "DUMMY_PASSWORD_HASH",
    "create_access_token",
    "decode_token",
    "hash_password",
    "secrets_match",
    "verify_password",
]
