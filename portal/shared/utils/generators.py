"""ID and token generators (CUID, one-time tokens)."""

import hashlib
import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2)."""
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_token() -> str:
    """URL-safe one-time token (password reset links)."""
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    """SHA-256 hex digest of a one-time token; only the digest is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
