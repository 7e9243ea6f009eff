"""Security: access tokens and password hashing."""

from portal.infrastructure.security.jwt import AccessClaims, create_access_token, verify_token
from portal.infrastructure.security.password import (
    check_password_strength,
    get_password_hash,
    verify_password,
)

__all__ = [
    "AccessClaims",
    "check_password_strength",
    "create_access_token",
    "get_password_hash",
    "verify_password",
    "verify_token",
]
