"""Access tokens for browser sessions.

A token names the identity (sub) and the auth_session row (sid) it belongs to;
the row, not the token, decides whether the session is still live.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, cast

from jose import JWTError, jwt

from portal.core.config import get_settings


@dataclass(frozen=True)
class AccessClaims:
    """Decoded claims of a portal access token."""

    identity_id: str
    session_id: str
    expires_at: datetime


def create_access_token(identity_id: str, session_id: str, expires_at: datetime) -> str:
    """Encode an access token for the session, expiring with it."""
    settings = get_settings()
    claims: dict[str, Any] = {
        "sub": identity_id,
        "sid": session_id,
        "exp": expires_at,
        "iat": datetime.now(UTC),
    }
    encoded = jwt.encode(
        claims,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> AccessClaims:
    """Verify and decode an access token.

    Raises:
        ValueError: If the token is invalid, expired, or missing sub/sid.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    sub = payload.get("sub")
    sid = payload.get("sid")
    if not sub or not sid:
        raise ValueError("Token missing required claim: sub or sid")
    return AccessClaims(
        identity_id=str(sub),
        session_id=str(sid),
        expires_at=datetime.fromtimestamp(int(payload["exp"]), UTC),
    )
