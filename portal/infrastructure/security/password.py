"""Account password hashing (bcrypt over a SHA-256 pre-hash) and strength rules."""

import base64
import hashlib

import bcrypt

from portal.domain.exceptions import ValidationException

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 256


def _prehash(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def check_password_strength(password: str) -> None:
    """Raise ValidationException when the password is too short or too long."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationException(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            field="password",
        )
    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValidationException(
            f"Password must be at most {MAX_PASSWORD_LENGTH} characters",
            field="password",
        )


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bool(bcrypt.checkpw(_prehash(plain_password), hashed_password.encode("utf-8")))
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    hashed = bcrypt.hashpw(_prehash(password), bcrypt.gensalt())
    return hashed.decode("utf-8")
