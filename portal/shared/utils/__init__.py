"""Shared utilities: datetime, generators, sanitization."""

from portal.shared.utils.datetime import ensure_utc, epoch_millis, utc_now
from portal.shared.utils.generators import generate_cuid, generate_token, hash_token
from portal.shared.utils.sanitization import InputSanitizer

__all__ = [
    "generate_cuid",
    "generate_token",
    "hash_token",
    "utc_now",
    "ensure_utc",
    "epoch_millis",
    "InputSanitizer",
]
