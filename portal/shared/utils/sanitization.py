"""Input sanitization for free text and uploaded file names."""

import re
import unicodedata
from typing import ClassVar

import nh3


class InputSanitizer:
    """
    Sanitize user inputs before they are stored and shown back in the portal.

    Brief answers and profile fields are plain text: every HTML tag is stripped.
    """

    ALLOWED_TAGS: ClassVar[set[str]] = set()
    FILENAME_UNSAFE: ClassVar[re.Pattern[str]] = re.compile(r"[^\w.\- ()]+")
    RESERVED_NAMES: ClassVar[frozenset[str]] = frozenset({"", ".", ".."})
    MAX_FILENAME_LENGTH: ClassVar[int] = 180

    @classmethod
    def sanitize_html(cls, value: str) -> str:
        """Remove all HTML tags with nh3.

        Args:
            value: Raw string that may contain HTML.

        Returns:
            Sanitized string safe for HTML display.
        """
        if not value:
            return value
        return nh3.clean(value, tags=cls.ALLOWED_TAGS, attributes={})

    @classmethod
    def sanitize_text(cls, value: str | None) -> str | None:
        """Strip HTML and surrounding whitespace; empty results become None."""
        if value is None:
            return None
        cleaned = cls.sanitize_html(value).strip()
        return cleaned or None

    @classmethod
    def sanitize_filename(cls, value: str) -> str:
        """Reduce an uploaded file name to a safe basename.

        Drops any directory part and NUL bytes, replaces characters outside
        a conservative set with underscores and caps the length.

        Raises:
            ValueError: If nothing usable remains.
        """
        name = unicodedata.normalize("NFKC", value or "").replace("\x00", "")
        name = name.replace("\\", "/").rsplit("/", 1)[-1].strip()
        name = cls.FILENAME_UNSAFE.sub("_", name)
        if len(name) > cls.MAX_FILENAME_LENGTH:
            stem, dot, ext = name.rpartition(".")
            if dot and len(ext) < 16:
                name = stem[: cls.MAX_FILENAME_LENGTH - len(ext) - 1] + "." + ext
            else:
                name = name[: cls.MAX_FILENAME_LENGTH]
        if name in cls.RESERVED_NAMES:
            raise ValueError("Invalid file name")
        return name
