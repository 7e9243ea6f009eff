"""DTOs for profile use cases."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProfileUpdate:
    """Owner-editable profile fields. None means unchanged."""

    full_name: str | None = None
    company: str | None = None
    avatar_url: str | None = None

    def is_empty(self) -> bool:
        return self.full_name is None and self.company is None and self.avatar_url is None
