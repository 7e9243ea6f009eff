"""Application services: cross-cutting rules used by several use cases."""

from portal.application.services.file_access_scope import (
    FileAccessScope,
    can_view,
    list_visible,
)

__all__ = ["FileAccessScope", "can_view", "list_visible"]
