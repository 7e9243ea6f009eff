"""Logging configuration for the portal."""

import logging
import sys

from portal.core.config import get_settings
from portal.shared.context import get_request_context

LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s %(identity_id)s] %(message)s"
)


class RequestContextFilter(logging.Filter):
    """Stamp each record with the request ID and admitted identity ('-' when unset)."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = get_request_context()
        record.request_id = ctx.request_id or "-"
        record.correlation_id = ctx.correlation_id or "-"
        record.identity_id = ctx.identity_id or "-"
        return True


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[handler],
    )
