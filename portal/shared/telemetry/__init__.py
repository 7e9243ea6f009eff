"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from portal.shared.telemetry.logging import RequestContextFilter, setup_logging
from portal.shared.telemetry.telemetry import (
    PortalTracing,
    get_telemetry,
    set_telemetry,
)
from portal.shared.telemetry.tracing import traced

__all__ = [
    "setup_logging",
    "RequestContextFilter",
    "PortalTracing",
    "get_telemetry",
    "set_telemetry",
    "traced",
]
