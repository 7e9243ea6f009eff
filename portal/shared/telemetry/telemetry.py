"""OpenTelemetry tracing for the portal API.

One PortalTracing instance is built from settings at startup and published
via set_telemetry(); the database module picks it up when the engine is
created so SQL spans join the request trace.
"""

import logging
import threading
from collections.abc import Callable

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from portal.core.config import Settings

logger = logging.getLogger(__name__)

# Polled by load balancers.
UNTRACED_URLS = "/api/v1/health"


def _pick_exporter(kind: str, endpoint: str | None) -> SpanExporter | None:
    if kind == "none":
        return None
    if kind == "otlp":
        if endpoint:
            return OTLPSpanExporter(
                endpoint=endpoint, insecure=endpoint.startswith("http://")
            )
        logger.warning("OTLP exporter selected without an endpoint; using console")
    elif kind != "console":
        logger.warning("Unknown span exporter %r; using console", kind)
    return ConsoleSpanExporter()


class PortalTracing:
    """Tracer provider plus the instrumentations the portal turns on."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
        exporter: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.exporter = exporter
        self.otlp_endpoint = otlp_endpoint
        self.sample_rate = sample_rate
        self.provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "PortalTracing":
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
            exporter=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )

    def start(self) -> bool:
        """Install the global tracer provider. On failure the API runs untraced."""
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=TraceIdRatioBased(self.sample_rate),
            )
            exporter = _pick_exporter(self.exporter, self.otlp_endpoint)
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception:
            logger.exception("Tracing setup failed; continuing without spans")
            return False
        self.provider = provider
        logger.info(
            "Tracing started for %s %s (exporter=%s, sample_rate=%s)",
            self.service_name,
            self.service_version,
            self.exporter,
            self.sample_rate,
        )
        return True

    def _instrument(self, what: str, hook: Callable[[TracerProvider], None]) -> None:
        if self.provider is None:
            return
        try:
            hook(self.provider)
        except Exception:
            logger.exception("Could not instrument %s", what)
        else:
            logger.debug("%s instrumented", what)

    def attach(self, app: FastAPI, *, redis: bool = False) -> None:
        """Instrument the app's requests, log records and optionally Redis."""
        self._instrument(
            "FastAPI",
            lambda provider: FastAPIInstrumentor.instrument_app(
                app, tracer_provider=provider, excluded_urls=UNTRACED_URLS
            ),
        )
        self._instrument(
            "logging",
            lambda provider: LoggingInstrumentor().instrument(tracer_provider=provider),
        )
        if redis:
            self._instrument(
                "Redis",
                lambda provider: RedisInstrumentor().instrument(tracer_provider=provider),
            )

    def watch_engine(self, engine: AsyncEngine) -> None:
        self._instrument(
            "SQLAlchemy",
            lambda provider: SQLAlchemyInstrumentor().instrument(
                engine=engine.sync_engine, tracer_provider=provider
            ),
        )

    def stop(self) -> None:
        """Flush pending spans."""
        provider, self.provider = self.provider, None
        if provider is None:
            return
        try:
            provider.shutdown()
        except Exception:
            logger.exception("Error flushing spans on shutdown")


_current: PortalTracing | None = None
_current_lock = threading.RLock()


def get_telemetry() -> PortalTracing | None:
    with _current_lock:
        return _current


def set_telemetry(tracing: PortalTracing | None) -> None:
    global _current
    with _current_lock:
        _current = tracing
