"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers. See
portal.core.lifespan and portal.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and clear
the get_settings cache) before importing or calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from portal.api.v1 import api_router
from portal.core.config import get_settings
from portal.core.exception_handlers import register_exception_handlers
from portal.core.lifespan import create_lifespan
from portal.core.limiter import limiter
from portal.middleware import (
    RequestContextMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)

# Multipart framing around an upload of max_upload_size bytes.
MULTIPART_OVERHEAD_BYTES = 64 * 1024


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # First added = innermost. Request order: size limit -> request context -> security -> CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RequestContextMiddleware,
        request_id_header=settings.request_id_header,
        correlation_id_header=settings.correlation_id_header,
    )
    app.add_middleware(
        RequestSizeLimitMiddleware,
        max_bytes=settings.max_upload_size + MULTIPART_OVERHEAD_BYTES,
    )

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
