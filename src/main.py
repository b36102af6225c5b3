"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import SERVICE_VERSION
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from api.v1.dependencies import (
    get_consistency_validator,
    get_event_bus,
    get_notification_service,
)
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from domain.services.notification_listener import register_notification_listeners

logger = structlog.get_logger()

setup_logging()

API_DESCRIPTION = (
    "## Education Center Notifications\n\n"
    "Turns domain events (center, branch, access, user, auth and role "
    "changes) into rendered, channel-specific notification payloads.\n\n"
    "### Features\n"
    "- **Manifests**: One declarative manifest per notification type, "
    "with audiences, channels, templates and required variables\n"
    "- **Locales**: Per-channel locale fallback to the default locale\n"
    "- **Channels**: Email, SMS, WhatsApp, in-app and push payloads\n"
    "- **Consistency checks**: Manifests are checked against event "
    "mappings and templates at startup\n\n"
    "### Rate Limits\n"
    "- GET endpoints: 30 requests/minute\n"
    "- POST endpoints: 10 requests/minute"
)

OPENAPI_TAGS = [
    {"name": "health", "description": "Liveness and readiness probes"},
    {
        "name": "notifications",
        "description": "Manifest catalog, previews, dispatch and delivery logs",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Validate manifests and subscribe notification listeners on startup.

    In strict mode (CI, production) a manifest error aborts startup.
    """
    get_consistency_validator().validate()
    subscribed = register_notification_listeners(get_event_bus(), get_notification_service())
    logger.info(
        "application_started",
        environment=settings.app_env,
        strict_validation=settings.strict_notification_validation,
        listeners=len(subscribed),
    )
    yield
    logger.info("application_stopped")


def _add_middleware(app: FastAPI) -> None:
    # Starlette wraps in reverse: the last one added runs first
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=API_DESCRIPTION,
        version=SERVICE_VERSION,
        debug=settings.debug,
        contact={"name": "EduCenter Platform Team"},
        license_info={"name": "MIT"},
        openapi_tags=OPENAPI_TAGS,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    setup_exception_handlers(app)
    _add_middleware(app)

    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
