"""Unit tests for middleware."""

import pytest
import structlog
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware


def _create_app_with_middleware() -> FastAPI:
    """Create a minimal FastAPI app with the application's middleware stack."""
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/test")
    async def _() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/context")
    async def _context() -> dict[str, str]:
        bound = structlog.contextvars.get_contextvars()
        return {"correlation_id": bound.get("correlation_id", "")}

    return app


async def _get(path: str, headers: dict[str, str] | None = None):
    transport = ASGITransport(app=_create_app_with_middleware())
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path, headers=headers)


class TestSecurityHeadersMiddleware:
    """Tests for SecurityHeadersMiddleware."""

    @pytest.mark.asyncio
    async def test_adds_security_headers(self) -> None:
        response = await _get("/test")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert response.headers["referrer-policy"] == "strict-origin-when-cross-origin"


class TestRequestIDMiddleware:
    """Tests for RequestIDMiddleware."""

    @pytest.mark.asyncio
    async def test_generates_request_id_when_not_provided(self) -> None:
        response = await _get("/test")

        assert response.headers["x-request-id"]
        assert response.headers["x-correlation-id"] == response.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_propagates_existing_request_id(self) -> None:
        response = await _get("/test", headers={"X-Request-ID": "custom-req-123"})

        assert response.headers["x-request-id"] == "custom-req-123"

    @pytest.mark.asyncio
    async def test_correlation_header_wins(self) -> None:
        response = await _get(
            "/test", headers={"X-Correlation-ID": "corr-1", "X-Request-ID": "req-1"}
        )

        assert response.headers["x-request-id"] == "corr-1"

    @pytest.mark.asyncio
    async def test_malformed_id_is_replaced(self) -> None:
        response = await _get("/test", headers={"X-Request-ID": "bad id with spaces"})

        assert response.headers["x-request-id"] != "bad id with spaces"


class TestRequestLoggingMiddleware:
    @pytest.mark.asyncio
    async def test_binds_correlation_id_for_handlers(self) -> None:
        response = await _get("/context", headers={"X-Correlation-ID": "corr-7"})

        assert response.json() == {"correlation_id": "corr-7"}
