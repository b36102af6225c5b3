"""Unit tests for exception handlers."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException
from structlog.testing import capture_logs

from api.exception_handlers import setup_exception_handlers
from core.exceptions import (
    AudienceNotSupportedError,
    ChannelNotSupportedError,
    ErrorCode,
    InvalidRecipientError,
    ManifestNotFoundError,
    ManifestRegistryError,
    ManifestValidationError,
    MissingTemplateVariablesError,
    PayloadBuildError,
    TemplateNotFoundError,
    TemplateRenderingError,
    UnknownNotificationTypeError,
)


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


async def _get(app: FastAPI, path: str):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path)


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_app_exception_returns_error_code_and_message(self) -> None:
        app = _create_test_app()

        @app.get("/raise-app")
        async def _() -> None:
            raise UnknownNotificationTypeError("NOPE")

        response = await _get(app, "/raise-app")

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "UNKNOWN_NOTIFICATION_TYPE"
        assert "NOPE" in body["message"]

    @pytest.mark.asyncio
    async def test_missing_variables_lists_them(self) -> None:
        app = _create_test_app()

        @app.get("/raise-missing")
        async def _() -> None:
            raise MissingTemplateVariablesError("OTP", "DEFAULT", "SMS", ["otpCode"])

        response = await _get(app, "/raise-missing")

        assert response.status_code == 422
        assert response.json()["details"]["missing"] == ["otpCode"]

    @pytest.mark.asyncio
    async def test_server_side_app_exception_logs_error(self) -> None:
        app = _create_test_app()

        @app.get("/raise-manifest")
        async def _() -> None:
            raise ManifestValidationError([{"message": "x"}])

        with capture_logs() as logs:
            response = await _get(app, "/raise-manifest")

        assert response.status_code == 500
        entry = next(e for e in logs if e["event"] == "app_exception")
        assert entry["log_level"] == "error"

    @pytest.mark.asyncio
    async def test_http_exception_returns_standard_format(self) -> None:
        app = _create_test_app()

        @app.get("/raise-http")
        async def _() -> None:
            raise HTTPException(status_code=403, detail="Forbidden")

        response = await _get(app, "/raise-http")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "HTTP_ERROR"
        assert body["message"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_validation_error_returns_field_details(self) -> None:
        app = _create_test_app()

        class Body(BaseModel):
            event_id: str = Field(..., min_length=1)

        @app.post("/validate")
        async def _(body: Body) -> dict[str, bool]:
            return {"ok": True}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/validate", json={"event_id": ""})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "body.event_id"

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self) -> None:
        app = _create_test_app()

        mock_request = MagicMock()
        mock_request.state.request_id = "test-req-id"

        handler = app.exception_handlers.get(Exception)
        assert handler is not None, "Global exception handler not registered"

        response = await handler(mock_request, RuntimeError("Something went wrong"))  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "test-req-id"


class TestErrorCodes:
    def test_every_error_code_has_a_producer(self) -> None:
        """Each code is raised by an exception or written by a handler."""
        raised = {
            exc.error_code
            for exc in (
                ManifestNotFoundError("OTP"),
                TemplateNotFoundError("sms/auth/otp", "en", "/t/en/sms/auth/otp.txt"),
                UnknownNotificationTypeError("NOPE"),
                AudienceNotSupportedError("OTP", "NOBODY"),
                ChannelNotSupportedError("OTP", "DEFAULT", "PUSH"),
                MissingTemplateVariablesError("OTP", "DEFAULT", "SMS", ["otpCode"]),
                InvalidRecipientError("EMAIL", "nope"),
                PayloadBuildError("OTP", "EMAIL", "no subject"),
                ManifestRegistryError("duplicate manifest"),
                ManifestValidationError([]),
                TemplateRenderingError("sms/auth/otp", "undefined"),
            )
        }
        from_handlers = {
            ErrorCode.VALIDATION_ERROR,
            ErrorCode.RATE_LIMIT_EXCEEDED,
            ErrorCode.INTERNAL_ERROR,
        }

        assert raised | from_handlers == set(ErrorCode)
