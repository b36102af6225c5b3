"""Request and correlation ID middleware."""

import re
import uuid
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# Correlation IDs end up in delivery log rows (64 chars max).
_VALID_ID = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")


def _incoming_id(request: Request) -> str | None:
    for header in ("X-Correlation-ID", "X-Request-ID"):
        value = request.headers.get(header)
        if value and _VALID_ID.match(value):
            return value
    return None


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID that also serves as the notification correlation ID.

    A caller-supplied ``X-Correlation-ID`` (or ``X-Request-ID``) is reused
    when well formed, so a dispatch can be traced across services.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = _incoming_id(request) or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Correlation-ID"] = request_id

        return response
