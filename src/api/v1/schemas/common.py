"""Schemas shared by every API route."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body written by the exception handlers for every failed request."""

    error_code: str = Field(..., examples=["UNKNOWN_NOTIFICATION_TYPE"])
    message: str
    details: dict[str, Any] | list[dict[str, Any]] | None = None
