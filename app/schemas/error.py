"""Error response body shared by all exception handlers."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ValidationErrorItem(BaseModel):
    """One failing field of a rejected request body."""

    field: str
    rejected_value: Any = None
    message: str


class ErrorResponse(BaseModel):
    """Standard error body: status code, short reason, message and request path."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    status: int
    error: str
    message: str
    path: str
    validation_errors: list[ValidationErrorItem] | None = None
