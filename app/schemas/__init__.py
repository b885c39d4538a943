"""Pydantic request/response schemas."""

from app.schemas.auth import AuthResponse, CurrentUser, LoginRequest, RegisterRequest
from app.schemas.error import ErrorResponse, ValidationErrorItem
from app.schemas.health import HealthResponse
from app.schemas.user import (
    UserCreateRequest,
    UserResponse,
    UserSummary,
    UserUpdateRequest,
)

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "UserCreateRequest",
    "UserResponse",
    "UserSummary",
    "UserUpdateRequest",
    "ValidationErrorItem",
]
