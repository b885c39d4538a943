"""Request/response schemas for user management endpoints."""

import re

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.models.user import Role

USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"


def validate_password_strength(value: str) -> str:
    """Require at least one lowercase letter, one uppercase letter and one digit."""
    if not (
        re.search(r"[a-z]", value)
        and re.search(r"[A-Z]", value)
        and re.search(r"\d", value)
    ):
        raise ValueError(
            "Password must contain at least one lowercase letter, one uppercase letter, and one digit"
        )
    return value


def parse_role(value: object) -> object:
    """Accept role names case-insensitively; a missing role means USER."""
    if value is None:
        return Role.USER
    if isinstance(value, str):
        return value.strip().upper()
    return value


class UserCreateRequest(BaseModel):
    """Body for POST /users (admin only)."""

    name: str = Field(..., min_length=2, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="Email address")
    age: int = Field(..., ge=0, le=150, description="Age in years")
    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        pattern=USERNAME_PATTERN,
        description="Letters, numbers and underscores only",
    )
    password: str = Field(..., min_length=8, max_length=128, description="Plain-text password")
    role: Role = Field(default=Role.USER, description="ADMIN, MANAGER or USER")

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password_strength(v)

    @field_validator("role", mode="before")
    @classmethod
    def check_role(cls, v: object) -> object:
        return parse_role(v)


class UserUpdateRequest(BaseModel):
    """Body for PUT /users/{id}. All fields optional; only provided fields change."""

    name: str | None = Field(default=None, min_length=2, max_length=100)
    email: EmailStr | None = None
    age: int | None = Field(default=None, ge=0, le=150)


class UserResponse(BaseModel):
    """User as returned by the API (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None
    email: str | None = None
    age: int | None = None
    username: str | None = None
    role: Role
    enabled: bool


class UserSummary(BaseModel):
    """Public-safe projection returned alongside a token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str | None = None
    name: str | None = None
    email: str | None = None
    role: str = Field(..., description="Role authority, e.g. ROLE_USER")
