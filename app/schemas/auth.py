"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field

from app.models.user import Role
from app.schemas.user import UserCreateRequest, UserSummary


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class RegisterRequest(UserCreateRequest):
    """Self-service registration; same rules as admin user creation."""


class AuthResponse(BaseModel):
    """JWT returned after registration or login, with the user's public profile."""

    token: str = Field(..., description="JWT; send as Authorization: Bearer <token>")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserSummary


class CurrentUser(BaseModel):
    """Identity resolved from a bearer token for the current request."""

    model_config = {"frozen": True}

    username: str
    role: str | None = Field(default=None, description="Role authority, e.g. ROLE_ADMIN")

    def has_role(self, *roles: Role) -> bool:
        return any(self.role == role.authority for role in roles)
