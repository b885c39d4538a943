"""Persisted user record and role model (auth and RBAC)."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """
    Access level of a user account.

    ADMIN: full access including user creation and deletion.
    MANAGER: can read and update users, but cannot create or delete.
    USER: read-only access to user information.
    """

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    USER = "USER"

    @property
    def authority(self) -> str:
        """Authority string carried in tokens, e.g. ROLE_ADMIN."""
        return f"ROLE_{self.value}"


class UserRecord(BaseModel):
    """
    User account as held by UserStore and written to the JSON data file.

    password holds the bcrypt hash under the fixed "password" key; API responses
    use the public schemas in app.schemas.user and never include it.
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    id: int | None = Field(default=None, ge=1)
    name: str | None = None
    email: str | None = None
    age: int | None = None
    username: str | None = None
    password: str | None = Field(default=None, repr=False)
    role: Role = Role.USER
    enabled: bool = True
