"""Domain models for the user store."""

from app.models.user import Role, UserRecord

__all__ = ["Role", "UserRecord"]
