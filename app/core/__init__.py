"""Core app configuration, security and dependencies."""

from app.core.config import get_settings, settings
from app.core.security import TokenCodec

__all__ = ["get_settings", "settings", "TokenCodec"]
