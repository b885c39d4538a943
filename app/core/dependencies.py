"""FastAPI dependencies exposing the app-wide store, codec and auth service."""

from typing import Annotated

from fastapi import Depends, Request

from app.core.config import Settings
from app.core.security import TokenCodec
from app.services.auth import AuthService
from app.services.user_store import UserStore


def get_user_store(request: Request) -> UserStore:
    """Dependency that returns the store created by the application factory."""
    return request.app.state.user_store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_auth_service(
    store: Annotated[UserStore, Depends(get_user_store)],
    codec: Annotated[TokenCodec, Depends(get_codec)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthService:
    return AuthService(store, codec, bcrypt_rounds=settings.BCRYPT_ROUNDS)
