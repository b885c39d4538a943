"""Register/login routes and identity dependencies (get_current_user, require_roles)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.core.dependencies import get_auth_service
from app.models.user import Role
from app.schemas.auth import AuthResponse, CurrentUser, LoginRequest, RegisterRequest
from app.services.auth import AuthService

router = APIRouter()


@router.post("/register", response_model=AuthResponse)
def register(
    body: RegisterRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Create an account and return a JWT for it. 400 if the username is taken."""
    return auth.register(body)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Authenticate with username and password; returns a JWT.
    Include the token in the Authorization header as: Bearer <token>
    """
    return auth.login(body.username, body.password)


def get_current_user_optional(request: Request) -> CurrentUser | None:
    """Identity set by AuthenticationMiddleware, or None for anonymous requests."""
    return getattr(request.state, "identity", None)


def get_current_user(
    identity: Annotated[CurrentUser | None, Depends(get_current_user_optional)],
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT. Raises 401 if missing or invalid."""
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


def require_roles(*roles: Role) -> Callable[[CurrentUser], CurrentUser]:
    """Build a dependency that allows only the given roles. Raises 403 otherwise."""

    def check(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not current_user.has_role(*roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role for this operation",
            )
        return current_user

    return check


require_admin = require_roles(Role.ADMIN)
require_admin_or_manager = require_roles(Role.ADMIN, Role.MANAGER)
