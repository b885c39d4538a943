"""User CRUD routes. Reads need any identity; writes are role-restricted."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from app.api.v1.auth import get_current_user, require_admin, require_admin_or_manager
from app.core.config import Settings
from app.core.dependencies import get_app_settings, get_user_store
from app.core.errors import UserNotFoundError
from app.core.security import hash_password
from app.models.user import UserRecord
from app.schemas.auth import CurrentUser
from app.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest
from app.services.user_store import DuplicateIdentifierError, UserStore

router = APIRouter()

Store = Annotated[UserStore, Depends(get_user_store)]


@router.get("", response_model=list[UserResponse])
def list_users(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Store,
) -> list[UserRecord]:
    return store.find_all()


@router.get("/username/{username}", response_model=UserResponse)
def get_user_by_username(
    username: str,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Store,
) -> UserRecord:
    user = store.find_by_username(username)
    if user is None:
        raise UserNotFoundError("username", username)
    return user


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Store,
) -> UserRecord:
    user = store.find_by_id(user_id)
    if user is None:
        raise UserNotFoundError("id", user_id)
    return user


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreateRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    store: Store,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UserRecord:
    """Create a user (admin only). 409 if the username already exists."""
    if store.exists_by_username(body.username):
        raise DuplicateIdentifierError("username", body.username)
    user = UserRecord(
        name=body.name,
        email=body.email,
        age=body.age,
        username=body.username,
        password=hash_password(body.password, settings.BCRYPT_ROUNDS),
        role=body.role,
    )
    return store.save(user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    _user: Annotated[CurrentUser, Depends(require_admin_or_manager)],
    store: Store,
) -> UserRecord:
    """Apply the provided name/email/age to an existing user (admin or manager)."""
    user = store.update(user_id, body.model_dump(exclude_none=True))
    if user is None:
        raise UserNotFoundError("id", user_id)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    store: Store,
) -> Response:
    if not store.delete_by_id(user_id):
        raise UserNotFoundError("id", user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
