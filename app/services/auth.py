"""Registration and login: credential checks on top of UserStore and TokenCodec."""

import logging

from app.core.security import TokenCodec, hash_password, verify_password
from app.models.user import UserRecord
from app.schemas.auth import AuthResponse, RegisterRequest
from app.schemas.user import UserSummary
from app.services.user_store import DuplicateIdentifierError, UserStore

logger = logging.getLogger(__name__)

# Unknown username and wrong password must look the same to the client.
INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"


class InvalidCredentialsError(Exception):
    """Raised for any failed login, without saying which part was wrong."""

    def __init__(self, message: str = INVALID_CREDENTIALS_MESSAGE) -> None:
        self.message = message
        super().__init__(message)


class UsernameTakenError(Exception):
    """Raised when registering a username that already exists."""

    def __init__(self, username: str) -> None:
        self.username = username
        self.message = "Username is already taken"
        super().__init__(self.message)


def to_summary(user: UserRecord) -> UserSummary:
    return UserSummary(
        id=user.id,
        username=user.username,
        name=user.name,
        email=user.email,
        role=user.role.authority,
    )


class AuthService:
    """Issues tokens for new and returning users."""

    def __init__(self, store: UserStore, codec: TokenCodec, bcrypt_rounds: int | None = None) -> None:
        self.store = store
        self.codec = codec
        self.bcrypt_rounds = bcrypt_rounds

    def register(self, body: RegisterRequest) -> AuthResponse:
        """Create a user with a hashed password and return a token for it."""
        if self.store.exists_by_username(body.username):
            raise UsernameTakenError(body.username)
        user = UserRecord(
            name=body.name,
            email=body.email,
            age=body.age,
            username=body.username,
            password=hash_password(body.password, self.bcrypt_rounds),
            role=body.role,
            enabled=True,
        )
        try:
            saved = self.store.save(user)
        except DuplicateIdentifierError:
            # Lost a race with a concurrent registration of the same username.
            raise UsernameTakenError(body.username)
        logger.info("Registered user id=%s username=%s role=%s", saved.id, saved.username, saved.role.value)
        return self._auth_response(saved)

    def login(self, username: str, password: str) -> AuthResponse:
        """Verify credentials and return a token; InvalidCredentialsError on any mismatch."""
        user = self.store.find_by_username(username)
        if user is None or not verify_password(password, user.password):
            logger.info("Failed login for username=%s", username)
            raise InvalidCredentialsError()
        if not user.enabled:
            logger.info("Login refused for disabled username=%s", username)
            raise InvalidCredentialsError()
        return self._auth_response(user)

    def _auth_response(self, user: UserRecord) -> AuthResponse:
        token = self.codec.issue(user.username, user.role.authority)
        return AuthResponse(token=token, user=to_summary(user))
