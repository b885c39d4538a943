"""Password hashing and JWT issuance/verification for authentication."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt
from pydantic import BaseModel, SecretStr

from app.core.config import Settings, get_settings, has_strong_secret

logger = logging.getLogger(__name__)

# Used when no JWT_SECRET (or one shorter than 32 bytes) is configured.
# UNSAFE for production: anyone reading this source can forge tokens.
DEV_FALLBACK_SECRET = "defaultSecretKeyForDevelopmentOnlyNotForProduction123456789"

DEFAULT_TOKEN_TTL_SECONDS = 86400
ROLE_CLAIM = "role"
REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    cost = rounds if rounds is not None else get_settings().BCRYPT_ROUNDS
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(plain_password: str, hashed: str | None) -> bool:
    """Verify a plain password against a stored hash."""
    if not hashed:
        return False
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class InvalidSubjectError(Exception):
    """Raised when a token is requested for an empty or missing subject."""

    def __init__(self, message: str = "Token subject must be a non-empty username") -> None:
        self.message = message
        super().__init__(message)


class TokenError(Exception):
    """Base class for token decoding failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MalformedTokenError(TokenError):
    """Token is not a well-formed JWS or lacks required claims."""


class SignatureError(TokenError):
    """Token signature does not verify against the signing key."""


class ExpiredTokenError(TokenError):
    """Token expiration time has passed."""


class TokenClaims(BaseModel):
    """Decoded claims of a verified token."""

    subject: str
    role: str | None = None
    issued_at: datetime
    expires_at: datetime


def resolve_signing_key(secret: SecretStr | str | None) -> bytes:
    """
    Return the HMAC key bytes for the configured secret.
    Secrets missing or shorter than 32 bytes are replaced by DEV_FALLBACK_SECRET.
    """
    if isinstance(secret, str):
        secret = SecretStr(secret)
    if has_strong_secret(secret):
        return secret.get_secret_value().encode("utf-8")
    logger.warning(
        "JWT_SECRET is missing or shorter than 32 bytes; using the development "
        "fallback key. Do not run like this in production."
    )
    return DEV_FALLBACK_SECRET.encode("utf-8")


class TokenCodec:
    """
    Issues and verifies HS256 JWTs carrying a username (sub) and a role authority.

    Holds only immutable state, so one instance can be shared across request threads.
    """

    def __init__(
        self,
        secret: SecretStr | str | None = None,
        ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
        algorithm: str = "HS256",
    ) -> None:
        if ttl_seconds < 1:
            raise ValueError("ttl_seconds must be at least 1")
        self._key = resolve_signing_key(secret)
        self._ttl = timedelta(seconds=ttl_seconds)
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(
            secret=settings.JWT_SECRET,
            ttl_seconds=settings.JWT_EXPIRATION_SECONDS,
            algorithm=settings.JWT_ALGORITHM,
        )

    def issue(self, username: str | None, role: str | None = None) -> str:
        """Create a signed token for username; the role claim is omitted when role is None."""
        if not username or not username.strip():
            raise InvalidSubjectError()
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": username,
            "iat": now,
            "exp": now + self._ttl,
        }
        if role is not None:
            payload[ROLE_CLAIM] = role
        return jwt.encode(payload, self._key, algorithm=self.algorithm)

    def decode(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the claims.
        Raises MalformedTokenError, SignatureError or ExpiredTokenError.
        """
        if not isinstance(token, str) or not token:
            raise MalformedTokenError("Token must be a non-empty string")
        try:
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError("Token has expired")
        except jwt.InvalidSignatureError:
            raise SignatureError("Token signature is invalid")
        except jwt.InvalidTokenError as e:
            raise MalformedTokenError(f"Malformed token: {e}")

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise MalformedTokenError("Token subject is missing")
        role = payload.get(ROLE_CLAIM)
        if role is not None and not isinstance(role, str):
            raise MalformedTokenError("Token role claim must be a string")
        try:
            return TokenClaims(
                subject=subject,
                role=role,
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
            )
        except (TypeError, ValueError, OverflowError) as e:
            raise MalformedTokenError(f"Malformed token timestamps: {e}")

    def validate(self, token: str) -> bool:
        """True iff the token verifies and is unexpired. Never raises."""
        try:
            self.decode(token)
        except TokenError as e:
            logger.debug("Token rejected: %s", e.message)
            return False
        return True

    def validate_strict(self, token: str, expected_username: str) -> bool:
        """Decode with errors surfaced; True iff the subject matches and the token is unexpired."""
        claims = self.decode(token)
        return claims.subject == expected_username and claims.expires_at > datetime.now(UTC)

    def extract_username(self, token: str) -> str:
        return self.decode(token).subject

    def extract_role(self, token: str) -> str | None:
        return self.decode(token).role

    def extract_expiration(self, token: str) -> datetime:
        return self.decode(token).expires_at

