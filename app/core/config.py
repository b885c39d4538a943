"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# HMAC-SHA256 keys shorter than this are rejected in favour of the dev fallback.
MIN_JWT_SECRET_BYTES = 32

VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"
    # Unset: any origin in dev, none in prod.
    CORS_ALLOW_ORIGINS: list[str] | None = None

    # JSON file holding the user collection; rewritten on every mutation
    USER_DATA_FILE: str = "users.json"

    # JWT authentication. Unset or short secrets fall back to a dev key (refused in prod).
    JWT_SECRET: SecretStr | None = None
    JWT_ALGORITHM: Literal["HS256"] = "HS256"
    JWT_EXPIRATION_SECONDS: int = 86400

    # Bcrypt cost (rounds); 12 is a good default for security vs speed.
    BCRYPT_ROUNDS: int = 12

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}")
        return level

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            raise ValueError("API_PREFIX must start with '/' (e.g. /api)")
        return v

    @field_validator("USER_DATA_FILE")
    @classmethod
    def validate_user_data_file(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("USER_DATA_FILE must be set and non-empty")
        return v.strip()

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr | None) -> SecretStr | None:
        if v is None or not v.get_secret_value().strip():
            return None
        return v

    @field_validator("JWT_EXPIRATION_SECONDS")
    @classmethod
    def validate_jwt_expiration_seconds(cls, v: int) -> int:
        if v < 1 or v > 2592000:
            raise ValueError(
                "JWT_EXPIRATION_SECONDS must be between 1 and 2592000 (1 sec to 30 days)"
            )
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 4 or v > 16:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 16")
        return v

    @model_validator(mode="after")
    def require_strong_secret_in_prod(self) -> "Settings":
        if self.APP_ENV == "prod" and not has_strong_secret(self.JWT_SECRET):
            raise ValueError(
                f"JWT_SECRET must be set to at least {MIN_JWT_SECRET_BYTES} bytes when APP_ENV=prod"
            )
        return self

    @model_validator(mode="after")
    def default_cors_origins(self) -> "Settings":
        if self.CORS_ALLOW_ORIGINS is None:
            self.CORS_ALLOW_ORIGINS = ["*"] if self.APP_ENV == "dev" else []
        return self


def has_strong_secret(secret: SecretStr | None) -> bool:
    """True if the secret is long enough to be used as the HMAC-SHA256 key."""
    if secret is None:
        return False
    return len(secret.get_secret_value().encode("utf-8")) >= MIN_JWT_SECRET_BYTES


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
