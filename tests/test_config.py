"""Unit tests for app.core.config: defaults, validation and the production secret rule."""

import unittest

from pydantic import SecretStr, ValidationError

from app.core.config import Settings, has_strong_secret

STRONG_SECRET = "0123456789abcdef0123456789abcdef"


class TestDefaults(unittest.TestCase):
    """Defaults match a local development setup."""

    def test_defaults(self) -> None:
        s = Settings(_env_file=None)
        self.assertEqual(s.APP_ENV, "dev")
        self.assertEqual(s.USER_DATA_FILE, "users.json")
        self.assertEqual(s.JWT_EXPIRATION_SECONDS, 86400)
        self.assertEqual(s.JWT_ALGORITHM, "HS256")
        self.assertEqual(s.API_PREFIX, "/api")


class TestCorsOrigins(unittest.TestCase):
    """Unset CORS origins allow everything in dev and nothing in prod."""

    def test_dev_default_allows_any_origin(self) -> None:
        self.assertEqual(Settings(_env_file=None).CORS_ALLOW_ORIGINS, ["*"])

    def test_prod_default_allows_no_origin(self) -> None:
        s = Settings(_env_file=None, APP_ENV="prod", JWT_SECRET=STRONG_SECRET)
        self.assertEqual(s.CORS_ALLOW_ORIGINS, [])

    def test_explicit_origins_kept_in_prod(self) -> None:
        s = Settings(
            _env_file=None,
            APP_ENV="prod",
            JWT_SECRET=STRONG_SECRET,
            CORS_ALLOW_ORIGINS=["https://app.example.com"],
        )
        self.assertEqual(s.CORS_ALLOW_ORIGINS, ["https://app.example.com"])


class TestValidation(unittest.TestCase):
    """Out-of-range values are rejected at startup."""

    def test_invalid_values(self) -> None:
        cases = [
            {"JWT_EXPIRATION_SECONDS": 0},
            {"BCRYPT_ROUNDS": 3},
            {"LOG_LEVEL": "LOUD"},
            {"USER_DATA_FILE": "  "},
            {"API_PREFIX": "api"},
            {"JWT_ALGORITHM": "RS256"},
        ]
        for overrides in cases:
            with self.subTest(overrides=overrides):
                with self.assertRaises(ValidationError):
                    Settings(_env_file=None, **overrides)

    def test_normalization(self) -> None:
        s = Settings(_env_file=None, LOG_LEVEL="debug", API_PREFIX="/api/", JWT_SECRET="   ")
        self.assertEqual(s.LOG_LEVEL, "DEBUG")
        self.assertEqual(s.API_PREFIX, "/api")
        self.assertIsNone(s.JWT_SECRET)


class TestSecretPolicy(unittest.TestCase):
    """Production requires a secret of at least 32 bytes; dev tolerates its absence."""

    def test_has_strong_secret(self) -> None:
        self.assertFalse(has_strong_secret(None))
        self.assertFalse(has_strong_secret(SecretStr("x" * 31)))
        self.assertTrue(has_strong_secret(SecretStr("x" * 32)))

    def test_dev_without_secret(self) -> None:
        self.assertIsNone(Settings(_env_file=None, APP_ENV="dev").JWT_SECRET)

    def test_prod_without_secret_fails(self) -> None:
        for secret in (None, "short-secret"):
            with self.subTest(secret=secret):
                with self.assertRaises(ValidationError):
                    Settings(_env_file=None, APP_ENV="prod", JWT_SECRET=secret)

    def test_prod_with_strong_secret(self) -> None:
        s = Settings(_env_file=None, APP_ENV="prod", JWT_SECRET=STRONG_SECRET)
        self.assertEqual(s.JWT_SECRET.get_secret_value(), STRONG_SECRET)


if __name__ == "__main__":
    unittest.main()
