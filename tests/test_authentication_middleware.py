"""Unit tests for app.middleware.authentication: bearer extraction and per-request identity."""

import time
import unittest
from unittest.mock import MagicMock

import jwt
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from app.core.security import TokenCodec
from app.middleware.authentication import (
    AuthenticationMiddleware,
    extract_bearer_token,
    resolve_identity,
)
from app.schemas.auth import CurrentUser

SECRET = "0123456789abcdef0123456789abcdef-test-secret"


class TestExtractBearerToken(unittest.TestCase):
    """Only 'Bearer <token>' headers yield a token."""

    def test_cases(self) -> None:
        cases = [
            (None, None),
            ("", None),
            ("Bearer ", None),
            ("Basic dXNlcjpwYXNz", None),
            ("bearer abc", None),
            ("Bearer abc.def.ghi", "abc.def.ghi"),
        ]
        for header, expected in cases:
            with self.subTest(header=header):
                self.assertEqual(extract_bearer_token(header), expected)


class TestResolveIdentity(unittest.TestCase):
    """resolve_identity returns (username, role) for valid tokens and None otherwise."""

    def setUp(self) -> None:
        self.codec = TokenCodec(secret=SECRET)

    def test_valid_token(self) -> None:
        token = self.codec.issue("alice", "ROLE_MANAGER")
        identity = resolve_identity(f"Bearer {token}", self.codec)
        self.assertEqual(identity, CurrentUser(username="alice", role="ROLE_MANAGER"))

    def test_token_without_role(self) -> None:
        identity = resolve_identity(f"Bearer {self.codec.issue('alice')}", self.codec)
        self.assertEqual(identity.username, "alice")
        self.assertIsNone(identity.role)

    def test_invalid_tokens_give_no_identity(self) -> None:
        now = int(time.time())
        expired = jwt.encode({"sub": "alice", "iat": now - 100, "exp": now - 10}, SECRET, algorithm="HS256")
        foreign = TokenCodec(secret="fedcba9876543210fedcba9876543210-other").issue("alice", "ROLE_ADMIN")
        for header in [None, "Bearer garbage", f"Bearer {expired}", f"Bearer {foreign}", "Token abc"]:
            with self.subTest(header=header):
                self.assertIsNone(resolve_identity(header, self.codec))

    def test_uses_lenient_validate(self) -> None:
        codec = MagicMock(spec=TokenCodec)
        codec.validate.return_value = False
        self.assertIsNone(resolve_identity("Bearer abc", codec))
        codec.validate.assert_called_once_with("abc")
        codec.decode.assert_not_called()


def _build_app(codec: TokenCodec, preset: CurrentUser | None = None) -> FastAPI:
    """Minimal app echoing request.state.identity, optionally with an identity set upstream."""
    app = FastAPI()

    @app.get("/whoami")
    def whoami(request: Request) -> dict:
        identity = request.state.identity
        return {"identity": identity.model_dump() if identity else None}

    app.add_middleware(AuthenticationMiddleware, codec=codec)
    if preset is not None:

        @app.middleware("http")
        async def preset_identity(request: Request, call_next):  # registered last, runs first
            request.state.identity = preset
            return await call_next(request)

    return app


class TestAuthenticationMiddleware(unittest.TestCase):
    """The middleware never rejects requests; it only sets request.state.identity."""

    def setUp(self) -> None:
        self.codec = TokenCodec(secret=SECRET)
        self.client = TestClient(_build_app(self.codec))

    def test_valid_bearer_sets_identity(self) -> None:
        token = self.codec.issue("alice", "ROLE_USER")
        resp = self.client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["identity"], {"username": "alice", "role": "ROLE_USER"})

    def test_missing_header_passes_through(self) -> None:
        resp = self.client.get("/whoami")
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["identity"])

    def test_invalid_token_passes_through(self) -> None:
        resp = self.client.get("/whoami", headers={"Authorization": "Bearer not-a-token"})
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["identity"])

    def test_existing_identity_is_kept(self) -> None:
        preset = CurrentUser(username="upstream", role="ROLE_ADMIN")
        client = TestClient(_build_app(self.codec, preset=preset))
        token = self.codec.issue("alice", "ROLE_USER")
        resp = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.json()["identity"], {"username": "upstream", "role": "ROLE_ADMIN"})


if __name__ == "__main__":
    unittest.main()
