"""Tests for token issuance, verification and the bearer gate."""

import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from jose import jwt

from adapter.fake.task_repository import FakeTaskRepository
from api.config import Settings
from api.dependencies import get_task_repo
from api.main import create_app
from api.security import (
    AuthIdentity,
    create_access_token,
    extract_bearer_token,
    verify_token,
)
from domain.model.errors import AuthenticationError, InvalidTokenError, TokenExpiredError

SETTINGS = Settings(jwt_secret_key="test-secret", bcrypt_rounds=4)


class TestCreateAndVerifyToken(unittest.TestCase):
    """create_access_token() / verify_token() round trip and failure modes."""

    def test_round_trip_returns_same_user_id(self):
        token = create_access_token("user-123", SETTINGS, email="alice@example.com")

        identity = verify_token(token, SETTINGS)

        self.assertEqual(identity, AuthIdentity(user_id="user-123", email="alice@example.com"))

    def test_token_carries_subject_and_expiry(self):
        before = datetime.now(timezone.utc)
        token = create_access_token("user-123", SETTINGS)

        claims = jwt.get_unverified_claims(token)

        self.assertEqual(claims["sub"], "user-123")
        self.assertEqual(claims["id"], "user-123")
        expected_exp = int((before + timedelta(hours=1)).timestamp())
        self.assertAlmostEqual(claims["exp"], expected_exp, delta=5)
        self.assertNotIn("email", claims)

    def test_expired_token_rejected_as_expired(self):
        token = create_access_token("user-123", SETTINGS, expires_in=timedelta(seconds=-10))

        with self.assertRaises(TokenExpiredError) as context:
            verify_token(token, SETTINGS)

        self.assertEqual(context.exception.message, "Token expired")

    def test_configured_lifetime_is_used(self):
        short = Settings(jwt_secret_key="test-secret", jwt_expiration=timedelta(seconds=-1))
        token = create_access_token("user-123", short)

        with self.assertRaises(TokenExpiredError):
            verify_token(token, short)

    def test_token_signed_with_other_secret_rejected(self):
        other = Settings(jwt_secret_key="another-secret")
        token = create_access_token("user-123", other)

        with self.assertRaises(InvalidTokenError) as context:
            verify_token(token, SETTINGS)

        self.assertEqual(context.exception.message, "Invalid token")

    def test_garbage_token_rejected(self):
        with self.assertRaises(InvalidTokenError) as context:
            verify_token("not.a.jwt", SETTINGS)

        self.assertEqual(context.exception.message, "Invalid token")

    def test_token_without_user_id_rejected(self):
        exp = datetime.now(timezone.utc) + timedelta(minutes=5)
        token = jwt.encode({"email": "a@example.com", "exp": exp}, "test-secret", algorithm="HS256")

        with self.assertRaises(InvalidTokenError) as context:
            verify_token(token, SETTINGS)

        self.assertEqual(context.exception.message, "Invalid token: missing user id")

    def test_token_with_blank_user_id_rejected(self):
        exp = datetime.now(timezone.utc) + timedelta(minutes=5)
        token = jwt.encode({"sub": "   ", "exp": exp}, "test-secret", algorithm="HS256")

        with self.assertRaises(InvalidTokenError) as context:
            verify_token(token, SETTINGS)

        self.assertEqual(context.exception.message, "Invalid token: missing user id")

    def test_legacy_id_claim_accepted(self):
        exp = datetime.now(timezone.utc) + timedelta(minutes=5)
        token = jwt.encode({"id": "legacy-user", "exp": exp}, "test-secret", algorithm="HS256")

        self.assertEqual(verify_token(token, SETTINGS).user_id, "legacy-user")


class TestExtractBearerToken(unittest.TestCase):
    """Header-shape failures all share the generic message."""

    def test_valid_header(self):
        self.assertEqual(extract_bearer_token("Bearer abc.def.ghi"), "abc.def.ghi")

    def test_rejects_malformed_headers(self):
        for header in [None, "", "Basic abc", "bearer abc", "Bearer", "Bearer ", "Bearer    "]:
            with self.subTest(header=header):
                with self.assertRaises(AuthenticationError) as context:
                    extract_bearer_token(header)
                self.assertEqual(context.exception.message, "Unauthorized")


class TestAuthGate(unittest.TestCase):
    """Gate behaviour observed through GET /api/tasks."""

    def setUp(self):
        self.app = create_app(SETTINGS, connection=MagicMock())
        self.app.dependency_overrides[get_task_repo] = FakeTaskRepository
        self.client = TestClient(self.app)

    def tearDown(self):
        self.app.dependency_overrides.clear()

    def _get_tasks(self, authorization=None):
        headers = {"Authorization": authorization} if authorization is not None else {}
        return self.client.get("/api/tasks", headers=headers)

    def test_missing_header(self):
        response = self._get_tasks()

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Unauthorized"})
        self.assertEqual(response.headers["WWW-Authenticate"], "Bearer")

    def test_scheme_without_token(self):
        response = self._get_tasks("Bearer")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Unauthorized"})

    def test_wrong_scheme(self):
        token = create_access_token("user-1", SETTINGS)

        response = self._get_tasks(f"Token {token}")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Unauthorized"})

    def test_expired_token(self):
        token = create_access_token("user-1", SETTINGS, expires_in=timedelta(seconds=-10))

        response = self._get_tasks(f"Bearer {token}")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Token expired"})

    def test_token_from_other_secret(self):
        token = create_access_token("user-1", Settings(jwt_secret_key="someone-else"))

        response = self._get_tasks(f"Bearer {token}")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Invalid token"})

    def test_valid_token_passes(self):
        token = create_access_token("user-1", SETTINGS)

        response = self._get_tasks(f"Bearer {token}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])


if __name__ == '__main__':
    unittest.main()
