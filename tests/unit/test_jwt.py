# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for JWT identity tokens.

Tests the JWTManager class and token operations.
"""

import time
from unittest.mock import MagicMock

import pytest
from jose import jwt
from pydantic import SecretStr

from registrar.domains.auth.jwt import InvalidTokenError, JWTManager, TokenExpiredError
from registrar.domains.common import Identity


@pytest.fixture
def jwt_settings() -> MagicMock:
    """Create mock JWT settings."""
    settings = MagicMock()
    settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
    settings.algorithm = "HS256"
    settings.access_token_expire_minutes = 30
    return settings


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    """Create JWT manager with test settings."""
    return JWTManager(jwt_settings)


class TestJWTManager:
    def test_round_trip_to_identity(self, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token(student_id=42, program_id=7, role="student")

        payload = jwt_manager.decode_token(token)

        assert payload.sub == "42"
        assert payload.jti
        assert payload.exp > payload.iat
        assert payload.to_identity() == Identity(student_id=42, program_id=7, role="student")

    def test_expired_token(self, jwt_manager: JWTManager) -> None:
        now = int(time.time())
        token = jwt.encode(
            {"sub": "1", "program_id": 1, "role": "student", "iat": now - 120, "exp": now - 60},
            "test-secret-key-for-jwt-testing",
            algorithm="HS256",
        )

        with pytest.raises(TokenExpiredError):
            jwt_manager.decode_token(token)

    def test_wrong_secret(self, jwt_manager: JWTManager) -> None:
        now = int(time.time())
        token = jwt.encode(
            {"sub": "1", "program_id": 1, "role": "student", "iat": now, "exp": now + 60},
            "another-secret",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token(token)

    def test_missing_identity_claims(self, jwt_manager: JWTManager) -> None:
        now = int(time.time())
        token = jwt.encode(
            {"sub": "1", "iat": now, "exp": now + 60},
            "test-secret-key-for-jwt-testing",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token(token)

    def test_garbage_token(self, jwt_manager: JWTManager) -> None:
        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token("not-a-jwt")
