# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT identity tokens using python-jose.

Tokens are minted by the external session service with a shared secret.
This service decodes them into an :class:`Identity`; minting is provided
for tooling and tests.

Example:
    >>> from registrar.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> token = jwt_manager.create_access_token(student_id=42, program_id=7, role="student")
    >>> jwt_manager.decode_token(token).to_identity()
    Identity(student_id=42, program_id=7, role='student')
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, jwt
from pydantic import BaseModel

from registrar.core.config.settings import JWTSettings
from registrar.domains.common import Identity

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    """JWT token payload structure.

    Attributes:
        sub: Subject (student or staff id).
        program_id: Program the subject belongs to.
        role: Role name.
        exp: Expiration timestamp.
        iat: Issued at timestamp.
        jti: JWT ID for token tracking.
    """

    sub: str
    program_id: int
    role: str
    exp: int
    iat: int
    jti: str | None = None

    def to_identity(self) -> Identity:
        return Identity(student_id=int(self.sub), program_id=self.program_id, role=self.role)


class JWTError(Exception):
    """Base exception for JWT operations."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTManager:
    """JWT token creation and validation manager.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings

    def create_access_token(self, student_id: int, program_id: int, role: str) -> str:
        """Create an access token.

        Args:
            student_id: Subject identifier.
            program_id: Program identifier.
            role: Role name.

        Returns:
            JWT access token string.
        """
        now = datetime.now(timezone.utc)
        exp = now + timedelta(minutes=self._settings.access_token_expire_minutes)

        payload = {
            "sub": str(student_id),
            "program_id": program_id,
            "role": role,
            "exp": int(exp.timestamp()),
            "iat": int(now.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }

        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )

    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate a JWT token.

        Args:
            token: JWT token string.

        Returns:
            TokenPayload with decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or lacks identity claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
            return TokenPayload(
                sub=payload["sub"],
                program_id=payload["program_id"],
                role=payload["role"],
                exp=payload["exp"],
                iat=payload["iat"],
                jti=payload.get("jti"),
            )

        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except Exception as e:
            logger.warning("Token decode failed: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {str(e)}")
