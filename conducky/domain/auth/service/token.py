"""Token service for JWT access tokens."""

import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from conducky.config import JwtConfig
from conducky.domain.auth.model.value import UserId
from conducky.domain.shared.error import ConfigurationError
from conducky.domain.shared.service import Service

logger = logging.getLogger(__name__)

AUDIENCE = "authenticated"


class TokenService(Service):
    """Issues and validates HS256 access tokens carrying the user id as ``sub``."""

    _config: JwtConfig

    def _secret(self) -> str:
        if not self._config.secret:
            raise ConfigurationError("JWT secret is not configured", code="jwt_secret_missing")
        return self._config.secret

    def create_access_token(
        self,
        user_id: UserId,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        now = datetime.now(UTC)
        expires_at = now + timedelta(minutes=self._config.access_token_expire_minutes)

        payload = {
            "sub": str(user_id),
            "aud": AUDIENCE,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": secrets.token_hex(16),
        }
        if additional_claims:
            payload.update(additional_claims)

        return jwt.encode(payload, self._secret(), algorithm=self._config.algorithm)

    def validate_access_token(self, token: str) -> dict[str, Any]:
        """Decode a token.

        Raises:
            jwt.InvalidTokenError: If the token is invalid or expired
        """
        return jwt.decode(
            token,
            self._secret(),
            algorithms=[self._config.algorithm],
            audience=AUDIENCE,
        )

    @property
    def access_token_expire_seconds(self) -> int:
        return self._config.access_token_expire_minutes * 60
