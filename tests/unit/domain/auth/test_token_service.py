"""Unit tests for TokenService."""

import jwt
import pytest

from conducky.config import JwtConfig
from conducky.domain.auth.model.value import UserId
from conducky.domain.auth.service.token import TokenService
from conducky.domain.shared.error import ConfigurationError

SECRET = "unit-test-secret-with-enough-length-for-hs256"


class TestTokenService:
    def test_round_trip(self):
        service = TokenService(_config=JwtConfig(secret=SECRET))
        user_id = UserId.generate()

        payload = service.validate_access_token(service.create_access_token(user_id))

        assert payload["sub"] == str(user_id)
        assert payload["aud"] == "authenticated"

    def test_tampered_token_rejected(self):
        service = TokenService(_config=JwtConfig(secret=SECRET))
        other = TokenService(_config=JwtConfig(secret=SECRET + "-other"))

        with pytest.raises(jwt.InvalidTokenError):
            service.validate_access_token(other.create_access_token(UserId.generate()))

    def test_missing_secret(self):
        service = TokenService(_config=JwtConfig(secret=""))

        with pytest.raises(ConfigurationError):
            service.create_access_token(UserId.generate())

    def test_expire_seconds(self):
        service = TokenService(_config=JwtConfig(secret=SECRET, access_token_expire_minutes=5))
        assert service.access_token_expire_seconds == 300
