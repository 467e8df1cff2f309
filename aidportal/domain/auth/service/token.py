"""Token service for JWT creation and validation."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from aidportal.config import JwtConfig
from aidportal.domain.auth.model.role import Role
from aidportal.domain.auth.model.value import UserId
from aidportal.domain.shared.service import Service


class TokenService(Service):
    """Issues and validates HS256 access tokens carrying `sub` and `role`."""

    _config: JwtConfig

    def create_access_token(self, user_id: UserId, role: Role) -> str:
        """Create a JWT access token.

        Args:
            user_id: The user's internal ID
            role: The role the token grants

        Returns:
            Encoded JWT string
        """
        now = datetime.now(UTC)
        expires_at = now + timedelta(minutes=self._config.access_token_expire_minutes)

        payload = {
            "sub": str(user_id),
            "role": role.name.lower(),
            "aud": "authenticated",
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": secrets.token_hex(16),
        }

        return jwt.encode(payload, self._config.secret, algorithm=self._config.algorithm)

    def validate_access_token(self, token: str) -> dict[str, Any]:
        """Validate and decode a JWT access token.

        Raises:
            jwt.InvalidTokenError: If token is invalid or expired
        """
        return jwt.decode(
            token,
            self._config.secret,
            algorithms=[self._config.algorithm],
            audience="authenticated",
        )

    @property
    def access_token_expire_seconds(self) -> int:
        return self._config.access_token_expire_minutes * 60
