"""Auth service for registration, login and password resets."""

import hmac
import logging
from dataclasses import dataclass

from aidportal.domain.auth.model.role import Role
from aidportal.domain.auth.model.user import User, normalize_email
from aidportal.domain.auth.model.value import ADMIN_USER_ID, UserId
from aidportal.domain.auth.port.repository import UserRepository
from aidportal.domain.auth.service.password import hash_password, verify_password
from aidportal.domain.auth.service.token import TokenService
from aidportal.domain.shared.error import (
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from aidportal.domain.shared.service import Service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    user_id: UserId
    role: Role
    access_token: str
    expires_in: int


class AuthService(Service):
    """Orchestrates the portal's password-based authentication.

    - register: create an employee account
    - login: verify email + password, refuse accounts waiting for a reset
    - admin_login: exchange the shared administrator secret for a session
    - request_reset / set_password: administrator-mediated password reset
    """

    _user_repo: UserRepository
    _token_service: TokenService
    _admin_secret: str
    _min_password_length: int = 6

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        department: str | None = None,
    ) -> tuple[User, Session]:
        if not name.strip():
            raise ValidationError("Name is required", field="name")
        if "@" not in email:
            raise ValidationError("A valid email is required", field="email")
        self._check_password(password)

        if await self._user_repo.get_by_email(normalize_email(email)) is not None:
            raise ConflictError(f"An account already exists for {normalize_email(email)}")

        user = User.create(
            name=name,
            email=email,
            password_hash=hash_password(password),
            department=department,
        )
        await self._user_repo.save(user)
        logger.info("Registered user %s", user.id)
        return user, self._session_for(user.id, user.role)

    async def login(self, email: str, password: str) -> tuple[User, Session]:
        user = await self._user_repo.get_by_email(normalize_email(email))
        if user is None or not verify_password(password, user.password_hash):
            raise AuthorizationError("Invalid email or password", code="invalid_credentials")
        if user.reset_requested:
            raise AuthorizationError(
                "A password reset is pending for this account; "
                "wait for an administrator to set a new password",
                code="reset_pending",
            )
        return user, self._session_for(user.id, user.role)

    def admin_login(self, secret: str) -> Session:
        """Verify the shared administrator credential."""
        if not self._admin_secret:
            raise ConfigurationError("Administrator access is not configured")
        if not hmac.compare_digest(secret.encode("utf-8"), self._admin_secret.encode("utf-8")):
            logger.warning("Rejected administrator login attempt")
            raise AuthorizationError("Invalid administrator credential", code="invalid_credentials")
        return self._session_for(ADMIN_USER_ID, Role.ADMIN)

    async def request_reset(self, email: str) -> None:
        user = await self._user_repo.get_by_email(normalize_email(email))
        if user is None:
            raise NotFoundError(f"No account found for {normalize_email(email)}")
        user.request_reset()
        await self._user_repo.save(user)
        logger.info("Password reset requested for user %s", user.id)

    async def set_password(self, user_id: UserId, password: str) -> User:
        self._check_password(password)
        user = await self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")
        user.set_password(hash_password(password))
        await self._user_repo.save(user)
        logger.info("Password set for user %s", user.id)
        return user

    async def get_user(self, user_id: UserId) -> User:
        user = await self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")
        return user

    async def list_users(self) -> list[User]:
        return await self._user_repo.list()

    def _check_password(self, password: str) -> None:
        if len(password) < self._min_password_length:
            raise ValidationError(
                f"Password must have at least {self._min_password_length} characters",
                field="password",
            )

    def _session_for(self, user_id: UserId, role: Role) -> Session:
        return Session(
            user_id=user_id,
            role=role,
            access_token=self._token_service.create_access_token(user_id, role),
            expires_in=self._token_service.access_token_expire_seconds,
        )
