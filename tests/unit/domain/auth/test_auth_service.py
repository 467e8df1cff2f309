"""Unit tests for AuthService."""

from unittest.mock import AsyncMock

import pytest

from aidportal.config import JwtConfig
from aidportal.domain.auth.model.role import Role
from aidportal.domain.auth.model.user import User
from aidportal.domain.auth.model.value import ADMIN_USER_ID, UserId
from aidportal.domain.auth.service.auth import AuthService
from aidportal.domain.auth.service.password import hash_password, verify_password
from aidportal.domain.auth.service.token import TokenService
from aidportal.domain.shared.error import (
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


def make_token_service() -> TokenService:
    return TokenService(
        _config=JwtConfig(secret="test-secret-key-256-bits-long-xx", access_token_expire_minutes=60)
    )


def make_auth_service(
    user_repo: AsyncMock | None = None,
    admin_secret: str = "comite-2024",
) -> AuthService:
    """Create an AuthService with a mocked repository."""
    if user_repo is None:
        user_repo = AsyncMock()
        user_repo.get_by_email.return_value = None
    return AuthService(
        _user_repo=user_repo,
        _token_service=make_token_service(),
        _admin_secret=admin_secret,
    )


def make_user(password: str = "segredo1", reset_requested: bool = False) -> User:
    user = User.create(
        name="Maria Silva",
        email="Maria@Hospital.org",
        password_hash=hash_password(password),
        department="UTI",
    )
    if reset_requested:
        user.request_reset()
    return user


class TestPasswordHashing:
    def test_hash_verifies(self):
        password_hash = hash_password("segredo1")

        assert password_hash != "segredo1"
        assert verify_password("segredo1", password_hash)
        assert not verify_password("outra", password_hash)

    def test_empty_hash_never_verifies(self):
        assert not verify_password("qualquer", "")


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_creates_employee_session(self):
        repo = AsyncMock()
        repo.get_by_email.return_value = None
        service = make_auth_service(user_repo=repo)

        user, session = await service.register(
            name="Maria Silva",
            email=" Maria@Hospital.org ",
            password="segredo1",
            department="UTI",
        )

        assert user.email == "maria@hospital.org"
        assert user.role == Role.EMPLOYEE
        assert verify_password("segredo1", user.password_hash)
        assert session.user_id == user.id
        assert session.role == Role.EMPLOYEE
        assert session.expires_in == 3600
        repo.save.assert_awaited_once_with(user)

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self):
        repo = AsyncMock()
        repo.get_by_email.return_value = make_user()
        service = make_auth_service(user_repo=repo)

        with pytest.raises(ConflictError):
            await service.register("Outra", "maria@hospital.org", "segredo1")

        repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_short_password_is_refused(self):
        service = make_auth_service()

        with pytest.raises(ValidationError) as exc_info:
            await service.register("Maria", "maria@hospital.org", "123")

        assert exc_info.value.field == "password"

    @pytest.mark.asyncio
    async def test_invalid_email_is_refused(self):
        service = make_auth_service()

        with pytest.raises(ValidationError) as exc_info:
            await service.register("Maria", "maria.hospital.org", "segredo1")

        assert exc_info.value.field == "email"


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_with_correct_password(self):
        user = make_user()
        repo = AsyncMock()
        repo.get_by_email.return_value = user
        service = make_auth_service(user_repo=repo)

        logged_in, session = await service.login("MARIA@hospital.org", "segredo1")

        assert logged_in is user
        repo.get_by_email.assert_awaited_once_with("maria@hospital.org")
        payload = make_token_service().validate_access_token(session.access_token)
        assert payload["sub"] == str(user.id)
        assert payload["role"] == "employee"

    @pytest.mark.asyncio
    async def test_wrong_password(self):
        repo = AsyncMock()
        repo.get_by_email.return_value = make_user()
        service = make_auth_service(user_repo=repo)

        with pytest.raises(AuthorizationError) as exc_info:
            await service.login("maria@hospital.org", "errada")

        assert exc_info.value.code == "invalid_credentials"

    @pytest.mark.asyncio
    async def test_unknown_email_looks_like_wrong_password(self):
        service = make_auth_service()

        with pytest.raises(AuthorizationError) as exc_info:
            await service.login("ninguem@hospital.org", "segredo1")

        assert exc_info.value.code == "invalid_credentials"

    @pytest.mark.asyncio
    async def test_pending_reset_blocks_login(self):
        repo = AsyncMock()
        repo.get_by_email.return_value = make_user(reset_requested=True)
        service = make_auth_service(user_repo=repo)

        with pytest.raises(AuthorizationError) as exc_info:
            await service.login("maria@hospital.org", "segredo1")

        assert exc_info.value.code == "reset_pending"


class TestAdminLogin:
    def test_shared_secret_grants_admin(self):
        service = make_auth_service()

        session = service.admin_login("comite-2024")

        assert session.user_id == ADMIN_USER_ID
        assert session.role == Role.ADMIN

    def test_wrong_secret(self):
        service = make_auth_service()

        with pytest.raises(AuthorizationError):
            service.admin_login("chute")

    def test_unconfigured_secret(self):
        service = make_auth_service(admin_secret="")

        with pytest.raises(ConfigurationError):
            service.admin_login("")


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_request_reset_flags_account(self):
        user = make_user()
        repo = AsyncMock()
        repo.get_by_email.return_value = user
        service = make_auth_service(user_repo=repo)

        await service.request_reset("maria@hospital.org")

        assert user.reset_requested is True
        repo.save.assert_awaited_once_with(user)

    @pytest.mark.asyncio
    async def test_request_reset_for_unknown_email(self):
        service = make_auth_service()

        with pytest.raises(NotFoundError):
            await service.request_reset("ninguem@hospital.org")

    @pytest.mark.asyncio
    async def test_set_password_clears_reset(self):
        user = make_user(reset_requested=True)
        repo = AsyncMock()
        repo.get.return_value = user
        service = make_auth_service(user_repo=repo)

        await service.set_password(user.id, "nova-senha")

        assert user.reset_requested is False
        assert verify_password("nova-senha", user.password_hash)

    @pytest.mark.asyncio
    async def test_set_password_for_unknown_user(self):
        repo = AsyncMock()
        repo.get.return_value = None
        service = make_auth_service(user_repo=repo)

        with pytest.raises(NotFoundError):
            await service.set_password(UserId.generate(), "nova-senha")
