"""DI provider for auth domain."""

import logging
from uuid import UUID

import jwt
from dishka import from_context, provide
from starlette.requests import Request

from aidportal.config import Config
from aidportal.domain.auth.command.login import (
    AdminLoginHandler,
    LoginHandler,
    RegisterHandler,
)
from aidportal.domain.auth.command.password import RequestResetHandler, SetPasswordHandler
from aidportal.domain.auth.model.identity import Anonymous, Identity
from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.auth.model.value import UserId
from aidportal.domain.auth.port.repository import UserRepository
from aidportal.domain.auth.query.get_current_user import GetCurrentUserHandler
from aidportal.domain.auth.query.list_users import ListUsersHandler
from aidportal.domain.auth.service.auth import AuthService
from aidportal.domain.auth.service.token import TokenService
from aidportal.domain.shared.error import AuthorizationError
from aidportal.util.di.base import Provider
from aidportal.util.di.scope import Scope

logger = logging.getLogger(__name__)


class AuthProvider(Provider):
    """DI provider for auth domain services and handlers."""

    request = from_context(provides=Request, scope=Scope.UOW)

    # Command Handlers
    register_handler = provide(RegisterHandler, scope=Scope.UOW)
    login_handler = provide(LoginHandler, scope=Scope.UOW)
    admin_login_handler = provide(AdminLoginHandler, scope=Scope.UOW)
    request_reset_handler = provide(RequestResetHandler, scope=Scope.UOW)
    set_password_handler = provide(SetPasswordHandler, scope=Scope.UOW)

    # Query Handlers
    get_current_user_handler = provide(GetCurrentUserHandler, scope=Scope.UOW)
    list_users_handler = provide(ListUsersHandler, scope=Scope.UOW)

    @provide(scope=Scope.APP)
    def get_token_service(self, config: Config) -> TokenService:
        return TokenService(_config=config.auth.jwt)

    @provide(scope=Scope.UOW)
    def get_auth_service(
        self,
        config: Config,
        user_repo: UserRepository,
        token_service: TokenService,
    ) -> AuthService:
        return AuthService(
            _user_repo=user_repo,
            _token_service=token_service,
            _admin_secret=config.auth.admin_secret,
            _min_password_length=config.auth.min_password_length,
        )

    @provide(scope=Scope.UOW)
    def get_identity(self, request: Request, token_service: TokenService) -> Identity:
        """Resolve Identity from the Bearer token.

        Returns Anonymous for unauthenticated requests, Principal for authenticated.
        """
        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            return Anonymous()

        token = auth_header[7:]  # Remove "Bearer " prefix

        try:
            payload = token_service.validate_access_token(token)
            user_id = UserId(UUID(payload["sub"]))
            role = Role[str(payload["role"]).upper()]
        except jwt.InvalidTokenError:
            return Anonymous()
        except (KeyError, ValueError):
            logger.warning("Access token with malformed claims")
            return Anonymous()

        logger.debug("Identity resolved: user_id=%s, role=%s", user_id, role)
        return Principal(user_id=user_id, role=role)

    @provide(scope=Scope.UOW)
    def get_principal(self, identity: Identity) -> Principal:
        """Extract Principal from Identity. Raises if not authenticated."""
        if isinstance(identity, Principal):
            return identity
        raise AuthorizationError("Authentication required", code="missing_token")
