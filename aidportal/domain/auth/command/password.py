"""Administrator-mediated password reset."""

from uuid import UUID

from pydantic import Field

from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.auth.model.value import UserId
from aidportal.domain.auth.query.get_current_user import UserView
from aidportal.domain.auth.service.auth import AuthService
from aidportal.domain.shared.authorization.gate import at_least, public
from aidportal.domain.shared.command import Command, CommandHandler, Result


class RequestReset(Command):
    email: str


class ResetRequested(Result):
    email: str


class RequestResetHandler(CommandHandler[RequestReset, ResetRequested]):
    __auth__ = public()
    auth_service: AuthService

    async def run(self, cmd: RequestReset) -> ResetRequested:
        await self.auth_service.request_reset(cmd.email)
        return ResetRequested(email=cmd.email.strip().lower())


class SetPassword(Command):
    user_id: UUID
    password: str = Field(repr=False)


class SetPasswordHandler(CommandHandler[SetPassword, UserView]):
    __auth__ = at_least(Role.ADMIN)
    principal: Principal
    auth_service: AuthService

    async def run(self, cmd: SetPassword) -> UserView:
        user = await self.auth_service.set_password(UserId(cmd.user_id), cmd.password)
        return UserView.of(user)
