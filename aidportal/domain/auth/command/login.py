"""Login and registration commands."""

from pydantic import Field

from aidportal.domain.auth.query.get_current_user import UserView
from aidportal.domain.auth.service.auth import AuthService, Session
from aidportal.domain.shared.authorization.gate import public
from aidportal.domain.shared.command import Command, CommandHandler, Result


class SessionIssued(Result):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    role: str
    user: UserView | None = None

    @classmethod
    def of(cls, session: Session, user: UserView | None = None) -> "SessionIssued":
        return cls(
            access_token=session.access_token,
            expires_in=session.expires_in,
            role=session.role.name.lower(),
            user=user,
        )


class Register(Command):
    name: str
    email: str
    password: str = Field(repr=False)
    department: str | None = None


class RegisterHandler(CommandHandler[Register, SessionIssued]):
    __auth__ = public()
    auth_service: AuthService

    async def run(self, cmd: Register) -> SessionIssued:
        user, session = await self.auth_service.register(
            name=cmd.name,
            email=cmd.email,
            password=cmd.password,
            department=cmd.department,
        )
        return SessionIssued.of(session, UserView.of(user))


class Login(Command):
    email: str
    password: str = Field(repr=False)


class LoginHandler(CommandHandler[Login, SessionIssued]):
    __auth__ = public()
    auth_service: AuthService

    async def run(self, cmd: Login) -> SessionIssued:
        user, session = await self.auth_service.login(cmd.email, cmd.password)
        return SessionIssued.of(session, UserView.of(user))


class AdminLogin(Command):
    secret: str = Field(repr=False)


class AdminLoginHandler(CommandHandler[AdminLogin, SessionIssued]):
    __auth__ = public()
    auth_service: AuthService

    async def run(self, cmd: AdminLogin) -> SessionIssued:
        return SessionIssued.of(self.auth_service.admin_login(cmd.secret))
