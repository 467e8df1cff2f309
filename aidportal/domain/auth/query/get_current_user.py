from datetime import datetime

from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.auth.model.user import User
from aidportal.domain.auth.model.value import ADMIN_USER_ID
from aidportal.domain.auth.service.auth import AuthService
from aidportal.domain.shared.authorization.gate import at_least
from aidportal.domain.shared.query import Query, QueryHandler, Result


class UserView(Result):
    id: str
    name: str
    email: str
    role: str
    department: str | None = None
    reset_requested: bool = False
    created_at: datetime | None = None

    @classmethod
    def of(cls, user: User) -> "UserView":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role.name.lower(),
            department=user.department,
            reset_requested=user.reset_requested,
            created_at=user.created_at,
        )


class GetCurrentUser(Query):
    pass


class GetCurrentUserHandler(QueryHandler[GetCurrentUser, UserView]):
    __auth__ = at_least(Role.EMPLOYEE)
    principal: Principal
    auth_service: AuthService

    async def run(self, cmd: GetCurrentUser) -> UserView:
        # The shared administrator session has no account row
        if self.principal.user_id == ADMIN_USER_ID:
            return UserView(
                id=str(ADMIN_USER_ID),
                name="Administrator",
                email="",
                role=Role.ADMIN.name.lower(),
            )
        user = await self.auth_service.get_user(self.principal.user_id)
        return UserView.of(user)
