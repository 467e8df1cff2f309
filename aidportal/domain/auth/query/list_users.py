from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.auth.query.get_current_user import UserView
from aidportal.domain.auth.service.auth import AuthService
from aidportal.domain.shared.authorization.gate import at_least
from aidportal.domain.shared.query import Query, QueryHandler, Result


class ListUsers(Query):
    pending_reset_only: bool = False


class UserList(Result):
    items: list[UserView]


class ListUsersHandler(QueryHandler[ListUsers, UserList]):
    __auth__ = at_least(Role.ADMIN)
    principal: Principal
    auth_service: AuthService

    async def run(self, cmd: ListUsers) -> UserList:
        users = await self.auth_service.list_users()
        if cmd.pending_reset_only:
            users = [u for u in users if u.reset_requested]
        return UserList(items=[UserView.of(u) for u in users])
