from uuid import UUID

import logfire

from aidportal.domain.aid.model.value import AidRequestId
from aidportal.domain.aid.service.aid_request import AidRequestService
from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.shared.authorization.gate import at_least
from aidportal.domain.shared.command import Command, CommandHandler, Result


class DeleteRequest(Command):
    request_id: UUID


class RequestDeleted(Result):
    id: str


class DeleteRequestHandler(CommandHandler[DeleteRequest, RequestDeleted]):
    __auth__ = at_least(Role.ADMIN)
    principal: Principal
    aid_request_service: AidRequestService

    async def run(self, cmd: DeleteRequest) -> RequestDeleted:
        with logfire.span("DeleteAidRequest"):
            await self.aid_request_service.delete(AidRequestId(cmd.request_id))
            return RequestDeleted(id=str(cmd.request_id))
