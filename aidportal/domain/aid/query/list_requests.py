from aidportal.domain.aid.model.value import RequestStatus
from aidportal.domain.aid.query.get_request import RequestView
from aidportal.domain.aid.service.aid_request import AidRequestService
from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.shared.authorization.gate import at_least
from aidportal.domain.shared.query import Query, QueryHandler, Result


class ListRequests(Query):
    status: RequestStatus | None = None


class RequestList(Result):
    items: list[RequestView]
    total: int


class ListRequestsHandler(QueryHandler[ListRequests, RequestList]):
    __auth__ = at_least(Role.EMPLOYEE)
    principal: Principal
    aid_request_service: AidRequestService

    async def run(self, cmd: ListRequests) -> RequestList:
        # Administrators see every request; employees only their own
        requests = await self.aid_request_service.list_requests(self.principal, cmd.status)
        return RequestList(items=[RequestView.of(r) for r in requests], total=len(requests))
