from aidportal.domain.aid.service.aid_request import AidRequestService
from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.shared.authorization.gate import at_least
from aidportal.domain.shared.query import Query, QueryHandler, Result


class GetSummary(Query):
    pass


class StatusCount(Result):
    status: str
    label: str
    count: int


class StatusSummary(Result):
    counts: list[StatusCount]
    total: int
    awaiting_action: int


class GetSummaryHandler(QueryHandler[GetSummary, StatusSummary]):
    __auth__ = at_least(Role.ADMIN)
    principal: Principal
    aid_request_service: AidRequestService

    async def run(self, cmd: GetSummary) -> StatusSummary:
        counts = await self.aid_request_service.summary()
        awaiting = sum(n for status, n in counts.items() if not status.is_terminal)
        return StatusSummary(
            counts=[
                StatusCount(status=status.value, label=status.label, count=n)
                for status, n in counts.items()
            ],
            total=sum(counts.values()),
            awaiting_action=awaiting,
        )
