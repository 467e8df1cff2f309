"""Administrator decisions on pending requests."""

from uuid import UUID

import logfire

from aidportal.domain.aid.model.value import AidRequestId, Committee
from aidportal.domain.aid.query.get_request import RequestView
from aidportal.domain.aid.service.aid_request import AidRequestService
from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.shared.authorization.gate import at_least
from aidportal.domain.shared.command import Command, CommandHandler


class ApproveRequest(Command):
    request_id: UUID
    committee: Committee


class ApproveRequestHandler(CommandHandler[ApproveRequest, RequestView]):
    __auth__ = at_least(Role.ADMIN)
    principal: Principal
    aid_request_service: AidRequestService

    async def run(self, cmd: ApproveRequest) -> RequestView:
        with logfire.span("ApproveAidRequest", committee=cmd.committee.value):
            request = await self.aid_request_service.approve(
                AidRequestId(cmd.request_id), cmd.committee
            )
            return RequestView.of(request)


class RejectRequest(Command):
    request_id: UUID
    reason: str | None = None


class RejectRequestHandler(CommandHandler[RejectRequest, RequestView]):
    __auth__ = at_least(Role.ADMIN)
    principal: Principal
    aid_request_service: AidRequestService

    async def run(self, cmd: RejectRequest) -> RequestView:
        with logfire.span("RejectAidRequest"):
            request = await self.aid_request_service.reject(
                AidRequestId(cmd.request_id), cmd.reason
            )
            return RequestView.of(request)
