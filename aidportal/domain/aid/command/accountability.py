"""Post-event accountability and reimbursement."""

from uuid import UUID

import logfire

from aidportal.domain.aid.model.accountability import AccountabilityPackage
from aidportal.domain.aid.model.value import AidRequestId
from aidportal.domain.aid.query.get_request import RequestView
from aidportal.domain.aid.service.aid_request import AidRequestService
from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.shared.authorization.gate import at_least
from aidportal.domain.shared.command import Command, CommandHandler


class SubmitAccountability(Command):
    request_id: UUID
    package: AccountabilityPackage


class SubmitAccountabilityHandler(CommandHandler[SubmitAccountability, RequestView]):
    __auth__ = at_least(Role.EMPLOYEE)
    principal: Principal
    aid_request_service: AidRequestService

    async def run(self, cmd: SubmitAccountability) -> RequestView:
        with logfire.span("SubmitAccountability"):
            request = await self.aid_request_service.submit_accountability(
                self.principal, AidRequestId(cmd.request_id), cmd.package
            )
            return RequestView.of(request)


class ApproveAccountability(Command):
    request_id: UUID


class ApproveAccountabilityHandler(CommandHandler[ApproveAccountability, RequestView]):
    __auth__ = at_least(Role.ADMIN)
    principal: Principal
    aid_request_service: AidRequestService

    async def run(self, cmd: ApproveAccountability) -> RequestView:
        request = await self.aid_request_service.approve_accountability(
            AidRequestId(cmd.request_id)
        )
        return RequestView.of(request)


class ConfirmPayment(Command):
    request_id: UUID


class ConfirmPaymentHandler(CommandHandler[ConfirmPayment, RequestView]):
    __auth__ = at_least(Role.ADMIN)
    principal: Principal
    aid_request_service: AidRequestService

    async def run(self, cmd: ConfirmPayment) -> RequestView:
        with logfire.span("ConfirmPayment"):
            request = await self.aid_request_service.confirm_payment(AidRequestId(cmd.request_id))
            return RequestView.of(request)
