from datetime import date
from decimal import Decimal

import logfire
from pydantic import Field

from aidportal.domain.aid.model.value import Attachment, EventParameters, Modality
from aidportal.domain.aid.query.get_request import RequestView
from aidportal.domain.aid.service.aid_request import AidRequestService
from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.shared.authorization.gate import at_least
from aidportal.domain.shared.command import Command, CommandHandler


class SubmitRequest(Command):
    requester_name: str = Field(min_length=1)
    job_role: str = Field(min_length=1)
    event_name: str = Field(min_length=1)
    event_location: str | None = None
    event_date: date
    modality: Modality
    registration_fee: Decimal = Field(ge=0)
    summary: Attachment | None = None
    event_params: EventParameters
    ethics_committee_proof: Attachment | None = None


class SubmitRequestHandler(CommandHandler[SubmitRequest, RequestView]):
    __auth__ = at_least(Role.EMPLOYEE)
    principal: Principal
    aid_request_service: AidRequestService

    async def run(self, cmd: SubmitRequest) -> RequestView:
        with logfire.span("SubmitAidRequest", modality=cmd.modality.value):
            request = await self.aid_request_service.submit(
                self.principal,
                requester_name=cmd.requester_name,
                job_role=cmd.job_role,
                event_name=cmd.event_name,
                event_location=cmd.event_location,
                event_date=cmd.event_date,
                modality=cmd.modality,
                registration_fee=cmd.registration_fee,
                summary=cmd.summary,
                event_params=cmd.event_params,
                ethics_committee_proof=cmd.ethics_committee_proof,
            )
            return RequestView.of(request)
