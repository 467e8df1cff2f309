from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from aidportal.domain.aid.model.aggregate import AidRequest
from aidportal.domain.aid.model.value import AidRequestId, Attachment, Modality, RequestStatus
from aidportal.domain.aid.service.aid_request import AidRequestService
from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.shared.authorization.gate import at_least
from aidportal.domain.shared.query import Query, QueryHandler, Result


class RequestView(Result):
    id: str
    owner_id: str
    requester_name: str
    job_role: str
    event_name: str
    event_location: str | None
    event_date: date
    modality: Modality
    modality_label: str
    registration_fee: Decimal
    event_params_text: str | None
    status: RequestStatus
    status_label: str
    scientific_approved: bool
    admin_approved: bool
    rejection_reason: str | None
    documents: list[Attachment]
    ethics_committee_proof: Attachment | None
    accountability_documents: list[Attachment]
    submission_date: datetime
    updated_at: datetime

    @classmethod
    def of(cls, request: AidRequest) -> "RequestView":
        return cls(
            id=str(request.id),
            owner_id=str(request.owner_id),
            requester_name=request.requester_name,
            job_role=request.job_role,
            event_name=request.event_name,
            event_location=request.event_location,
            event_date=request.event_date,
            modality=request.modality,
            modality_label=request.modality.label,
            registration_fee=request.registration_fee,
            event_params_text=request.event_params_text,
            status=request.status,
            status_label=request.status.label,
            scientific_approved=request.scientific_approved,
            admin_approved=request.admin_approved,
            rejection_reason=request.rejection_reason,
            documents=request.documents,
            ethics_committee_proof=request.ethics_committee_proof,
            accountability_documents=request.accountability_documents,
            submission_date=request.submission_date,
            updated_at=request.updated_at,
        )


class GetRequest(Query):
    request_id: UUID


class GetRequestHandler(QueryHandler[GetRequest, RequestView]):
    __auth__ = at_least(Role.EMPLOYEE)
    principal: Principal
    aid_request_service: AidRequestService

    async def run(self, cmd: GetRequest) -> RequestView:
        request = await self.aid_request_service.get(self.principal, AidRequestId(cmd.request_id))
        return RequestView.of(request)
