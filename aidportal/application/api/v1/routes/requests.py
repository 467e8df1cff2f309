"""Aid request routes for employees and administrators."""

from datetime import date
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from aidportal.domain.aid.command.accountability import (
    ApproveAccountability,
    ApproveAccountabilityHandler,
    ConfirmPayment,
    ConfirmPaymentHandler,
    SubmitAccountability,
    SubmitAccountabilityHandler,
)
from aidportal.domain.aid.command.delete import (
    DeleteRequest,
    DeleteRequestHandler,
    RequestDeleted,
)
from aidportal.domain.aid.command.review import (
    ApproveRequest,
    ApproveRequestHandler,
    RejectRequest,
    RejectRequestHandler,
)
from aidportal.domain.aid.command.submit import SubmitRequest, SubmitRequestHandler
from aidportal.domain.aid.model.accountability import AccountabilityPackage
from aidportal.domain.aid.model.value import Committee, Modality, RequestStatus
from aidportal.domain.aid.query.eligibility import (
    CheckEligibility,
    CheckEligibilityHandler,
    EligibilityView,
)
from aidportal.domain.aid.query.get_request import GetRequest, GetRequestHandler, RequestView
from aidportal.domain.aid.query.list_requests import (
    ListRequests,
    ListRequestsHandler,
    RequestList,
)

router = APIRouter(prefix="/requests", tags=["Aid requests"], route_class=DishkaRoute)


class RejectBody(BaseModel):
    reason: str | None = None


@router.get("/eligibility", response_model=EligibilityView)
async def check_eligibility(
    modality: Modality,
    event_date: date,
    handler: FromDishka[CheckEligibilityHandler],
) -> EligibilityView:
    """Check lead time and annual cap before filling the form."""
    return await handler.run(CheckEligibility(modality=modality, event_date=event_date))


@router.post("", response_model=RequestView, status_code=201)
async def submit_request(
    body: SubmitRequest,
    handler: FromDishka[SubmitRequestHandler],
) -> RequestView:
    return await handler.run(body)


@router.get("", response_model=RequestList)
async def list_requests(
    handler: FromDishka[ListRequestsHandler],
    status: RequestStatus | None = None,
) -> RequestList:
    return await handler.run(ListRequests(status=status))


@router.get("/{request_id}", response_model=RequestView)
async def get_request(
    request_id: UUID,
    handler: FromDishka[GetRequestHandler],
) -> RequestView:
    return await handler.run(GetRequest(request_id=request_id))


@router.post("/{request_id}/accountability", response_model=RequestView)
async def submit_accountability(
    request_id: UUID,
    body: AccountabilityPackage,
    handler: FromDishka[SubmitAccountabilityHandler],
) -> RequestView:
    return await handler.run(SubmitAccountability(request_id=request_id, package=body))


# -- administrator actions ----------------------------------------------------


@router.post("/{request_id}/approvals/{committee}", response_model=RequestView)
async def approve_request(
    request_id: UUID,
    committee: Committee,
    handler: FromDishka[ApproveRequestHandler],
) -> RequestView:
    return await handler.run(ApproveRequest(request_id=request_id, committee=committee))


@router.post("/{request_id}/reject", response_model=RequestView)
async def reject_request(
    request_id: UUID,
    handler: FromDishka[RejectRequestHandler],
    body: RejectBody | None = None,
) -> RequestView:
    reason = body.reason if body else None
    return await handler.run(RejectRequest(request_id=request_id, reason=reason))


@router.post("/{request_id}/accountability/approve", response_model=RequestView)
async def approve_accountability(
    request_id: UUID,
    handler: FromDishka[ApproveAccountabilityHandler],
) -> RequestView:
    return await handler.run(ApproveAccountability(request_id=request_id))


@router.post("/{request_id}/payment", response_model=RequestView)
async def confirm_payment(
    request_id: UUID,
    handler: FromDishka[ConfirmPaymentHandler],
) -> RequestView:
    return await handler.run(ConfirmPayment(request_id=request_id))


@router.delete("/{request_id}", response_model=RequestDeleted)
async def delete_request(
    request_id: UUID,
    handler: FromDishka[DeleteRequestHandler],
) -> RequestDeleted:
    return await handler.run(DeleteRequest(request_id=request_id))
