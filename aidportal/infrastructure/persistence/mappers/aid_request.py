from decimal import Decimal
from typing import Any
from uuid import UUID

from aidportal.domain.aid.model.aggregate import AidRequest
from aidportal.domain.aid.model.value import (
    AidRequestId,
    Attachment,
    Modality,
    RequestStatus,
)
from aidportal.domain.auth.model.value import UserId


def row_to_aid_request(row: dict[str, Any]) -> AidRequest:
    """Convert database row to AidRequest aggregate."""
    proof = row.get("ethics_committee_proof")
    return AidRequest(
        id=AidRequestId(UUID(row["id"])),
        owner_id=UserId(UUID(row["owner_id"])),
        requester_name=row["requester_name"],
        job_role=row["job_role"],
        event_name=row["event_name"],
        event_location=row.get("event_location"),
        event_date=row["event_date"],
        modality=Modality(row["modality"]),
        registration_fee=Decimal(row["registration_fee"]),
        event_params_text=row.get("event_params_text"),
        status=RequestStatus(row["status"]),
        scientific_approved=bool(row["scientific_approved"]),
        admin_approved=bool(row["admin_approved"]),
        rejection_reason=row.get("rejection_reason"),
        documents=[Attachment(**a) for a in row.get("documents") or []],
        ethics_committee_proof=Attachment(**proof) if proof else None,
        accountability_documents=[
            Attachment(**a) for a in row.get("accountability_documents") or []
        ],
        submission_date=row["submission_date"],
        updated_at=row["updated_at"],
    )


def aid_request_to_dict(request: AidRequest) -> dict[str, Any]:
    """Convert AidRequest aggregate to database dict."""
    proof = request.ethics_committee_proof
    return {
        "id": str(request.id),
        "owner_id": str(request.owner_id),
        "requester_name": request.requester_name,
        "job_role": request.job_role,
        "event_name": request.event_name,
        "event_location": request.event_location,
        "event_date": request.event_date,
        "modality": request.modality.value,
        "registration_fee": request.registration_fee,
        "event_params_text": request.event_params_text,
        "status": request.status.value,
        "scientific_approved": request.scientific_approved,
        "admin_approved": request.admin_approved,
        "rejection_reason": request.rejection_reason,
        "documents": [a.model_dump(mode="json") for a in request.documents],
        "ethics_committee_proof": proof.model_dump(mode="json") if proof else None,
        "accountability_documents": [
            a.model_dump(mode="json") for a in request.accountability_documents
        ],
        "submission_date": request.submission_date,
        "updated_at": request.updated_at,
    }
