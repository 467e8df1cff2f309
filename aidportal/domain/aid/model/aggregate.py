from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

from pydantic import Field

from aidportal.domain.aid.model.accountability import (
    AccountabilityPackage,
    validate_accountability,
)
from aidportal.domain.aid.model.value import (
    AidRequestId,
    Attachment,
    Committee,
    Modality,
    NotificationIntent,
    RequestStatus,
    TemplateKind,
)
from aidportal.domain.auth.model.value import UserId
from aidportal.domain.shared.error import InvalidTransitionError, ValidationError
from aidportal.domain.shared.model.aggregate import Aggregate


def check_required_documents(
    modality: Modality,
    summary: Attachment | None,
    ethics_committee_proof: Attachment | None,
) -> None:
    """Work summary always; ethics committee proof iff modality II."""
    if summary is None:
        raise ValidationError("The work summary is required", field="summary")
    if modality.requires_ethics_proof and ethics_committee_proof is None:
        raise ValidationError(
            "Modality II requires the ethics committee proof",
            field="ethics_committee_proof",
        )
    if not modality.requires_ethics_proof and ethics_committee_proof is not None:
        raise ValidationError(
            "Ethics committee proof only applies to Modality II",
            field="ethics_committee_proof",
        )


class AidRequest(Aggregate):
    """A financial-aid request and its lifecycle.

    Every transition either raises InvalidTransitionError without touching
    any field, or mutates in place and returns the notification intents it
    produced.
    """

    id: AidRequestId
    owner_id: UserId
    requester_name: str
    job_role: str
    event_name: str
    event_location: str | None = None
    event_date: date
    modality: Modality
    registration_fee: Decimal = Field(ge=0)
    event_params_text: str | None = None
    status: RequestStatus = RequestStatus.PENDING_APPROVAL
    scientific_approved: bool = False
    admin_approved: bool = False
    rejection_reason: str | None = None
    documents: list[Attachment]
    ethics_committee_proof: Attachment | None = None
    accountability_documents: list[Attachment] = []
    submission_date: datetime
    updated_at: datetime

    @classmethod
    def submit(
        cls,
        *,
        owner_id: UserId,
        requester_name: str,
        job_role: str,
        event_name: str,
        event_date: date,
        modality: Modality,
        registration_fee: Decimal,
        documents: list[Attachment],
        event_location: str | None = None,
        event_params_text: str | None = None,
        ethics_committee_proof: Attachment | None = None,
        now: datetime | None = None,
    ) -> tuple["AidRequest", list[NotificationIntent]]:
        """Create a request in PendingApproval with both approval flags unset.

        ``documents`` starts with the work summary.
        """
        check_required_documents(
            modality, documents[0] if documents else None, ethics_committee_proof
        )

        now = now or datetime.now(UTC)
        request = cls(
            id=AidRequestId.generate(),
            owner_id=owner_id,
            requester_name=requester_name.strip(),
            job_role=job_role.strip(),
            event_name=event_name.strip(),
            event_location=event_location,
            event_date=event_date,
            modality=modality,
            registration_fee=registration_fee,
            event_params_text=event_params_text,
            documents=list(documents),
            ethics_committee_proof=ethics_committee_proof,
            submission_date=now,
            updated_at=now,
        )
        return request, [request._intent(TemplateKind.REQUEST_RECEIVED)]

    # -- transitions --------------------------------------------------------

    def approve(self, committee: Committee) -> list[NotificationIntent]:
        """Record one committee's approval.

        Re-approving a committee that already approved is a no-op.
        """
        action = f"approve_{committee.value}"
        if self.status.is_terminal:
            raise InvalidTransitionError(self.status.value, action)
        if self._committee_flag(committee):
            return []
        self._require(action, RequestStatus.PENDING_APPROVAL)

        if committee is Committee.SCIENTIFIC:
            self.scientific_approved = True
        else:
            self.admin_approved = True
        self._touch()
        return self._apply_dual_approval()

    def reject(self, reason: str | None = None) -> list[NotificationIntent]:
        self._require("reject", RequestStatus.PENDING_APPROVAL)
        self.status = RequestStatus.REJECTED
        self.rejection_reason = reason.strip() if reason and reason.strip() else None
        self._touch()
        return [self._intent(TemplateKind.REJECTED, reason=self.rejection_reason)]

    def submit_accountability(self, package: AccountabilityPackage) -> list[NotificationIntent]:
        self._require(
            "submit_accountability",
            RequestStatus.APPROVED,
            RequestStatus.PENDING_ACCOUNTABILITY,
        )
        if self.accountability_documents:
            raise InvalidTransitionError(self.status.value, "submit_accountability")

        documents = validate_accountability(package)

        self.accountability_documents = documents
        self.status = RequestStatus.ACCOUNTABILITY_REVIEW
        self._touch()
        return [
            self._intent(
                TemplateKind.ACCOUNTABILITY_RECEIVED,
                document_count=len(documents),
            )
        ]

    def approve_accountability(self) -> list[NotificationIntent]:
        self._require("approve_accountability", RequestStatus.ACCOUNTABILITY_REVIEW)
        self.status = RequestStatus.WAITING_REIMBURSEMENT
        self._touch()
        return [self._intent(TemplateKind.ACCOUNTABILITY_APPROVED)]

    def confirm_payment(self) -> list[NotificationIntent]:
        self._require("confirm_payment", RequestStatus.WAITING_REIMBURSEMENT)
        self.status = RequestStatus.COMPLETED
        self._touch()
        return [self._intent(TemplateKind.REIMBURSEMENT_COMPLETED)]

    def ensure_deletable(self) -> list[Attachment]:
        """Check the request may be deleted and return every attachment it holds."""
        if self.status.is_terminal:
            raise InvalidTransitionError(self.status.value, "delete")
        return self.attachments()

    # -- queries ------------------------------------------------------------

    def attachments(self) -> list[Attachment]:
        """Summary documents, ethics proof, then accountability documents."""
        items = list(self.documents)
        if self.ethics_committee_proof is not None:
            items.append(self.ethics_committee_proof)
        items.extend(self.accountability_documents)
        return items

    def is_owned_by(self, user_id: UserId) -> bool:
        return self.owner_id == user_id

    # -- internals ----------------------------------------------------------

    def _apply_dual_approval(self) -> list[NotificationIntent]:
        """Move to Approved once both committees have approved."""
        if (
            self.status == RequestStatus.PENDING_APPROVAL
            and self.scientific_approved
            and self.admin_approved
        ):
            self.status = RequestStatus.APPROVED
            self._touch()
            return [self._intent(TemplateKind.APPROVED)]
        return []

    def _committee_flag(self, committee: Committee) -> bool:
        if committee is Committee.SCIENTIFIC:
            return self.scientific_approved
        return self.admin_approved

    def _require(self, action: str, *allowed: RequestStatus) -> None:
        if self.status not in allowed:
            raise InvalidTransitionError(self.status.value, action)

    def _touch(self) -> None:
        self.updated_at = datetime.now(UTC)

    def _intent(self, kind: TemplateKind, **extra: Any) -> NotificationIntent:
        context: dict[str, Any] = {
            "request_id": str(self.id),
            "requester_name": self.requester_name,
            "event_name": self.event_name,
            "event_date": self.event_date.isoformat(),
            "modality": self.modality.label,
            "status": self.status.value,
            "status_label": self.status.label,
        }
        context.update(extra)
        return NotificationIntent(template_kind=kind, context=context)
