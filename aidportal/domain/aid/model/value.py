"""Value objects for the aid domain."""

from datetime import datetime
from enum import StrEnum
from typing import Any, Literal
from uuid import UUID, uuid4

from pydantic import Field, RootModel

from aidportal.domain.shared.model.value import ValueObject


class AidRequestId(RootModel[UUID]):
    """Unique identifier for an AidRequest."""

    @classmethod
    def generate(cls) -> "AidRequestId":
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.root)

    def __hash__(self) -> int:
        return hash(self.root)


class RequestStatus(StrEnum):
    """Closed set of lifecycle states."""

    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"
    PENDING_ACCOUNTABILITY = "pending_accountability"
    ACCOUNTABILITY_REVIEW = "accountability_review"
    WAITING_REIMBURSEMENT = "waiting_reimbursement"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self in (RequestStatus.REJECTED, RequestStatus.COMPLETED)

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS: dict[RequestStatus, str] = {
    RequestStatus.PENDING_APPROVAL: "Pendente Aprovação",
    RequestStatus.APPROVED: "Aprovado",
    RequestStatus.REJECTED: "Recusado",
    RequestStatus.PENDING_ACCOUNTABILITY: "Aguardando Prestação de Contas",
    RequestStatus.ACCOUNTABILITY_REVIEW: "Análise de Contas",
    RequestStatus.WAITING_REIMBURSEMENT: "Aguardando Reembolso",
    RequestStatus.COMPLETED: "Finalizado",
}
"""pt-BR display labels, kept apart from the stored values."""


class Modality(StrEnum):
    """Aid modality.

    I: presentation without publication intent.
    II: presentation with publication intent; requires ethics-committee proof.
    """

    I = "I"  # noqa: E741
    II = "II"

    @property
    def label(self) -> str:
        return f"Modalidade {self.value}"

    @property
    def requires_ethics_proof(self) -> bool:
        return self is Modality.II


class Committee(StrEnum):
    SCIENTIFIC = "scientific"
    ADMINISTRATIVE = "administrative"


class TemplateKind(StrEnum):
    REQUEST_RECEIVED = "request_received"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACCOUNTABILITY_RECEIVED = "accountability_received"
    ACCOUNTABILITY_APPROVED = "accountability_approved"
    REIMBURSEMENT_COMPLETED = "reimbursement_completed"


class Attachment(ValueObject):
    """A stored file reference. `locator` is opaque outside the storage port."""

    name: str
    size_label: str
    uploaded_at: datetime
    locator: str


class EventParameters(ValueObject):
    """Event submission parameters, given either as text or as an uploaded file."""

    mode: Literal["text", "file"]
    text: str | None = None
    file: Attachment | None = None

    @property
    def is_empty(self) -> bool:
        if self.mode == "text":
            return not (self.text and self.text.strip())
        return self.file is None


class NotificationIntent(ValueObject):
    """A notification a transition wants sent; dispatched after commit."""

    template_kind: TemplateKind
    context: dict[str, Any] = Field(default_factory=dict)


def size_label(size_bytes: int) -> str:
    """Human size label in whole kilobytes, e.g. 2048 -> '2KB'."""
    return f"{round(size_bytes / 1024)}KB"
