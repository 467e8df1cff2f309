"""Aid domain models."""

from .accountability import AccountabilityPackage, validate_accountability
from .aggregate import AidRequest
from .value import (
    AidRequestId,
    Attachment,
    Committee,
    EventParameters,
    Modality,
    NotificationIntent,
    RequestStatus,
    TemplateKind,
)

__all__ = [
    "AccountabilityPackage",
    "AidRequest",
    "AidRequestId",
    "Attachment",
    "Committee",
    "EventParameters",
    "Modality",
    "NotificationIntent",
    "RequestStatus",
    "TemplateKind",
    "validate_accountability",
]
