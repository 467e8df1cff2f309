"""Aid domain commands."""

from .accountability import (
    ApproveAccountability,
    ApproveAccountabilityHandler,
    ConfirmPayment,
    ConfirmPaymentHandler,
    SubmitAccountability,
    SubmitAccountabilityHandler,
)
from .delete import DeleteRequest, DeleteRequestHandler, RequestDeleted
from .review import ApproveRequest, ApproveRequestHandler, RejectRequest, RejectRequestHandler
from .submit import SubmitRequest, SubmitRequestHandler
from .upload import AttachmentUploaded, UploadAttachment, UploadAttachmentHandler

__all__ = [
    "ApproveAccountability",
    "ApproveAccountabilityHandler",
    "ApproveRequest",
    "ApproveRequestHandler",
    "AttachmentUploaded",
    "ConfirmPayment",
    "ConfirmPaymentHandler",
    "DeleteRequest",
    "DeleteRequestHandler",
    "RejectRequest",
    "RejectRequestHandler",
    "RequestDeleted",
    "SubmitAccountability",
    "SubmitAccountabilityHandler",
    "SubmitRequest",
    "SubmitRequestHandler",
    "UploadAttachment",
    "UploadAttachmentHandler",
]
