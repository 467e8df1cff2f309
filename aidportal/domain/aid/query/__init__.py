"""Aid domain queries."""

from .download_attachment import AttachmentStream, DownloadAttachment, DownloadAttachmentHandler
from .eligibility import CheckEligibility, CheckEligibilityHandler, EligibilityView
from .get_request import GetRequest, GetRequestHandler, RequestView
from .list_requests import ListRequests, ListRequestsHandler, RequestList
from .rules import GetRules, GetRulesHandler, ProgramRules
from .summary import GetSummary, GetSummaryHandler, StatusSummary

__all__ = [
    "AttachmentStream",
    "CheckEligibility",
    "CheckEligibilityHandler",
    "DownloadAttachment",
    "DownloadAttachmentHandler",
    "EligibilityView",
    "GetRequest",
    "GetRequestHandler",
    "GetRules",
    "GetRulesHandler",
    "GetSummary",
    "GetSummaryHandler",
    "ListRequests",
    "ListRequestsHandler",
    "ProgramRules",
    "RequestList",
    "RequestView",
    "StatusSummary",
]
