from .aid_request import AidRequestService
from .eligibility import EligibilityReport, assess_eligibility, ensure_eligible

__all__ = ["AidRequestService", "EligibilityReport", "assess_eligibility", "ensure_eligible"]
