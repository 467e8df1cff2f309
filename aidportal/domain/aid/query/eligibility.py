from datetime import date

from pydantic import BaseModel

from aidportal.domain.aid.model.value import Modality
from aidportal.domain.aid.service.aid_request import AidRequestService
from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.shared.authorization.gate import at_least
from aidportal.domain.shared.query import Query, QueryHandler, Result


class CheckEligibility(Query):
    modality: Modality
    event_date: date


class EligibilityProblem(BaseModel):
    code: str
    message: str


class EligibilityView(Result):
    eligible: bool
    modality: Modality
    event_date: date
    days_until_event: int
    days_short: int
    minimum_days: int
    problems: list[EligibilityProblem]


class CheckEligibilityHandler(QueryHandler[CheckEligibility, EligibilityView]):
    __auth__ = at_least(Role.EMPLOYEE)
    principal: Principal
    aid_request_service: AidRequestService

    async def run(self, cmd: CheckEligibility) -> EligibilityView:
        report = await self.aid_request_service.eligibility(
            self.principal, cmd.modality, cmd.event_date
        )
        return EligibilityView(
            eligible=report.eligible,
            modality=report.modality,
            event_date=report.event_date,
            days_until_event=report.days_until_event,
            days_short=report.days_short,
            minimum_days=report.minimum_days,
            problems=[EligibilityProblem(code=p.code, message=p.message) for p in report.problems],
        )
