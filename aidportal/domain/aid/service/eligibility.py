"""Eligibility rules for creating a new aid request.

Pure functions over the employee's prior requests and the proposed values;
nothing here touches storage.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from aidportal.domain.aid.model.aggregate import AidRequest, check_required_documents
from aidportal.domain.aid.model.value import (
    Attachment,
    EventParameters,
    Modality,
    RequestStatus,
)
from aidportal.domain.shared.error import (
    AnnualLimitReachedError,
    DomainError,
    InsufficientLeadTimeError,
    ValidationError,
)

DEFAULT_LEAD_TIME_DAYS = 15


def lead_time_days(event_date: date, today: date) -> int:
    """Whole days from today until the event (negative if it already happened)."""
    return (event_date - today).days


def check_lead_time(
    event_date: date,
    today: date,
    minimum_days: int = DEFAULT_LEAD_TIME_DAYS,
) -> int:
    """Return the lead time in days, or raise if it is below the minimum."""
    days = lead_time_days(event_date, today)
    if days < minimum_days:
        raise InsufficientLeadTimeError(days_until_event=days, minimum_days=minimum_days)
    return days


def check_annual_cap(prior: Iterable[AidRequest], modality: Modality, today: date) -> None:
    """One non-rejected request per modality per calendar year."""
    for request in prior:
        if (
            request.modality == modality
            and request.submission_date.year == today.year
            and request.status != RequestStatus.REJECTED
        ):
            raise AnnualLimitReachedError(modality=modality.label, year=today.year)


def check_event_parameters(params: EventParameters) -> None:
    if params.is_empty:
        raise ValidationError(
            f"Event parameters are required ({params.mode})",
            field="event_params",
        )


@dataclass(frozen=True)
class EligibilityReport:
    """Outcome of the reactive check shown while the form is being filled."""

    modality: Modality
    event_date: date
    days_until_event: int
    minimum_days: int
    problems: list[DomainError] = field(default_factory=list)

    @property
    def eligible(self) -> bool:
        return not self.problems

    @property
    def days_short(self) -> int:
        return max(0, self.minimum_days - self.days_until_event)


def assess_eligibility(
    prior: Iterable[AidRequest],
    modality: Modality,
    event_date: date,
    today: date,
    minimum_days: int = DEFAULT_LEAD_TIME_DAYS,
) -> EligibilityReport:
    """Evaluate lead time and annual cap together without raising."""
    problems: list[DomainError] = []
    try:
        check_lead_time(event_date, today, minimum_days)
    except InsufficientLeadTimeError as e:
        problems.append(e)
    try:
        check_annual_cap(prior, modality, today)
    except AnnualLimitReachedError as e:
        problems.append(e)
    return EligibilityReport(
        modality=modality,
        event_date=event_date,
        days_until_event=lead_time_days(event_date, today),
        minimum_days=minimum_days,
        problems=problems,
    )


def ensure_eligible(
    prior: Iterable[AidRequest],
    modality: Modality,
    event_date: date,
    today: date,
    summary: Attachment | None,
    ethics_committee_proof: Attachment | None,
    event_params: EventParameters,
    minimum_days: int = DEFAULT_LEAD_TIME_DAYS,
) -> None:
    """Full submission check; raises the first failing rule.

    Form-level problems (attachments, event parameters) are reported before
    the policy rules.
    """
    check_required_documents(modality, summary, ethics_committee_proof)
    check_event_parameters(event_params)
    check_lead_time(event_date, today, minimum_days)
    check_annual_cap(prior, modality, today)
