"""Tests for mapping portal errors to HTTP responses."""

import pytest

from aidportal.application.api.v1.errors import map_error
from aidportal.domain.shared.error import (
    AnnualLimitReachedError,
    AuthorizationError,
    ConcurrentModificationError,
    ConflictError,
    DispatchError,
    IncompleteAccountabilityError,
    InsufficientLeadTimeError,
    InvalidTransitionError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)


class TestMapError:
    @pytest.mark.parametrize(
        "error,status",
        [
            (NotFoundError("missing"), 404),
            (ValidationError("bad", field="email"), 422),
            (InsufficientLeadTimeError(days_until_event=9, minimum_days=15), 422),
            (IncompleteAccountabilityError(["photo"]), 422),
            (InvalidTransitionError("completed", "delete"), 409),
            (AnnualLimitReachedError("Modalidade I", 2024), 409),
            (ConflictError("dup"), 409),
            (ConcurrentModificationError("AidRequest", "r-1"), 409),
            (AuthorizationError("nope", code="access_denied"), 403),
            (StorageUnavailableError("disk"), 503),
            (DispatchError("smtp"), 503),
        ],
    )
    def test_status_codes(self, error, status):
        assert map_error(error).status_code == status

    def test_lead_time_details_are_exposed(self):
        exc = map_error(InsufficientLeadTimeError(days_until_event=9, minimum_days=15))

        assert exc.detail["code"] == "insufficient_lead_time"
        assert exc.detail["days_short"] == 6
        assert exc.detail["days_until_event"] == 9

    def test_missing_slots_are_exposed(self):
        exc = map_error(IncompleteAccountabilityError(["photo", "receipts"]))

        assert exc.detail["missing_slots"] == ["photo", "receipts"]

    def test_validation_field_is_exposed(self):
        exc = map_error(ValidationError("bad", field="email"))

        assert exc.detail == {"code": "VALIDATION_ERROR", "message": "bad", "field": "email"}

    @pytest.mark.parametrize("code", ["missing_token", "invalid_credentials"])
    def test_unauthenticated_is_401(self, code):
        exc = map_error(AuthorizationError("who?", code=code))

        assert exc.status_code == 401
        assert exc.headers == {"WWW-Authenticate": "Bearer"}
