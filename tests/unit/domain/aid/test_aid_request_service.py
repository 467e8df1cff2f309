"""Unit tests for AidRequestService."""

from datetime import UTC, date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from aidportal.config import PolicyConfig
from aidportal.domain.aid.model.accountability import AccountabilityPackage
from aidportal.domain.aid.model.aggregate import AidRequest
from aidportal.domain.aid.model.value import (
    AidRequestId,
    Attachment,
    Committee,
    EventParameters,
    Modality,
    RequestStatus,
    TemplateKind,
)
from aidportal.domain.aid.service.aid_request import MAX_WRITE_ATTEMPTS, AidRequestService
from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.auth.model.value import ADMIN_USER_ID, UserId
from aidportal.domain.notification.event.requested import NotificationRequested
from aidportal.domain.shared.error import (
    AuthorizationError,
    ConcurrentModificationError,
    IncompleteAccountabilityError,
    InsufficientLeadTimeError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)

TODAY = date(2024, 1, 1)


def make_attachment(name: str = "resumo.pdf") -> Attachment:
    return Attachment(
        name=name,
        size_label="1KB",
        uploaded_at=datetime(2024, 1, 1, tzinfo=UTC),
        locator=f"1704067200000_0badf00d_{name}",
    )


def make_employee() -> Principal:
    return Principal(user_id=UserId.generate(), role=Role.EMPLOYEE)


def make_admin() -> Principal:
    return Principal(user_id=ADMIN_USER_ID, role=Role.ADMIN)


def make_request(owner: Principal, status: RequestStatus | None = None) -> AidRequest:
    request, _ = AidRequest.submit(
        owner_id=owner.user_id,
        requester_name="Maria Silva",
        job_role="Enfermeira",
        event_name="Congresso",
        event_date=date(2024, 3, 1),
        modality=Modality.I,
        registration_fee=Decimal("300"),
        documents=[make_attachment()],
    )
    if status is not None:
        request.status = status
    return request


def make_service(
    request_repo: AsyncMock | None = None,
    storage: AsyncMock | None = None,
    outbox: AsyncMock | None = None,
    max_upload_bytes: int = 1024,
    uploader: Principal | None = None,
) -> AidRequestService:
    """Create an AidRequestService with mocked ports and a fixed clock.

    The default storage reports ``uploader`` as the owner of every locator.
    """
    if request_repo is None:
        request_repo = AsyncMock()
        request_repo.list_by_owner.return_value = []
    if storage is None:
        storage = AsyncMock()
        storage.owner_of.return_value = uploader.user_id if uploader else None
    return AidRequestService(
        request_repo=request_repo,
        storage=storage,
        outbox=outbox or AsyncMock(),
        policy=PolicyConfig(),
        max_upload_bytes=max_upload_bytes,
        today=lambda: TODAY,
    )


def appended_kinds(outbox: AsyncMock) -> list[TemplateKind]:
    return [c.args[0].template_kind for c in outbox.append.call_args_list]


class TestSubmit:
    @pytest.mark.asyncio
    async def test_submit_saves_and_queues_confirmation(self):
        # Arrange
        repo = AsyncMock()
        repo.list_by_owner.return_value = []
        outbox = AsyncMock()
        employee = make_employee()
        service = make_service(request_repo=repo, outbox=outbox, uploader=employee)

        # Act
        request = await service.submit(
            employee,
            requester_name="Maria Silva",
            job_role="Enfermeira",
            event_name="Congresso",
            event_date=date(2024, 1, 20),
            modality=Modality.I,
            registration_fee=Decimal("250.00"),
            summary=make_attachment(),
            event_params=EventParameters(mode="text", text="Pôster"),
        )

        # Assert
        assert request.status == RequestStatus.PENDING_APPROVAL
        assert request.owner_id == employee.user_id
        assert request.event_params_text == "Pôster"
        repo.save.assert_awaited_once_with(request)
        event = outbox.append.call_args.args[0]
        assert isinstance(event, NotificationRequested)
        assert event.template_kind == TemplateKind.REQUEST_RECEIVED
        assert event.recipient_id == employee.user_id
        assert event.request_id == str(request.id)

    @pytest.mark.asyncio
    async def test_event_parameter_file_is_kept_with_documents(self):
        employee = make_employee()
        service = make_service(uploader=employee)
        params_file = make_attachment("edital.pdf")

        request = await service.submit(
            employee,
            requester_name="Maria",
            job_role="Enfermeira",
            event_name="Congresso",
            event_date=date(2024, 2, 1),
            modality=Modality.I,
            registration_fee=Decimal("0"),
            summary=make_attachment(),
            event_params=EventParameters(mode="file", file=params_file),
        )

        assert request.documents == [make_attachment(), params_file]
        assert request.event_params_text is None

    @pytest.mark.asyncio
    async def test_late_submission_is_refused(self):
        repo = AsyncMock()
        repo.list_by_owner.return_value = []
        outbox = AsyncMock()
        service = make_service(request_repo=repo, outbox=outbox)

        with pytest.raises(InsufficientLeadTimeError) as exc_info:
            await service.submit(
                make_employee(),
                requester_name="Maria",
                job_role="Enfermeira",
                event_name="Congresso",
                event_date=date(2024, 1, 10),
                modality=Modality.I,
                registration_fee=Decimal("100"),
                summary=make_attachment(),
                event_params=EventParameters(mode="text", text="Oral"),
            )

        assert exc_info.value.days_short == 6
        repo.save.assert_not_awaited()
        outbox.append.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_file_mode_params_without_summary_is_refused(self):
        repo = AsyncMock()
        repo.list_by_owner.return_value = []
        outbox = AsyncMock()
        employee = make_employee()
        service = make_service(request_repo=repo, outbox=outbox, uploader=employee)

        with pytest.raises(ValidationError) as exc_info:
            await service.submit(
                employee,
                requester_name="Maria",
                job_role="Enfermeira",
                event_name="Congresso",
                event_date=date(2024, 2, 1),
                modality=Modality.I,
                registration_fee=Decimal("0"),
                summary=None,
                event_params=EventParameters(mode="file", file=make_attachment("edital.pdf")),
            )

        assert exc_info.value.field == "summary"
        repo.save.assert_not_awaited()
        outbox.append.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_locator_is_refused(self):
        repo = AsyncMock()
        repo.list_by_owner.return_value = []
        storage = AsyncMock()
        storage.owner_of.return_value = None
        service = make_service(request_repo=repo, storage=storage)
        made_up = Attachment(
            name="resumo.pdf",
            size_label="1KB",
            uploaded_at=datetime(2024, 1, 1, tzinfo=UTC),
            locator="1700000000000_deadbeef_resumo.pdf",
        )

        with pytest.raises(ValidationError) as exc_info:
            await service.submit(
                make_employee(),
                requester_name="Maria",
                job_role="Enfermeira",
                event_name="Congresso",
                event_date=date(2024, 2, 1),
                modality=Modality.I,
                registration_fee=Decimal("0"),
                summary=made_up,
                event_params=EventParameters(mode="text", text="Oral"),
            )

        assert exc_info.value.field == "attachments"
        storage.owner_of.assert_awaited_once_with(made_up.locator)
        repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_another_employees_upload_is_refused(self):
        repo = AsyncMock()
        repo.list_by_owner.return_value = []
        service = make_service(request_repo=repo, uploader=make_employee())

        with pytest.raises(ValidationError) as exc_info:
            await service.submit(
                make_employee(),
                requester_name="Maria",
                job_role="Enfermeira",
                event_name="Congresso",
                event_date=date(2024, 2, 1),
                modality=Modality.II,
                registration_fee=Decimal("0"),
                summary=make_attachment(),
                event_params=EventParameters(mode="text", text="Oral"),
                ethics_committee_proof=make_attachment("cep.pdf"),
            )

        assert exc_info.value.field == "attachments"
        repo.save.assert_not_awaited()


class TestReads:
    @pytest.mark.asyncio
    async def test_owner_can_read_request(self):
        employee = make_employee()
        request = make_request(employee)
        repo = AsyncMock()
        repo.get.return_value = request
        service = make_service(request_repo=repo)

        assert await service.get(employee, request.id) is request

    @pytest.mark.asyncio
    async def test_other_employee_is_denied(self):
        request = make_request(make_employee())
        repo = AsyncMock()
        repo.get.return_value = request
        service = make_service(request_repo=repo)

        with pytest.raises(AuthorizationError):
            await service.get(make_employee(), request.id)

    @pytest.mark.asyncio
    async def test_admin_can_read_any_request(self):
        request = make_request(make_employee())
        repo = AsyncMock()
        repo.get.return_value = request
        service = make_service(request_repo=repo)

        assert await service.get(make_admin(), request.id) is request

    @pytest.mark.asyncio
    async def test_missing_request(self):
        repo = AsyncMock()
        repo.get.return_value = None
        service = make_service(request_repo=repo)

        with pytest.raises(NotFoundError):
            await service.get(make_admin(), AidRequestId.generate())

    @pytest.mark.asyncio
    async def test_employee_lists_only_own_requests(self):
        employee = make_employee()
        repo = AsyncMock()
        repo.list_by_owner.return_value = []
        service = make_service(request_repo=repo)

        await service.list_requests(employee, status=RequestStatus.APPROVED)

        repo.list_by_owner.assert_awaited_once_with(employee.user_id, status=RequestStatus.APPROVED)
        repo.list.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_admin_lists_everything(self):
        repo = AsyncMock()
        repo.list.return_value = []
        service = make_service(request_repo=repo)

        await service.list_requests(make_admin())

        repo.list.assert_awaited_once_with(status=None)

    @pytest.mark.asyncio
    async def test_summary_includes_every_status(self):
        repo = AsyncMock()
        repo.count_by_status.return_value = {RequestStatus.APPROVED: 2}
        service = make_service(request_repo=repo)

        summary = await service.summary()

        assert summary[RequestStatus.APPROVED] == 2
        assert summary[RequestStatus.COMPLETED] == 0
        assert set(summary) == set(RequestStatus)


class TestTransitions:
    @pytest.mark.asyncio
    async def test_second_approval_queues_approved_notice(self):
        request = make_request(make_employee())
        request.approve(Committee.SCIENTIFIC)
        repo = AsyncMock()
        repo.get_for_update.return_value = request
        outbox = AsyncMock()
        service = make_service(request_repo=repo, outbox=outbox)

        result = await service.approve(request.id, Committee.ADMINISTRATIVE)

        assert result.status == RequestStatus.APPROVED
        repo.save.assert_awaited_once_with(request)
        assert appended_kinds(outbox) == [TemplateKind.APPROVED]

    @pytest.mark.asyncio
    async def test_first_approval_sends_nothing(self):
        request = make_request(make_employee())
        repo = AsyncMock()
        repo.get_for_update.return_value = request
        outbox = AsyncMock()
        service = make_service(request_repo=repo, outbox=outbox)

        await service.approve(request.id, Committee.SCIENTIFIC)

        outbox.append.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_approving_missing_request(self):
        repo = AsyncMock()
        repo.get_for_update.return_value = None
        service = make_service(request_repo=repo)

        with pytest.raises(NotFoundError):
            await service.approve(AidRequestId.generate(), Committee.SCIENTIFIC)

    @pytest.mark.asyncio
    async def test_reject_carries_reason(self):
        request = make_request(make_employee())
        repo = AsyncMock()
        repo.get_for_update.return_value = request
        outbox = AsyncMock()
        service = make_service(request_repo=repo, outbox=outbox)

        await service.reject(request.id, "Fora do escopo")

        event = outbox.append.call_args.args[0]
        assert event.template_kind == TemplateKind.REJECTED
        assert event.context["reason"] == "Fora do escopo"

    @pytest.mark.asyncio
    async def test_incomplete_accountability_is_not_saved(self):
        employee = make_employee()
        request = make_request(employee, status=RequestStatus.APPROVED)
        repo = AsyncMock()
        repo.get_for_update.return_value = request
        outbox = AsyncMock()
        service = make_service(request_repo=repo, outbox=outbox, uploader=employee)
        package = AccountabilityPackage(
            attendance_certificate=make_attachment("a.pdf"),
            presentation_certificate=make_attachment("b.pdf"),
            receipts=[make_attachment("c.pdf")],
        )

        with pytest.raises(IncompleteAccountabilityError):
            await service.submit_accountability(employee, request.id, package)

        assert request.status == RequestStatus.APPROVED
        repo.save.assert_not_awaited()
        outbox.append.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_accountability_by_other_employee_is_denied(self):
        request = make_request(make_employee(), status=RequestStatus.APPROVED)
        repo = AsyncMock()
        repo.get_for_update.return_value = request
        service = make_service(request_repo=repo)

        with pytest.raises(AuthorizationError):
            await service.submit_accountability(
                make_employee(), request.id, AccountabilityPackage()
            )

    @pytest.mark.asyncio
    async def test_accountability_with_foreign_upload_is_refused(self):
        employee = make_employee()
        request = make_request(employee, status=RequestStatus.APPROVED)
        repo = AsyncMock()
        repo.get_for_update.return_value = request
        service = make_service(request_repo=repo, uploader=make_employee())
        package = AccountabilityPackage(
            attendance_certificate=make_attachment("a.pdf"),
            presentation_certificate=make_attachment("b.pdf"),
            photo=make_attachment("c.jpg"),
            receipts=[make_attachment("d.pdf")],
        )

        with pytest.raises(ValidationError) as exc_info:
            await service.submit_accountability(employee, request.id, package)

        assert exc_info.value.field == "attachments"
        assert request.status == RequestStatus.APPROVED
        repo.save.assert_not_awaited()


class TestConcurrentWrites:
    @pytest.mark.asyncio
    async def test_lost_race_reapplies_to_fresh_row(self):
        # Arrange: the first load predates another approval that wins the write
        owner = make_employee()
        stale = make_request(owner)
        fresh = stale.model_copy(deep=True)
        fresh.approve(Committee.SCIENTIFIC)
        repo = AsyncMock()
        repo.get_for_update.side_effect = [stale, fresh]
        repo.save.side_effect = [ConcurrentModificationError("Aid request", str(stale.id)), None]
        outbox = AsyncMock()
        service = make_service(request_repo=repo, outbox=outbox)

        # Act
        result = await service.approve(stale.id, Committee.ADMINISTRATIVE)

        # Assert
        assert result is fresh
        assert result.status == RequestStatus.APPROVED
        assert repo.save.await_count == 2
        assert appended_kinds(outbox) == [TemplateKind.APPROVED]

    @pytest.mark.asyncio
    async def test_conflict_is_reported_after_repeated_losses(self):
        request = make_request(make_employee())
        repo = AsyncMock()
        repo.get_for_update.return_value = request
        repo.save.side_effect = ConcurrentModificationError("Aid request", str(request.id))
        outbox = AsyncMock()
        service = make_service(request_repo=repo, outbox=outbox)

        with pytest.raises(ConcurrentModificationError):
            await service.reject(request.id, "Duplicado")

        assert repo.save.await_count == MAX_WRITE_ATTEMPTS
        outbox.append.assert_not_awaited()


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_removes_every_attachment(self):
        request = make_request(make_employee())
        repo = AsyncMock()
        repo.get_for_update.return_value = request
        storage = AsyncMock()
        service = make_service(request_repo=repo, storage=storage)

        await service.delete(request.id)

        storage.delete.assert_awaited_once_with(make_attachment().locator)
        repo.delete.assert_awaited_once_with(request.id)

    @pytest.mark.asyncio
    async def test_completed_request_is_kept(self):
        request = make_request(make_employee(), status=RequestStatus.COMPLETED)
        repo = AsyncMock()
        repo.get_for_update.return_value = request
        storage = AsyncMock()
        service = make_service(request_repo=repo, storage=storage)

        with pytest.raises(InvalidTransitionError):
            await service.delete(request.id)

        storage.delete.assert_not_awaited()
        repo.delete.assert_not_awaited()


class TestUpload:
    @pytest.mark.asyncio
    async def test_empty_file_is_refused(self):
        service = make_service()

        with pytest.raises(ValidationError):
            await service.upload_attachment(make_employee(), "a.pdf", b"")

    @pytest.mark.asyncio
    async def test_oversized_file_is_refused(self):
        storage = AsyncMock()
        service = make_service(storage=storage, max_upload_bytes=10)

        with pytest.raises(ValidationError) as exc_info:
            await service.upload_attachment(make_employee(), "a.pdf", b"x" * 11)

        assert exc_info.value.field == "file"
        storage.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_upload_delegates_to_storage(self):
        storage = AsyncMock()
        storage.save.return_value = make_attachment("a.pdf")
        service = make_service(storage=storage)
        employee = make_employee()

        attachment = await service.upload_attachment(employee, " a.pdf ", b"%PDF")

        storage.save.assert_awaited_once_with("a.pdf", b"%PDF", owner_id=employee.user_id)
        assert attachment.name == "a.pdf"


class TestDownload:
    @pytest.mark.asyncio
    async def test_uploader_can_open_own_file(self):
        employee = make_employee()
        storage = AsyncMock()
        storage.owner_of.return_value = employee.user_id
        service = make_service(storage=storage)

        await service.open_attachment(employee, "1704067200000_0badf00d_a.pdf")

        storage.open.assert_awaited_once_with("1704067200000_0badf00d_a.pdf")

    @pytest.mark.asyncio
    async def test_other_employee_gets_not_found(self):
        storage = AsyncMock()
        storage.owner_of.return_value = UserId.generate()
        service = make_service(storage=storage)

        with pytest.raises(NotFoundError):
            await service.open_attachment(make_employee(), "1704067200000_0badf00d_a.pdf")

        storage.open.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_admin_opens_any_file(self):
        storage = AsyncMock()
        storage.owner_of.return_value = UserId.generate()
        service = make_service(storage=storage)

        await service.open_attachment(make_admin(), "1704067200000_0badf00d_a.pdf")

        storage.open.assert_awaited_once_with("1704067200000_0badf00d_a.pdf")
