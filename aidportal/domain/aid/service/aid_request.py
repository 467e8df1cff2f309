import logging
import re
from collections.abc import AsyncIterator, Callable, Iterable
from datetime import date
from decimal import Decimal
from uuid import uuid4

from aidportal.config import PolicyConfig
from aidportal.domain.aid.model.accountability import AccountabilityPackage
from aidportal.domain.aid.model.aggregate import AidRequest
from aidportal.domain.aid.model.value import (
    AidRequestId,
    Attachment,
    Committee,
    EventParameters,
    Modality,
    NotificationIntent,
    RequestStatus,
)
from aidportal.domain.aid.port.repository import AidRequestRepository
from aidportal.domain.aid.port.storage import AttachmentStorage
from aidportal.domain.aid.service.eligibility import (
    EligibilityReport,
    assess_eligibility,
    ensure_eligible,
)
from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.notification.event.requested import NotificationRequested
from aidportal.domain.shared.error import (
    AuthorizationError,
    ConcurrentModificationError,
    NotFoundError,
    ValidationError,
)
from aidportal.domain.shared.event import EventId
from aidportal.domain.shared.outbox import Outbox
from aidportal.domain.shared.service import Service

logger = logging.getLogger(__name__)

# Loads of a row that lost a write race before the conflict is reported
MAX_WRITE_ATTEMPTS = 3

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.]")


def clean_filename(filename: str) -> str:
    """Replace everything but ASCII letters, digits and dots with '_'."""
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", filename.strip())
    return cleaned or "file"


def original_filename(locator: str) -> str:
    """Filename part of a storage locator ("<millis>_<token>_<name>")."""
    parts = locator.split("_", 2)
    return parts[2] if len(parts) == 3 else locator


class AidRequestService(Service):
    """Application logic around the AidRequest aggregate.

    Mutations load the row locked for update, apply one transition, save,
    and append the resulting notification intents to the outbox, all in the
    caller's unit of work. Attachments named by a request must have been
    uploaded by the acting principal.
    """

    request_repo: AidRequestRepository
    storage: AttachmentStorage
    outbox: Outbox
    policy: PolicyConfig
    max_upload_bytes: int = 20 * 1024 * 1024
    today: Callable[[], date] = date.today

    # -- eligibility / submission ------------------------------------------

    async def eligibility(
        self, principal: Principal, modality: Modality, event_date: date
    ) -> EligibilityReport:
        prior = await self.request_repo.list_by_owner(principal.user_id)
        return assess_eligibility(
            prior,
            modality,
            event_date,
            self.today(),
            minimum_days=self.policy.lead_time_days,
        )

    async def submit(
        self,
        principal: Principal,
        *,
        requester_name: str,
        job_role: str,
        event_name: str,
        event_date: date,
        modality: Modality,
        registration_fee: Decimal,
        summary: Attachment | None,
        event_params: EventParameters,
        event_location: str | None = None,
        ethics_committee_proof: Attachment | None = None,
    ) -> AidRequest:
        prior = await self.request_repo.list_by_owner(principal.user_id)
        ensure_eligible(
            prior,
            modality,
            event_date,
            self.today(),
            summary=summary,
            ethics_committee_proof=ethics_committee_proof,
            event_params=event_params,
            minimum_days=self.policy.lead_time_days,
        )

        params_file = event_params.file if event_params.mode == "file" else None
        # Summary first, then the event-parameters file
        documents = [d for d in (summary, params_file) if d is not None]
        await self._check_uploads(
            principal,
            [*documents, *([ethics_committee_proof] if ethics_committee_proof else [])],
        )

        request, intents = AidRequest.submit(
            owner_id=principal.user_id,
            requester_name=requester_name,
            job_role=job_role,
            event_name=event_name,
            event_location=event_location,
            event_date=event_date,
            modality=modality,
            registration_fee=registration_fee,
            event_params_text=event_params.text if event_params.mode == "text" else None,
            documents=documents,
            ethics_committee_proof=ethics_committee_proof,
        )
        await self.request_repo.save(request)
        await self._notify(request, intents)
        logger.info("Aid request %s submitted (modality %s)", request.id, modality.value)
        return request

    # -- reads --------------------------------------------------------------

    async def get(self, principal: Principal, request_id: AidRequestId) -> AidRequest:
        request = await self.request_repo.get(request_id)
        if request is None:
            raise NotFoundError(f"Aid request not found: {request_id}")
        self._check_access(principal, request)
        return request

    async def list_requests(
        self, principal: Principal, status: RequestStatus | None = None
    ) -> list[AidRequest]:
        if principal.is_admin:
            return await self.request_repo.list(status=status)
        return await self.request_repo.list_by_owner(principal.user_id, status=status)

    async def summary(self) -> dict[RequestStatus, int]:
        counts = await self.request_repo.count_by_status()
        return {status: counts.get(status, 0) for status in RequestStatus}

    # -- transitions --------------------------------------------------------

    async def approve(self, request_id: AidRequestId, committee: Committee) -> AidRequest:
        request = await self._transition(request_id, lambda r: r.approve(committee))
        logger.info(
            "Aid request %s: %s approval recorded (status=%s)",
            request.id,
            committee.value,
            request.status.value,
        )
        return request

    async def reject(self, request_id: AidRequestId, reason: str | None = None) -> AidRequest:
        request = await self._transition(request_id, lambda r: r.reject(reason))
        logger.info("Aid request %s rejected", request.id)
        return request

    async def submit_accountability(
        self,
        principal: Principal,
        request_id: AidRequestId,
        package: AccountabilityPackage,
    ) -> AidRequest:
        await self._check_uploads(principal, package.attachments())

        def apply(request: AidRequest) -> list[NotificationIntent]:
            self._check_access(principal, request)
            return request.submit_accountability(package)

        request = await self._transition(request_id, apply)
        logger.info(
            "Aid request %s: accountability submitted (%d documents)",
            request.id,
            len(request.accountability_documents),
        )
        return request

    async def approve_accountability(self, request_id: AidRequestId) -> AidRequest:
        return await self._transition(request_id, lambda r: r.approve_accountability())

    async def confirm_payment(self, request_id: AidRequestId) -> AidRequest:
        request = await self._transition(request_id, lambda r: r.confirm_payment())
        logger.info("Aid request %s: reimbursement completed", request.id)
        return request

    async def delete(self, request_id: AidRequestId) -> None:
        """Remove the request and every stored attachment.

        Files go first so a storage failure leaves the request in place for
        a retry; deleting an already-removed file is a no-op.
        """
        request = await self._load_for_update(request_id)
        attachments = request.ensure_deletable()
        for attachment in attachments:
            await self.storage.delete(attachment.locator)
        await self.request_repo.delete(request.id)
        logger.info("Aid request %s deleted (%d attachments)", request.id, len(attachments))

    # -- attachments --------------------------------------------------------

    async def upload_attachment(
        self, principal: Principal, filename: str, content: bytes
    ) -> Attachment:
        if not content:
            raise ValidationError("Uploaded file is empty", field="file")
        if len(content) > self.max_upload_bytes:
            raise ValidationError(
                f"File exceeds the {self.max_upload_bytes // (1024 * 1024)}MB limit",
                field="file",
            )
        return await self.storage.save(
            filename.strip() or "file", content, owner_id=principal.user_id
        )

    async def open_attachment(self, principal: Principal, locator: str) -> AsyncIterator[bytes]:
        """Stream a stored file; employees only reach their own uploads."""
        if not principal.is_admin and await self.storage.owner_of(locator) != principal.user_id:
            raise NotFoundError(f"Attachment not found: {locator}")
        return await self.storage.open(locator)

    # -- helpers ------------------------------------------------------------

    async def _load_for_update(self, request_id: AidRequestId) -> AidRequest:
        request = await self.request_repo.get_for_update(request_id)
        if request is None:
            raise NotFoundError(f"Aid request not found: {request_id}")
        return request

    async def _transition(
        self,
        request_id: AidRequestId,
        apply: Callable[[AidRequest], list[NotificationIntent]],
    ) -> AidRequest:
        """Apply one transition to the stored row and queue its intents.

        When the save finds the row changed since it was loaded, the
        transition is re-applied to a fresh load, so guards such as the dual
        approval always see the flags that are actually stored.
        """
        attempt = 1
        while True:
            request = await self._load_for_update(request_id)
            intents = apply(request)
            try:
                await self.request_repo.save(request)
            except ConcurrentModificationError:
                if attempt >= MAX_WRITE_ATTEMPTS:
                    raise
                logger.info("Aid request %s changed concurrently, reloading", request_id)
                attempt += 1
                continue
            break

        await self._notify(request, intents)
        return request

    async def _check_uploads(
        self, principal: Principal, attachments: Iterable[Attachment]
    ) -> None:
        for attachment in attachments:
            if await self.storage.owner_of(attachment.locator) != principal.user_id:
                raise ValidationError(
                    f"Attachment {attachment.name!r} was not uploaded by you",
                    field="attachments",
                )

    def _check_access(self, principal: Principal, request: AidRequest) -> None:
        if principal.is_admin or request.is_owned_by(principal.user_id):
            return
        raise AuthorizationError(
            "Access denied: request belongs to another employee",
            code="access_denied",
        )

    async def _notify(self, request: AidRequest, intents: list[NotificationIntent]) -> None:
        for intent in intents:
            await self.outbox.append(
                NotificationRequested(
                    id=EventId(uuid4()),
                    recipient_id=request.owner_id,
                    request_id=str(request.id),
                    template_kind=intent.template_kind,
                    context=intent.context,
                )
            )
