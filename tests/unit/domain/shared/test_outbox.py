"""Unit tests for Outbox consumer-group fan-out and the subscription registry."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from aidportal.domain.aid.model.value import TemplateKind
from aidportal.domain.auth.model.value import UserId
from aidportal.domain.notification.event.requested import NotificationRequested
from aidportal.domain.notification.handler import DispatchNotification
from aidportal.domain.shared.event import ClaimResult, Event, EventId
from aidportal.domain.shared.model.subscription_registry import SubscriptionRegistry
from aidportal.domain.shared.outbox import Outbox
from aidportal.infrastructure.event.di import HANDLERS, build_subscription_registry


class AuditEvent(Event):
    id: EventId
    note: str


def make_notification() -> NotificationRequested:
    return NotificationRequested(
        id=EventId(uuid4()),
        recipient_id=UserId.generate(),
        request_id=str(uuid4()),
        template_kind=TemplateKind.REQUEST_RECEIVED,
    )


class TestOutbox:
    @pytest.fixture
    def mock_repo(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def outbox(self, mock_repo: AsyncMock) -> Outbox:
        registry = SubscriptionRegistry({"NotificationRequested": {"DispatchNotification"}})
        return Outbox(mock_repo, registry)

    @pytest.mark.asyncio
    async def test_append_creates_delivery_per_subscriber(self, outbox, mock_repo):
        event = make_notification()

        await outbox.append(event)

        mock_repo.save_with_deliveries.assert_awaited_once_with(
            event, consumer_groups={"DispatchNotification"}
        )

    @pytest.mark.asyncio
    async def test_unsubscribed_event_is_audit_only(self, outbox, mock_repo):
        event = AuditEvent(id=EventId(uuid4()), note="seen")

        await outbox.append(event)

        mock_repo.save_with_deliveries.assert_awaited_once_with(event, consumer_groups=set())

    @pytest.mark.asyncio
    async def test_claim_passes_type_names(self, outbox, mock_repo):
        mock_repo.claim_delivery.return_value = ClaimResult(events=[], claimed_at=datetime.now(UTC))

        result = await outbox.claim([NotificationRequested], limit=5, consumer_group="G")

        assert not result
        mock_repo.claim_delivery.assert_awaited_once_with(
            consumer_group="G", event_types=["NotificationRequested"], limit=5
        )

    @pytest.mark.asyncio
    async def test_delivery_bookkeeping(self, outbox, mock_repo):
        await outbox.mark_delivered("d1")
        await outbox.mark_failed_with_retry("d2", "boom", max_retries=2)
        await outbox.reset_stale_claims(300.0)

        mock_repo.mark_delivery_status.assert_awaited_once_with("d1", status="delivered")
        mock_repo.mark_failed_with_retry.assert_awaited_once_with("d2", error="boom", max_retries=2)
        mock_repo.reset_stale_deliveries.assert_awaited_once_with(300.0)


class TestSubscriptionRegistry:
    def test_registry_maps_event_to_handlers(self):
        registry = build_subscription_registry(HANDLERS)

        assert registry == {"NotificationRequested": {"DispatchNotification"}}

    def test_dispatch_is_registered(self):
        assert DispatchNotification in HANDLERS


class TestEventRegistry:
    def test_subclasses_register_by_name(self):
        assert Event._registry["NotificationRequested"] is NotificationRequested

    def test_delivery_id_is_not_serialized(self):
        event = make_notification()
        event.attach_delivery("d1")

        assert event.delivery_id == "d1"
        assert "delivery_id" not in event.model_dump()
        assert "_delivery_id" not in event.model_dump()
