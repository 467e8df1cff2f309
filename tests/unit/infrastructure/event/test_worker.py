"""Unit tests for Worker poll cycles and WorkerPool lifecycle."""

import asyncio
from datetime import UTC, datetime
from typing import ClassVar
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from aidportal.domain.shared.event import (
    ClaimResult,
    Event,
    EventHandler,
    EventId,
    WorkerConfig,
    WorkerStatus,
)
from aidportal.domain.shared.outbox import Outbox
from aidportal.infrastructure.event.worker import Worker, WorkerPool


class PingEvent(Event):
    """Test event for worker tests."""

    id: EventId
    data: str


class RecordingHandler(EventHandler[PingEvent]):
    """Test handler that tracks handle calls."""

    __poll_interval__: ClassVar[float] = 0.01

    processed_events: list[PingEvent]

    async def handle(self, event: PingEvent) -> None:
        self.processed_events.append(event)


class BatchHandler(EventHandler[PingEvent]):
    __batch_size__: ClassVar[int] = 10
    __max_retries__: ClassVar[int] = 3

    batches: list[list[PingEvent]]

    async def handle_batch(self, events: list[PingEvent]) -> None:
        self.batches.append(events)


class FailingHandler(EventHandler[PingEvent]):
    """Handler that always raises an error."""

    async def handle(self, event: PingEvent) -> None:
        raise RuntimeError("Processing failed")


def make_event(data: str, delivery_id: str) -> PingEvent:
    event = PingEvent(id=EventId(uuid4()), data=data)
    event.attach_delivery(delivery_id)
    return event


def make_mock_container(outbox: AsyncMock, handler: EventHandler | None = None):
    """Create a mock DI container whose UOW scope yields the outbox and handler."""

    async def get_dependency(cls):
        if cls == Outbox:
            return outbox
        return handler

    scope = AsyncMock()
    scope.get = AsyncMock(side_effect=get_dependency)

    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=scope)
    context.__aexit__ = AsyncMock(return_value=None)

    container = MagicMock()
    container.return_value = context
    return container


def make_outbox(*events: PingEvent) -> AsyncMock:
    outbox = AsyncMock(spec=Outbox)
    outbox.claim.return_value = ClaimResult(events=list(events), claimed_at=datetime.now(UTC))
    return outbox


class TestWorkerConfig:
    def test_config_is_read_from_handler(self):
        worker = Worker(BatchHandler)

        assert worker.name == "BatchHandler"
        assert worker.config.event_types == (PingEvent,)
        assert worker.config.batch_size == 10
        assert worker.config.max_retries == 3

    def test_invalid_config_is_refused(self):
        with pytest.raises(ValueError):
            WorkerConfig(name="x", event_types=())
        with pytest.raises(ValueError):
            WorkerConfig(name="x", event_types=(PingEvent,), batch_size=0)


class TestWorkerPoll:
    @pytest.mark.asyncio
    async def test_claims_processes_and_marks_delivered(self):
        # Arrange
        event = make_event("one", "delivery-1")
        outbox = make_outbox(event)
        handler = RecordingHandler(processed_events=[])
        worker = Worker(RecordingHandler)
        worker.set_container(make_mock_container(outbox, handler))

        # Act
        had_events = await worker.poll_once()

        # Assert
        assert had_events is True
        assert handler.processed_events == [event]
        outbox.claim.assert_awaited_once_with(
            event_types=[PingEvent], limit=1, consumer_group="RecordingHandler"
        )
        outbox.mark_delivered.assert_awaited_once_with("delivery-1")
        assert worker.state.processed_count == 1
        assert worker.state.status == WorkerStatus.IDLE

    @pytest.mark.asyncio
    async def test_returns_false_when_idle(self):
        outbox = make_outbox()
        handler = RecordingHandler(processed_events=[])
        worker = Worker(RecordingHandler)
        worker.set_container(make_mock_container(outbox, handler))

        assert await worker.poll_once() is False
        outbox.mark_delivered.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_batch_handler_gets_all_events(self):
        events = [make_event("a", "d-a"), make_event("b", "d-b")]
        outbox = make_outbox(*events)
        handler = BatchHandler(batches=[])
        worker = Worker(BatchHandler)
        worker.set_container(make_mock_container(outbox, handler))

        await worker.poll_once()

        assert handler.batches == [events]
        assert outbox.mark_delivered.await_count == 2

    @pytest.mark.asyncio
    async def test_handler_failure_marks_for_retry(self):
        outbox = make_outbox(make_event("boom", "delivery-9"))
        worker = Worker(FailingHandler)
        worker.set_container(make_mock_container(outbox, FailingHandler()))

        await worker.poll_once()

        outbox.mark_failed_with_retry.assert_awaited_once_with(
            "delivery-9", "Processing failed", max_retries=1
        )
        outbox.mark_delivered.assert_not_awaited()
        assert worker.state.failed_count == 1
        assert isinstance(worker.state.error, RuntimeError)

    @pytest.mark.asyncio
    async def test_poll_without_container_fails(self):
        worker = Worker(RecordingHandler)

        with pytest.raises(RuntimeError):
            await worker.poll_once()


class TestWorkerPool:
    def test_register_creates_named_workers(self):
        pool = WorkerPool(container=MagicMock())

        pool.register(RecordingHandler)
        pool.register(FailingHandler)

        assert [w.name for w in pool.workers] == ["RecordingHandler", "FailingHandler"]
        assert pool.get_worker("FailingHandler") is not None
        assert pool.get_worker("Missing") is None

    @pytest.mark.asyncio
    async def test_start_requires_container(self):
        pool = WorkerPool()
        pool.register(RecordingHandler)

        with pytest.raises(RuntimeError):
            await pool.start()

    @pytest.mark.asyncio
    async def test_pool_processes_until_stopped(self):
        event = make_event("one", "delivery-1")
        outbox = AsyncMock(spec=Outbox)
        outbox.claim.side_effect = [
            ClaimResult(events=[event], claimed_at=datetime.now(UTC)),
        ] + [ClaimResult(events=[], claimed_at=datetime.now(UTC))] * 1000
        handler = RecordingHandler(processed_events=[])
        pool = WorkerPool(container=make_mock_container(outbox, handler), stale_claim_interval=0)
        pool.register(RecordingHandler)

        async with pool:
            for _ in range(100):
                if handler.processed_events:
                    break
                await asyncio.sleep(0.01)

        assert handler.processed_events == [event]
        outbox.mark_delivered.assert_awaited_with("delivery-1")
