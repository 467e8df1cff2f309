"""SQLAlchemy adapter implementing EventRepository."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from aidportal.domain.shared.event import ClaimResult, Event, EventId
from aidportal.domain.shared.port.event_repository import EventRepository
from aidportal.infrastructure.persistence.tables import deliveries_table, events_table

logger = logging.getLogger(__name__)


class SQLAlchemyEventRepository(EventRepository):
    """SQLAlchemy-backed event repository.

    Events are stored in an append-only log. Delivery tracking uses a
    separate deliveries table with one row per (event, consumer_group) pair.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save_with_deliveries(self, event: Event, consumer_groups: set[str]) -> None:
        now = datetime.now(UTC)

        await self._session.execute(
            insert(events_table).values(
                id=str(event.id),
                event_type=type(event).__name__,
                payload=event.model_dump(mode="json"),
                created_at=now,
            )
        )

        for group in sorted(consumer_groups):
            await self._session.execute(
                insert(deliveries_table).values(
                    id=str(uuid4()),
                    event_id=str(event.id),
                    consumer_group=group,
                    status="pending",
                    retry_count=0,
                    updated_at=now,
                )
            )

    async def get(self, event_id: EventId) -> Event | None:
        stmt = select(events_table.c.event_type, events_table.c.payload).where(
            events_table.c.id == str(event_id)
        )
        result = await self._session.execute(stmt)
        row = result.first()
        if row is None:
            return None

        event_type, payload = row
        return self._deserialize(event_type, payload)

    async def claim_delivery(
        self,
        consumer_group: str,
        event_types: list[str],
        limit: int = 1,
    ) -> ClaimResult:
        """Claim pending deliveries for a specific consumer group.

        Uses FOR UPDATE SKIP LOCKED on PostgreSQL; on SQLite the lock clause
        is dropped and the single writer connection serializes claims.
        """
        now = datetime.now(UTC)

        stmt = (
            select(
                deliveries_table.c.id,
                events_table.c.event_type,
                events_table.c.payload,
            )
            .join(events_table, deliveries_table.c.event_id == events_table.c.id)
            .where(
                deliveries_table.c.consumer_group == consumer_group,
                deliveries_table.c.status == "pending",
                events_table.c.event_type.in_(event_types),
            )
            .order_by(events_table.c.created_at.asc())
            .limit(limit)
            .with_for_update(skip_locked=True, of=deliveries_table)
        )
        result = await self._session.execute(stmt)
        rows = result.fetchall()

        if not rows:
            return ClaimResult(events=[], claimed_at=now)

        await self._session.execute(
            update(deliveries_table)
            .where(deliveries_table.c.id.in_([row[0] for row in rows]))
            .values(status="claimed", claimed_at=now, updated_at=now)
        )

        events: list[Event] = []
        for delivery_id, event_type, payload in rows:
            event = self._deserialize(event_type, payload)
            if event is None:
                await self.mark_delivery_status(
                    delivery_id, status="failed", error=f"Undecodable event '{event_type}'"
                )
                continue
            event.attach_delivery(delivery_id)
            events.append(event)

        return ClaimResult(events=events, claimed_at=now)

    async def mark_delivery_status(
        self,
        delivery_id: str,
        status: str,
        error: str | None = None,
    ) -> None:
        now = datetime.now(UTC)
        values: dict[str, Any] = {"status": status, "updated_at": now}
        if status == "delivered":
            values["delivered_at"] = now
        if error is not None:
            values["delivery_error"] = error

        await self._session.execute(
            update(deliveries_table).where(deliveries_table.c.id == delivery_id).values(**values)
        )

    async def reset_stale_deliveries(self, timeout_seconds: float) -> int:
        cutoff = datetime.now(UTC) - timedelta(seconds=timeout_seconds)

        result = await self._session.execute(
            update(deliveries_table)
            .where(
                deliveries_table.c.status == "claimed",
                deliveries_table.c.claimed_at < cutoff,
            )
            .values(status="pending", claimed_at=None, updated_at=datetime.now(UTC))
        )
        count = result.rowcount
        if count > 0:
            logger.info("Reset %d stale deliveries (older than %ss)", count, timeout_seconds)
        return count

    async def mark_failed_with_retry(
        self,
        delivery_id: str,
        error: str,
        max_retries: int,
    ) -> None:
        now = datetime.now(UTC)

        result = await self._session.execute(
            select(deliveries_table.c.retry_count).where(deliveries_table.c.id == delivery_id)
        )
        row = result.first()
        if row is None:
            logger.warning("Delivery %s not found for mark_failed_with_retry", delivery_id)
            return

        retry_count = (row[0] or 0) + 1
        if retry_count >= max_retries:
            values: dict[str, Any] = {
                "status": "failed",
                "delivery_error": error,
                "retry_count": retry_count,
                "updated_at": now,
                "delivered_at": now,
            }
        else:
            values = {
                "status": "pending",
                "delivery_error": error,
                "retry_count": retry_count,
                "claimed_at": None,
                "updated_at": now,
            }

        await self._session.execute(
            update(deliveries_table).where(deliveries_table.c.id == delivery_id).values(**values)
        )

    def _deserialize(self, event_type: str, payload: dict | str) -> Event | None:
        event_cls = Event._registry.get(event_type)
        if event_cls is None:
            logger.warning("Unknown event type '%s' - skipping", event_type)
            return None

        try:
            if isinstance(payload, str):
                return event_cls.model_validate_json(payload)
            return event_cls.model_validate(payload)
        except PydanticValidationError as e:
            logger.error("Failed to deserialize event type '%s': %s", event_type, e)
            return None
