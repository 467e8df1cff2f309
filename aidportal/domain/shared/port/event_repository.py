"""EventRepository port - pure CRUD for event persistence."""

from typing import Protocol

from aidportal.domain.shared.event import ClaimResult, Event, EventId


class EventRepository(Protocol):
    """Repository for domain events - pure data access.

    Events are stored in an append-only log. Delivery tracking is handled
    via a separate deliveries table, one row per (event, consumer_group) pair.
    """

    async def save_with_deliveries(self, event: Event, consumer_groups: set[str]) -> None:
        """Save event to the append-only log and create delivery rows.

        Args:
            event: The event to persist.
            consumer_groups: Consumer group names to create deliveries for.
                If empty, the event is saved without any delivery rows (audit-only).
        """
        ...

    async def get(self, event_id: EventId) -> Event | None:
        """Get an event by ID."""
        ...

    async def claim_delivery(
        self,
        consumer_group: str,
        event_types: list[str],
        limit: int = 1,
    ) -> ClaimResult:
        """Claim pending deliveries for a specific consumer group.

        Returns the claimed events, each carrying its delivery id.
        """
        ...

    async def mark_delivery_status(
        self,
        delivery_id: str,
        status: str,
        error: str | None = None,
    ) -> None:
        """Update a delivery's status (delivered, failed)."""
        ...

    async def reset_stale_deliveries(self, timeout_seconds: float) -> int:
        """Reset claimed deliveries older than timeout_seconds back to pending."""
        ...

    async def mark_failed_with_retry(
        self,
        delivery_id: str,
        error: str,
        max_retries: int,
    ) -> None:
        """Record a failed attempt.

        Resets to 'pending' while retry_count < max_retries, otherwise marks
        the delivery 'failed' permanently.
        """
        ...
