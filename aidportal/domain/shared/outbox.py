"""Outbox - domain service for reliable event delivery."""

from aidportal.domain.shared.event import ClaimResult, Event
from aidportal.domain.shared.model.subscription_registry import SubscriptionRegistry
from aidportal.domain.shared.port.event_repository import EventRepository
from aidportal.domain.shared.service import Service


class Outbox(Service):
    """Domain service for reliable event delivery via the transactional outbox pattern.

    On append(), looks up the consumer groups subscribed to the event type and
    creates one delivery row per group in the same session as the state change
    that produced the event. Events with no subscribers are kept as audit-only.
    """

    _repo: EventRepository
    _registry: SubscriptionRegistry

    async def append(self, event: Event) -> None:
        """Add an event to the outbox for delivery."""
        consumer_groups = self._registry.get(type(event).__name__, set())
        await self._repo.save_with_deliveries(event, consumer_groups=consumer_groups)

    async def claim(
        self,
        event_types: list[type[Event]],
        limit: int,
        consumer_group: str,
    ) -> ClaimResult:
        """Claim pending deliveries for a specific consumer group."""
        return await self._repo.claim_delivery(
            consumer_group=consumer_group,
            event_types=[et.__name__ for et in event_types],
            limit=limit,
        )

    async def mark_delivered(self, delivery_id: str) -> None:
        """Mark a delivery as successfully delivered."""
        await self._repo.mark_delivery_status(delivery_id, status="delivered")

    async def mark_failed_with_retry(self, delivery_id: str, error: str, max_retries: int) -> None:
        """Mark a delivery as failed, resetting it to pending while retries remain."""
        await self._repo.mark_failed_with_retry(delivery_id, error=error, max_retries=max_retries)

    async def reset_stale_claims(self, timeout_seconds: float) -> int:
        """Reset deliveries that have been claimed for too long (crashed workers)."""
        return await self._repo.reset_stale_deliveries(timeout_seconds)
