"""Domain events, event handlers, and worker bookkeeping types."""

from abc import ABCMeta
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import (
    Any,
    ClassVar,
    Generic,
    Iterator,
    NewType,
    TypeVar,
    dataclass_transform,
    get_args,
    get_origin,
)
from uuid import UUID

from pydantic import Field, PrivateAttr

from aidportal.domain.shared.model.entity import Entity

EventId = NewType("EventId", UUID)

E = TypeVar("E", bound="Event")


def _utc_now() -> datetime:
    return datetime.now(UTC)


class Event(Entity):
    """Base class for domain events.

    Subclasses are automatically registered by name in Event._registry so the
    event repository can deserialize stored payloads.
    """

    id: EventId
    created_at: datetime = Field(default_factory=_utc_now)

    # Set by the event repository when the event was claimed through a delivery row
    _delivery_id: str | None = PrivateAttr(default=None)

    _registry: ClassVar[dict[str, type["Event"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._registry[cls.__name__] = cls

    @property
    def delivery_id(self) -> str | None:
        return self._delivery_id

    def attach_delivery(self, delivery_id: str) -> None:
        self._delivery_id = delivery_id


# --- Worker bookkeeping ---


@dataclass(frozen=True)
class WorkerConfig:
    """Configuration for a single worker instance.

    Attributes:
        name: Unique worker identifier (also the consumer group).
        event_types: Event types to claim.
        batch_size: Max events per batch (default: 1).
        poll_interval: Seconds between polls when idle (default: 0.5).
        max_retries: Attempts before a delivery is marked failed (default: 1).
        claim_timeout: Seconds before a claim is considered stale (default: 300.0).
    """

    name: str
    event_types: tuple[type["Event"], ...]
    batch_size: int = 1
    poll_interval: float = 0.5
    max_retries: int = 1
    claim_timeout: float = 300.0

    def __post_init__(self) -> None:
        if not self.event_types:
            raise ValueError("event_types must not be empty")
        if self.batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be > 0")
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        if self.claim_timeout <= 0:
            raise ValueError("claim_timeout must be > 0")


class WorkerStatus(Enum):
    """Status of a running worker."""

    IDLE = "idle"
    CLAIMING = "claiming"
    PROCESSING = "processing"
    STOPPING = "stopping"


@dataclass
class WorkerState:
    """Runtime state for a running worker (not persisted)."""

    config: WorkerConfig
    status: WorkerStatus = WorkerStatus.IDLE
    current_batch: list["Event"] = field(default_factory=list)
    last_claim_at: datetime | None = None
    processed_count: int = 0
    failed_count: int = 0
    error: Exception | None = None


@dataclass(frozen=True)
class ClaimResult:
    """Result of a claim operation.

    Attributes:
        events: Claimed events, each carrying its delivery id.
        claimed_at: Timestamp of claim.
    """

    events: list["Event"]
    claimed_at: datetime

    def __bool__(self) -> bool:
        return len(self.events) > 0

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator["Event"]:
        return iter(self.events)


# --- EventHandler ---


def _extract_event_type(cls: type) -> type["Event"] | None:
    """Extract the event type E from EventHandler[E] in class bases."""
    for base in getattr(cls, "__orig_bases__", []):
        origin = get_origin(base)
        origin_name = getattr(origin, "__name__", None)
        if origin is not None and origin_name == "EventHandler":
            args = get_args(base)
            if args and isinstance(args[0], type) and issubclass(args[0], Event):
                return args[0]
    return None


@dataclass_transform()
class _EventHandlerMeta(ABCMeta):
    """Metaclass that applies @dataclass and extracts __event_type__ from EventHandler[E]."""

    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any]) -> type:
        cls = super().__new__(mcs, name, bases, namespace)
        if any(isinstance(b, mcs) for b in bases):
            cls = dataclass(cls)
            event_type = _extract_event_type(cls)
            if event_type is not None:
                cls.__event_type__ = event_type
        return cls


class EventHandler(Generic[E], metaclass=_EventHandlerMeta):
    """Base class for pull-based event handlers.

    Workers claim events from the outbox and delegate to handlers for
    processing. Subclasses are automatically dataclasses with DI-injected
    dependencies; the handled event type comes from the generic parameter.

    Configuration is via class variables:
        __batch_size__: Max events to claim at once (default: 1)
        __poll_interval__: Seconds between polls when idle (default: 0.5)
        __max_retries__: Attempts before marking a delivery failed (default: 1)
        __claim_timeout__: Seconds before claim considered stale (default: 300.0)

    Example:
        class DispatchNotification(EventHandler[NotificationRequested]):
            notifier: Notifier

            async def handle(self, event: NotificationRequested) -> None:
                await self.notifier.notify(...)
    """

    __event_type__: ClassVar[type[Event]]
    __batch_size__: ClassVar[int] = 1
    __poll_interval__: ClassVar[float] = 0.5
    __max_retries__: ClassVar[int] = 1
    __claim_timeout__: ClassVar[float] = 300.0

    async def handle(self, event: E) -> None:
        """Handle a single event. Override for single-event processing."""
        raise NotImplementedError(
            f"{type(self).__name__} must implement handle() or handle_batch()"
        )

    async def handle_batch(self, events: list[E]) -> None:
        """Handle a batch of events. Default implementation loops over handle()."""
        for event in events:
            await self.handle(event)
