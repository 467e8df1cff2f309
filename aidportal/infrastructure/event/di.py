"""Dependency injection provider for the event system."""

import logging
from typing import Any, NewType

from dishka import AsyncContainer, provide

from aidportal.config import Config
from aidportal.domain.notification.handler import DispatchNotification
from aidportal.domain.shared.event import EventHandler
from aidportal.domain.shared.model.subscription_registry import SubscriptionRegistry
from aidportal.domain.shared.outbox import Outbox
from aidportal.domain.shared.port.event_repository import EventRepository
from aidportal.infrastructure.event.worker import WorkerPool
from aidportal.util.di.base import Provider
from aidportal.util.di.scope import Scope

logger = logging.getLogger(__name__)


HandlerTypes = NewType("HandlerTypes", list[type[EventHandler[Any]]])

# All event handlers for WorkerPool registration
HANDLERS: HandlerTypes = HandlerTypes(
    [
        DispatchNotification,
    ]
)


def build_subscription_registry(handlers: HandlerTypes) -> SubscriptionRegistry:
    """Map each handler's __event_type__.__name__ to the handler's __name__."""
    registry: dict[str, set[str]] = {}
    for handler in handlers:
        registry.setdefault(handler.__event_type__.__name__, set()).add(handler.__name__)
    return SubscriptionRegistry(registry)


class EventProvider(Provider):
    """Provides event system components.

    Handlers and Outbox are UOW-scoped (fresh per unit of work).
    WorkerPool and SubscriptionRegistry are APP-scoped singletons.
    """

    @provide(scope=Scope.UOW)
    def get_outbox(self, repo: EventRepository, registry: SubscriptionRegistry) -> Outbox:
        return Outbox(repo, registry)

    for _handler_type in HANDLERS:
        locals()[_handler_type.__name__] = provide(_handler_type, scope=Scope.UOW)

    @provide(scope=Scope.APP)
    def get_handler_types(self) -> HandlerTypes:
        return HANDLERS

    @provide(scope=Scope.APP)
    def get_subscription_registry(self, handler_types: HandlerTypes) -> SubscriptionRegistry:
        registry = build_subscription_registry(handler_types)
        logger.info(
            "Built subscription registry: %d event types, %d consumer groups",
            len(registry),
            sum(len(v) for v in registry.values()),
        )
        return registry

    @provide(scope=Scope.APP)
    def get_worker_pool(
        self,
        container: AsyncContainer,
        handler_types: HandlerTypes,
        config: Config,
    ) -> WorkerPool:
        pool = WorkerPool(
            container=container,
            stale_claim_interval=config.worker.stale_claim_interval,
        )
        for handler_type in handler_types:
            pool.register(handler_type)

        logger.info("WorkerPool created with %d workers", len(pool.workers))
        return pool
