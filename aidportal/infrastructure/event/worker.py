"""Worker and WorkerPool for pull-based event processing."""

import asyncio
import logging
from typing import Any

from dishka import AsyncContainer

from aidportal.domain.auth.model.identity import Identity, System
from aidportal.domain.shared.event import (
    EventHandler,
    WorkerConfig,
    WorkerState,
    WorkerStatus,
)
from aidportal.domain.shared.outbox import Outbox
from aidportal.util.di.scope import Scope

logger = logging.getLogger(__name__)


class Worker:
    """Pull-based event worker that delegates to an EventHandler.

    Each poll runs in its own UOW scope: the claim, the handler's work and
    the delivery bookkeeping commit together when the scope exits. The
    handler class name is the consumer group, so every handler gets its own
    delivery row per event.

    Configuration is read from the handler's class variables:
        __event_type__: Event type to claim
        __batch_size__: Max events per batch
        __poll_interval__: Seconds between polls when idle
        __max_retries__: Attempts before a delivery is marked failed
        __claim_timeout__: Seconds before a claim is considered stale
    """

    def __init__(self, handler_type: type[EventHandler[Any]]) -> None:
        self._handler_type = handler_type
        self._config = WorkerConfig(
            name=handler_type.__name__,
            event_types=(handler_type.__event_type__,),
            batch_size=handler_type.__batch_size__,
            poll_interval=handler_type.__poll_interval__,
            max_retries=handler_type.__max_retries__,
            claim_timeout=handler_type.__claim_timeout__,
        )
        self._state = WorkerState(config=self._config)
        self._shutdown = False
        self._task: asyncio.Task | None = None
        self._container: AsyncContainer | None = None

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def handler_type(self) -> type[EventHandler[Any]]:
        return self._handler_type

    @property
    def config(self) -> WorkerConfig:
        return self._config

    @property
    def state(self) -> WorkerState:
        return self._state

    def set_container(self, container: AsyncContainer) -> None:
        self._container = container

    def start(self) -> asyncio.Task:
        """Start the worker in a background task."""
        if self._container is None:
            raise RuntimeError("Container not set. Call set_container() first.")

        self._shutdown = False
        self._task = asyncio.create_task(self._run(), name=f"worker-{self.name}")
        logger.info("Worker '%s' started", self.name)
        return self._task

    def stop(self) -> None:
        """Signal the worker to stop after its current batch."""
        self._shutdown = True
        self._state.status = WorkerStatus.STOPPING
        logger.info("Worker '%s' stopping...", self.name)

    async def _run(self) -> None:
        try:
            while not self._shutdown:
                try:
                    had_events = await self.poll_once()
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    # Claim or commit failed (database down); back off and retry
                    logger.exception("Worker '%s' poll failed: %s", self.name, e)
                    self._state.error = e
                    had_events = False
                if not had_events:
                    await asyncio.sleep(self._config.poll_interval)
        except asyncio.CancelledError:
            logger.info("Worker '%s' cancelled", self.name)
            raise
        finally:
            logger.info("Worker '%s' stopped", self.name)

    async def poll_once(self) -> bool:
        """Execute one poll cycle: claim, process, mark.

        Returns:
            True if events were claimed, False if idle.
        """
        if self._container is None:
            raise RuntimeError("Container not set")

        self._state.status = WorkerStatus.CLAIMING

        async with self._container(scope=Scope.UOW, context={Identity: System()}) as scope:
            outbox = await scope.get(Outbox)

            result = await outbox.claim(
                event_types=list(self._config.event_types),
                limit=self._config.batch_size,
                consumer_group=self.name,
            )
            if not result:
                self._state.status = WorkerStatus.IDLE
                return False

            self._state.status = WorkerStatus.PROCESSING
            self._state.current_batch = result.events
            self._state.last_claim_at = result.claimed_at

            try:
                handler = await scope.get(self._handler_type)
                if self._config.batch_size > 1:
                    await handler.handle_batch(result.events)
                else:
                    await handler.handle(result.events[0])

                for event in result.events:
                    await outbox.mark_delivered(event.delivery_id)
                self._state.processed_count += len(result.events)

            except Exception as e:
                self._state.failed_count += len(result.events)
                self._state.error = e
                logger.error("Worker '%s' batch failed: %s", self.name, e)
                for event in result.events:
                    await outbox.mark_failed_with_retry(
                        event.delivery_id,
                        str(e),
                        max_retries=self._config.max_retries,
                    )

            finally:
                self._state.current_batch = []
                self._state.status = WorkerStatus.IDLE

        return True


class WorkerPool:
    """Manages workers and the periodic stale-claim cleanup.

    Usage:
        pool = WorkerPool(container)
        pool.register(DispatchNotification)

        async with pool:
            ...  # workers are running
    """

    def __init__(
        self,
        container: AsyncContainer | None = None,
        stale_claim_interval: float = 60.0,
    ) -> None:
        self._container = container
        self._workers: list[Worker] = []
        self._stale_claim_interval = stale_claim_interval
        self._stale_claim_task: asyncio.Task | None = None
        self._shutdown = False

    def set_container(self, container: AsyncContainer) -> None:
        self._container = container
        for worker in self._workers:
            worker.set_container(container)

    @property
    def workers(self) -> list[Worker]:
        return self._workers

    def register(self, handler_type: type[EventHandler[Any]]) -> Worker:
        """Register an EventHandler type and create a Worker for it."""
        worker = Worker(handler_type)
        if self._container is not None:
            worker.set_container(self._container)
        self._workers.append(worker)
        logger.debug("Registered handler '%s' as worker", handler_type.__name__)
        return worker

    def get_worker(self, name: str) -> Worker | None:
        for worker in self._workers:
            if worker.name == name:
                return worker
        return None

    async def start(self) -> None:
        if self._container is None:
            raise RuntimeError("Container not set. Call set_container() first.")

        self._shutdown = False
        for worker in self._workers:
            worker.set_container(self._container)
            worker.start()

        if self._stale_claim_interval > 0:
            self._stale_claim_task = asyncio.create_task(
                self._run_stale_claim_cleanup(), name="stale-claim-cleanup"
            )

        logger.info("WorkerPool started with %d workers", len(self._workers))

    async def stop(self, timeout: float = 30.0) -> None:
        """Stop all workers, waiting up to `timeout` seconds for in-flight batches."""
        self._shutdown = True

        for worker in self._workers:
            worker.stop()

        if self._stale_claim_task and not self._stale_claim_task.done():
            self._stale_claim_task.cancel()
            try:
                await self._stale_claim_task
            except asyncio.CancelledError:
                pass

        tasks = [w._task for w in self._workers if w._task and not w._task.done()]
        if tasks:
            _, pending = await asyncio.wait(tasks, timeout=timeout)
            for task in pending:
                task.cancel()

        logger.info("WorkerPool stopped")

    async def __aenter__(self) -> "WorkerPool":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.stop()

    async def _run_stale_claim_cleanup(self) -> None:
        """Periodically reset claims left behind by crashed workers."""
        while not self._shutdown:
            try:
                await asyncio.sleep(self._stale_claim_interval)
                if self._shutdown or self._container is None or not self._workers:
                    break

                max_timeout = max(w.config.claim_timeout for w in self._workers)
                async with self._container(scope=Scope.UOW, context={Identity: System()}) as scope:
                    outbox = await scope.get(Outbox)
                    await outbox.reset_stale_claims(max_timeout)

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Stale claim cleanup failed: %s", e)
