"""Event infrastructure - worker and DI provider.

Import modules directly:
    from aidportal.infrastructure.event.di import EventProvider
    from aidportal.infrastructure.event.worker import Worker, WorkerPool
"""

__all__: list[str] = []
