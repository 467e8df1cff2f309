"""Notification delivery adapters.

Import modules directly:
    from aidportal.infrastructure.notification.di import NotificationProvider
"""

__all__: list[str] = []
