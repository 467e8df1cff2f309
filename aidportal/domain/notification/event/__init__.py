from .requested import NotificationRequested

__all__ = ["NotificationRequested"]
