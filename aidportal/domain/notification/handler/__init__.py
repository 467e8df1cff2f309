from .dispatch_notification import DispatchNotification

__all__ = ["DispatchNotification"]
