"""DispatchNotification - delivers NotificationRequested events."""

import logging

from aidportal.domain.auth.port.repository import UserRepository
from aidportal.domain.notification.event.requested import NotificationRequested
from aidportal.domain.notification.model.value import Recipient
from aidportal.domain.notification.port.notifier import Notifier
from aidportal.domain.shared.error import DispatchError
from aidportal.domain.shared.event import EventHandler

logger = logging.getLogger(__name__)


class DispatchNotification(EventHandler[NotificationRequested]):
    """Sends the notification for a committed lifecycle transition.

    Delivery is attempted once. A DispatchError is logged and the delivery
    is still marked done; the transition that produced it is never affected.
    """

    __max_retries__ = 1

    user_repo: UserRepository
    notifier: Notifier

    async def handle(self, event: NotificationRequested) -> None:
        user = await self.user_repo.get(event.recipient_id)
        if user is None:
            logger.warning(
                "Dropping %s notification for request %s: user %s not found",
                event.template_kind.value,
                event.request_id,
                event.recipient_id,
            )
            return

        try:
            await self.notifier.notify(
                Recipient(name=user.name, email=user.email),
                event.template_kind,
                event.context,
            )
        except DispatchError as e:
            logger.error(
                "Failed to dispatch %s notification for request %s: %s",
                event.template_kind.value,
                event.request_id,
                e,
            )
            return

        logger.info(
            "Dispatched %s notification for request %s",
            event.template_kind.value,
            event.request_id,
        )
