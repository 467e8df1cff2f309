"""Log-only notifier for development and tests."""

import logging
from typing import Any

from aidportal.config import NotificationConfig
from aidportal.domain.aid.model.value import TemplateKind
from aidportal.domain.notification.model.template import render
from aidportal.domain.notification.model.value import Recipient
from aidportal.domain.notification.port.notifier import Notifier

logger = logging.getLogger(__name__)


class LoggingNotifier(Notifier):
    """Renders the message and writes it to the log instead of sending it."""

    def __init__(self, config: NotificationConfig) -> None:
        self._config = config

    async def notify(
        self,
        recipient: Recipient,
        template_kind: TemplateKind,
        context: dict[str, Any],
    ) -> None:
        message = render(template_kind, context)
        logger.info(
            "Email (log only): to=%s cc=%s subject='%s'",
            recipient.email,
            ",".join(self._config.admin_recipients),
            message.subject,
        )
        logger.debug("Email body:\n%s", message.body)
