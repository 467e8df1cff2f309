"""SMTP notifier."""

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Any

from aidportal.config import NotificationConfig
from aidportal.domain.aid.model.value import TemplateKind
from aidportal.domain.notification.model.template import RenderedMessage, render
from aidportal.domain.notification.model.value import Recipient
from aidportal.domain.notification.port.notifier import Notifier
from aidportal.domain.shared.error import DispatchError

logger = logging.getLogger(__name__)


class SmtpNotifier(Notifier):
    """Sends one message to the requester with the administrators in copy."""

    def __init__(self, config: NotificationConfig) -> None:
        self._config = config

    async def notify(
        self,
        recipient: Recipient,
        template_kind: TemplateKind,
        context: dict[str, Any],
    ) -> None:
        message = render(template_kind, context)
        try:
            await asyncio.to_thread(self._send, recipient, message)
        except (smtplib.SMTPException, OSError) as e:
            raise DispatchError(f"SMTP delivery to {recipient.email} failed: {e}") from e
        logger.info("Email sent: to=%s subject='%s'", recipient.email, message.subject)

    def _build(self, recipient: Recipient, message: RenderedMessage) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = message.subject
        msg["From"] = self._config.sender
        msg["To"] = f"{recipient.name} <{recipient.email}>" if recipient.name else recipient.email
        cc = [a for a in self._config.admin_recipients if a.lower() != recipient.email.lower()]
        if cc:
            msg["Cc"] = ", ".join(cc)
        msg.set_content(message.body)
        return msg

    def _send(self, recipient: Recipient, message: RenderedMessage) -> None:
        smtp_config = self._config.smtp
        msg = self._build(recipient, message)
        with smtplib.SMTP(smtp_config.host, smtp_config.port, timeout=smtp_config.timeout) as smtp:
            if smtp_config.use_tls:
                smtp.starttls()
            if smtp_config.username and smtp_config.password:
                smtp.login(smtp_config.username, smtp_config.password)
            smtp.send_message(msg)
