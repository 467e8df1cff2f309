from typing import Any

from aidportal.domain.aid.model.value import TemplateKind
from aidportal.domain.auth.model.value import UserId
from aidportal.domain.shared.event import Event


class NotificationRequested(Event):
    """A lifecycle transition asked for a notification to be sent."""

    recipient_id: UserId
    request_id: str
    template_kind: TemplateKind
    context: dict[str, Any] = {}
