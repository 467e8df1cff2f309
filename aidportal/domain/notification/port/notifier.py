from abc import abstractmethod
from typing import Any, Protocol

from aidportal.domain.aid.model.value import TemplateKind
from aidportal.domain.notification.model.value import Recipient
from aidportal.domain.shared.port import Port


class Notifier(Port, Protocol):
    """Delivers one notification. Failures raise DispatchError."""

    @abstractmethod
    async def notify(
        self,
        recipient: Recipient,
        template_kind: TemplateKind,
        context: dict[str, Any],
    ) -> None: ...
