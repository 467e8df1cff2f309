from abc import abstractmethod
from collections.abc import AsyncIterator
from typing import Protocol

from aidportal.domain.aid.model.value import Attachment
from aidportal.domain.auth.model.value import UserId
from aidportal.domain.shared.port import Port


class AttachmentStorage(Port, Protocol):
    """Stores uploaded files. Failures raise StorageUnavailableError."""

    @abstractmethod
    async def save(self, filename: str, content: bytes, *, owner_id: UserId) -> Attachment:
        """Persist content for its uploader and return the attachment (with opaque locator)."""
        ...

    @abstractmethod
    async def owner_of(self, locator: str) -> UserId | None:
        """Uploader of a stored file, or None if the locator is unknown."""
        ...

    @abstractmethod
    async def open(self, locator: str) -> AsyncIterator[bytes]:
        """Stream a stored file. Raises NotFoundError for unknown locators."""
        ...

    @abstractmethod
    async def delete(self, locator: str) -> None:
        """Remove a stored file; unknown locators are ignored."""
        ...
