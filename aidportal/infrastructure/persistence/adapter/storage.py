import asyncio
import secrets
import tempfile
import time
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID

from aidportal.domain.aid.model.value import Attachment, size_label
from aidportal.domain.aid.port.storage import AttachmentStorage
from aidportal.domain.aid.service.aid_request import clean_filename
from aidportal.domain.auth.model.value import UserId
from aidportal.domain.shared.error import NotFoundError, StorageUnavailableError

_CHUNK_SIZE = 64 * 1024


class LocalAttachmentStorage(AttachmentStorage):
    """Local filesystem implementation of AttachmentStorage.

    Locators have the form "<millis>_<token>_<clean name>" and map to a file
    directly under base_path. The uploader id is kept in a hidden
    ".<locator>.owner" file next to it.
    """

    def __init__(self, base_path: str) -> None:
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _safe_path(self, locator: str) -> Path:
        """Resolve locator within base_path, rejecting path traversal attempts."""
        safe_name = Path(locator).name
        if not safe_name or safe_name != locator or safe_name.startswith("."):
            raise NotFoundError(f"Attachment not found: {locator}")
        target = self.base_path / safe_name
        if not target.resolve().is_relative_to(self.base_path.resolve()):
            raise NotFoundError(f"Attachment not found: {locator}")
        return target

    async def save(self, filename: str, content: bytes, *, owner_id: UserId) -> Attachment:
        locator = f"{int(time.time() * 1000)}_{secrets.token_hex(4)}_{clean_filename(filename)}"
        target = self._safe_path(locator)
        try:
            await asyncio.to_thread(self._write, self._owner_path(target), str(owner_id).encode())
            await asyncio.to_thread(self._write, target, content)
        except OSError as e:
            raise StorageUnavailableError(f"Could not store attachment: {e}") from e

        return Attachment(
            name=filename,
            size_label=size_label(len(content)),
            uploaded_at=datetime.now(UTC),
            locator=locator,
        )

    async def owner_of(self, locator: str) -> UserId | None:
        try:
            target = self._safe_path(locator)
        except NotFoundError:
            return None
        owner_path = self._owner_path(target)
        if not target.is_file() or not owner_path.is_file():
            return None
        try:
            text = await asyncio.to_thread(owner_path.read_text)
        except OSError as e:
            raise StorageUnavailableError(f"Could not read attachment owner: {e}") from e
        return UserId(UUID(text.strip()))

    async def open(self, locator: str) -> AsyncIterator[bytes]:
        target = self._safe_path(locator)
        if not target.is_file():
            raise NotFoundError(f"Attachment not found: {locator}")

        async def _stream() -> AsyncIterator[bytes]:
            with open(target, "rb") as f:
                while chunk := await asyncio.to_thread(f.read, _CHUNK_SIZE):
                    yield chunk

        return _stream()

    async def delete(self, locator: str) -> None:
        try:
            target = self._safe_path(locator)
        except NotFoundError:
            return
        try:
            await asyncio.to_thread(target.unlink, missing_ok=True)
            await asyncio.to_thread(self._owner_path(target).unlink, missing_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"Could not delete attachment: {e}") from e

    def _owner_path(self, target: Path) -> Path:
        return target.with_name(f".{target.name}.owner")

    def _write(self, target: Path, content: bytes) -> None:
        # Atomic write: write to temp file then rename
        fd, tmp_path = tempfile.mkstemp(dir=self.base_path, prefix=".upload-")
        try:
            with open(fd, "wb") as f:
                f.write(content)
            Path(tmp_path).replace(target)
        except OSError:
            Path(tmp_path).unlink(missing_ok=True)
            raise
