from __future__ import annotations

from abc import abstractmethod
from typing import List, Protocol

from aidportal.domain.aid.model.aggregate import AidRequest
from aidportal.domain.aid.model.value import AidRequestId, RequestStatus
from aidportal.domain.auth.model.value import UserId
from aidportal.domain.shared.port import Port


class AidRequestRepository(Port, Protocol):
    @abstractmethod
    async def get(self, request_id: AidRequestId) -> AidRequest | None: ...

    @abstractmethod
    async def get_for_update(self, request_id: AidRequestId) -> AidRequest | None:
        """Load the latest row and lock it for the rest of the unit of work."""
        ...

    @abstractmethod
    async def list(
        self,
        *,
        status: RequestStatus | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> List[AidRequest]:
        """List requests, newest submission first."""
        ...

    @abstractmethod
    async def list_by_owner(
        self,
        owner_id: UserId,
        *,
        status: RequestStatus | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> List[AidRequest]: ...

    @abstractmethod
    async def save(self, request: AidRequest) -> None:
        """Insert or update."""
        ...

    @abstractmethod
    async def delete(self, request_id: AidRequestId) -> None: ...

    @abstractmethod
    async def count_by_status(self) -> dict[RequestStatus, int]: ...
