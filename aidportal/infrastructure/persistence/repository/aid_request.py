from __future__ import annotations

from typing import List

from sqlalchemy import Select, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from aidportal.domain.aid.model.aggregate import AidRequest
from aidportal.domain.aid.model.value import AidRequestId, RequestStatus
from aidportal.domain.aid.port.repository import AidRequestRepository
from aidportal.domain.auth.model.value import UserId
from aidportal.domain.shared.error import ConcurrentModificationError
from aidportal.infrastructure.persistence.mappers.aid_request import (
    aid_request_to_dict,
    row_to_aid_request,
)
from aidportal.infrastructure.persistence.tables import aid_requests_table


class SQLAlchemyAidRequestRepository(AidRequestRepository):
    """SQL implementation of AidRequestRepository (SQLite or PostgreSQL).

    Remembers the row version of every request it reads or writes; saving a
    request whose row was changed by another unit of work in the meantime
    raises ConcurrentModificationError instead of overwriting it.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._versions: dict[str, int] = {}

    async def get(self, request_id: AidRequestId) -> AidRequest | None:
        stmt = select(aid_requests_table).where(aid_requests_table.c.id == str(request_id))
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return self._load(dict(row)) if row else None

    async def get_for_update(self, request_id: AidRequestId) -> AidRequest | None:
        # SQLite ignores FOR UPDATE; file databases take the write lock at BEGIN IMMEDIATE
        stmt = (
            select(aid_requests_table)
            .where(aid_requests_table.c.id == str(request_id))
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return self._load(dict(row)) if row else None

    async def list(
        self,
        *,
        status: RequestStatus | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> List[AidRequest]:
        stmt = select(aid_requests_table)
        return await self._fetch(stmt, status=status, limit=limit, offset=offset)

    async def list_by_owner(
        self,
        owner_id: UserId,
        *,
        status: RequestStatus | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> List[AidRequest]:
        stmt = select(aid_requests_table).where(aid_requests_table.c.owner_id == str(owner_id))
        return await self._fetch(stmt, status=status, limit=limit, offset=offset)

    async def save(self, request: AidRequest) -> None:
        row = aid_request_to_dict(request)
        key = str(request.id)
        expected = self._versions.get(key)

        if expected is None:
            stmt = select(aid_requests_table.c.version).where(aid_requests_table.c.id == key)
            current = (await self.session.execute(stmt)).scalar_one_or_none()
            if current is None:
                await self.session.execute(insert(aid_requests_table).values(**row, version=1))
                self._versions[key] = 1
                await self.session.flush()
                return
            expected = current

        result = await self.session.execute(
            update(aid_requests_table)
            .where(
                aid_requests_table.c.id == key,
                aid_requests_table.c.version == expected,
            )
            .values(**row, version=expected + 1)
        )
        if result.rowcount == 0:
            self._versions.pop(key, None)
            raise ConcurrentModificationError("Aid request", key)
        self._versions[key] = expected + 1
        await self.session.flush()

    async def delete(self, request_id: AidRequestId) -> None:
        stmt = delete(aid_requests_table).where(aid_requests_table.c.id == str(request_id))
        await self.session.execute(stmt)
        await self.session.flush()

    async def count_by_status(self) -> dict[RequestStatus, int]:
        stmt = select(aid_requests_table.c.status, func.count()).group_by(
            aid_requests_table.c.status
        )
        result = await self.session.execute(stmt)
        return {RequestStatus(status): count for status, count in result.all()}

    async def _fetch(
        self,
        stmt: Select,
        *,
        status: RequestStatus | None,
        limit: int | None,
        offset: int | None,
    ) -> List[AidRequest]:
        if status is not None:
            stmt = stmt.where(aid_requests_table.c.status == status.value)
        stmt = stmt.order_by(aid_requests_table.c.submission_date.desc())
        if offset is not None:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return [self._load(dict(r)) for r in result.mappings().all()]

    def _load(self, row: dict) -> AidRequest:
        self._versions[row["id"]] = row["version"]
        return row_to_aid_request(row)
