"""Concurrent writes to the same aid request on SQLite."""

import asyncio
from datetime import UTC, date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from aidportal.config import DatabaseConfig, PolicyConfig
from aidportal.domain.aid.model.aggregate import AidRequest
from aidportal.domain.aid.model.value import (
    AidRequestId,
    Attachment,
    Committee,
    Modality,
    RequestStatus,
)
from aidportal.domain.aid.service.aid_request import AidRequestService
from aidportal.domain.auth.model.user import User
from aidportal.domain.shared.error import ConcurrentModificationError
from aidportal.domain.shared.model.subscription_registry import SubscriptionRegistry
from aidportal.domain.shared.outbox import Outbox
from aidportal.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
)
from aidportal.infrastructure.persistence.repository.aid_request import (
    SQLAlchemyAidRequestRepository,
)
from aidportal.infrastructure.persistence.repository.event import SQLAlchemyEventRepository
from aidportal.infrastructure.persistence.repository.user import SQLAlchemyUserRepository
from aidportal.infrastructure.persistence.tables import events_table, metadata


async def seed_request(session) -> AidRequest:
    owner = User.create(name="Maria Silva", email="maria@hospital.org", password_hash="hash")
    await SQLAlchemyUserRepository(session).save(owner)
    request, _ = AidRequest.submit(
        owner_id=owner.id,
        requester_name=owner.name,
        job_role="Enfermeira",
        event_name="Congresso",
        event_date=date(2024, 6, 1),
        modality=Modality.I,
        registration_fee=Decimal("100"),
        documents=[
            Attachment(
                name="resumo.pdf",
                size_label="1KB",
                uploaded_at=datetime(2024, 1, 2, tzinfo=UTC),
                locator="1704153600000_00c0ffee_resumo.pdf",
            )
        ],
        now=datetime(2024, 1, 5, tzinfo=UTC),
    )
    await SQLAlchemyAidRequestRepository(session).save(request)
    return request


def make_service(session, request_repo: SQLAlchemyAidRequestRepository) -> AidRequestService:
    return AidRequestService(
        request_repo=request_repo,
        storage=AsyncMock(),
        outbox=Outbox(SQLAlchemyEventRepository(session), SubscriptionRegistry({})),
        policy=PolicyConfig(),
    )


class RivalApprovalRepository(SQLAlchemyAidRequestRepository):
    """Lets another unit of work record the scientific approval right after
    this repository's first locked read."""

    def __init__(self, session) -> None:
        super().__init__(session)
        self.rival_done = False

    async def get_for_update(self, request_id: AidRequestId) -> AidRequest | None:
        request = await super().get_for_update(request_id)
        if not self.rival_done:
            self.rival_done = True
            rival = SQLAlchemyAidRequestRepository(self.session)
            other = await rival.get_for_update(request_id)
            assert other is not None
            other.approve(Committee.SCIENTIFIC)
            await rival.save(other)
        return request


class TestOptimisticSave:
    @pytest.mark.asyncio
    async def test_stale_save_is_refused(self, sqlite_session):
        # Arrange: two units of work read the same version
        request = await seed_request(sqlite_session)
        first = SQLAlchemyAidRequestRepository(sqlite_session)
        second = SQLAlchemyAidRequestRepository(sqlite_session)
        a = await first.get_for_update(request.id)
        b = await second.get_for_update(request.id)
        assert a is not None and b is not None

        # Act
        a.approve(Committee.SCIENTIFIC)
        await first.save(a)
        b.approve(Committee.ADMINISTRATIVE)

        # Assert
        with pytest.raises(ConcurrentModificationError):
            await second.save(b)
        stored = await SQLAlchemyAidRequestRepository(sqlite_session).get(request.id)
        assert stored is not None
        assert stored.scientific_approved is True
        assert stored.admin_approved is False

    @pytest.mark.asyncio
    async def test_interleaved_approvals_end_approved(self, sqlite_session):
        # Arrange
        request = await seed_request(sqlite_session)
        repo = RivalApprovalRepository(sqlite_session)
        service = make_service(sqlite_session, repo)

        # Act: the scientific approval lands between our read and our save
        result = await service.approve(request.id, Committee.ADMINISTRATIVE)

        # Assert
        assert repo.rival_done
        assert result.status == RequestStatus.APPROVED
        stored = await SQLAlchemyAidRequestRepository(sqlite_session).get(request.id)
        assert stored is not None
        assert stored.status == RequestStatus.APPROVED
        assert stored.scientific_approved and stored.admin_approved
        appended = (
            await sqlite_session.execute(select(func.count()).select_from(events_table))
        ).scalar_one()
        assert appended == 1


@pytest_asyncio.fixture
async def file_engine(tmp_path):
    engine = create_db_engine(DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'aid.db'}"))
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    yield engine
    await engine.dispose()


class TestFileDatabase:
    @pytest.mark.asyncio
    async def test_committees_approving_at_once_both_count(self, file_engine):
        factory = create_session_factory(file_engine)
        async with factory() as session:
            request = await seed_request(session)
            await session.commit()

        async def approve(committee: Committee, delay: float) -> None:
            await asyncio.sleep(delay)
            async with factory() as session:
                service = make_service(session, SQLAlchemyAidRequestRepository(session))
                await service.approve(request.id, committee)
                # Hold the transaction open so the other approval has to wait
                await asyncio.sleep(0.05)
                await session.commit()

        await asyncio.gather(
            approve(Committee.SCIENTIFIC, 0),
            approve(Committee.ADMINISTRATIVE, 0.01),
        )

        async with factory() as session:
            stored = await SQLAlchemyAidRequestRepository(session).get(request.id)
        assert stored is not None
        assert stored.status == RequestStatus.APPROVED
        assert stored.scientific_approved and stored.admin_approved
