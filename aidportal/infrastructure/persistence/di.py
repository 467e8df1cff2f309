from typing import AsyncIterable

from dishka import from_context, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from aidportal.config import Config
from aidportal.domain.aid.port.repository import AidRequestRepository
from aidportal.domain.aid.port.storage import AttachmentStorage
from aidportal.domain.auth.port.repository import UserRepository
from aidportal.domain.shared.port.event_repository import EventRepository
from aidportal.infrastructure.persistence.adapter.storage import LocalAttachmentStorage
from aidportal.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
)
from aidportal.infrastructure.persistence.repository.aid_request import (
    SQLAlchemyAidRequestRepository,
)
from aidportal.infrastructure.persistence.repository.event import SQLAlchemyEventRepository
from aidportal.infrastructure.persistence.repository.user import SQLAlchemyUserRepository
from aidportal.util.di.base import Provider
from aidportal.util.di.scope import Scope


class PersistenceProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def get_engine(self, config: Config) -> AsyncEngine:
        return create_db_engine(config.database)

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    # One session per unit of work; committed when the scope exits cleanly
    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        async with session_factory() as session:
            yield session
            await session.commit()

    user_repo = provide(SQLAlchemyUserRepository, scope=Scope.UOW, provides=UserRepository)
    request_repo = provide(
        SQLAlchemyAidRequestRepository, scope=Scope.UOW, provides=AidRequestRepository
    )
    event_repo = provide(SQLAlchemyEventRepository, scope=Scope.UOW, provides=EventRepository)

    @provide(scope=Scope.APP)
    def get_attachment_storage(self, config: Config) -> AttachmentStorage:
        return LocalAttachmentStorage(base_path=config.storage.path)
