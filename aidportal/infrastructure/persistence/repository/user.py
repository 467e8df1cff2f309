"""SQL repository implementation for the auth domain."""

from __future__ import annotations

from typing import List

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from aidportal.domain.auth.model.user import User, normalize_email
from aidportal.domain.auth.model.value import UserId
from aidportal.domain.auth.port.repository import UserRepository
from aidportal.infrastructure.persistence.mappers.user import row_to_user, user_to_dict
from aidportal.infrastructure.persistence.tables import users_table


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: UserId) -> User | None:
        stmt = select(users_table).where(users_table.c.id == str(user_id))
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(users_table).where(users_table.c.email == normalize_email(email))
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def list(self) -> List[User]:
        stmt = select(users_table).order_by(users_table.c.name.asc())
        result = await self.session.execute(stmt)
        return [row_to_user(dict(r)) for r in result.mappings().all()]

    async def save(self, user: User) -> None:
        user_dict = user_to_dict(user)
        existing = await self.get(user.id)

        if existing:
            stmt = update(users_table).where(users_table.c.id == str(user.id)).values(**user_dict)
        else:
            stmt = insert(users_table).values(**user_dict)

        await self.session.execute(stmt)
        await self.session.flush()
