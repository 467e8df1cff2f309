"""Repository ports for the auth domain."""

from abc import abstractmethod
from typing import Protocol

from aidportal.domain.auth.model.user import User
from aidportal.domain.auth.model.value import UserId
from aidportal.domain.shared.port import Port


class UserRepository(Port, Protocol):
    """Repository for User aggregate persistence."""

    @abstractmethod
    async def get(self, user_id: UserId) -> User | None:
        """Get a user by ID."""
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Get a user by (normalized) email."""
        ...

    @abstractmethod
    async def list(self) -> list[User]:
        """List all users ordered by name."""
        ...

    @abstractmethod
    async def save(self, user: User) -> None:
        """Save a user (create or update)."""
        ...
