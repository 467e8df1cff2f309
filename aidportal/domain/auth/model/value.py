"""Value objects for the auth domain."""

from uuid import UUID, uuid4

from pydantic import RootModel


class UserId(RootModel[UUID]):
    """Unique identifier for a User."""

    @classmethod
    def generate(cls) -> "UserId":
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.root)

    def __hash__(self) -> int:
        return hash(self.root)


ADMIN_USER_ID = UserId(UUID("00000000-0000-0000-0000-000000000001"))
"""Well-known user ID for the shared administrator session."""
