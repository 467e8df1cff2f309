"""User aggregate for the auth domain."""

from datetime import UTC, datetime

from aidportal.domain.auth.model.role import Role
from aidportal.domain.auth.model.value import UserId
from aidportal.domain.shared.model.aggregate import Aggregate


class User(Aggregate):
    """A portal account.

    Invariants:
    - `id` and `created_at` are immutable after creation
    - `email` is stored lower-cased (unique, case-insensitive)
    - `updated_at` is set on any modification
    - an account with `reset_requested` cannot log in until an
      administrator sets a new password
    """

    id: UserId
    name: str
    email: str
    role: Role = Role.EMPLOYEE
    department: str | None = None
    password_hash: str
    reset_requested: bool = False
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        name: str,
        email: str,
        password_hash: str,
        department: str | None = None,
        role: Role = Role.EMPLOYEE,
    ) -> "User":
        return cls(
            id=UserId.generate(),
            name=name.strip(),
            email=normalize_email(email),
            role=role,
            department=department,
            password_hash=password_hash,
            created_at=datetime.now(UTC),
        )

    def request_reset(self) -> None:
        """Flag the account for an administrator password reset."""
        self.reset_requested = True
        self.updated_at = datetime.now(UTC)

    def set_password(self, password_hash: str) -> None:
        """Replace the password hash and clear any pending reset."""
        self.password_hash = password_hash
        self.reset_requested = False
        self.updated_at = datetime.now(UTC)


def normalize_email(email: str) -> str:
    return email.strip().lower()
