from typing import Any
from uuid import UUID

from aidportal.domain.auth.model.role import Role
from aidportal.domain.auth.model.user import User
from aidportal.domain.auth.model.value import UserId


def row_to_user(row: dict[str, Any]) -> User:
    """Convert a database row to a User model."""
    return User(
        id=UserId(UUID(row["id"])),
        name=row["name"],
        email=row["email"],
        role=Role[row["role"]],
        department=row.get("department"),
        password_hash=row["password_hash"],
        reset_requested=bool(row["reset_requested"]),
        created_at=row["created_at"],
        updated_at=row.get("updated_at"),
    )


def user_to_dict(user: User) -> dict[str, Any]:
    """Convert a User model to a database row dict."""
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role.name,
        "department": user.department,
        "password_hash": user.password_hash,
        "reset_requested": user.reset_requested,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }
