"""Auth domain models."""

from .identity import Anonymous, Identity, System
from .principal import Principal
from .role import Role
from .user import User
from .value import ADMIN_USER_ID, UserId

__all__ = [
    "ADMIN_USER_ID",
    "Anonymous",
    "Identity",
    "Principal",
    "Role",
    "System",
    "User",
    "UserId",
]
