"""Auth domain queries."""

from .get_current_user import GetCurrentUser, GetCurrentUserHandler, UserView
from .list_users import ListUsers, ListUsersHandler, UserList

__all__ = [
    "GetCurrentUser",
    "GetCurrentUserHandler",
    "ListUsers",
    "ListUsersHandler",
    "UserList",
    "UserView",
]
