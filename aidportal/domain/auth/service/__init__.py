from .auth import AuthService, Session
from .token import TokenService

__all__ = ["AuthService", "Session", "TokenService"]
