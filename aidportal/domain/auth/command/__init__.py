"""Auth domain commands."""

from .login import (
    AdminLogin,
    AdminLoginHandler,
    Login,
    LoginHandler,
    Register,
    RegisterHandler,
    SessionIssued,
)
from .password import (
    RequestReset,
    RequestResetHandler,
    ResetRequested,
    SetPassword,
    SetPasswordHandler,
)

__all__ = [
    "AdminLogin",
    "AdminLoginHandler",
    "Login",
    "LoginHandler",
    "Register",
    "RegisterHandler",
    "RequestReset",
    "RequestResetHandler",
    "ResetRequested",
    "SessionIssued",
    "SetPassword",
    "SetPasswordHandler",
]
