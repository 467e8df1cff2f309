"""Authorization wrapper shared by command and query handlers."""

import logging
from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Any

_auth_logger = logging.getLogger("aidportal.authz")

# Unbound async handler method: (self, msg) -> Coroutine -> Result
HandlerMethod = Callable[..., Coroutine[Any, Any, Any]]


def wrap_run_with_auth(original_run: HandlerMethod) -> HandlerMethod:
    """Wrap a handler's run() with __auth__ gate evaluation."""

    @wraps(original_run)
    async def auth_wrapped_run(self: Any, msg: Any) -> Any:
        from aidportal.domain.auth.model.principal import Principal
        from aidportal.domain.shared.authorization.gate import AtLeast, Gate, Public
        from aidportal.domain.shared.error import AuthorizationError, ConfigurationError

        auth_gate = getattr(type(self), "__auth__", None)

        if not isinstance(auth_gate, Gate):
            raise ConfigurationError(f"Handler {type(self).__name__} has no __auth__ declaration")

        if isinstance(auth_gate, Public):
            return await original_run(self, msg)

        if isinstance(auth_gate, AtLeast):
            principal = getattr(self, "principal", None)
            if not isinstance(principal, Principal):
                raise AuthorizationError("Authentication required", code="missing_token")

            _auth_logger.debug(
                "Auth check: handler=%s, required=%s, role=%s, user_id=%s",
                type(self).__name__,
                auth_gate.role,
                principal.role,
                principal.user_id,
            )

            if not principal.has_role(auth_gate.role):
                raise AuthorizationError(
                    f"Access denied: insufficient role for {type(self).__name__}",
                    code="access_denied",
                )

            return await original_run(self, msg)

        raise ConfigurationError(
            f"Handler {type(self).__name__} has unhandled __auth__ type: {type(auth_gate).__name__}"
        )

    return auth_wrapped_run
