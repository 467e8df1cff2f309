"""Startup validation for handler authorization declarations."""

import logging

from aidportal.domain.shared.authorization.gate import Gate
from aidportal.domain.shared.command import CommandHandler
from aidportal.domain.shared.error import ConfigurationError
from aidportal.domain.shared.query import QueryHandler

logger = logging.getLogger(__name__)


def _check_handler_class(handler: type) -> None:
    """Raise ConfigurationError if the handler has no __auth__ gate."""
    if not isinstance(getattr(handler, "__auth__", None), Gate):
        raise ConfigurationError(f"{handler.__name__} has no __auth__ declaration")


def validate_all_handlers() -> None:
    """Check every portal CommandHandler and QueryHandler declares an __auth__ gate.

    Only handlers defined under the aidportal package are scanned.

    Raises ConfigurationError listing all offending handlers.
    """
    handlers = [
        h
        for h in (*CommandHandler.__subclasses__(), *QueryHandler.__subclasses__())
        if h.__module__.startswith("aidportal.")
    ]
    violations: list[str] = []
    for handler in handlers:
        try:
            _check_handler_class(handler)
        except ConfigurationError as e:
            violations.append(e.message)

    if violations:
        raise ConfigurationError(
            f"Authorization validation failed for {len(violations)} handler(s):\n"
            + "\n".join(f"  - {v}" for v in violations)
        )

    logger.info("Authorization startup validation passed for %d handlers", len(handlers))
