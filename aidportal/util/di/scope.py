"""Custom Dishka scopes for the aid portal."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """Dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Application lifetime (singletons)
    - UOW: Unit of Work (HTTP requests and background event handling)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
