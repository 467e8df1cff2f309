"""Role hierarchy for authorization."""

from enum import IntEnum


class Role(IntEnum):
    """Hierarchical roles with numeric ordering.

    Higher values inherit all permissions of lower values.
    """

    EMPLOYEE = 10
    ADMIN = 30
