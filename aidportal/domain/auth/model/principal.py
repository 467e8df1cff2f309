"""Principal - authenticated identity with a role, resolved per-request."""

from dataclasses import dataclass

from aidportal.domain.auth.model.identity import Identity
from aidportal.domain.auth.model.role import Role
from aidportal.domain.auth.model.value import UserId


@dataclass(frozen=True)
class Principal(Identity):
    """The authenticated identity of the current requester.

    Resolved per-request from the access token. Immutable after creation.
    """

    user_id: UserId
    role: Role

    def has_role(self, role: Role) -> bool:
        """Check the assigned role is >= the given role (hierarchy comparison)."""
        return self.role >= role

    @property
    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)
