"""
Access gate: allow/deny for an authenticated identity and a required role.

The role model is flat. An identity holding only ADMIN does not pass a READ
check; grant READ explicitly if it should.
"""

from rbac_directory.errors import AuthorizationError
from rbac_directory.models import Identity, Role


class AccessGate:
    def authorize(self, identity: Identity, required_role: Role) -> bool:
        return identity.has_role(required_role)

    def require(self, identity: Identity, required_role: Role) -> Identity:
        """
        Raises:
            AuthorizationError: If the identity lacks `required_role`.
        """
        if not self.authorize(identity, required_role):
            raise AuthorizationError(
                "Access denied",
                details={"required_role": required_role.value},
            )
        return identity
