"""
Core value types: Role, Account, Identity.

Roles are flat: holding ADMIN does not imply READ or WRITE. The seeded
administrator gets all three roles explicitly for that reason.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, List

__all__ = ["Role", "Account", "Identity", "VALID_ROLE_NAMES", "sorted_role_names"]


class Role(str, Enum):
    """Closed set of permission tags."""

    ADMIN = "ADMIN"
    READ = "READ"
    WRITE = "WRITE"


VALID_ROLE_NAMES: List[str] = [role.value for role in Role]


def sorted_role_names(roles: Iterable[Role]) -> List[str]:
    """Stable, JSON-friendly rendering of a role set."""
    return sorted(role.value for role in roles)


@dataclass(frozen=True)
class Account:
    """Stored directory record. Replaced wholesale on update, never mutated."""

    username: str
    password_hash: str
    roles: FrozenSet[Role]

    def __repr__(self) -> str:
        # keep the digest out of logs and tracebacks
        return f"Account(username={self.username!r}, roles={sorted_role_names(self.roles)})"


@dataclass(frozen=True)
class Identity:
    """Result of a successful authentication. Holds no reference to the hash."""

    username: str
    roles: FrozenSet[Role]

    def has_role(self, role: Role) -> bool:
        return role in self.roles
