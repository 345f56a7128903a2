"""
DirectoryService module for the RBAC Directory.

Responsibilities:
    - Create, delete and re-role accounts in the injected credential store
    - Enforce username uniqueness
    - Reject unknown role names and empty role sets
    - Hash passwords before they reach storage; plaintext never does

Design notes:
    - Every mutating call validates first and touches the store last, so a
      rejected request leaves no trace.
    - bcrypt is slow on purpose; hashing happens outside the store lock and
      the existence check is repeated inside it before the write.
    - `update_roles` copies the stored hash into the replacement record, so
      the account keeps authenticating with its original password.
"""

import logging
import re
from typing import Iterable, List, Optional, Protocol, Tuple, Union

from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import VALID_ROLE_NAMES, Account, Role, sorted_role_names
from ..storage.base import BaseStorage

log = logging.getLogger("rbac.directory")

RoleLike = Union[Role, str]

# HTTP Basic splits user-id and password at the first ":" and route paths split
# at "/", so usernames stay within a path- and header-safe alphabet
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9._@-]{1,64}$")

# bcrypt only consumes the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class Hasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, password: str, digest: str) -> bool: ...


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def parse_roles(roles: Optional[Iterable[RoleLike]]) -> frozenset:
    """
    Turn raw role names into a non-empty frozenset of Role.

    Raises:
        ValidationError: If no roles are given or any name is not a Role.
    """
    raw = list(roles) if roles is not None else []
    if not raw:
        raise ValidationError("At least one role is required")

    parsed = set()
    invalid = set()
    for item in raw:
        if isinstance(item, Role):
            parsed.add(item)
        elif isinstance(item, str) and item in VALID_ROLE_NAMES:
            parsed.add(Role(item))
        else:
            invalid.add(str(item))

    if invalid:
        raise ValidationError(
            f"Invalid roles: {sorted(invalid)}",
            details={"valid_roles": VALID_ROLE_NAMES},
        )
    return frozenset(parsed)


class DirectoryService:
    """Coordinates account CRUD over a credential store."""

    def __init__(self, storage: BaseStorage, hasher: Hasher):
        """
        Args:
            storage (BaseStorage): Backend credential store.
            hasher (Hasher): Anything with `hash` and `verify`; the app
                wires in the bcrypt hasher from `auth.utils`.
        """
        self.storage = storage
        self.hasher = hasher

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _validate_credentials(username: Optional[str], password: Optional[str]) -> None:
        if username is None or not username.strip():
            raise ValidationError("Username is required")
        if not USERNAME_PATTERN.match(username):
            raise ValidationError(
                "Username may only contain letters, digits and . _ @ - (max 64 characters)"
            )
        if password is None or not password.strip():
            raise ValidationError("Password is required")
        if password_too_long(password):
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    def _require(self, username: str) -> Account:
        account = self.storage.get(username)
        if account is None:
            raise NotFoundError("User not found", details={"username": username})
        return account

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def create_account(
        self,
        username: Optional[str],
        password: Optional[str],
        roles: Optional[Iterable[RoleLike]],
    ) -> Account:
        """
        Create an account with a freshly hashed password.

        Raises:
            ValidationError: Empty username/password, empty or unknown roles.
            ConflictError: Username already stored.
        """
        self._validate_credentials(username, password)
        role_set = parse_roles(roles)

        if self.storage.exists(username):
            raise ConflictError("User already exists", details={"username": username})

        account = Account(username=username, password_hash=self.hasher.hash(password), roles=role_set)
        with self.storage.locked():
            # another request may have taken the name while we were hashing
            if self.storage.exists(username):
                raise ConflictError("User already exists", details={"username": username})
            self.storage.put(account)

        log.info("User created: username=%s roles=%s", username, sorted_role_names(role_set))
        return account

    def delete_account(self, username: str) -> None:
        """
        Raises:
            NotFoundError: Username not stored.
        """
        if not self.storage.remove(username):
            raise NotFoundError("User not found", details={"username": username})
        log.info("User deleted: username=%s", username)

    def update_roles(self, username: str, roles: Optional[Iterable[RoleLike]]) -> Account:
        """
        Replace an account's role set, keeping its password hash.

        Raises:
            NotFoundError: Username not stored.
            ValidationError: Empty or unknown roles.
        """
        self._require(username)
        role_set = parse_roles(roles)

        with self.storage.locked():
            current = self._require(username)
            updated = Account(username=username, password_hash=current.password_hash, roles=role_set)
            self.storage.put(updated)

        log.info("User roles updated: username=%s roles=%s", username, sorted_role_names(role_set))
        return updated

    def seed(self, accounts: Iterable[Tuple[str, str, Iterable[RoleLike]]]) -> List[Account]:
        """Create the given (username, password, roles) accounts; used at startup."""
        return [self.create_account(username, password, roles) for username, password, roles in accounts]

    def get_account(self, username: str) -> Account:
        return self._require(username)

    def list_accounts(self) -> List[Account]:
        return sorted(self.storage.list(), key=lambda account: account.username)
