"""
Base credential-store interface for the RBAC Directory.

Purpose:
    Define a small, stable contract that storage backends implement without
    requiring changes to the Directory Service.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional

from ..models import Account


class BaseStorage(ABC):
    """Abstract base class for credential stores."""

    @abstractmethod  # pragma: no cover
    def get(self, username: str) -> Optional[Account]:
        """
        Retrieve an account by username.

        Returns:
            Optional[Account]: The stored record or None.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def put(self, account: Account) -> None:
        """
        Insert or fully replace the record keyed by `account.username`.

        A put never leaves a partially written record behind.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def remove(self, username: str) -> bool:
        """
        Remove an account.

        Returns:
            bool: False if the username was not stored.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def exists(self, username: str) -> bool:
        """Return True if the username is stored."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def list(self) -> List[Account]:
        """Return every stored account, in no particular order."""
        raise NotImplementedError

    @contextmanager
    def locked(self) -> Iterator[None]:
        """
        Hold the store's exclusion lock across a check-then-write sequence.

        Backends without a lock of their own (e.g. ones relying on database
        constraints) may keep this no-op default.
        """
        yield
