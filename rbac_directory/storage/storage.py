"""
Storage module for the RBAC Directory (in-memory implementation).

Responsibilities:
    - Hold username -> Account records
    - Provide lookup, upsert, removal and listing
    - Serialize mutations so concurrent requests cannot interleave a
      check-then-write on the same username

Design:
    - Accounts are frozen dataclasses, so readers can use the dict without
      taking the lock; they always observe a whole record or none.
    - Writers take a re-entrant lock. `locked()` exposes the same lock so the
      Directory Service can wrap a read-modify-write in one critical section
      and still call `put`/`remove` inside it.
    - Nothing survives a restart; the process reseeds on boot.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from ..models import Account
from .base import BaseStorage


class Storage(BaseStorage):
    def __init__(self):
        """
        Initialize an empty store.

        Internal schema:
            self.accounts = {username: Account}
        """
        self.accounts: Dict[str, Account] = {}
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def get(self, username: str) -> Optional[Account]:
        return self.accounts.get(username)

    def put(self, account: Account) -> None:
        """
        Insert or replace an account.

        Raises:
            ValueError: If the record is missing a username or roles. Nothing
                is written in that case.
        """
        if not account.username:
            raise ValueError("Account username must be non-empty")
        if not account.roles:
            raise ValueError("Account must hold at least one role")
        with self._lock:
            self.accounts[account.username] = account

    def remove(self, username: str) -> bool:
        with self._lock:
            return self.accounts.pop(username, None) is not None

    def exists(self, username: str) -> bool:
        return username in self.accounts

    def list(self) -> List[Account]:
        # snapshot under the lock so a concurrent put can't resize the dict mid-copy
        with self._lock:
            return list(self.accounts.values())

    def __len__(self) -> int:
        return len(self.accounts)
