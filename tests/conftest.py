"""
Global pytest fixtures for the RBAC Directory test suite.

Responsibilities:
    - Provide a fresh FastAPI TestClient via the app factory for integration tests
    - Provide isolated Storage, PasswordHasher, DirectoryService,
      Authenticator and AccessGate fixtures for direct testing

bcrypt is deliberately slow, so the suite runs with the minimum work factor.
The environment is set before any project module reads it.
"""

import os

os.environ.setdefault("RBAC_BCRYPT_ROUNDS", "4")
os.environ.setdefault("RBAC_STARTUP_SELF_CHECK", "0")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from auth.gate import AccessGate  # noqa: E402
from auth.service import Authenticator  # noqa: E402
from auth.utils import PasswordHasher  # noqa: E402
from main import create_app  # noqa: E402
from rbac_directory.directory.directory_service import DirectoryService  # noqa: E402
from rbac_directory.storage.storage import Storage  # noqa: E402


@pytest.fixture
def client() -> TestClient:
    """
    Provide a fresh TestClient with a new app instance.

    Each invocation builds its own store, so users created in one test
    never leak into another.
    """
    return TestClient(create_app())


@pytest.fixture
def storage() -> Storage:
    return Storage()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def directory(storage: Storage, hasher: PasswordHasher) -> DirectoryService:
    return DirectoryService(storage=storage, hasher=hasher)


@pytest.fixture
def authenticator(directory: DirectoryService) -> Authenticator:
    return Authenticator(directory)


@pytest.fixture
def gate() -> AccessGate:
    return AccessGate()
