"""
Configuration for the auth module.

Defines the accounts seeded into every fresh directory at startup. They are
ordinary accounts once created. The well-known passwords are for demos only;
override them through the environment anywhere else.
"""

import os
from typing import List, NamedTuple, Tuple

from rbac_directory.models import Role


def _seed_password(env_name: str, default: str) -> str:
    """Env override for a seed password; blank values keep the default."""
    value = os.getenv(env_name, "")
    return value if value.strip() else default


class SeedAccount(NamedTuple):
    username: str
    password: str
    roles: Tuple[Role, ...]


DEFAULT_ACCOUNTS: List[SeedAccount] = [
    SeedAccount(
        "system_admin",
        _seed_password("SYSTEM_ADMIN_PASSWORD", "system_admin_pass"),
        (Role.ADMIN, Role.READ, Role.WRITE),
    ),
    SeedAccount(
        "system_reader",
        _seed_password("SYSTEM_READER_PASSWORD", "system_reader_pass"),
        (Role.READ,),
    ),
    SeedAccount(
        "system_writer",
        _seed_password("SYSTEM_WRITER_PASSWORD", "system_writer_pass"),
        (Role.WRITE,),
    ),
]
