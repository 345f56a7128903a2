"""
Runtime configuration for the RBAC Directory
============================================

Simple settings module that reads from environment variables (only here),
and exposes a stable `settings` object for the rest of the codebase.
Avoid reading env vars anywhere else; import from this module instead.

Password hashing
----------------
- RBAC_BCRYPT_ROUNDS        : bcrypt work factor; default 12; clamped to [4, 31]

Startup
-------
- RBAC_SEED_DEFAULT_ACCOUNTS : "1"/"true" (default) seeds system_admin/reader/writer
- RBAC_STARTUP_SELF_CHECK    : "1"/"true" (default) authenticates the seeds at boot
- RBAC_LOG_LEVEL             : root log level when no handler is configured (default INFO)

Server
------
- RBAC_HOST                  : bind address for `python main.py` (default 127.0.0.1)
- RBAC_PORT                  : port for `python main.py` (default 8081)
"""

import os


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class _Settings:
    # -------- Password hashing --------
    BCRYPT_ROUNDS: int = max(4, min(31, _get_int("RBAC_BCRYPT_ROUNDS", 12)))

    # -------- Startup --------
    SEED_DEFAULT_ACCOUNTS: bool = _get_bool("RBAC_SEED_DEFAULT_ACCOUNTS", True)
    STARTUP_SELF_CHECK: bool = _get_bool("RBAC_STARTUP_SELF_CHECK", True)
    LOG_LEVEL: str = os.getenv("RBAC_LOG_LEVEL", "INFO").strip().upper()

    # -------- Server --------
    HOST: str = os.getenv("RBAC_HOST", "127.0.0.1")
    PORT: int = _get_int("RBAC_PORT", 8081)


settings = _Settings()
