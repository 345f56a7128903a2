"""
Error taxonomy for the RBAC Directory.

Every failure a caller can trigger maps to one of these classes. The HTTP
layer (see `main.py`) recovers them at the request boundary and renders
`{"error": message, "timestamp": ..., **details}` with `status_code`.
"""

from typing import Any, Dict, Optional

__all__ = [
    "DirectoryError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "AuthenticationError",
    "AuthorizationError",
]


class DirectoryError(Exception):
    """Base class; carries a client-safe message and optional extra body fields."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})


class ValidationError(DirectoryError):
    """Malformed input: missing fields, unknown role, empty role set."""

    status_code = 400


class AuthenticationError(DirectoryError):
    """Bad or missing credentials."""

    status_code = 401


class AuthorizationError(DirectoryError):
    """Valid identity without the required role."""

    status_code = 403


class NotFoundError(DirectoryError):
    """Unknown username on lookup, delete or update."""

    status_code = 404


class ConflictError(DirectoryError):
    """Username already taken."""

    status_code = 409
