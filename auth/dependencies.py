"""
FastAPI dependency functions for authentication, role checks and request bodies.

Use `require_role(Role.X)` in a route's `dependencies=[...]` or as a
parameter default to protect an endpoint:

    @app.get("/service/read/ping")
    def read_ping(identity: Identity = Depends(require_role(Role.READ))): ...

The authenticator and gate are looked up on `request.app.state`, so every app
built by the factory checks against its own directory.
"""

from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from rbac_directory.errors import AuthenticationError, ValidationError
from rbac_directory.models import Identity, Role

# HTTP Basic authentication scheme; missing credentials are reported by us
# so the response body matches every other error
security = HTTPBasic(auto_error=False)


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPBasicCredentials] = Depends(security),
) -> Identity:
    """
    Dependency that retrieves and validates the current user.

    Returns:
        Identity: The authenticated username and roles.
    """
    if credentials is None:
        raise AuthenticationError("Authentication required")
    return request.app.state.authenticator.authenticate(credentials.username, credentials.password)


def require_role(role: Role) -> Callable[..., Identity]:
    """Dependency factory that enforces a single required role."""

    def _check_role(request: Request, identity: Identity = Depends(get_current_identity)) -> Identity:
        return request.app.state.gate.require(identity, role)

    return _check_role


def validation_issues(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Reduce pydantic error dicts to JSON-safe {loc, msg} pairs."""
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in errors
    ]


def json_body(model: Any) -> Callable[..., Awaitable[Any]]:
    """
    Dependency factory that reads and validates the JSON request body.

    A body declared as a plain route parameter is parsed before any
    dependency runs. Declare this after the role guard instead, so an
    unauthenticated caller gets 401 before the payload is looked at.
    """
    adapter = TypeAdapter(model)

    async def _read_body(request: Request) -> Any:
        raw = await request.body()
        try:
            return adapter.validate_json(raw)
        except PydanticValidationError as exc:
            raise ValidationError(
                "Invalid request body",
                details={"issues": validation_issues(exc.errors())},
            ) from None

    return _read_body
