"""
Main API module for the RBAC Directory service.

Responsibilities:
    - Expose role-gated demo endpoints for ADMIN, READ and WRITE
    - Expose user management (create, list, delete, re-role) for admins
    - Translate domain errors into structured JSON responses

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - Each app owns a fresh in-memory Storage, DirectoryService,
      Authenticator and AccessGate, kept on `app.state`.
    - Role checks are explicit `require_role(...)` dependencies attached at
      route registration.
    - Credentials arrive with every request (HTTP Basic); there are no sessions.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth.config import DEFAULT_ACCOUNTS
from auth.dependencies import json_body, require_role, validation_issues
from auth.gate import AccessGate
from auth.schemas import CreateUserRequest, UpdateRolesRequest
from auth.service import Authenticator
from auth.utils import PasswordHasher
from rbac_directory.config import settings
from rbac_directory.directory.directory_service import DirectoryService
from rbac_directory.errors import AuthenticationError, DirectoryError
from rbac_directory.models import Identity, Role, sorted_role_names
from rbac_directory.storage.storage import Storage

ENDPOINTS = [
    ("GET", "/service/admin/ping", "ADMIN"),
    ("GET", "/service/admin/system-info", "ADMIN"),
    ("GET", "/service/read/ping", "READ"),
    ("GET", "/service/read/public-data", "READ"),
    ("GET", "/service/write/ping", "WRITE"),
    ("POST", "/service/write/create", "WRITE"),
    ("GET", "/auth/users", "ADMIN"),
    ("POST", "/auth/users", "ADMIN"),
    ("DELETE", "/auth/users/{username}", "ADMIN"),
    ("PUT", "/auth/users/{username}/roles", "ADMIN"),
]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error_body(message: str, **details: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": message, "timestamp": _now()}
    body.update(details)
    return body


def _log_startup(log: logging.Logger, authenticator: Authenticator) -> None:
    """Announce seeded accounts and endpoints, then prove the seeds authenticate."""
    log.info("Seeded accounts:")
    for seed in DEFAULT_ACCOUNTS:
        log.info("  - %s (%s)", seed.username, ", ".join(role.value for role in seed.roles))
    log.info("Endpoints:")
    for method, path, role in ENDPOINTS:
        log.info("  - %-6s %s (requires %s)", method, path, role)

    if not settings.STARTUP_SELF_CHECK:
        return
    for seed in DEFAULT_ACCOUNTS:
        try:
            identity = authenticator.authenticate(seed.username, seed.password)
        except AuthenticationError as exc:
            log.error("Self-check: %s failed to authenticate: %s", seed.username, exc.message)
        else:
            log.info("Self-check: %s authenticated roles=%s", seed.username, sorted_role_names(identity.roles))


def create_app() -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Returns:
        FastAPI: A fully configured application with its own isolated
                 credential store.
    """
    app = FastAPI(
        title="RBAC Directory",
        description="Role-gated demo endpoints backed by an in-memory user directory",
        docs_url="/docs",
    )
    log = logging.getLogger("rbac")

    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.LOG_LEVEL)

    # ----------------------------------------------------------------
    # Per-app instances (isolated for tests)
    # ----------------------------------------------------------------
    storage = Storage()
    directory = DirectoryService(storage=storage, hasher=PasswordHasher())
    authenticator = Authenticator(directory)
    gate = AccessGate()

    app.state.directory = directory
    app.state.authenticator = authenticator
    app.state.gate = gate
    app.state.started_at = time.monotonic()

    if settings.SEED_DEFAULT_ACCOUNTS:
        directory.seed(DEFAULT_ACCOUNTS)
        _log_startup(log, authenticator)

    # ----------------------------------------------------------------
    # Error translation
    # ----------------------------------------------------------------
    @app.exception_handler(DirectoryError)
    async def directory_error_handler(request: Request, exc: DirectoryError) -> JSONResponse:
        headers = {"WWW-Authenticate": "Basic"} if isinstance(exc, AuthenticationError) else None
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, **exc.details),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=_error_body("Invalid request body", issues=validation_issues(exc.errors())),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=_error_body("Internal server error"))

    # Health check
    @app.get("/health")
    def health():
        return {"status": "ok"}

    # ----------------------------------------------------------------
    # Role-gated service endpoints
    # ----------------------------------------------------------------
    @app.get("/service/admin/ping")
    def admin_ping(identity: Identity = Depends(require_role(Role.ADMIN))) -> Dict[str, Any]:
        log.info("ADMIN ACCESS: %s accessed admin endpoint", identity.username)
        return {
            "message": "Admin access granted",
            "timestamp": _now(),
            "access_level": Role.ADMIN.value,
            "description": "This endpoint requires ADMIN role",
            "username": identity.username,
        }

    @app.get("/service/admin/system-info")
    def system_info(identity: Identity = Depends(require_role(Role.ADMIN))) -> Dict[str, Any]:
        return {
            "system_status": "operational",
            "uptime_seconds": round(time.monotonic() - app.state.started_at, 3),
            "account_count": len(directory.list_accounts()),
            "timestamp": _now(),
        }

    @app.get("/service/read/ping")
    def read_ping(identity: Identity = Depends(require_role(Role.READ))) -> Dict[str, Any]:
        log.info("READ ACCESS: %s accessed read endpoint", identity.username)
        return {
            "message": "Read access granted",
            "timestamp": _now(),
            "access_level": Role.READ.value,
            "description": "This endpoint requires READ role",
            "username": identity.username,
        }

    @app.get("/service/read/public-data")
    def public_data(identity: Identity = Depends(require_role(Role.READ))) -> Dict[str, Any]:
        return {
            "data": "This is public data accessible to all readers",
            "sensitivity": "public",
            "timestamp": _now(),
        }

    @app.get("/service/write/ping")
    def write_ping(identity: Identity = Depends(require_role(Role.WRITE))) -> Dict[str, Any]:
        log.info("WRITE ACCESS: %s accessed write endpoint", identity.username)
        return {
            "message": "Write access granted",
            "timestamp": _now(),
            "access_level": Role.WRITE.value,
            "description": "This endpoint requires WRITE role",
            "username": identity.username,
        }

    @app.post("/service/write/create")
    def create_resource(
        identity: Identity = Depends(require_role(Role.WRITE)),
        data: Dict[str, Any] = Depends(json_body(Dict[str, Any])),
    ) -> Dict[str, Any]:
        return {
            "message": "Resource created successfully",
            "created_data": data,
            "resource_id": f"res_{int(time.time() * 1000)}",
            "timestamp": _now(),
        }

    # ----------------------------------------------------------------
    # User management
    # ----------------------------------------------------------------
    @app.get("/auth/users")
    def list_users(identity: Identity = Depends(require_role(Role.ADMIN))) -> Dict[str, Any]:
        return {
            "users": [
                {"username": account.username, "roles": sorted_role_names(account.roles)}
                for account in directory.list_accounts()
            ],
            "timestamp": _now(),
        }

    @app.post("/auth/users", status_code=201)
    def create_user(
        identity: Identity = Depends(require_role(Role.ADMIN)),
        req: CreateUserRequest = Depends(json_body(CreateUserRequest)),
    ) -> Dict[str, Any]:
        """
        Create a user with the given roles.

        Raises:
            ValidationError: Missing fields or unknown roles (400).
            ConflictError: Username taken (409).
        """
        account = directory.create_account(req.username, req.password, req.roles)
        return {
            "message": "User created successfully",
            "username": account.username,
            "roles": sorted_role_names(account.roles),
            "timestamp": _now(),
        }

    @app.delete("/auth/users/{username}")
    def delete_user(username: str, identity: Identity = Depends(require_role(Role.ADMIN))) -> Dict[str, Any]:
        directory.delete_account(username)
        return {
            "message": "User deleted successfully",
            "username": username,
            "timestamp": _now(),
        }

    @app.put("/auth/users/{username}/roles")
    def update_user_roles(
        username: str,
        identity: Identity = Depends(require_role(Role.ADMIN)),
        req: UpdateRolesRequest = Depends(json_body(UpdateRolesRequest)),
    ) -> Dict[str, Any]:
        account = directory.update_roles(username, req.roles)
        return {
            "message": "User roles updated successfully",
            "username": username,
            "new_roles": sorted_role_names(account.roles),
            "timestamp": _now(),
        }

    return app


# `uvicorn main:app --reload` and `from main import app` continue to work.
app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
