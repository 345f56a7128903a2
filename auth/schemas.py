"""
Pydantic schemas for request payloads in the auth module.

Fields are optional at the schema level; emptiness and role validity are
checked by the Directory Service so every rejection reads the same way.
"""

from typing import List, Optional

from pydantic import BaseModel


class CreateUserRequest(BaseModel):
    """Payload for POST /auth/users."""
    username: Optional[str] = None
    password: Optional[str] = None
    roles: Optional[List[str]] = None


class UpdateRolesRequest(BaseModel):
    """Payload for PUT /auth/users/{username}/roles."""
    roles: Optional[List[str]] = None

