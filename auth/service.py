"""
Core authentication logic.

Validates a username/password pair against the directory and turns the
stored account into an Identity. Unknown users and wrong passwords fail
with the same message so callers cannot discover which usernames exist.
"""

import logging

from rbac_directory.directory.directory_service import DirectoryService
from rbac_directory.errors import AuthenticationError, NotFoundError
from rbac_directory.models import Identity

log = logging.getLogger("rbac.auth")

INVALID_CREDENTIALS = "Invalid credentials"


class Authenticator:
    def __init__(self, directory: DirectoryService):
        self.directory = directory
        self.hasher = directory.hasher
        # checked against when the user is unknown, so both paths cost one bcrypt verify
        self._dummy_hash = self.hasher.hash("not-a-real-password")

    def authenticate(self, username: str, password: str) -> Identity:
        """
        Authenticate a user by validating their username and password.

        Args:
            username (str): The username provided by the client.
            password (str): The password provided by the client.

        Returns:
            Identity: The authenticated username and its stored roles.

        Raises:
            AuthenticationError: If authentication fails.
        """
        try:
            account = self.directory.get_account(username)
        except NotFoundError:
            self.hasher.verify(password or "", self._dummy_hash)
            log.debug("Authentication failed: unknown user %r", username)
            raise AuthenticationError(INVALID_CREDENTIALS) from None

        if not self.hasher.verify(password or "", account.password_hash):
            log.debug("Authentication failed: wrong password for %r", username)
            raise AuthenticationError(INVALID_CREDENTIALS)

        return Identity(username=account.username, roles=account.roles)
