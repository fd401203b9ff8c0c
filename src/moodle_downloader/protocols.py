"""Protocol definitions for dependency injection and interface contracts."""

from typing import Protocol

from .models import Token


class AuthBackend(Protocol):
    """Protocol for the remote token issuance and validation service."""

    def request_token(self, base_url: str, username: str, password: str) -> Token:
        """Request a new token using username and password.

        Raises:
            AuthRejectedError: If the site refuses the credentials.
            TransportError: If the site cannot be reached.
            MoodleDownloaderError: If the response format is unexpected.
        """
        ...

    def validate(self, base_url: str, token: str) -> int:
        """Probe a token against the account-info query.

        Returns:
            The account identifier of the token owner.

        Raises:
            AuthRejectedError: If the token is not accepted.
            TransportError: If the site cannot be reached.
            MoodleDownloaderError: If the response format is unexpected.
        """
        ...
