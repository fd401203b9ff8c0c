"""moodle-downloader custom exceptions.

Exception Design Principles:
1. Wrap library exceptions (httpx, json, pydantic) only when useful context
   can be added, always chaining with ``from``
2. Nothing below the CLI terminates the process; errors bubble up to a single
   top-level handler
3. Split on domain of actionable information:
   - Recoverable by fixing the settings file (ConfigError)
   - Recoverable by correcting stored credentials (AuthRejectedError)
   - Recoverable by re-running later (TransportError)
   - Degraded but non-fatal for the current run (PersistError)
"""


class MoodleDownloaderError(Exception):
    """Base exception for all moodle-downloader errors.

    Also raised directly when the remote end answers with a response whose
    format is not what the Moodle web service contract promises.
    """

    def __init__(
        self,
        message: str,  # the error message
        *,
        errors: list[str] = None,  # detailed list of errors (if available)
        suggestions: list[str] = None,  # remedial actions
        context: dict = None,  # additional detailed context
    ):
        """Initialize MoodleDownloaderError.

        Args:
            message: Primary error message for users
            errors: List of specific error details
            suggestions: List of actionable suggestions for resolution
            context: Additional context information as key-value pairs
        """
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.context = context or {}


class ConfigError(MoodleDownloaderError):
    """Settings file errors - recoverable by user reconfiguration.

    - Missing or unreadable settings file
    - Invalid JSON or wrong shape
    - Username/password absent when a token renewal is needed
    """

    pass


class AuthRejectedError(MoodleDownloaderError):
    """The remote site rejected the credentials or the token.

    Raised when the token endpoint refuses the username/password, or when the
    account-info probe refuses a token. On a cached token this only triggers a
    renewal; on a freshly issued token it is fatal for the run.
    """

    pass


class TransportError(MoodleDownloaderError):
    """Network failure, timeout or non-auth HTTP error status.

    Fatal for the current run. There is no automatic retry; re-running the
    tool later is the recovery path.
    """

    pass


class PersistError(MoodleDownloaderError):
    """Writing the renewed token back to the settings file failed.

    The token in memory remains usable for the rest of the run, but the next
    run will have to renew again.
    """

    pass
