"""Credential management with cached-token validation and renewal."""

import logging

from .exceptions import (
    AuthRejectedError,
    ConfigError,
    MoodleDownloaderError,
    PersistError,
    TransportError,
)
from .models import AcquireResult, Settings
from .protocols import AuthBackend
from .settings_store import SettingsStore
from .utils import mask_secret

logger = logging.getLogger("moodle-downloader.auth")


class CredentialManager:
    """Produces a verified access token from the settings file.

    Responsibilities:
    - Reuse the cached token while the site still accepts it
    - Renew the token from username/password otherwise
    - Persist a renewed token only once it has been validated
    """

    def __init__(self, store: SettingsStore, backend: AuthBackend):
        """Initialize CredentialManager.

        Args:
            store: Settings store bound to the settings file location.
            backend: Remote token issuance and validation service.
        """
        self.store = store
        self.backend = backend

    def acquire(self) -> AcquireResult:
        """Get a valid token, renewing and persisting it if necessary.

        Returns:
            AcquireResult with the settings carrying the usable token.

        Raises:
            ConfigError: If settings cannot be loaded or lack credentials.
            AuthRejectedError: If the site rejects the credentials or the new token.
            TransportError: If the site cannot be reached during renewal.
            MoodleDownloaderError: If the site answers in an unexpected format.
        """
        settings = self.store.load()

        if settings.token:
            user_id = self._check_cached(settings)
            if user_id is not None:
                return AcquireResult(settings=settings, user_id=user_id)
        else:
            logger.info("No cached token set")

        return self._renew(settings)

    def validate(self, base_url: str, token: str) -> int:
        """Return the account id for a token, raising if it is not usable."""
        logger.debug(f"Validating token {mask_secret(token)}")
        return self.backend.validate(base_url, token)

    def _check_cached(self, settings: Settings) -> int | None:
        """Probe the cached token; None means it has to be renewed."""
        logger.info(
            f"Checking if the cached token {mask_secret(settings.token)} is valid"
        )

        try:
            user_id = self.validate(settings.base_url, settings.token)
        except AuthRejectedError as e:
            logger.info(f"Cached token is invalid: {e.message}")
            return None
        except TransportError as e:
            # Unreachable and invalid are not told apart here, both renew
            logger.warning(f"Could not verify cached token, renewing: {e.message}")
            return None
        except MoodleDownloaderError as e:
            logger.warning(
                f"Unexpected answer while checking cached token: {e.message}"
            )
            return None

        logger.info("Cached token is valid")
        return user_id

    def _renew(self, settings: Settings) -> AcquireResult:
        """Request, validate and persist a new token."""
        if not settings.has_login:
            raise ConfigError(
                "Cannot renew token: username or password missing in settings",
                suggestions=["Add username and password to the settings file"],
                context={"settings_path": str(self.store.path)},
            )

        logger.info("Renewing token")
        new_token = self.backend.request_token(
            settings.base_url,
            settings.username,
            settings.password.get_secret_value(),
        )

        try:
            user_id = self.validate(settings.base_url, new_token.token)
        except AuthRejectedError as e:
            raise AuthRejectedError(
                "Newly issued token was rejected by the site",
                errors=[e.message, *e.errors],
                suggestions=["Check username and password in the settings file"],
                context={**e.context, "settings_path": str(self.store.path)},
            ) from e

        logger.info(f"New token {mask_secret(new_token.token)} is valid")
        renewed = settings.with_token(new_token.token)

        try:
            self.store.save(renewed)
        except PersistError as e:
            logger.error(
                f"{e.message}; the token works for this run but will be renewed again next time"
            )
            return AcquireResult(
                settings=renewed, user_id=user_id, renewed=True, persisted=False
            )

        return AcquireResult(settings=renewed, user_id=user_id, renewed=True)
