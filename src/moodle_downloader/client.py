"""Moodle client — handles low-level web service calls."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .config import Config, get_config
from .consts import (
    REST_FORMAT,
    REST_URL_PATH,
    SITE_INFO_FUNCTION,
    TOKEN_SERVICE,
    TOKEN_URL_PATH,
    USER_AGENT,
)
from .exceptions import AuthRejectedError, MoodleDownloaderError, TransportError
from .models import SiteInfo, Token

logger = logging.getLogger("moodle-downloader.client")

AUTH_STATUS_CODES = {401, 403}


def endpoint_url(base_url: str, path: str) -> str:
    """Join the site root and an endpoint path.

    The settings file usually stores the root with a trailing slash
    (``https://example.edu/``); both spellings give the same URL.
    """
    return f"{base_url.rstrip('/')}{path}"


class MoodleClient:
    """Moodle web service client for token issuance and validation.

    Responsibilities:
    - Request tokens from the login endpoint
    - Query account info with a token
    - Translate HTTP and payload failures into domain exceptions
    """

    def __init__(
        self,
        config: Config | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize MoodleClient.

        Args:
            config: Config instance. If None, uses get_config().
            http_client: HTTP client. If None, creates a new one.
        """
        self.config = config or get_config()
        self._owns_http_client = http_client is None

        self.http_client = http_client or httpx.Client(
            headers={"User-Agent": USER_AGENT},
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
        )

    def __enter__(self) -> "MoodleClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            self.http_client.close()

    def request_token(self, base_url: str, username: str, password: str) -> Token:
        """Request a new web service token with username and password.

        Args:
            base_url: Root URL of the Moodle site.
            username: Moodle login name.
            password: Moodle password.

        Returns:
            Token issued by the site.

        Raises:
            AuthRejectedError: If the site refuses the credentials.
            TransportError: For network errors or non-auth HTTP errors.
            MoodleDownloaderError: If the response format is unexpected.
        """
        url = endpoint_url(base_url, TOKEN_URL_PATH)
        logger.info(f"Requesting new token for {username} from {url}")

        payload = self._post_form(
            url,
            {"username": username, "password": password, "service": TOKEN_SERVICE},
        )

        if "error" in payload or "errorcode" in payload:
            raise AuthRejectedError(
                f"Login rejected by {base_url}: {payload.get('error', 'unknown error')}",
                errors=[f"errorcode: {payload.get('errorcode', 'n/a')}"],
                suggestions=[
                    "Check username and password in the settings file",
                    "Make sure mobile web services are enabled on the site",
                ],
                context={"url": url},
            )

        try:
            token = Token.model_validate(payload)
        except ValidationError as e:
            raise MoodleDownloaderError(
                "Token endpoint returned a response without a token",
                errors=[err["msg"] for err in e.errors()],
                suggestions=[
                    "Verify that baseURL points at the Moodle site root",
                ],
                context={"url": url},
            ) from e

        logger.info("Token received")
        return token

    def get_site_info(self, base_url: str, token: str) -> SiteInfo:
        """Query basic account info for the owner of a token.

        Raises:
            AuthRejectedError: If the token is not accepted.
            TransportError: For network errors or non-auth HTTP errors.
            MoodleDownloaderError: If the response format is unexpected.
        """
        url = endpoint_url(base_url, REST_URL_PATH)
        logger.debug(f"Calling {SITE_INFO_FUNCTION} on {url}")

        payload = self._post_form(
            url,
            {
                "wstoken": token,
                "wsfunction": SITE_INFO_FUNCTION,
                "moodlewsrestformat": REST_FORMAT,
            },
        )

        if "exception" in payload or "errorcode" in payload:
            raise AuthRejectedError(
                f"Token rejected by {base_url}: {payload.get('message', 'unknown error')}",
                errors=[f"errorcode: {payload.get('errorcode', 'n/a')}"],
                suggestions=["Request a new token with username and password"],
                context={"url": url},
            )

        try:
            return SiteInfo.model_validate(payload)
        except ValidationError as e:
            raise MoodleDownloaderError(
                "Site info response did not contain a user id",
                errors=[err["msg"] for err in e.errors()],
                context={"url": url},
            ) from e

    def validate(self, base_url: str, token: str) -> int:
        """Probe a token, returning the account id on success."""
        return self.get_site_info(base_url, token).user_id

    def _post_form(self, url: str, data: dict[str, str]) -> dict[str, Any]:
        """POST form data and return the decoded JSON object."""
        try:
            response = self.http_client.post(
                url,
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            if status_code in AUTH_STATUS_CODES:
                raise AuthRejectedError(
                    f"Authentication failed ({status_code})",
                    errors=[str(e)],
                    suggestions=["Verify the credentials in the settings file"],
                    context={"url": url, "status_code": status_code},
                ) from e
            raise TransportError(
                f"HTTP error ({status_code}) from {url}",
                errors=[str(e)],
                suggestions=[
                    "Check the baseURL in the settings file",
                    "Try again later",
                ],
                context={"url": url, "status_code": status_code},
            ) from e
        except httpx.RequestError as e:
            raise TransportError(
                f"Network error: {e}",
                errors=[str(e)],
                suggestions=[
                    "Check your internet connection",
                    "Try again - this may be a temporary network issue",
                ],
                context={"url": url, "exception_type": type(e).__name__},
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise MoodleDownloaderError(
                f"Malformed JSON response from {url}",
                errors=[str(e)],
                suggestions=["Verify that baseURL points at the Moodle site root"],
                context={"url": url},
            ) from e

        if not isinstance(payload, dict):
            raise MoodleDownloaderError(
                f"Unexpected response from {url}: expected a JSON object",
                context={"url": url},
            )
        return payload
