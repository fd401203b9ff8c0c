from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_serializer,
    field_validator,
)

# =============================================================================
# SETTINGS FILE MODEL
# =============================================================================
# Mirrors the JSON settings file: {"baseURL", "username", "password", "token"}.
# Secrets are kept out of repr() so a logged Settings never leaks them.


class Settings(BaseModel):
    """Connection and credential data persisted in the settings file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    base_url: str = Field(
        ..., alias="baseURL", min_length=1, description="Root URL of the Moodle site"
    )
    username: str = Field("", description="Moodle login name")
    password: SecretStr = Field(
        default=SecretStr(""), description="Moodle password"
    )
    token: str = Field(
        "", repr=False, description="Cached web service token (may be stale)"
    )

    @field_validator("username", "password", "token", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_serializer("password", when_used="json")
    def _reveal_password(self, value: SecretStr) -> str:
        return value.get_secret_value()

    @property
    def has_login(self) -> bool:
        """Whether username and password are both present."""
        return bool(self.username and self.password.get_secret_value())

    def with_token(self, token: str) -> "Settings":
        """Return a copy of these settings carrying a new token."""
        return self.model_copy(update={"token": token})

    def to_file_dict(self) -> dict[str, str]:
        """Serialize to the on-disk key shape, secrets included."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# MOODLE WEB SERVICE MODELS
# =============================================================================


class Token(BaseModel):
    """Response of the token endpoint on a successful login."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    token: str = Field(..., min_length=1, repr=False)
    private_token: str | None = Field(None, alias="privatetoken", repr=False)


class SiteInfo(BaseModel):
    """Subset of core_webservice_get_site_info used to identify the account."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: int = Field(..., alias="userid")
    site_name: str | None = Field(None, alias="sitename")
    username: str | None = None
    full_name: str | None = Field(None, alias="fullname")


# =============================================================================
# CREDENTIAL MANAGER RESULT
# =============================================================================


class AcquireResult(BaseModel):
    """Outcome of a successful credential acquisition."""

    settings: Settings = Field(..., description="Settings carrying the token in use")
    user_id: int = Field(..., description="Account id reported by the token probe")
    renewed: bool = Field(False, description="Whether a new token was requested")
    persisted: bool = Field(
        True, description="False when a renewed token could not be written back"
    )

    @property
    def token(self) -> str:
        """The verified, usable token."""
        return self.settings.token
