"""Configuration management."""

import logging
from functools import cache

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings

from .consts import DEFAULT_SETTINGS_FILE, DEFAULT_TIMEOUT_SECONDS


class Config(BaseSettings):
    """Process configuration, overridable through ``MOODLEDL_*`` variables."""

    model_config = ConfigDict(
        env_prefix="MOODLEDL_", case_sensitive=False, extra="ignore"
    )
    settings_file: str = Field(
        default=DEFAULT_SETTINGS_FILE,
        description="Path to the JSON settings file holding credentials and token",
    )
    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
        description="Logging level",
    )
    timeout_seconds: int = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        le=300,
        description="HTTP request timeout in seconds",
    )


@cache
def get_config() -> Config:
    """Get a cached Config instance."""
    return Config()


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Configure logging for the entire application"""
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,  # Override any existing configuration
    )
    return logging.getLogger("moodle-downloader")
