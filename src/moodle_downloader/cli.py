"""Command-line entry point."""

import logging
import sys

import click
from pydantic import ValidationError

from .auth import CredentialManager
from .client import MoodleClient
from .config import Config, get_config, setup_logging
from .consts import APP_NAME, PACKAGE_VERSION
from .exceptions import MoodleDownloaderError
from .models import AcquireResult
from .settings_store import SettingsStore

logger = logging.getLogger("moodle-downloader.cli")

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def login(settings_path: str, config: Config) -> AcquireResult:
    """Acquire a verified token for the site in the given settings file."""
    with MoodleClient(config) as client:
        manager = CredentialManager(SettingsStore(settings_path), client)
        return manager.acquire()


def _echo_error(error: MoodleDownloaderError) -> None:
    click.echo(f"Error: {error.message}", err=True)
    for detail in error.errors:
        click.echo(f"  - {detail}", err=True)
    for suggestion in error.suggestions:
        click.echo(f"  hint: {suggestion}", err=True)


@click.command(
    name=APP_NAME, context_settings={"help_option_names": ["-h", "--help"]}
)
@click.option(
    "--settings",
    "-s",
    "settings_path",
    default=None,
    help="Path to settings file [default: $MOODLEDL_SETTINGS_FILE or "
    "~/.config/moodleDownloader/settings.json]",
)
@click.option(
    "--courses",
    "-c",
    default="all",
    show_default=True,
    help="List of courses to download",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the configured logging level",
)
@click.version_option(PACKAGE_VERSION, prog_name=APP_NAME)
def main(settings_path: str | None, courses: str, log_level: str | None) -> None:
    """Log in to a Moodle site and show the account id."""
    try:
        config = get_config()
    except ValidationError as e:
        click.echo(f"Error: invalid environment configuration\n{e}", err=True)
        sys.exit(1)

    setup_logging(log_level or config.log_level)
    settings_path = settings_path or config.settings_file
    logger.info(f"settingsPath {settings_path}")
    logger.info(f"coursesList {courses}")

    try:
        result = login(settings_path, config)
    except MoodleDownloaderError as e:
        logger.error(f"Login failed: {e.message}")
        _echo_error(e)
        sys.exit(1)

    if not result.persisted:
        click.echo(
            f"Warning: renewed token could not be saved to {settings_path}",
            err=True,
        )

    logger.info(f"UserID: {result.user_id}")
    click.echo(f"UserID: {result.user_id}")


if __name__ == "__main__":
    main()
