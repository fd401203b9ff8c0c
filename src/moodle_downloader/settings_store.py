"""File-backed JSON settings store."""

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from .consts import SETTINGS_FILE_MODE, SETTINGS_JSON_INDENT
from .exceptions import ConfigError, PersistError
from .models import Settings

logger = logging.getLogger("moodle-downloader.settings")


class SettingsStore:
    """Reads and writes the settings file at a fixed location.

    Responsibilities:
    - Parse the settings file into a Settings value
    - Write renewed settings back, readable by the owner only
    """

    def __init__(self, path: str | os.PathLike):
        """Initialize SettingsStore.

        Args:
            path: Location of the settings file; ``~`` is expanded.
        """
        self.path = Path(path).expanduser()

    def load(self) -> Settings:
        """Load settings from disk.

        Returns:
            Parsed Settings.

        Raises:
            ConfigError: If the file is missing, unreadable or malformed.
        """
        logger.debug(f"Loading settings from {self.path}")

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigError(
                f"Settings file not readable: {self.path}",
                errors=[str(e)],
                suggestions=[
                    f"Create a settings file at {self.path}",
                    "Check file permissions",
                ],
                context={"settings_path": str(self.path)},
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in settings file: {self.path}",
                errors=[f"JSON error: {e.msg} (line {e.lineno})"],
                suggestions=["Fix JSON syntax in settings file"],
                context={"settings_path": str(self.path)},
            ) from e
        except UnicodeDecodeError as e:
            raise ConfigError(
                f"Settings file is not valid UTF-8: {self.path}",
                errors=[str(e)],
                suggestions=["Save the settings file with UTF-8 encoding"],
                context={"settings_path": str(self.path)},
            ) from e

        if not isinstance(data, dict):
            raise ConfigError(
                f"Settings file must contain a JSON object: {self.path}",
                suggestions=[
                    'Use the shape {"baseURL": ..., "username": ..., '
                    '"password": ..., "token": ...}'
                ],
                context={"settings_path": str(self.path)},
            )

        try:
            settings = Settings.model_validate(data)
        except ValidationError as e:
            raise ConfigError(
                f"Malformed settings file: {self.path}",
                errors=[
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ],
                suggestions=["Make sure baseURL is set to the Moodle site root"],
                context={"settings_path": str(self.path)},
            ) from e

        logger.info(f"Settings loaded for {settings.base_url}")
        return settings

    def save(self, settings: Settings) -> None:
        """Write settings to disk with owner-only permissions.

        Raises:
            PersistError: If the file cannot be written.
        """
        logger.debug(f"Saving settings to {self.path}")
        payload = json.dumps(
            settings.to_file_dict(), indent=SETTINGS_JSON_INDENT, ensure_ascii=False
        )

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._replace_atomically(payload)
        except OSError as e:
            raise PersistError(
                f"Could not write settings file: {self.path}",
                errors=[str(e)],
                suggestions=[
                    "Check that the settings file and its directory are writable",
                ],
                context={"settings_path": str(self.path)},
            ) from e

        logger.info("Settings saved")

    def _replace_atomically(self, payload: str) -> None:
        """Write payload to an owner-only temp file, then swap it into place.

        The existing settings file stays intact until the new content is
        completely written.
        """
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                os.fchmod(f.fileno(), SETTINGS_FILE_MODE)
                f.write(payload)
            os.replace(tmp_name, self.path)
        except OSError:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
