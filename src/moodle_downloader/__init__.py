"""moodle-downloader

Logs in to a Moodle site, caching the web service token in a JSON settings
file and renewing it from username/password when the site stops accepting it.
"""

from .auth import CredentialManager
from .client import MoodleClient
from .config import Config, get_config, setup_logging
from .consts import PACKAGE_VERSION
from .exceptions import (
    AuthRejectedError,
    ConfigError,
    MoodleDownloaderError,
    PersistError,
    TransportError,
)
from .models import AcquireResult, Settings, SiteInfo, Token
from .settings_store import SettingsStore

__version__ = PACKAGE_VERSION

__all__ = [
    "__version__",
    "get_config",
    "setup_logging",
    "Config",
    "CredentialManager",
    "MoodleClient",
    "SettingsStore",
    "Settings",
    "Token",
    "SiteInfo",
    "AcquireResult",
    "MoodleDownloaderError",
    "ConfigError",
    "AuthRejectedError",
    "TransportError",
    "PersistError",
]
