"""High-value constants for the moodle-downloader package."""

# Package metadata
PACKAGE_VERSION = "0.1.0"
APP_NAME = "moodle-downloader"
USER_AGENT = f"{APP_NAME}/{PACKAGE_VERSION}"

# External API contract consts
TOKEN_URL_PATH = "/login/token.php"
REST_URL_PATH = "/webservice/rest/server.php"
TOKEN_SERVICE = "moodle_mobile_app"
SITE_INFO_FUNCTION = "core_webservice_get_site_info"
REST_FORMAT = "json"

# Business logic consts
DEFAULT_SETTINGS_FILE = "~/.config/moodleDownloader/settings.json"
DEFAULT_TIMEOUT_SECONDS = 10
SETTINGS_FILE_MODE = 0o600  # owner read/write only
SETTINGS_JSON_INDENT = 1
