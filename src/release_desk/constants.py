"""Application-wide constants for release-desk.

Values here are shared by the logger, configuration and network layers.
Anything user-tunable lives in settings.conf and only its default is
declared in this module.
"""

# Application identity
APP_NAME = "release-desk"
CONFIG_DIR_NAME = "release-desk"
DEFAULT_CONFIG_SUBDIR = ".config"
CONFIG_FILE_NAME = "settings.conf"

# Logging
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL = "INFO"
LOG_FILE_NAME = "release-desk.log"
LOG_ROTATION_THRESHOLD_BYTES = 1_048_576
LOG_BACKUP_COUNT = 3
LOG_CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_CONSOLE_DATE_FORMAT = "%H:%M:%S"
LOG_FILE_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
    "RESET": "\033[0m",
}

# Configuration keys and sections
SECTION_DEFAULT = "DEFAULT"
SECTION_NETWORK = "network"
SECTION_UPDATE = "update"
SECTION_DIRECTORY = "directory"
KEY_LOG_LEVEL = "log_level"
KEY_CONSOLE_LOG_LEVEL = "console_log_level"
KEY_MAX_CONCURRENT_REQUESTS = "max_concurrent_requests"
KEY_CATALOG_LIMIT = "catalog_limit"

DEFAULT_MAX_CONCURRENT_REQUESTS = 5
DEFAULT_CATALOG_LIMIT = 200
MAX_PAGE_LIMIT = 200
DEFAULT_TIMEOUT_SECONDS = 10

# Credential storage
KEYRING_SERVICE = "release-desk"
KEYRING_CONFIG_KEY = "AppStoreConnectConfig"

# App Store Connect
ASC_BASE_URL = "https://api.appstoreconnect.apple.com"
ASC_TOKEN_AUDIENCE = "appstoreconnect-v1"
ASC_TOKEN_LIFETIME_SECONDS = 19 * 60
ASC_TOKEN_REFRESH_MARGIN_SECONDS = 60

# iTunes lookup
ITUNES_LOOKUP_URL = "https://itunes.apple.com/lookup"
ICON_CACHE_COUNT_LIMIT = 1000
ICON_CACHE_BYTE_LIMIT = 50 * 1024 * 1024
ICON_LOOKUP_CONCURRENCY = 10
ARTWORK_KEYS = (
    "artworkUrl512",
    "artworkUrl100",
    "artworkUrl60",
    "artworkUrl30",
)

# Self-update
GITHUB_API_URL = "https://api.github.com"
DEFAULT_UPDATE_OWNER = "rijieli"
DEFAULT_UPDATE_REPO = "Release"
INSTALLER_EXTENSION = ".dmg"
DOWNLOAD_CHUNK_SIZE = 65_536
DOWNLOAD_PROGRESS_STEP = 0.1
DOWNLOAD_PROGRESS_STEP_BYTES = 1_048_576
DOWNLOAD_PROGRESS_CAP = 0.9
HDIUTIL = "/usr/bin/hdiutil"

# Fallback version for unpackaged runs
VERSION_UNKNOWN = "0.0.0"

