"""Settings manager for the settings.conf INI file."""

import configparser
from pathlib import Path

from release_desk.config.paths import Paths
from release_desk.constants import (
    DEFAULT_CATALOG_LIMIT,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_CONCURRENT_REQUESTS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_UPDATE_OWNER,
    DEFAULT_UPDATE_REPO,
    KEY_CATALOG_LIMIT,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_LOG_LEVEL,
    KEY_MAX_CONCURRENT_REQUESTS,
    MAX_PAGE_LIMIT,
    SECTION_DEFAULT,
    SECTION_DIRECTORY,
    SECTION_NETWORK,
    SECTION_UPDATE,
)
from release_desk.exceptions import ConfigError
from release_desk.logger import get_logger
from release_desk.types import Settings

logger = get_logger(__name__)

RawConfigDict = dict[str, str | dict[str, str]]

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_FILE_HEADER = """\
# release-desk settings
#
# Lines starting with '#' or ';' are comments. Remove a key to fall back
# to its default value. App Store Connect credentials are not stored
# here; use 'release-desk config --set-credentials' (system keyring).

"""

_KEY_COMMENTS: dict[str, dict[str, str]] = {
    SECTION_DEFAULT: {
        KEY_LOG_LEVEL: "# DEBUG, INFO, WARNING, ERROR",
        KEY_CONSOLE_LOG_LEVEL: "# DEBUG, INFO, WARNING, ERROR",
        KEY_MAX_CONCURRENT_REQUESTS: "# parallel per-app API requests",
        KEY_CATALOG_LIMIT: f"# apps per listing (max {MAX_PAGE_LIMIT})",
    },
    SECTION_NETWORK: {"timeout_seconds": "# connect timeout"},
    SECTION_UPDATE: {
        "owner": "# GitHub owner of the release feed",
        "repo": "# GitHub repository of the release feed",
        "debug_updater": "# offer any release that ships an installer",
        "ignored_version": "# release tag to stay quiet about",
    },
    SECTION_DIRECTORY: {},
}


class SettingsManager:
    """Manages the global INI configuration."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize settings manager.

        Args:
            config_dir: Configuration directory path
                (defaults to Paths.CONFIG_DIR)

        """
        self.config_dir = config_dir or Paths.CONFIG_DIR
        self.settings_file = self.config_dir / "settings.conf"

    def get_default_settings(self) -> RawConfigDict:
        """Get default configuration values as raw strings.

        Returns:
            Default configuration dictionary

        """
        return {
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            KEY_MAX_CONCURRENT_REQUESTS: str(DEFAULT_MAX_CONCURRENT_REQUESTS),
            KEY_CATALOG_LIMIT: str(DEFAULT_CATALOG_LIMIT),
            SECTION_NETWORK: {
                "timeout_seconds": str(DEFAULT_TIMEOUT_SECONDS),
            },
            SECTION_UPDATE: {
                "owner": DEFAULT_UPDATE_OWNER,
                "repo": DEFAULT_UPDATE_REPO,
                "debug_updater": "false",
                "ignored_version": "",
            },
            SECTION_DIRECTORY: {
                "logs": str(self.config_dir / "logs"),
                "tmp": str(self.config_dir / "tmp"),
            },
        }

    def _create_parser(self) -> configparser.ConfigParser:
        """Create a ConfigParser populated with defaults."""
        parser = configparser.ConfigParser(
            inline_comment_prefixes=("#", ";"),
            interpolation=None,
        )
        defaults = self.get_default_settings()
        parser.read_dict(
            {
                SECTION_DEFAULT: {
                    key: value
                    for key, value in defaults.items()
                    if not isinstance(value, dict)
                }
            }
        )
        for key, value in defaults.items():
            if isinstance(value, dict):
                parser.add_section(key)
                for subkey, subvalue in value.items():
                    parser.set(key, subkey, subvalue)
        return parser

    def load_settings(self) -> Settings:
        """Load settings, writing a default file on first run.

        Returns:
            Typed settings

        Raises:
            ConfigError: If the file exists but cannot be parsed

        """
        parser = self._create_parser()

        if self.settings_file.exists():
            try:
                parser.read(self.settings_file, encoding="utf-8")
            except configparser.Error as e:
                msg = f"Cannot parse {self.settings_file}: {e}"
                raise ConfigError(msg) from e
            settings = self._convert(parser)
        else:
            settings = self._convert(parser)
            try:
                self.save_settings(settings)
            except OSError as e:
                logger.warning("Could not write default settings: %s", e)

        return settings

    def save_settings(self, settings: Settings) -> None:
        """Save settings to the INI file with inline comments.

        Args:
            settings: Settings to persist

        """
        self.config_dir.mkdir(parents=True, exist_ok=True)

        sections: dict[str, dict[str, str]] = {
            SECTION_DEFAULT: {
                KEY_LOG_LEVEL: settings["log_level"],
                KEY_CONSOLE_LOG_LEVEL: settings["console_log_level"],
                KEY_MAX_CONCURRENT_REQUESTS: str(
                    settings["max_concurrent_requests"]
                ),
                KEY_CATALOG_LIMIT: str(settings["catalog_limit"]),
            },
            SECTION_NETWORK: {
                "timeout_seconds": str(
                    settings["network"]["timeout_seconds"]
                ),
            },
            SECTION_UPDATE: {
                "owner": settings["update"]["owner"],
                "repo": settings["update"]["repo"],
                "debug_updater": str(
                    settings["update"]["debug_updater"]
                ).lower(),
                "ignored_version": settings["update"]["ignored_version"],
            },
            SECTION_DIRECTORY: {
                key: str(path)
                for key, path in settings["directory"].items()
            },
        }

        with self.settings_file.open("w", encoding="utf-8") as f:
            f.write(_FILE_HEADER)
            for section, values in sections.items():
                f.write(f"[{section}]\n")
                for key, value in values.items():
                    comment = _KEY_COMMENTS[section].get(key, "")
                    if comment:
                        f.write(f"{key} = {value}  {comment}\n")
                    else:
                        f.write(f"{key} = {value}\n")
                f.write("\n")

    def _convert(self, parser: configparser.ConfigParser) -> Settings:
        """Convert parsed INI values to typed settings."""
        defaults = parser[SECTION_DEFAULT]
        network = parser[SECTION_NETWORK]
        update = parser[SECTION_UPDATE]
        directory = parser[SECTION_DIRECTORY]

        catalog_limit = self._get_int(
            defaults, KEY_CATALOG_LIMIT, DEFAULT_CATALOG_LIMIT
        )
        if not 1 <= catalog_limit <= MAX_PAGE_LIMIT:
            logger.warning(
                "catalog_limit %d out of range, using %d",
                catalog_limit,
                DEFAULT_CATALOG_LIMIT,
            )
            catalog_limit = DEFAULT_CATALOG_LIMIT

        max_concurrent = self._get_int(
            defaults,
            KEY_MAX_CONCURRENT_REQUESTS,
            DEFAULT_MAX_CONCURRENT_REQUESTS,
        )
        if max_concurrent < 1:
            logger.warning(
                "max_concurrent_requests must be positive, using %d",
                DEFAULT_MAX_CONCURRENT_REQUESTS,
            )
            max_concurrent = DEFAULT_MAX_CONCURRENT_REQUESTS

        return Settings(
            log_level=self._get_level(
                defaults, KEY_LOG_LEVEL, DEFAULT_LOG_LEVEL
            ),
            console_log_level=self._get_level(
                defaults, KEY_CONSOLE_LOG_LEVEL, DEFAULT_CONSOLE_LOG_LEVEL
            ),
            max_concurrent_requests=max_concurrent,
            catalog_limit=catalog_limit,
            network={
                "timeout_seconds": self._get_int(
                    network, "timeout_seconds", DEFAULT_TIMEOUT_SECONDS
                ),
            },
            update={
                "owner": update.get("owner", DEFAULT_UPDATE_OWNER),
                "repo": update.get("repo", DEFAULT_UPDATE_REPO),
                "debug_updater": self._get_bool(update, "debug_updater"),
                "ignored_version": update.get("ignored_version", ""),
            },
            directory={
                "logs": Paths.expand_path(directory["logs"]),
                "tmp": Paths.expand_path(directory["tmp"]),
            },
        )

    @staticmethod
    def _get_int(
        section: configparser.SectionProxy, key: str, default: int
    ) -> int:
        """Read an integer option, falling back to ``default``."""
        try:
            return section.getint(key, fallback=default)
        except ValueError:
            logger.warning(
                "Invalid integer for %s: %r, using %d",
                key,
                section.get(key),
                default,
            )
            return default

    @staticmethod
    def _get_bool(section: configparser.SectionProxy, key: str) -> bool:
        """Read a boolean option, treating bad values as false."""
        try:
            return section.getboolean(key, fallback=False)
        except ValueError:
            logger.warning("Invalid boolean for %s: %r", key, section.get(key))
            return False

    @staticmethod
    def _get_level(
        section: configparser.SectionProxy, key: str, default: str
    ) -> str:
        """Read a log level name, falling back to ``default``."""
        value = section.get(key, default).upper()
        if value not in _VALID_LEVELS:
            logger.warning("Invalid log level for %s: %r", key, value)
            return default
        return value
