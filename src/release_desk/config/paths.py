"""Path constants for release-desk configuration."""

from pathlib import Path

from release_desk.constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_SUBDIR,
)


class Paths:
    """Application paths and directory structure."""

    HOME_DIR = Path.home()
    CONFIG_DIR = HOME_DIR / DEFAULT_CONFIG_SUBDIR / CONFIG_DIR_NAME
    LOGS_DIR = CONFIG_DIR / "logs"
    TMP_DIR = CONFIG_DIR / "tmp"
    SETTINGS_FILE = CONFIG_DIR / CONFIG_FILE_NAME

    @classmethod
    def expand_path(cls, path_str: str) -> Path:
        """Expand ``~`` and resolve a configured path.

        Args:
            path_str: Path as written in settings.conf

        Returns:
            Absolute path

        """
        return Path(path_str).expanduser().resolve()
