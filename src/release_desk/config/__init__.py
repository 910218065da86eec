"""Configuration management for release-desk.

- settings.py: SettingsManager for the settings.conf INI file
- credentials.py: KeyringCredentialStore for App Store Connect keys
- paths.py: Path constants

Requirements:
    - orjson: credential blob serialization
    - keyring: credential storage
"""

from pathlib import Path

from release_desk.config.credentials import (
    AppStoreConnectConfig,
    KeyringCredentialStore,
)
from release_desk.config.paths import Paths
from release_desk.config.settings import SettingsManager
from release_desk.types import Settings

__all__ = [
    "AppStoreConnectConfig",
    "ConfigManager",
    "KeyringCredentialStore",
    "Paths",
    "SettingsManager",
]


class ConfigManager:
    """Facade that coordinates settings and credential storage."""

    def __init__(
        self,
        config_dir: Path | None = None,
        credential_store: KeyringCredentialStore | None = None,
    ) -> None:
        """Initialize configuration manager.

        Args:
            config_dir: Optional custom config directory.
                Defaults to Paths.CONFIG_DIR
            credential_store: Optional credential store
                (defaults to the system keyring)

        """
        self._config_dir = config_dir or Paths.CONFIG_DIR
        self.settings_manager = SettingsManager(self._config_dir)
        self.credentials = credential_store or KeyringCredentialStore()

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir

    @property
    def settings_file(self) -> Path:
        """Get the settings file path."""
        return self.settings_manager.settings_file

    def load_settings(self) -> Settings:
        """Load settings from the INI file."""
        return self.settings_manager.load_settings()

    def save_settings(self, settings: Settings) -> None:
        """Save settings to the INI file."""
        self.settings_manager.save_settings(settings)

    def load_credentials(self) -> AppStoreConnectConfig:
        """Load App Store Connect credentials from the keyring."""
        return self.credentials.load()

    def save_credentials(self, config: AppStoreConnectConfig) -> None:
        """Store App Store Connect credentials in the keyring."""
        self.credentials.save(config)

    def clear_credentials(self) -> None:
        """Remove App Store Connect credentials from the keyring."""
        self.credentials.clear()
