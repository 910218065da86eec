"""Config command handler for release-desk CLI.

This module handles configuration management operations: showing the
current settings and managing the App Store Connect credentials kept in
the system keyring.
"""

from argparse import Namespace
from pathlib import Path

from release_desk.cli.commands.base import BaseCommandHandler
from release_desk.config import AppStoreConnectConfig
from release_desk.exceptions import ConfigError
from release_desk.logger import get_logger, temporary_console_level

logger = get_logger(__name__)


class ConfigHandler(BaseCommandHandler):
    """Handler for config command operations."""

    async def execute(self, args: Namespace) -> None:
        """Execute the config command."""
        with temporary_console_level("INFO"):
            if args.show:
                self._show_config()
            elif args.set_credentials:
                self._set_credentials(args)
            elif args.clear:
                self.config_manager.clear_credentials()
                logger.info("✅ Credentials removed from keyring")
            elif args.test:
                await self._test_connection()

    def _show_config(self) -> None:
        """Display current configuration."""
        settings = self.container.settings
        credentials = self.container.credentials.redacted()

        logger.info("📋 Current Configuration:")
        logger.info("  Settings File: %s", self.config_manager.settings_file)
        logger.info("  Log Level: %s", settings["log_level"])
        logger.info("  Console Log Level: %s", settings["console_log_level"])
        logger.info(
            "  Max Concurrent Requests: %s",
            settings["max_concurrent_requests"],
        )
        logger.info("  Catalog Limit: %s", settings["catalog_limit"])
        logger.info(
            "  Timeout: %ss", settings["network"]["timeout_seconds"]
        )
        logger.info(
            "  Update Feed: %s/%s",
            settings["update"]["owner"],
            settings["update"]["repo"],
        )
        logger.info(
            "  Ignored Version: %s",
            settings["update"]["ignored_version"] or "-",
        )
        logger.info("  Logs Dir: %s", settings["directory"]["logs"])
        logger.info("  Temp Dir: %s", settings["directory"]["tmp"])
        logger.info("")
        logger.info("🔑 Credentials:")
        logger.info("  Issuer ID: %s", credentials["issuer_id"] or "-")
        logger.info("  Key ID: %s", credentials["key_id"] or "-")
        logger.info("  Private Key: %s", credentials["private_key"] or "-")

    def _set_credentials(self, args: Namespace) -> None:
        """Read the key file and store all three credential fields."""
        missing = [
            flag
            for flag, value in (
                ("--issuer-id", args.issuer_id),
                ("--key-id", args.key_id),
                ("--key-file", args.key_file),
            )
            if not value
        ]
        if missing:
            msg = f"Missing {', '.join(missing)}"
            raise ConfigError(msg)

        key_path = Path(args.key_file).expanduser()
        try:
            private_key = key_path.read_text(encoding="utf-8")
        except OSError as e:
            msg = f"Cannot read key file {key_path}: {e}"
            raise ConfigError(msg) from e

        config = AppStoreConnectConfig(
            issuer_id=args.issuer_id.strip(),
            key_id=args.key_id.strip(),
            private_key=private_key.strip(),
        )
        self.config_manager.save_credentials(config)
        logger.info("✅ Credentials saved to keyring")

    async def _test_connection(self) -> None:
        """Try a minimal authenticated request."""
        if not self.container.credentials.is_valid:
            logger.info("❌ No credentials stored. Use --set-credentials.")
            return
        logger.info("🔍 Testing App Store Connect connection...")
        if await self.container.client.test_connection():
            logger.info("✅ Connection successful")
        else:
            logger.info("❌ Connection failed (see log for details)")
