"""CLI argument parser for release-desk.

Handles parsing of command-line arguments and provides a clean
interface for defining CLI commands and their options.
"""

import argparse
from argparse import Namespace
from collections.abc import Sequence

from release_desk.domain.platform import Platform

PLATFORM_CHOICES = [platform.value for platform in Platform]


class CLIParser:
    """Command-line argument parser for release-desk."""

    def parse_args(self, argv: Sequence[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments to parse; ``sys.argv[1:]`` when None

        Returns:
            Namespace: Parsed arguments namespace.

        """
        return self.build_parser().parse_args(argv)

    def build_parser(self) -> argparse.ArgumentParser:
        """Create the fully configured parser."""
        parser = self._create_main_parser()
        self._add_global_options(parser)
        self._add_subcommands(parser)
        return parser

    def _create_main_parser(self) -> argparse.ArgumentParser:
        return argparse.ArgumentParser(
            prog="release-desk",
            description="App Store Connect catalog and release notes",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Store API credentials (kept in the system keyring)
  %(prog)s config --set-credentials --issuer-id UUID --key-id ABC123 \\
      --key-file AuthKey_ABC123.p8
  %(prog)s config --test

  # Browse the catalog
  %(prog)s apps --icons
  %(prog)s detail 1234567890 --platform IOS

  # Edit "What's New" of the version being prepared
  %(prog)s notes 1234567890 --show
  %(prog)s notes 1234567890 --set en-US "Bug fixes" --upload
  %(prog)s notes 1234567890 --copy-previous --upload

  # Client updates
  %(prog)s upgrade --check-only
            """,
        )

    def _add_global_options(self, parser: argparse.ArgumentParser) -> None:
        # Long form only; -v stays free for subcommand verbosity.
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show release-desk version and exit",
        )

    def _add_subcommands(self, parser: argparse.ArgumentParser) -> None:
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands"
        )
        self._add_apps_command(subparsers)
        self._add_detail_command(subparsers)
        self._add_notes_command(subparsers)
        self._add_config_command(subparsers)
        self._add_upgrade_command(subparsers)

    @staticmethod
    def _add_verbose(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Show debug output on the console",
        )

    def _add_apps_command(self, subparsers) -> None:
        apps_parser = subparsers.add_parser(
            "apps", help="List apps, one row per platform"
        )
        apps_parser.add_argument(
            "--icons",
            action="store_true",
            help="Look up icon URLs from the public App Store",
        )
        apps_parser.add_argument(
            "--limit",
            type=int,
            default=None,
            help="Maximum number of apps to list (1-200)",
        )
        self._add_verbose(apps_parser)

    def _add_detail_command(self, subparsers) -> None:
        detail_parser = subparsers.add_parser(
            "detail", help="Show app details and version history"
        )
        detail_parser.add_argument("app_id", help="App Store Connect app id")
        detail_parser.add_argument(
            "--platform",
            choices=PLATFORM_CHOICES,
            help="Only show versions of this platform",
        )
        self._add_verbose(detail_parser)

    def _add_notes_command(self, subparsers) -> None:
        notes_parser = subparsers.add_parser(
            "notes",
            help="View or edit localized release notes",
            epilog="""
Edits apply to the newest version and only while it is being prepared
for submission. Without --upload, edits are only previewed.
            """,
        )
        notes_parser.add_argument("app_id", help="App Store Connect app id")
        notes_parser.add_argument(
            "--platform",
            choices=PLATFORM_CHOICES,
            help="Platform whose version to edit",
        )
        action = notes_parser.add_mutually_exclusive_group(required=True)
        action.add_argument(
            "--show",
            action="store_true",
            help="Show the notes of every locale",
        )
        action.add_argument(
            "--set",
            nargs=2,
            action="append",
            metavar=("LOCALE", "TEXT"),
            help="Set the text of one locale (repeatable)",
        )
        action.add_argument(
            "--template",
            metavar="TEXT",
            help="Use the same text for every locale",
        )
        action.add_argument(
            "--copy-previous",
            action="store_true",
            help="Copy notes from the previous version",
        )
        notes_parser.add_argument(
            "--upload",
            action="store_true",
            help="Upload changed locales",
        )
        self._add_verbose(notes_parser)

    def _add_config_command(self, subparsers) -> None:
        config_parser = subparsers.add_parser(
            "config", help="Manage settings and API credentials"
        )
        action = config_parser.add_mutually_exclusive_group(required=True)
        action.add_argument(
            "--show", action="store_true", help="Show current configuration"
        )
        action.add_argument(
            "--set-credentials",
            action="store_true",
            help="Store API credentials in the system keyring",
        )
        action.add_argument(
            "--clear",
            action="store_true",
            help="Remove stored API credentials",
        )
        action.add_argument(
            "--test",
            action="store_true",
            help="Check that the stored credentials work",
        )
        config_parser.add_argument("--issuer-id", help="API issuer id")
        config_parser.add_argument("--key-id", help="API key id")
        config_parser.add_argument(
            "--key-file", help="Path to the downloaded .p8 key file"
        )

    def _add_upgrade_command(self, subparsers) -> None:
        upgrade_parser = subparsers.add_parser(
            "upgrade", help="Update release-desk itself"
        )
        upgrade_parser.add_argument(
            "--check-only",
            action="store_true",
            help="Only check whether a newer release exists",
        )
        upgrade_parser.add_argument(
            "--ignore",
            action="store_true",
            help="Stop notifying about the latest release",
        )
        self._add_verbose(upgrade_parser)
