"""Tests for CLIParser."""

import pytest

from release_desk.cli.parser import CLIParser


@pytest.fixture
def parser() -> CLIParser:
    """Fresh parser."""
    return CLIParser()


class TestGlobalOptions:
    """Top-level flags."""

    def test_version_flag(self, parser: CLIParser) -> None:
        """--version works without a command."""
        args = parser.parse_args(["--version"])

        assert args.version
        assert args.command is None


class TestApps:
    """apps subcommand."""

    def test_defaults(self, parser: CLIParser) -> None:
        """No icons, no limit override, not verbose."""
        args = parser.parse_args(["apps"])

        assert args.command == "apps"
        assert not args.icons
        assert args.limit is None
        assert not args.verbose

    def test_options(self, parser: CLIParser) -> None:
        """Icons, limit and verbosity parse."""
        args = parser.parse_args(["apps", "--icons", "--limit", "20", "-v"])

        assert args.icons
        assert args.limit == 20
        assert args.verbose


class TestDetailAndNotes:
    """detail and notes subcommands."""

    def test_detail_platform(self, parser: CLIParser) -> None:
        """Platforms use API wire values."""
        args = parser.parse_args(["detail", "123", "--platform", "MAC_OS"])

        assert args.app_id == "123"
        assert args.platform == "MAC_OS"

    def test_detail_rejects_unknown_platform(self, parser: CLIParser) -> None:
        """Unknown platforms are rejected by argparse."""
        with pytest.raises(SystemExit):
            parser.parse_args(["detail", "123", "--platform", "ANDROID"])

    def test_notes_set_is_repeatable(self, parser: CLIParser) -> None:
        """Several --set pairs accumulate."""
        args = parser.parse_args(
            [
                "notes",
                "123",
                "--set",
                "en-US",
                "Bug fixes",
                "--set",
                "de-DE",
                "Fehlerbehebungen",
                "--upload",
            ]
        )

        assert args.set == [
            ["en-US", "Bug fixes"],
            ["de-DE", "Fehlerbehebungen"],
        ]
        assert args.upload

    def test_notes_requires_an_action(self, parser: CLIParser) -> None:
        """One of --show/--set/--template/--copy-previous is required."""
        with pytest.raises(SystemExit):
            parser.parse_args(["notes", "123"])

    def test_notes_actions_are_exclusive(self, parser: CLIParser) -> None:
        """Actions cannot be combined."""
        with pytest.raises(SystemExit):
            parser.parse_args(
                ["notes", "123", "--show", "--template", "Fixes"]
            )


class TestConfigAndUpgrade:
    """config and upgrade subcommands."""

    def test_set_credentials(self, parser: CLIParser) -> None:
        """Credential flags parse alongside the action."""
        args = parser.parse_args(
            [
                "config",
                "--set-credentials",
                "--issuer-id",
                "uuid",
                "--key-id",
                "KEY",
                "--key-file",
                "AuthKey.p8",
            ]
        )

        assert args.set_credentials
        assert (args.issuer_id, args.key_id, args.key_file) == (
            "uuid",
            "KEY",
            "AuthKey.p8",
        )

    def test_config_requires_action(self, parser: CLIParser) -> None:
        """config without an action is an error."""
        with pytest.raises(SystemExit):
            parser.parse_args(["config"])

    def test_upgrade_flags(self, parser: CLIParser) -> None:
        """Upgrade accepts --check-only and --ignore."""
        args = parser.parse_args(["upgrade", "--check-only"])

        assert args.check_only
        assert not args.ignore
