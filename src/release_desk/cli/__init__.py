"""Command-line interface for release-desk."""

from release_desk.cli.runner import CLIRunner

__all__ = ["CLIRunner"]
