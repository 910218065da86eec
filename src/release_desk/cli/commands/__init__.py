"""Command handlers for release-desk CLI."""

from release_desk.cli.commands.apps import AppsHandler
from release_desk.cli.commands.base import BaseCommandHandler
from release_desk.cli.commands.config import ConfigHandler
from release_desk.cli.commands.detail import DetailHandler
from release_desk.cli.commands.notes import NotesHandler
from release_desk.cli.commands.upgrade import UpgradeHandler

__all__ = [
    "AppsHandler",
    "BaseCommandHandler",
    "ConfigHandler",
    "DetailHandler",
    "NotesHandler",
    "UpgradeHandler",
]
