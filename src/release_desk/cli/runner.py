"""CLI runner for release-desk.

Orchestrates the execution of CLI commands by routing parsed
arguments to the appropriate command handlers.
"""

import sys
from argparse import Namespace
from collections.abc import Sequence

from release_desk import __version__
from release_desk.cli.commands import (
    AppsHandler,
    BaseCommandHandler,
    ConfigHandler,
    DetailHandler,
    NotesHandler,
    UpgradeHandler,
)
from release_desk.cli.container import ServiceContainer
from release_desk.cli.parser import CLIParser
from release_desk.config import ConfigManager
from release_desk.exceptions import ReleaseDeskError
from release_desk.logger import (
    get_logger,
    temporary_console_level,
    update_logger_from_config,
)

logger = get_logger(__name__)

COMMAND_HANDLERS: dict[str, type[BaseCommandHandler]] = {
    "apps": AppsHandler,
    "detail": DetailHandler,
    "notes": NotesHandler,
    "config": ConfigHandler,
    "upgrade": UpgradeHandler,
}


class CLIRunner:
    """CLI command runner and orchestrator."""

    def __init__(
        self,
        config_manager: ConfigManager | None = None,
        container: ServiceContainer | None = None,
    ) -> None:
        """Initialize CLI runner.

        Args:
            config_manager: Configuration manager; default if omitted
            container: Pre-built service container (tests)

        """
        self.config_manager = config_manager or ConfigManager()
        self._container = container

    async def run(self, argv: Sequence[str] | None = None) -> None:
        """Run the CLI application.

        Parses arguments, handles global flags, validates commands,
        and routes to the appropriate handler. Exits with status 1 on
        any failure.
        """
        args = CLIParser().parse_args(argv)

        if args.version:
            print(__version__)
            return

        if not args.command:
            print("❌ No command specified. Use --help.")
            sys.exit(1)

        try:
            update_logger_from_config()
            await self._execute_command(args)
        except KeyboardInterrupt:
            print("\n⏹️  Operation cancelled by user")
            sys.exit(1)
        except ReleaseDeskError as e:
            logger.debug("Command failed", exc_info=True)
            print(f"❌ {e}")
            sys.exit(1)
        except Exception as e:
            logger.exception("Unexpected error")
            print(f"❌ Unexpected error: {e}")
            sys.exit(1)

    async def _execute_command(self, args: Namespace) -> None:
        """Execute the specified command with the appropriate handler."""
        handler_class = COMMAND_HANDLERS.get(args.command)
        if handler_class is None:
            print(f"❌ Unknown command: {args.command}")
            sys.exit(1)

        container = self._container or ServiceContainer(self.config_manager)
        level = "DEBUG" if getattr(args, "verbose", False) else "INFO"
        try:
            with temporary_console_level(level):
                await handler_class(container).execute(args)
        finally:
            await container.cleanup()
