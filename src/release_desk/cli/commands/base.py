"""Base command handler for release-desk CLI commands."""

from abc import ABC, abstractmethod
from argparse import Namespace

from release_desk.cli.container import ServiceContainer
from release_desk.logger import get_logger

logger = get_logger(__name__)


class BaseCommandHandler(ABC):
    """Abstract base class for all command handlers.

    Handlers receive the ServiceContainer and pull the services they need
    from it; they never construct services themselves.
    """

    def __init__(self, container: ServiceContainer) -> None:
        """Initialize the command handler.

        Args:
            container: Composition root holding every shared service

        """
        self.container = container
        self.config_manager = container.config

    @abstractmethod
    async def execute(self, args: Namespace) -> None:
        """Execute the command with the given arguments.

        Args:
            args: Parsed command-line arguments

        """
