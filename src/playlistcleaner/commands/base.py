"""Base command class for playlist operations."""

import asyncio

from ..cleaner import PlaylistCleaner
from ..errors import PlaylistCleanerError
from ..logging_config import get_logger

# Get logger for this module
logger = get_logger(__name__)


class PlaylistCommand:
    """Base class for playlist commands."""

    def __init__(self, cleaner: PlaylistCleaner, dry_run: bool = False):
        """Initialize command.

        Args:
            cleaner: Playlist cleaner bound to an authenticated client
            dry_run: Whether to only report what would change
        """
        self.cleaner = cleaner
        self.dry_run = dry_run
        self._logger = logger
        self._validated = False
        self.result = None

    def validate(self) -> None:
        """Validate command parameters.

        Raises:
            ValueError: If parameters are invalid
        """
        if not self.cleaner:
            raise ValueError("Playlist cleaner is required")
        self._validated = True

    def run(self) -> bool:
        """Run the command.

        Returns:
            bool: True if successful, False otherwise

        Raises:
            PlaylistCleanerError: If command fails
        """
        try:
            self.validate()
            return asyncio.run(self._run())
        except PlaylistCleanerError:
            raise
        except Exception as e:
            raise PlaylistCleanerError(str(e)) from e

    async def _run(self) -> bool:
        """Internal run implementation.

        Returns:
            bool: True if successful, False otherwise
        """
        return False
