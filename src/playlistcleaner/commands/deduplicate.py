"""Commands for listing and removing duplicate tracks."""

from typing import List, Optional

from ..cleaner import PlaylistCleaner
from ..deduplicate import count_duplicates
from ..models import DuplicateReport
from ..utils import parse_playlist_id, parse_track_id
from .base import PlaylistCommand


class ListDuplicatesCommand(PlaylistCommand):
    """Command for reporting duplicate tracks."""

    def __init__(self, cleaner: PlaylistCleaner, playlist_id: Optional[str] = None):
        """Initialize command.

        Args:
            cleaner: Playlist cleaner
            playlist_id: Optional playlist to inspect; all playlists when None
        """
        super().__init__(cleaner)
        self.playlist_id = playlist_id

    def validate(self) -> None:
        """Validate command arguments."""
        super().validate()
        if self.playlist_id is not None:
            self.playlist_id = parse_playlist_id(self.playlist_id)

    def _log_report(self, report: DuplicateReport) -> None:
        for record, surplus in report.items():
            self._logger.info(
                "  %s (first at position %d): %d extra copies",
                record.identity,
                record.position,
                surplus,
            )

    async def _run(self) -> bool:
        if self.playlist_id:
            report = await self.cleaner.get_playlist_duplicates(self.playlist_id)
            self._logger.info(
                "Playlist %s has %d duplicate copies", self.playlist_id, count_duplicates(report)
            )
            self._log_report(report)
            self.result = report
            return True

        summaries = await self.cleaner.list_all_playlists_with_duplicates()
        for summary in summaries:
            self._logger.info(
                "%s (%s) by %s: %s tracks, %d duplicate copies",
                summary.name,
                summary.playlist_id,
                summary.owner,
                summary.track_count,
                summary.duplicate_count,
            )
            self._log_report(summary.duplicates)
        self.result = summaries
        return True


class RemoveDuplicatesCommand(PlaylistCommand):
    """Command for removing the extra copies of one track."""

    def __init__(
        self, cleaner: PlaylistCleaner, playlist_id: str, track_id: str, dry_run: bool = False
    ):
        """Initialize command.

        Args:
            cleaner: Playlist cleaner
            playlist_id: Playlist to clean
            track_id: Duplicated track
            dry_run: Whether to only report the copies that would be removed
        """
        super().__init__(cleaner, dry_run=dry_run)
        self.playlist_id = playlist_id
        self.track_id = track_id

    def validate(self) -> None:
        """Validate command arguments."""
        super().validate()
        if not self.playlist_id:
            raise ValueError("Playlist ID is required")
        if not self.track_id:
            raise ValueError("Track ID is required")
        self.playlist_id = parse_playlist_id(self.playlist_id)
        self.track_id = parse_track_id(self.track_id)

    async def _run(self) -> bool:
        if self.dry_run:
            report = await self.cleaner.get_playlist_duplicates(self.playlist_id)
            surplus = next(
                (n for r, n in report.items() if r.key == self.track_id.casefold()), 0
            )
            self._logger.info("Would remove %d copies of %s", surplus, self.track_id)
            self.result = 0
            return True

        self.result = await self.cleaner.remove_specific_duplicates(
            self.playlist_id, self.track_id
        )
        self._logger.info("Removed %d copies of %s", self.result, self.track_id)
        return True


class CollapseDuplicatesCommand(PlaylistCommand):
    """Command for collapsing duplicated tracks to a single copy."""

    def __init__(
        self,
        cleaner: PlaylistCleaner,
        playlist_id: str,
        track_ids: Optional[List[str]] = None,
        dry_run: bool = False,
    ):
        """Initialize command.

        Args:
            cleaner: Playlist cleaner
            playlist_id: Playlist to clean
            track_ids: Tracks to collapse; every duplicated track when empty
            dry_run: Whether to only report the tracks that would be collapsed
        """
        super().__init__(cleaner, dry_run=dry_run)
        self.playlist_id = playlist_id
        self.track_ids = track_ids or None

    def validate(self) -> None:
        """Validate command arguments."""
        super().validate()
        if not self.playlist_id:
            raise ValueError("Playlist ID is required")
        self.playlist_id = parse_playlist_id(self.playlist_id)
        if self.track_ids:
            self.track_ids = [parse_track_id(track_id) for track_id in self.track_ids]

    async def _run(self) -> bool:
        if self.dry_run:
            report = await self.cleaner.get_playlist_duplicates(self.playlist_id)
            wanted = {t.casefold() for t in self.track_ids} if self.track_ids else None
            for record, surplus in report.items():
                if wanted is None or record.key in wanted:
                    self._logger.info(
                        "Would collapse %s (%d extra copies) at position %d",
                        record.identity,
                        surplus,
                        record.position,
                    )
            self.result = 0
            return True

        self.result = await self.cleaner.collapse_all_duplicates(self.playlist_id, self.track_ids)
        self._logger.info("Removed %d tracks and reinserted one copy of each", self.result)
        return True
