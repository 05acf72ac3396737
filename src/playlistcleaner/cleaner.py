"""Playlist duplicate listing and cleanup operations."""

import asyncio
from typing import Any, Dict, Iterable, List, Optional

from . import config
from .api import PlaylistAPI
from .batch import BatchMutationExecutor
from .connectivity import probe
from .deduplicate import (
    find_duplicates,
    plan_collapse_removal,
    plan_reinsertion,
    plan_specific_removal,
)
from .errors import (
    AuthenticationRequiredError,
    InvalidArgumentError,
    OperationCancelledError,
    check_cancelled,
    log_error,
)
from .logging_config import get_logger
from .models import DuplicateReport, PlaylistSummary
from .reader import read_snapshot, read_tracks

logger = get_logger(__name__)


def _require(value: Optional[str], name: str) -> str:
    if not value or not value.strip():
        raise InvalidArgumentError(f"{name} cannot be empty")
    return value.strip()


def _summary_from_playlist(playlist: Dict[str, Any]) -> PlaylistSummary:
    return PlaylistSummary(
        playlist_id=playlist["id"],
        name=playlist.get("name"),
        owner=(playlist.get("owner") or {}).get("display_name"),
        track_count=(playlist.get("tracks") or {}).get("total"),
        snapshot_id=playlist.get("snapshot_id"),
        uri=playlist.get("uri"),
        is_public=playlist.get("public"),
    )


class PlaylistCleaner:
    """Finds and removes duplicate tracks in the user's Spotify playlists.

    Every operation reads the playlist again before acting on it; nothing is
    cached between calls. Running two cleanups against the same playlist at
    the same time is not supported.
    """

    def __init__(
        self,
        api: PlaylistAPI,
        batch_size: int = config.MAX_BATCH_SIZE,
        progress: bool = False,
    ):
        """Initialize cleaner.

        Args:
            api: Remote playlist API
            batch_size: Items per mutation request
            progress: Whether to show progress bars while mutating
        """
        self.api = api
        self.batch_size = batch_size
        self.progress = progress

    async def is_connected(self) -> bool:
        """Check whether the Spotify session is authenticated."""
        return await probe(self.api)

    async def _ensure_connected(self) -> None:
        logger.info("Checking client connection...")
        if not await probe(self.api):
            raise AuthenticationRequiredError(
                "Spotify client is not connected or token is invalid"
            )
        logger.info("Client connection verified")

    def _executor(self, cancel: Optional[asyncio.Event]) -> BatchMutationExecutor:
        return BatchMutationExecutor(
            self.api, batch_size=self.batch_size, cancel=cancel, progress=self.progress
        )

    async def get_playlist_duplicates(
        self, playlist_id: str, cancel: Optional[asyncio.Event] = None
    ) -> DuplicateReport:
        """Get the duplicate report of one playlist.

        Args:
            playlist_id: ID of playlist to inspect
            cancel: Optional cancellation event

        Returns:
            Mapping of first occurrence to number of extra copies
        """
        playlist_id = _require(playlist_id, "Playlist ID")
        try:
            tracks = await read_tracks(self.api, playlist_id, cancel)
            duplicates = find_duplicates(tracks)
        except OperationCancelledError:
            logger.warning("Duplicate lookup for playlist %s was cancelled", playlist_id)
            raise
        except Exception as e:
            log_error(e, f"Error getting duplicate tracks for playlist {playlist_id}")
            raise

        logger.info(
            "Found %d duplicate tracks in playlist %s", len(duplicates), playlist_id
        )
        return duplicates

    async def list_all_playlists_with_duplicates(
        self, cancel: Optional[asyncio.Event] = None
    ) -> List[PlaylistSummary]:
        """List the user's playlists with the duplicates found in each.

        Args:
            cancel: Optional cancellation event

        Returns:
            One PlaylistSummary per playlist, in the order Spotify lists them
        """
        summaries = []
        page_token = None

        try:
            logger.info("Starting to fetch all user playlists")
            while True:
                check_cancelled(cancel)
                page = await self.api.list_playlists(page_token=page_token)
                logger.debug("Fetched playlist page, total playlists available: %d", page.total)

                for playlist in page.items:
                    check_cancelled(cancel)
                    summary = _summary_from_playlist(playlist)
                    summary.duplicates = await self.get_playlist_duplicates(
                        summary.playlist_id, cancel
                    )
                    summaries.append(summary)
                    if len(summaries) % 10 == 0:
                        logger.debug("Processed %d playlists so far", len(summaries))

                page_token = page.next_page_token
                if not page_token:
                    break
        except OperationCancelledError:
            logger.warning("Listing playlists was cancelled")
            raise
        except Exception as e:
            log_error(e, "Error occurred while fetching all playlists")
            raise

        logger.info("Successfully retrieved %d playlists", len(summaries))
        return summaries

    async def remove_specific_duplicates(
        self, playlist_id: str, track_id: str, cancel: Optional[asyncio.Event] = None
    ) -> int:
        """Remove every copy of a track except its first occurrence.

        Args:
            playlist_id: ID of playlist to clean
            track_id: ID of the duplicated track
            cancel: Optional cancellation event

        Returns:
            Number of copies removed

        Raises:
            InvalidArgumentError: If playlist or track ID is empty
            AuthenticationRequiredError: If the session is not authenticated
        """
        playlist_id = _require(playlist_id, "Playlist ID")
        track_id = _require(track_id, "Track ID")

        try:
            await self._ensure_connected()
            logger.info(
                "Starting to delete duplicates of track %s from playlist %s",
                track_id,
                playlist_id,
            )

            snapshot = await read_snapshot(self.api, playlist_id, cancel)
            candidates = plan_specific_removal(snapshot.tracks, track_id, cancel)
            if not candidates:
                logger.warning("No duplicates of track %s found in playlist %s", track_id, playlist_id)
                return 0

            logger.info(
                "Found %d duplicate occurrences of track %s (keeping first occurrence)",
                len(candidates),
                track_id,
            )
            removed = await self._executor(cancel).remove_batches(
                playlist_id, candidates, snapshot_id=snapshot.snapshot_id
            )
        except OperationCancelledError:
            logger.warning("Removing duplicates from playlist %s was cancelled", playlist_id)
            raise
        except Exception as e:
            log_error(e, f"Error occurred while deleting duplicates from playlist {playlist_id}")
            raise

        logger.info("Successfully removed %d tracks from playlist %s", removed, playlist_id)
        return removed

    async def collapse_all_duplicates(
        self,
        playlist_id: str,
        track_ids: Optional[Iterable[str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> int:
        """Collapse duplicated tracks down to a single copy each.

        Every occurrence of each track is removed, then one copy per track is
        put back at its earliest original position (clamped to the playlist
        size after removal).

        Args:
            playlist_id: ID of playlist to clean
            track_ids: Track IDs to collapse; None collapses every duplicate
                currently in the playlist
            cancel: Optional cancellation event

        Returns:
            Number of occurrences removed, before reinsertion

        Raises:
            InvalidArgumentError: If playlist ID is empty, or track_ids is
                a single string, empty, or contains an empty ID
            AuthenticationRequiredError: If the session is not authenticated
        """
        playlist_id = _require(playlist_id, "Playlist ID")
        if isinstance(track_ids, str):
            raise InvalidArgumentError("Track IDs must be a list of IDs, not a single string")
        if track_ids is not None:
            track_ids = [_require(track_id, "Track ID") for track_id in track_ids]
            if not track_ids:
                raise InvalidArgumentError("Track IDs cannot be empty")

        try:
            await self._ensure_connected()
            logger.info("Fetching all tracks from playlist %s...", playlist_id)
            snapshot = await read_snapshot(self.api, playlist_id, cancel)
            tracks = snapshot.tracks
            logger.info("Fetched %d total entries from playlist", snapshot.total)

            if track_ids is None:
                track_ids = [record.identity for record in find_duplicates(tracks)]

            candidates = plan_collapse_removal(tracks, track_ids, cancel)
            if not candidates:
                logger.info("None of the requested tracks found in playlist %s", playlist_id)
                return 0

            logger.info("Found %d tracks to remove", len(candidates))
            executor = self._executor(cancel)
            removed = await executor.remove_batches(
                playlist_id, candidates, snapshot_id=snapshot.snapshot_id
            )
            logger.info("Successfully removed %d tracks from playlist %s", removed, playlist_id)

            survivors = plan_reinsertion(candidates)
            metadata = await self.api.get_metadata(playlist_id)
            logger.info("Adding %d tracks back to playlist %s", len(survivors), playlist_id)
            added = await executor.add_batches(
                playlist_id, survivors, current_size=metadata.get("total", 0)
            )
            logger.info("Successfully added %d tracks back to playlist %s", added, playlist_id)
        except OperationCancelledError:
            logger.warning("Collapsing duplicates in playlist %s was cancelled", playlist_id)
            raise
        except Exception as e:
            log_error(e, f"Error occurred while collapsing duplicates in playlist {playlist_id}")
            raise

        return removed

