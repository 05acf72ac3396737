"""Batched, strictly sequential playlist mutations."""

import asyncio
from typing import List, Optional, Sequence, TypeVar

from tqdm import tqdm

from . import config
from .api import PlaylistAPI
from .deduplicate import clamp_insert_position
from .errors import InvalidArgumentError, check_cancelled
from .logging_config import get_logger
from .models import TrackRecord

logger = get_logger(__name__)

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> List[List[T]]:
    """Split items into consecutive chunks of at most size elements.

    Args:
        items: Items to split
        size: Maximum chunk length

    Returns:
        List of chunks in original order

    Raises:
        InvalidArgumentError: If size is smaller than 1
    """
    if size < 1:
        raise InvalidArgumentError("Batch size must be at least 1")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class BatchMutationExecutor:
    """Sends removals and insertions to Spotify one batch at a time.

    Batches are never sent concurrently: later batches depend on the
    playlist state left by earlier ones. A failing batch stops the run and
    the error propagates; batches already sent stay applied.
    """

    def __init__(
        self,
        api: PlaylistAPI,
        batch_size: int = config.MAX_BATCH_SIZE,
        cancel: Optional[asyncio.Event] = None,
        progress: bool = False,
    ):
        """Initialize executor.

        Args:
            api: Remote playlist API
            batch_size: Items per request, capped at the API maximum
            cancel: Optional event checked before each batch
            progress: Whether to show a progress bar
        """
        if batch_size < 1:
            raise InvalidArgumentError("Batch size must be at least 1")
        self.api = api
        self.batch_size = min(batch_size, config.MAX_BATCH_SIZE)
        self.cancel = cancel
        self.progress = progress

    async def remove_batches(
        self,
        playlist_id: str,
        candidates: Sequence[TrackRecord],
        snapshot_id: Optional[str] = None,
    ) -> int:
        """Remove the given occurrences in batches.

        Args:
            playlist_id: ID of playlist to remove from
            candidates: Occurrences to remove, in the order to send them
            snapshot_id: Snapshot all candidate positions were read from

        Returns:
            Number of occurrences removed
        """
        total_removed = 0
        batches = chunked(list(candidates), self.batch_size)

        for batch_num, batch in enumerate(
            tqdm(batches, desc="Removing", unit="batch", disable=not self.progress), 1
        ):
            check_cancelled(self.cancel)
            await self.api.remove_items(
                playlist_id,
                [(record.locator, record.position) for record in batch],
                snapshot_id=snapshot_id,
            )
            total_removed += len(batch)
            logger.debug("Removed batch %d, total removed: %d", batch_num, total_removed)

        return total_removed

    async def add_batches(
        self, playlist_id: str, plan: Sequence[TrackRecord], current_size: int
    ) -> int:
        """Insert tracks back at their original positions in batches.

        Each batch goes to the original position of its first record,
        clamped to the playlist size at that moment. The records of a batch
        land next to each other, so relative order with the tracks left in
        the playlist is only kept per batch.

        Args:
            playlist_id: ID of playlist to add to
            plan: Records to insert, ordered by original position
            current_size: Playlist size before the first insertion

        Returns:
            Number of tracks added
        """
        total_added = 0

        for batch in tqdm(
            chunked(list(plan), self.batch_size),
            desc="Reinserting",
            unit="batch",
            disable=not self.progress,
        ):
            check_cancelled(self.cancel)
            position = clamp_insert_position(batch[0].position, current_size)
            await self.api.add_items(
                playlist_id, [record.locator for record in batch], position=position
            )
            current_size += len(batch)
            total_added += len(batch)
            logger.debug(
                "Added batch of %d tracks at position %d, total added: %d",
                len(batch),
                position,
                total_added,
            )

        return total_added
