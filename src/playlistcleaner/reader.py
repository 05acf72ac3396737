"""Position indexed reading of playlist items."""

import asyncio
from typing import Any, AsyncIterator, Dict, List, Optional

from . import config
from .api import PlaylistAPI
from .errors import check_cancelled
from .logging_config import get_logger
from .models import CollectionSnapshot, OtherMedia, PlayableTrack, PlaylistEntry, TrackRecord

logger = get_logger(__name__)


def classify_item(item: Optional[Dict[str, Any]], position: int) -> PlaylistEntry:
    """Turn a raw playlist item into a PlayableTrack or OtherMedia entry.

    Args:
        item: Playlist item as returned by the playlist items endpoint
        position: Zero based index of the item in the playlist

    Returns:
        PlayableTrack for full tracks with an id, OtherMedia otherwise
    """
    track = (item or {}).get("track")
    if not track:
        return OtherMedia(position, "unavailable")
    kind = track.get("type", "track")
    if kind != "track":
        return OtherMedia(position, kind)
    if item.get("is_local") or not track.get("id"):
        return OtherMedia(position, "local")
    return PlayableTrack(
        position=position,
        identity=track["id"],
        locator=track.get("uri") or f"spotify:track:{track['id']}",
        name=track.get("name"),
    )


async def read_playlist(
    api: PlaylistAPI,
    playlist_id: str,
    cancel: Optional[asyncio.Event] = None,
    page_size: int = config.PAGE_SIZE,
) -> AsyncIterator[PlaylistEntry]:
    """Yield every entry of a playlist with its position.

    Positions count all entries, including ones that are not tracks, so
    they always match the index Spotify uses for the item.

    Args:
        api: Remote playlist API
        playlist_id: ID of playlist to read
        cancel: Optional event checked before each page and each entry
        page_size: Number of items per page request

    Yields:
        PlayableTrack or OtherMedia entries in playlist order

    Raises:
        OperationCancelledError: If cancel is set while reading
        ExternalServiceError: If a page request fails
    """
    position = 0
    page_token = None
    pages = 0

    while True:
        check_cancelled(cancel)
        page = await api.list_items(playlist_id, page_token=page_token, limit=page_size)
        pages += 1
        logger.debug(
            "Fetched page %d of playlist %s (%d items, %d total)",
            pages,
            playlist_id,
            len(page.items),
            page.total,
        )

        for item in page.items:
            check_cancelled(cancel)
            yield classify_item(item, position)
            position += 1

        page_token = page.next_page_token
        if not page_token:
            break

    logger.debug("Pagination complete for playlist %s, read %d entries", playlist_id, position)


async def read_tracks(
    api: PlaylistAPI, playlist_id: str, cancel: Optional[asyncio.Event] = None
) -> List[TrackRecord]:
    """Read the playable tracks of a playlist in order."""
    return [entry.record async for entry in read_playlist(api, playlist_id, cancel) if entry.is_track]


async def read_snapshot(
    api: PlaylistAPI, playlist_id: str, cancel: Optional[asyncio.Event] = None
) -> CollectionSnapshot:
    """Read a playlist together with the snapshot id its positions refer to.

    Args:
        api: Remote playlist API
        playlist_id: ID of playlist to read
        cancel: Optional cancellation event

    Returns:
        CollectionSnapshot with every entry
    """
    metadata = await api.get_metadata(playlist_id)
    entries = [entry async for entry in read_playlist(api, playlist_id, cancel)]
    return CollectionSnapshot(
        playlist_id=playlist_id,
        snapshot_id=metadata.get("snapshot_id"),
        total=len(entries),
        entries=entries,
    )
