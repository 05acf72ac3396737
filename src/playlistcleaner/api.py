"""Spotify Web API wrapper."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

import requests
import spotipy

from . import config
from .errors import (
    ExternalServiceError,
    InvalidArgumentError,
    PlaylistNotFoundError,
    RateLimitError,
    with_retry,
)
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ItemPage:
    """One page of a paginated listing."""

    items: List[Dict[str, Any]] = field(default_factory=list)
    next_page_token: Optional[str] = None
    total: int = 0


class PlaylistAPI(Protocol):
    """Remote surface the cleaner needs from the playlist service."""

    async def list_items(
        self, playlist_id: str, page_token: Optional[str] = None, limit: int = config.PAGE_SIZE
    ) -> ItemPage:
        ...

    async def get_metadata(self, playlist_id: str) -> Dict[str, Any]:
        ...

    async def remove_items(
        self,
        playlist_id: str,
        items: Sequence[Tuple[str, int]],
        snapshot_id: Optional[str] = None,
    ) -> Optional[str]:
        ...

    async def add_items(
        self, playlist_id: str, locators: Sequence[str], position: Optional[int] = None
    ) -> Optional[str]:
        ...

    async def get_current_identity(self) -> Dict[str, Any]:
        ...

    async def list_playlists(
        self, page_token: Optional[str] = None, limit: int = config.PLAYLIST_PAGE_SIZE
    ) -> ItemPage:
        ...


def translate_error(error: Exception, context: str) -> ExternalServiceError:
    """Convert a spotipy or transport error into an ExternalServiceError.

    Args:
        error: Exception raised by spotipy or requests
        context: What was being attempted, used in the message

    Returns:
        The matching ExternalServiceError subclass
    """
    if isinstance(error, spotipy.SpotifyException):
        status = error.http_status
        reason = getattr(error, "reason", None)
        if status == 429:
            headers = getattr(error, "headers", None) or {}
            retry_after = headers.get("Retry-After")
            return RateLimitError(int(retry_after) if retry_after else None)
        if status == 404:
            return PlaylistNotFoundError(f"{context}: not found", reason=reason)
        return ExternalServiceError(
            f"{context}: {error.msg}",
            status=status,
            reason=reason,
            retryable=status is not None and status >= 500,
        )
    if isinstance(error, requests.exceptions.RequestException):
        return ExternalServiceError(f"{context}: {str(error)}", retryable=True)
    return ExternalServiceError(f"{context}: {str(error)}")


def _next_offset(response: Dict[str, Any], offset: int, limit: int) -> Optional[str]:
    if not response.get("next"):
        return None
    return str(offset + (len(response.get("items") or []) or limit))


class SpotifyAPI:
    """Async wrapper for the Spotify playlist endpoints.

    spotipy is blocking, so every request runs in a worker thread and is
    awaited. Requests that hit the rate limit are retried with backoff;
    everything else is translated and raised.
    """

    def __init__(self, spotify: spotipy.Spotify):
        """Initialize API wrapper.

        Args:
            spotify: Authenticated spotipy client
        """
        self.spotify = spotify

    @with_retry(max_retries=config.API_MAX_RETRIES, initial_delay=config.API_RETRY_DELAY)
    async def _call(self, context: str, method: str, *args: Any, **kwargs: Any) -> Any:
        fn = getattr(self.spotify, method)
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except (spotipy.SpotifyException, requests.exceptions.RequestException) as e:
            raise translate_error(e, context) from e

    async def list_items(
        self, playlist_id: str, page_token: Optional[str] = None, limit: int = config.PAGE_SIZE
    ) -> ItemPage:
        """Get one page of playlist items.

        Args:
            playlist_id: ID of playlist to read
            page_token: Offset returned by the previous page, None for the first page
            limit: Number of items per page

        Returns:
            ItemPage with raw playlist item dictionaries

        Raises:
            PlaylistNotFoundError: If playlist is not found
            ExternalServiceError: If API request fails
        """
        offset = int(page_token) if page_token else 0
        response = await self._call(
            f"Failed to list items of playlist {playlist_id}",
            "playlist_items",
            playlist_id,
            limit=limit,
            offset=offset,
            additional_types=("track", "episode"),
        )
        return ItemPage(
            items=response.get("items") or [],
            next_page_token=_next_offset(response, offset, limit),
            total=response.get("total", 0),
        )

    async def get_metadata(self, playlist_id: str) -> Dict[str, Any]:
        """Get playlist size, snapshot and display information.

        Args:
            playlist_id: ID of playlist to get info for

        Returns:
            Dictionary with id, name, owner, total and snapshot_id

        Raises:
            PlaylistNotFoundError: If playlist is not found
            ExternalServiceError: If API request fails
        """
        playlist = await self._call(
            f"Failed to get playlist {playlist_id}",
            "playlist",
            playlist_id,
            fields="id,name,owner(display_name),snapshot_id,tracks(total)",
        )
        if not playlist:
            raise PlaylistNotFoundError(f"Playlist {playlist_id} not found")
        return {
            "id": playlist.get("id", playlist_id),
            "name": playlist.get("name"),
            "owner": (playlist.get("owner") or {}).get("display_name"),
            "total": (playlist.get("tracks") or {}).get("total", 0),
            "snapshot_id": playlist.get("snapshot_id"),
        }

    async def remove_items(
        self,
        playlist_id: str,
        items: Sequence[Tuple[str, int]],
        snapshot_id: Optional[str] = None,
    ) -> Optional[str]:
        """Remove specific occurrences from a playlist.

        Args:
            playlist_id: ID of playlist to remove from
            items: (uri, position) pairs, positions relative to snapshot_id
            snapshot_id: Snapshot the positions were read from

        Returns:
            The new snapshot id

        Raises:
            InvalidArgumentError: If more items than one request allows are given
            ExternalServiceError: If API request fails
        """
        if len(items) > config.MAX_BATCH_SIZE:
            raise InvalidArgumentError(
                f"Cannot remove more than {config.MAX_BATCH_SIZE} items per request"
            )
        payload = [{"uri": uri, "positions": [position]} for uri, position in items]
        response = await self._call(
            f"Failed to remove items from playlist {playlist_id}",
            "playlist_remove_specific_occurrences_of_items",
            playlist_id,
            payload,
            snapshot_id=snapshot_id,
        )
        return (response or {}).get("snapshot_id")

    async def add_items(
        self, playlist_id: str, locators: Sequence[str], position: Optional[int] = None
    ) -> Optional[str]:
        """Insert tracks into a playlist.

        Args:
            playlist_id: ID of playlist to add to
            locators: Track URIs to insert, in order
            position: Zero based insert position, None to append

        Returns:
            The new snapshot id

        Raises:
            InvalidArgumentError: If more items than one request allows are given
            ExternalServiceError: If API request fails
        """
        if len(locators) > config.MAX_BATCH_SIZE:
            raise InvalidArgumentError(
                f"Cannot add more than {config.MAX_BATCH_SIZE} items per request"
            )
        response = await self._call(
            f"Failed to add items to playlist {playlist_id}",
            "playlist_add_items",
            playlist_id,
            list(locators),
            position=position,
        )
        return (response or {}).get("snapshot_id")

    async def get_current_identity(self) -> Dict[str, Any]:
        """Get the profile of the authenticated user."""
        return await self._call("Failed to get current user", "current_user")

    async def list_playlists(
        self, page_token: Optional[str] = None, limit: int = config.PLAYLIST_PAGE_SIZE
    ) -> ItemPage:
        """Get one page of the current user's playlists."""
        offset = int(page_token) if page_token else 0
        response = await self._call(
            "Failed to list playlists",
            "current_user_playlists",
            limit=limit,
            offset=offset,
        )
        return ItemPage(
            items=response.get("items") or [],
            next_page_token=_next_offset(response, offset, limit),
            total=response.get("total", 0),
        )
