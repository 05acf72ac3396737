"""Web API for the Spotify playlist cleaner."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from . import auth
from .api import SpotifyAPI
from .cleaner import PlaylistCleaner
from .deduplicate import count_duplicates
from .errors import (
    AuthenticationRequiredError,
    ExternalServiceError,
    InvalidArgumentError,
    PlaylistNotFoundError,
    RateLimitError,
)
from .models import report_to_dicts

logger = logging.getLogger(__name__)

app = FastAPI()


class RemoveRequest(BaseModel):
    """Request model for removing the extra copies of one track."""

    track_id: str


class CollapseRequest(BaseModel):
    """Request model for collapsing duplicated tracks."""

    track_ids: Optional[List[str]] = None


class ApiResponse(BaseModel):
    """Response model for mutating endpoints."""

    success: bool
    removed_count: int = 0
    details: Optional[str] = None


def get_cleaner() -> PlaylistCleaner:
    """Get a cleaner bound to an authenticated Spotify client.

    Returns:
        PlaylistCleaner: Cleaner using the authenticated client

    Raises:
        HTTPException: If authentication fails
    """
    spotify = auth.get_spotify_service()
    if not spotify:
        logger.error("Failed to authenticate with Spotify")
        raise HTTPException(status_code=500, detail="Failed to authenticate")
    return PlaylistCleaner(SpotifyAPI(spotify))


def to_http_error(error: Exception) -> HTTPException:
    """Map a cleaner error to the HTTP error returned to the client."""
    if isinstance(error, InvalidArgumentError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, AuthenticationRequiredError):
        return HTTPException(status_code=401, detail=str(error))
    if isinstance(error, PlaylistNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, RateLimitError):
        headers = {"Retry-After": str(error.retry_after)} if error.retry_after else None
        return HTTPException(status_code=429, detail=str(error), headers=headers)
    if isinstance(error, ExternalServiceError):
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail="API Error")


@app.get("/playlists")
async def list_playlists_endpoint() -> List[Dict[str, Any]]:
    """List the user's playlists with their duplicate reports."""
    cleaner = get_cleaner()
    try:
        summaries = await cleaner.list_all_playlists_with_duplicates()
    except Exception as e:
        logger.error("Failed to list playlists: %s", str(e))
        raise to_http_error(e)
    return [summary.to_dict() for summary in summaries]


@app.get("/playlists/{playlist_id}/duplicates")
async def playlist_duplicates_endpoint(playlist_id: str) -> Dict[str, Any]:
    """Get the duplicate report of one playlist."""
    cleaner = get_cleaner()
    try:
        report = await cleaner.get_playlist_duplicates(playlist_id)
    except Exception as e:
        logger.error("Failed to get duplicates for %s: %s", playlist_id, str(e))
        raise to_http_error(e)
    return {
        "id": playlist_id,
        "duplicate_count": count_duplicates(report),
        "duplicates": report_to_dicts(report),
    }


@app.post("/playlists/{playlist_id}/duplicates/remove", response_model=ApiResponse)
async def remove_duplicates_endpoint(playlist_id: str, request: RemoveRequest) -> ApiResponse:
    """Remove every copy of a track after its first occurrence.

    Args:
        playlist_id: Playlist to clean
        request: Track to deduplicate

    Returns:
        ApiResponse: Response with the number of removed copies
    """
    cleaner = get_cleaner()
    try:
        removed = await cleaner.remove_specific_duplicates(playlist_id, request.track_id)
    except Exception as e:
        logger.error("Failed to remove duplicates from %s: %s", playlist_id, str(e))
        raise to_http_error(e)
    return ApiResponse(success=True, removed_count=removed)


@app.post("/playlists/{playlist_id}/duplicates/collapse", response_model=ApiResponse)
async def collapse_duplicates_endpoint(playlist_id: str, request: CollapseRequest) -> ApiResponse:
    """Collapse duplicated tracks to one copy each.

    Args:
        playlist_id: Playlist to clean
        request: Tracks to collapse; every duplicated track when omitted

    Returns:
        ApiResponse: Response with the number of removed occurrences
    """
    cleaner = get_cleaner()
    try:
        removed = await cleaner.collapse_all_duplicates(playlist_id, request.track_ids)
    except Exception as e:
        logger.error("Failed to collapse duplicates in %s: %s", playlist_id, str(e))
        raise to_http_error(e)
    return ApiResponse(success=True, removed_count=removed)
