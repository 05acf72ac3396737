"""Utility functions for Spotify playlist operations."""

import re

from .errors import InvalidArgumentError

_ID_PATTERN = re.compile(r"^[A-Za-z0-9]+$")


def _parse_spotify_id(value: str, kind: str) -> str:
    value = (value or "").strip()

    # spotify:playlist:<id> / spotify:track:<id>
    uri_match = re.match(rf"^spotify:{kind}:([A-Za-z0-9]+)$", value)
    if uri_match:
        return uri_match.group(1)

    # https://open.spotify.com/playlist/<id>?si=...
    url_match = re.search(rf"open\.spotify\.com/(?:intl-[a-z]+/)?{kind}/([A-Za-z0-9]+)", value)
    if url_match:
        return url_match.group(1)

    # If not a URI or URL, validate as a raw ID
    if _ID_PATTERN.match(value):
        return value

    raise InvalidArgumentError(
        f"Invalid {kind} format: {value}. Must be a Spotify {kind} URL, URI or ID"
    )


def parse_playlist_id(playlist_str: str) -> str:
    """Extract a playlist ID from a Spotify playlist URL, URI or raw ID.

    Args:
        playlist_str: A Spotify playlist URL, URI or ID

    Returns:
        The playlist ID

    Raises:
        InvalidArgumentError if the input is not a valid playlist URL, URI or ID
    """
    return _parse_spotify_id(playlist_str, "playlist")


def parse_track_id(track_str: str) -> str:
    """Extract a track ID from a Spotify track URL, URI or raw ID.

    Args:
        track_str: A Spotify track URL, URI or ID

    Returns:
        The track ID

    Raises:
        InvalidArgumentError if the input is not a valid track URL, URI or ID
    """
    return _parse_spotify_id(track_str, "track")
