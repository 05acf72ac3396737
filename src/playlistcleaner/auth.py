"""Spotify API authentication handling."""

import os
from typing import Optional

import spotipy
from spotipy.oauth2 import SpotifyOAuth

from . import config
from .errors import InvalidArgumentError


def get_spotify_service() -> Optional[spotipy.Spotify]:
    """
    Get an authenticated Spotify client.
    Returns None if authentication fails.
    """
    # Check for client credentials first
    if not config.SPOTIPY_CLIENT_ID or not config.SPOTIPY_CLIENT_SECRET:
        print("SPOTIPY_CLIENT_ID or SPOTIPY_CLIENT_SECRET environment variable not set")
        return None

    # Token cache lives next to the other credentials
    os.makedirs(os.path.dirname(config.TOKEN_CACHE_FILE), exist_ok=True)

    try:
        auth_manager = SpotifyOAuth(
            client_id=config.SPOTIPY_CLIENT_ID,
            client_secret=config.SPOTIPY_CLIENT_SECRET,
            redirect_uri=config.SPOTIPY_REDIRECT_URI,
            scope=" ".join(config.SPOTIFY_SCOPES),
            cache_path=config.TOKEN_CACHE_FILE,
        )
        return spotipy.Spotify(auth_manager=auth_manager)
    except Exception as e:
        print(f"Failed to build Spotify client: {str(e)}")
        return None


def create_client(access_token: str) -> spotipy.Spotify:
    """Build a Spotify client from an already issued access token.

    Args:
        access_token: OAuth access token

    Returns:
        spotipy client using the token

    Raises:
        InvalidArgumentError: If the token is empty
    """
    if not access_token:
        raise InvalidArgumentError("Access token cannot be empty")
    return spotipy.Spotify(auth=access_token)
