"""Live tests against the Spotify Web API.

Run with ``pytest --run-api`` and SPOTIFY_TEST_PLAYLIST set to a playlist
the authorized user can read.
"""

import os

import pytest

from src.playlistcleaner import auth
from src.playlistcleaner.api import SpotifyAPI
from src.playlistcleaner.cleaner import PlaylistCleaner
from src.playlistcleaner.deduplicate import count_duplicates
from src.playlistcleaner.reader import read_snapshot


@pytest.fixture
def live_cleaner():
    playlist_id = os.getenv("SPOTIFY_TEST_PLAYLIST")
    if not playlist_id:
        pytest.skip("SPOTIFY_TEST_PLAYLIST is not set")
    spotify = auth.get_spotify_service()
    if not spotify:
        pytest.skip("Spotify credentials are not configured")
    return PlaylistCleaner(SpotifyAPI(spotify)), playlist_id


@pytest.mark.api
@pytest.mark.anyio
async def test_live_connectivity(live_cleaner):
    cleaner, _ = live_cleaner
    assert await cleaner.is_connected() is True


@pytest.mark.api
@pytest.mark.anyio
async def test_live_read_matches_metadata(live_cleaner):
    cleaner, playlist_id = live_cleaner

    snapshot = await read_snapshot(cleaner.api, playlist_id)
    report = await cleaner.get_playlist_duplicates(playlist_id)

    assert snapshot.total == len(snapshot.entries)
    assert [entry.position for entry in snapshot.entries] == list(range(snapshot.total))
    assert count_duplicates(report) <= len(snapshot.tracks)
