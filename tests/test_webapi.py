"""Tests for the web API."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from src.playlistcleaner.errors import (
    AuthenticationRequiredError,
    ExternalServiceError,
    InvalidArgumentError,
    PlaylistNotFoundError,
    RateLimitError,
)
from src.playlistcleaner.models import PlaylistSummary, TrackRecord
from src.playlistcleaner.webapi import app

client = TestClient(app)

REPORT = {TrackRecord("A", "spotify:track:A", 0): 2}


@pytest.fixture
def mock_cleaner(mocker):
    """Patch get_cleaner with a mock whose operations are async."""
    cleaner = MagicMock()
    cleaner.list_all_playlists_with_duplicates = AsyncMock(
        return_value=[PlaylistSummary("pl1", "Mix", "tester", 5, duplicates=REPORT)]
    )
    cleaner.get_playlist_duplicates = AsyncMock(return_value=REPORT)
    cleaner.remove_specific_duplicates = AsyncMock(return_value=2)
    cleaner.collapse_all_duplicates = AsyncMock(return_value=3)
    mocker.patch("src.playlistcleaner.webapi.get_cleaner", return_value=cleaner)
    return cleaner


def test_list_playlists(mock_cleaner):
    """Test listing playlists with their duplicate counts."""
    response = client.get("/playlists")

    assert response.status_code == 200
    data = response.json()
    assert data[0]["id"] == "pl1"
    assert data[0]["duplicate_count"] == 2
    assert data[0]["duplicates"] == [
        {"track_id": "A", "uri": "spotify:track:A", "position": 0, "surplus": 2}
    ]


def test_playlist_duplicates(mock_cleaner):
    """Test the duplicate report of one playlist."""
    response = client.get("/playlists/pl1/duplicates")

    assert response.status_code == 200
    assert response.json()["duplicate_count"] == 2
    mock_cleaner.get_playlist_duplicates.assert_awaited_once_with("pl1")


def test_remove_duplicates(mock_cleaner):
    """Test removing the extra copies of one track."""
    response = client.post("/playlists/pl1/duplicates/remove", json={"track_id": "A"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "removed_count": 2, "details": None}
    mock_cleaner.remove_specific_duplicates.assert_awaited_once_with("pl1", "A")


def test_remove_duplicates_missing_track(mock_cleaner):
    """Test request validation of the remove endpoint."""
    response = client.post("/playlists/pl1/duplicates/remove", json={})

    assert response.status_code == 422
    mock_cleaner.remove_specific_duplicates.assert_not_awaited()


def test_collapse_duplicates(mock_cleaner):
    """Test collapsing selected tracks."""
    response = client.post("/playlists/pl1/duplicates/collapse", json={"track_ids": ["A"]})

    assert response.status_code == 200
    assert response.json()["removed_count"] == 3
    mock_cleaner.collapse_all_duplicates.assert_awaited_once_with("pl1", ["A"])


def test_collapse_all_duplicates(mock_cleaner):
    """Test collapsing every duplicated track when none are given."""
    response = client.post("/playlists/pl1/duplicates/collapse", json={})

    assert response.status_code == 200
    mock_cleaner.collapse_all_duplicates.assert_awaited_once_with("pl1", None)


@pytest.mark.parametrize(
    "error,status",
    [
        (InvalidArgumentError("Track ID cannot be empty"), 400),
        (AuthenticationRequiredError("Client is not connected"), 401),
        (PlaylistNotFoundError("Playlist not found"), 404),
        (ExternalServiceError("Service unavailable", status=503), 502),
        (RuntimeError("boom"), 500),
    ],
)
def test_error_mapping(mock_cleaner, error, status):
    """Test mapping cleaner errors to HTTP status codes."""
    mock_cleaner.remove_specific_duplicates.side_effect = error

    response = client.post("/playlists/pl1/duplicates/remove", json={"track_id": "A"})

    assert response.status_code == status


def test_rate_limit_sets_retry_after(mock_cleaner):
    """Test that rate limiting is reported with a Retry-After header."""
    mock_cleaner.collapse_all_duplicates.side_effect = RateLimitError(retry_after=30)

    response = client.post("/playlists/pl1/duplicates/collapse", json={})

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "30"


def test_authentication_failure():
    """Test that a missing client gives a server error."""
    with patch("src.playlistcleaner.webapi.auth.get_spotify_service", return_value=None):
        response = client.get("/playlists")

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to authenticate"
