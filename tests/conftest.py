"""Common test fixtures and utilities."""

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from src.playlistcleaner.api import ItemPage
from src.playlistcleaner.errors import ExternalServiceError, PlaylistNotFoundError

MAX_ITEMS_PER_REQUEST = 100


def make_item(entry: Optional[str]) -> Dict[str, Any]:
    """Build a raw playlist item.

    "A" is a track with id A, "ep:X" an episode, "local:X" a local file and
    None an unavailable track.
    """
    if entry is None:
        return {"track": None, "is_local": False}
    if entry.startswith("ep:"):
        ep_id = entry[3:]
        return {
            "track": {"id": ep_id, "type": "episode", "uri": f"spotify:episode:{ep_id}"},
            "is_local": False,
        }
    if entry.startswith("local:"):
        return {
            "track": {"id": None, "type": "track", "uri": f"spotify:local:{entry[6:]}"},
            "is_local": True,
        }
    return {
        "track": {
            "id": entry,
            "type": "track",
            "uri": f"spotify:track:{entry}",
            "name": f"Track {entry}",
        },
        "is_local": False,
    }


def item_label(item: Dict[str, Any]) -> Optional[str]:
    track = item.get("track")
    if track is None:
        return None
    if track.get("type") == "episode":
        return f"ep:{track['id']}"
    if item.get("is_local"):
        return f"local:{track['uri'].rsplit(':', 1)[-1]}"
    return track["id"]


class FakePlaylistAPI:
    """In-memory stand-in for the Spotify playlist endpoints.

    Removals are applied atomically per request and every (uri, position)
    pair is checked against the current playlist, like Spotify does for
    positional removal.
    """

    def __init__(self, playlists: Dict[str, Sequence[Optional[str]]], authenticated: bool = True):
        self.playlists = {
            pid: {"name": f"Playlist {pid}", "items": [make_item(e) for e in entries], "version": 1}
            for pid, entries in playlists.items()
        }
        self.authenticated = authenticated
        self.calls: List[Tuple[str, Any]] = []
        self.remove_batches: List[List[Tuple[str, int]]] = []
        self.add_batches: List[Tuple[List[str], Optional[int]]] = []
        self.fail_on_call: Optional[int] = None
        self.on_list_items: Optional[Callable[[str, Optional[str]], None]] = None
        self._mutations = 0

    def labels(self, playlist_id: str) -> List[Optional[str]]:
        return [item_label(item) for item in self.playlists[playlist_id]["items"]]

    def _playlist(self, playlist_id: str) -> Dict[str, Any]:
        if playlist_id not in self.playlists:
            raise PlaylistNotFoundError(f"Playlist {playlist_id} not found")
        return self.playlists[playlist_id]

    def _snapshot(self, playlist: Dict[str, Any]) -> str:
        return f"snap-{playlist['version']}"

    def _mutate(self) -> None:
        self._mutations += 1
        if self.fail_on_call is not None and self._mutations == self.fail_on_call:
            raise ExternalServiceError("Service unavailable", status=503, retryable=True)

    async def list_items(self, playlist_id, page_token=None, limit=50):
        self.calls.append(("list_items", (playlist_id, page_token)))
        if self.on_list_items:
            self.on_list_items(playlist_id, page_token)
        items = self._playlist(playlist_id)["items"]
        offset = int(page_token) if page_token else 0
        page = items[offset : offset + limit]
        next_token = str(offset + limit) if offset + limit < len(items) else None
        return ItemPage(items=list(page), next_page_token=next_token, total=len(items))

    async def get_metadata(self, playlist_id):
        self.calls.append(("get_metadata", playlist_id))
        playlist = self._playlist(playlist_id)
        return {
            "id": playlist_id,
            "name": playlist["name"],
            "owner": "tester",
            "total": len(playlist["items"]),
            "snapshot_id": self._snapshot(playlist),
        }

    async def remove_items(self, playlist_id, items, snapshot_id=None):
        self.calls.append(("remove_items", (playlist_id, list(items), snapshot_id)))
        if len(items) > MAX_ITEMS_PER_REQUEST:
            raise ExternalServiceError("Too many items", status=400)
        self._mutate()
        playlist = self._playlist(playlist_id)
        current = playlist["items"]
        for uri, position in items:
            if position >= len(current) or (current[position].get("track") or {}).get("uri") != uri:
                raise ExternalServiceError(f"Could not remove {uri} at {position}", status=400)
        self.remove_batches.append(list(items))
        for position in sorted({p for _, p in items}, reverse=True):
            del current[position]
        playlist["version"] += 1
        return self._snapshot(playlist)

    async def add_items(self, playlist_id, locators, position=None):
        self.calls.append(("add_items", (playlist_id, list(locators), position)))
        if len(locators) > MAX_ITEMS_PER_REQUEST:
            raise ExternalServiceError("Too many items", status=400)
        self._mutate()
        playlist = self._playlist(playlist_id)
        current = playlist["items"]
        if position is None:
            position = len(current)
        if position < 0 or position > len(current):
            raise ExternalServiceError(f"Invalid position {position}", status=400)
        self.add_batches.append((list(locators), position))
        new_items = [make_item(uri.rsplit(":", 1)[-1]) for uri in locators]
        current[position:position] = new_items
        playlist["version"] += 1
        return self._snapshot(playlist)

    async def get_current_identity(self):
        self.calls.append(("get_current_identity", None))
        if not self.authenticated:
            raise ExternalServiceError("Invalid access token", status=401)
        return {"id": "tester", "display_name": "Tester"}

    async def list_playlists(self, page_token=None, limit=50):
        self.calls.append(("list_playlists", page_token))
        rows = [
            {
                "id": pid,
                "name": playlist["name"],
                "owner": {"display_name": "tester"},
                "tracks": {"total": len(playlist["items"])},
                "snapshot_id": self._snapshot(playlist),
                "uri": f"spotify:playlist:{pid}",
                "public": False,
            }
            for pid, playlist in self.playlists.items()
        ]
        offset = int(page_token) if page_token else 0
        next_token = str(offset + limit) if offset + limit < len(rows) else None
        return ItemPage(items=rows[offset : offset + limit], next_page_token=next_token, total=len(rows))


@pytest.fixture
def anyio_backend():
    """Run async tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def make_api() -> Callable[..., FakePlaylistAPI]:
    """Factory for in-memory playlist APIs.

    Returns:
        Callable taking a mapping of playlist id to entry labels
    """

    def factory(playlists: Dict[str, Sequence[Optional[str]]], **kwargs: Any) -> FakePlaylistAPI:
        return FakePlaylistAPI(playlists, **kwargs)

    return factory


@pytest.fixture
def scenario_api(make_api) -> FakePlaylistAPI:
    """Playlist "pl1" holding [A, B, A, C, A]."""
    return make_api({"pl1": ["A", "B", "A", "C", "A"]})
