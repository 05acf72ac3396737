"""Data types shared by the reader, planners and executor."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class TrackRecord:
    """One playable entry at a specific offset in a specific read."""

    identity: str
    locator: str
    position: int

    @property
    def key(self) -> str:
        """Case-insensitive identity used for duplicate comparison."""
        return self.identity.casefold()


@dataclass(frozen=True)
class PlayableTrack:
    """Playlist entry that is a full track with an id."""

    position: int
    identity: str
    locator: str
    name: Optional[str] = None

    is_track = True

    @property
    def record(self) -> TrackRecord:
        return TrackRecord(self.identity, self.locator, self.position)


@dataclass(frozen=True)
class OtherMedia:
    """Playlist entry that occupies a position but is not a trackable track.

    Episodes, local files and unavailable tracks end up here.
    """

    position: int
    kind: str = "unknown"

    is_track = False

    @property
    def record(self) -> TrackRecord:
        raise TypeError(f"Entry at position {self.position} is {self.kind}, not a track")


PlaylistEntry = Union[PlayableTrack, OtherMedia]

# Maps the first-seen record of an identity to its surplus count
DuplicateReport = Dict[TrackRecord, int]


def report_to_dicts(report: DuplicateReport) -> List[Dict[str, Any]]:
    """Flatten a duplicate report into JSON friendly dictionaries."""
    return [
        {
            "track_id": record.identity,
            "uri": record.locator,
            "position": record.position,
            "surplus": surplus,
        }
        for record, surplus in report.items()
    ]


@dataclass
class CollectionSnapshot:
    """Materialised read of a playlist, tied to the snapshot it came from."""

    playlist_id: str
    snapshot_id: Optional[str]
    total: int
    entries: List[PlaylistEntry] = field(default_factory=list)

    @property
    def tracks(self) -> List[TrackRecord]:
        return [entry.record for entry in self.entries if entry.is_track]


@dataclass
class PlaylistSummary:
    """A playlist together with its duplicate report."""

    playlist_id: str
    name: Optional[str]
    owner: Optional[str]
    track_count: Optional[int]
    snapshot_id: Optional[str] = None
    uri: Optional[str] = None
    is_public: Optional[bool] = None
    duplicates: DuplicateReport = field(default_factory=dict)

    @property
    def duplicate_count(self) -> int:
        return sum(self.duplicates.values())

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON friendly view of the summary."""
        return {
            "id": self.playlist_id,
            "name": self.name,
            "owner": self.owner,
            "track_count": self.track_count,
            "snapshot_id": self.snapshot_id,
            "uri": self.uri,
            "public": self.is_public,
            "duplicate_count": self.duplicate_count,
            "duplicates": report_to_dicts(self.duplicates),
        }
