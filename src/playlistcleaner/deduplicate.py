"""Duplicate detection and removal/reinsertion planning.

Everything here is a pure function of the records it is given. Reading the
playlist and applying the plan happen in ``cleaner`` and ``batch``.
"""

import asyncio
from typing import Dict, Iterable, List, Optional

from .errors import check_cancelled
from .models import DuplicateReport, TrackRecord


def find_duplicates(records: Iterable[TrackRecord]) -> DuplicateReport:
    """Find tracks that appear more than once.

    Args:
        records: Track records in playlist order

    Returns:
        Mapping of the first occurrence of each duplicated track to the
        number of occurrences after it
    """
    counts: Dict[str, int] = {}
    first_seen: Dict[str, TrackRecord] = {}

    for record in records:
        key = record.key
        counts[key] = counts.get(key, 0) + 1
        if key not in first_seen:
            first_seen[key] = record

    return {first_seen[key]: count - 1 for key, count in counts.items() if count > 1}


def count_duplicates(report: DuplicateReport) -> int:
    """Total number of surplus occurrences in a duplicate report."""
    return sum(report.values())


def plan_specific_removal(
    records: Iterable[TrackRecord],
    identity: str,
    cancel: Optional[asyncio.Event] = None,
) -> List[TrackRecord]:
    """Plan removal of every occurrence of one track except the first.

    Args:
        records: Track records in playlist order
        identity: Track id to deduplicate, compared case-insensitively
        cancel: Optional event checked for every record

    Returns:
        Occurrences to remove, highest position first
    """
    key = identity.casefold()
    keep_first = True
    candidates = []

    for record in records:
        check_cancelled(cancel)
        if record.key != key:
            continue
        if keep_first:
            keep_first = False
            continue
        candidates.append(record)

    return sorted(candidates, key=lambda r: r.position, reverse=True)


def plan_collapse_removal(
    records: Iterable[TrackRecord],
    identities: Iterable[str],
    cancel: Optional[asyncio.Event] = None,
) -> List[TrackRecord]:
    """Plan removal of every occurrence, first included, of each track.

    Args:
        records: Track records in playlist order
        identities: Track ids to collapse, compared case-insensitively
        cancel: Optional event checked for every record

    Returns:
        Occurrences to remove, highest position first
    """
    keys = {identity.casefold() for identity in identities if identity}
    if not keys:
        return []

    candidates = {}
    for record in records:
        check_cancelled(cancel)
        if record.key in keys:
            candidates.setdefault((record.key, record.position), record)

    return sorted(candidates.values(), key=lambda r: r.position, reverse=True)


def plan_reinsertion(removed: Iterable[TrackRecord]) -> List[TrackRecord]:
    """Pick the one copy of each removed track that goes back in.

    The survivor is the occurrence with the lowest original position.

    Args:
        removed: Records that were removed

    Returns:
        One record per track, ordered by original position
    """
    survivors: Dict[str, TrackRecord] = {}
    for record in removed:
        current = survivors.get(record.key)
        if current is None or record.position < current.position:
            survivors[record.key] = record

    return sorted(survivors.values(), key=lambda r: r.position)


def clamp_insert_position(requested: int, current_size: int) -> int:
    """Clamp an insert position to the current playlist bounds."""
    return max(0, min(requested, current_size))
