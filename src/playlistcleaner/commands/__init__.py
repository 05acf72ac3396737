"""Command module initialization."""

from .base import PlaylistCommand
from .deduplicate import (  # noqa: F401
    CollapseDuplicatesCommand,
    ListDuplicatesCommand,
    RemoveDuplicatesCommand,
)

__all__ = [
    "PlaylistCommand",
    "ListDuplicatesCommand",
    "RemoveDuplicatesCommand",
    "CollapseDuplicatesCommand",
]
