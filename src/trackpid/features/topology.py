"""
Child particle counts for the PID scalar features.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..interfaces import EventData


@dataclass(frozen=True)
class ChildCounts:
    n_tracks: int
    n_showers: int
    n_grandchildren: int


def count_children(
    particle: Any,
    event: EventData,
    *,
    legacy_parent_classification: bool = False,
) -> ChildCounts:
    """
    Count track-like and shower-like children and all grandchildren.

    Args:
        particle: Parent particle
        event: Event data access
        legacy_parent_classification: Classify the parent once per child
            instead of the child itself. Networks trained on inputs from the
            historical implementation saw these counts (n_tracks equals the
            number of children for a track-like parent, n_showers is 0).

    Returns:
        ChildCounts
    """
    n_tracks = 0
    n_showers = 0
    n_grand = 0

    for child in event.get_children(particle):
        classified = particle if legacy_parent_classification else child
        n_tracks += int(bool(event.is_track_like(classified)))
        n_showers += int(bool(event.is_shower_like(classified)))
        n_grand += int(event.get_child_count(child))

    return ChildCounts(n_tracks=n_tracks, n_showers=n_showers, n_grandchildren=n_grand)
