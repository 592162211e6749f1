"""In-memory event data containers."""

from .event import (
    Particle,
    Track,
    Event,
    EventView,
    TRACK_PDG,
    SHOWER_PDG,
)

__all__ = [
    "Particle",
    "Track",
    "Event",
    "EventView",
    "TRACK_PDG",
    "SHOWER_PDG",
]
