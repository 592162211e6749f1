"""
Interfaces of the collaborators the PID helper depends on.

Event data access and the network itself live outside this package; any
object with these methods can be plugged in. trackpid.data.event provides an
in-memory EventData implementation and trackpid.inference a TorchScript
InferenceEngine.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

import numpy as np


@runtime_checkable
class TrackLike(Protocol):
    """A reconstructed track: one direction vector per trajectory point."""

    @property
    def directions(self) -> np.ndarray:  # [N, 3]
        ...


@runtime_checkable
class EventData(Protocol):
    """Read-only access to the particles, tracks and calorimetry of one event."""

    def is_track_like(self, particle: Any) -> bool:
        ...

    def is_shower_like(self, particle: Any) -> bool:
        ...

    def get_track(self, particle: Any) -> TrackLike:
        """Track of a track-like particle; raises KeyError otherwise."""
        ...

    def get_dedx(self, track: TrackLike) -> np.ndarray:
        """Per-point dE/dx along the track [T]."""
        ...

    def get_children(self, particle: Any) -> Sequence[Any]:
        ...

    def get_child_count(self, particle: Any) -> int:
        ...


@runtime_checkable
class InferenceEngine(Protocol):
    """Opaque PID network."""

    def run(self, dedx: np.ndarray, variables: np.ndarray) -> np.ndarray:
        """
        dedx: [B, L], variables: [B, V]
        returns: [B, C] class scores
        """
        ...
