"""
In-memory event record.

Holds reconstructed particles, tracks and calorimetry under data-source
labels (the same labels the PID config names), and exposes them through the
EventData interface via a label-bound EventView.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from ..utils.logging import get_logger

TRACK_PDG = 13
SHOWER_PDG = 11


@dataclass(frozen=True)
class Particle:
    """Reconstructed particle in the particle hierarchy."""

    id: int
    pdg: int = 0  # 13 track-like, 11 shower-like
    parent: Optional[int] = None
    daughters: tuple[int, ...] = ()

    @property
    def n_daughters(self) -> int:
        return len(self.daughters)


@dataclass(frozen=True)
class Track:
    id: int
    directions: np.ndarray  # [N, 3]
    positions: Optional[np.ndarray] = None  # [N, 3]

    @property
    def n_points(self) -> int:
        return int(self.directions.shape[0])


@dataclass
class Event:
    """
    Products of one event, keyed by data-source label.

    particles[label][particle_id] -> Particle
    tracks[label][particle_id] -> Track
    calorimetry[label][track_id] -> dE/dx [T]
    """

    particles: dict[str, dict[int, Particle]] = field(default_factory=dict)
    tracks: dict[str, dict[int, Track]] = field(default_factory=dict)
    calorimetry: dict[str, dict[int, np.ndarray]] = field(default_factory=dict)

    def add_particle(self, label: str, particle: Particle) -> None:
        self.particles.setdefault(label, {})[particle.id] = particle

    def add_track(self, label: str, particle_id: int, track: Track) -> None:
        self.tracks.setdefault(label, {})[particle_id] = track

    def add_calorimetry(self, label: str, track_id: int, dedx) -> None:
        self.calorimetry.setdefault(label, {})[track_id] = np.asarray(dedx, dtype=np.float32)

    def view(self, particle_label: str, track_label: str, calorimetry_label: str) -> "EventView":
        return EventView(self, particle_label, track_label, calorimetry_label)


class EventView:
    """EventData implementation bound to one set of data-source labels."""

    def __init__(
        self,
        event: Event,
        particle_label: str,
        track_label: str,
        calorimetry_label: str,
    ):
        self.event = event
        self.particle_label = particle_label
        self.track_label = track_label
        self.calorimetry_label = calorimetry_label

    @classmethod
    def from_config(cls, event: Event, config) -> "EventView":
        return cls(event, config.particle_label, config.track_label, config.calorimetry_label)

    def _particles(self) -> dict[int, Particle]:
        return self.event.particles.get(self.particle_label, {})

    def particle(self, particle_id: int) -> Particle:
        return self._particles()[particle_id]

    def is_track_like(self, particle: Particle) -> bool:
        # A particle counts as a track only if a track was actually built for it.
        return abs(particle.pdg) == TRACK_PDG and particle.id in self.event.tracks.get(
            self.track_label, {}
        )

    def is_shower_like(self, particle: Particle) -> bool:
        return abs(particle.pdg) == SHOWER_PDG

    def get_track(self, particle: Particle) -> Track:
        if not self.is_track_like(particle):
            raise KeyError(
                f"Particle {particle.id} has no track under label '{self.track_label}'"
            )
        return self.event.tracks[self.track_label][particle.id]

    def get_dedx(self, track: Track) -> np.ndarray:
        calo = self.event.calorimetry.get(self.calorimetry_label, {})
        if track.id not in calo:
            raise KeyError(
                f"Track {track.id} has no calorimetry under label '{self.calorimetry_label}'"
            )
        return calo[track.id]

    def get_children(self, particle: Particle) -> list[Particle]:
        """
        Daughters present under particle_label.

        Daughter ids missing from the event are skipped with a warning;
        get_child_count still reports the declared number of daughters.
        """
        particles = self._particles()
        missing = [d for d in particle.daughters if d not in particles]
        if missing:
            get_logger().warning(
                f"[trackpid] Particle {particle.id} lists daughters {missing} not found "
                f"under label '{self.particle_label}', skipping them"
            )
        return [particles[d] for d in particle.daughters if d in particles]

    def get_child_count(self, particle: Particle) -> int:
        return particle.n_daughters
