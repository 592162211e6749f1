"""
Angular deflection ("wobble") along a track trajectory.
"""

from __future__ import annotations

import numpy as np

from ..interfaces import TrackLike
from .stats import mean_and_std


def deflection_angles(directions: np.ndarray) -> np.ndarray:
    """
    Angle between the directions at consecutive trajectory points.

    Args:
        directions: Direction vectors [N, 3], N >= 2 (need not be unit length)

    Returns:
        Angles in radians [N-1], in [0, pi]. A zero-length direction gives 0.
    """
    d = np.asarray(directions, dtype=np.float64)
    if d.ndim != 2 or d.shape[1] != 3:
        raise ValueError(f"Expected directions of shape [N, 3], got {d.shape}")
    if d.shape[0] < 2:
        raise ValueError(
            f"Deflection needs at least 2 trajectory points, got {d.shape[0]}"
        )

    prev, cur = d[:-1], d[1:]
    norms = np.linalg.norm(prev, axis=1) * np.linalg.norm(cur, axis=1)
    dots = np.sum(prev * cur, axis=1)

    cos = np.ones_like(dots)
    valid = norms > 0.0
    cos[valid] = dots[valid] / norms[valid]
    return np.arccos(np.clip(cos, -1.0, 1.0))


def deflection_mean_and_std(track: TrackLike) -> tuple[float, float]:
    """Mean and std of the angular deflection between trajectory points."""
    return mean_and_std(deflection_angles(track.directions))
