"""
dE/dx signal conditioning.

Calorimetry hits occasionally produce very large or negative dE/dx values
(delta rays, mis-reconstructed pitch). Before the sequence is fed to the
network the values are clamped to [0, clamp_max] and isolated upward jumps
are smoothed over.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

MIN_CONDITION_POINTS = 3


def clamp_dedx(dedx: Sequence[float] | np.ndarray, clamp_max: float) -> np.ndarray:
    """
    Clamp dE/dx values to [0, clamp_max].

    Args:
        dedx: dE/dx samples [T]
        clamp_max: Upper bound for a single sample

    Returns:
        New float32 array [T]
    """
    x = np.asarray(dedx, dtype=np.float32).reshape(-1)
    return np.clip(x, 0.0, clamp_max).astype(np.float32)


def smooth_jumps(dedx: np.ndarray, jump_threshold: float) -> np.ndarray:
    """
    Smooth isolated upward jumps in place.

    The end points are linearly extrapolated from their two neighbours when
    they sit more than jump_threshold above the adjacent sample. Interior
    points are replaced by the average of their neighbours when they rise
    more than jump_threshold above the previous sample; falling edges are
    left untouched. The pass is sequential, so each point sees the values
    already rewritten before it.

    Args:
        dedx: float32 array [T], T >= 3 (modified in place)
        jump_threshold: Largest allowed rise between consecutive samples

    Returns:
        The same array, for chaining
    """
    n = len(dedx)
    if n < MIN_CONDITION_POINTS:
        raise ValueError(
            f"Jump smoothing needs at least {MIN_CONDITION_POINTS} samples, got {n}"
        )

    if dedx[0] - dedx[1] > jump_threshold:
        dedx[0] = dedx[1] + (dedx[1] - dedx[2])
    if dedx[n - 1] - dedx[n - 2] > jump_threshold:
        dedx[n - 1] = dedx[n - 2] + (dedx[n - 2] - dedx[n - 3])

    for i in range(1, n - 1):
        if dedx[i] - dedx[i - 1] > jump_threshold:
            dedx[i] = 0.5 * (dedx[i - 1] + dedx[i + 1])

    return dedx


def condition_dedx(
    dedx: Sequence[float] | np.ndarray,
    clamp_max: float,
    jump_threshold: float,
) -> np.ndarray:
    """
    Clamp then jump-smooth a dE/dx sequence.

    The input is not modified; the returned array has the same length.

    Args:
        dedx: Raw dE/dx samples [T], T >= 3
        clamp_max: Upper clamp applied to every sample
        jump_threshold: Rise above which a sample is smoothed

    Returns:
        Conditioned float32 array [T]
    """
    if len(dedx) < MIN_CONDITION_POINTS:
        raise ValueError(
            f"dE/dx conditioning needs at least {MIN_CONDITION_POINTS} samples, got {len(dedx)}"
        )
    return smooth_jumps(clamp_dedx(dedx, clamp_max), jump_threshold)
