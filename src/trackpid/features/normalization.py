"""
Fixed-length dE/dx input for the PID network.

The network expects exactly target_length dE/dx samples ending at the track
end (where the Bragg peak sits). Longer tracks are truncated from the front;
shorter ones are padded at the front with Gaussian noise drawn from the
statistics of a reference window.

Reference window: with p = (target_length - min_points) // 3, the window
holds the p samples x[T-2p : T-p], i.e. indices T-2p .. T-1-p, counted back
from the track end.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .stats import mean_and_std

# Upper bound on rejected (negative) draws per padded sample.
MAX_NEGATIVE_REDRAWS = 10_000


@dataclass(frozen=True)
class NormalizedDedx:
    """dE/dx vector of fixed length plus the reference window statistics."""

    dedx: np.ndarray  # [target_length] float32
    window_mean: float
    window_std: float
    n_padded: int  # synthetic samples at the front


def average_window(size: int, target_length: int, min_points: int) -> tuple[int, int]:
    """
    Index bounds of the reference window.

    Args:
        size: Length of the conditioned dE/dx sequence
        target_length: Fixed network input length
        min_points: Minimum accepted sequence length

    Returns:
        Half-open (start, stop) so that the window is x[start:stop]
    """
    if target_length < min_points:
        raise ValueError(
            f"target_length={target_length} must be >= min_points={min_points}"
        )

    points = (target_length - min_points) // 3
    if points == 0:
        raise ValueError(
            f"Empty dE/dx reference window: target_length={target_length}, "
            f"min_points={min_points} gives (target_length - min_points) // 3 = 0"
        )

    start = size - 2 * points
    stop = size - points
    if start < 0:
        raise ValueError(
            f"dE/dx reference window [{start}, {stop}) starts before the sequence "
            f"(size={size}, window points={points})"
        )
    return start, stop


def window_mean_and_std(
    dedx: np.ndarray,
    target_length: int,
    min_points: int,
) -> tuple[float, float]:
    """Mean and std of the reference window of a conditioned sequence."""
    start, stop = average_window(len(dedx), target_length, min_points)
    # Read from the track end backwards; the statistics do not depend on order.
    window = dedx[start:stop][::-1]
    return mean_and_std(window)


def draw_non_negative(
    rng: np.random.Generator,
    mean: float,
    std: float,
) -> float:
    """Draw from N(mean, std), redrawing until the value is >= 0."""
    if std == 0.0:
        if mean < 0.0:
            raise ValueError(f"Cannot draw a non-negative value from N({mean}, 0)")
        return float(mean)

    for _ in range(MAX_NEGATIVE_REDRAWS):
        value = float(rng.normal(mean, std))
        if value >= 0.0:
            return value
    raise ValueError(
        f"No non-negative draw from N({mean}, {std}) after {MAX_NEGATIVE_REDRAWS} attempts"
    )


def pad_front(
    dedx: np.ndarray,
    target_length: int,
    mean: float,
    std: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """
    Prepend synthetic samples until the sequence reaches target_length.

    Samples are prepended one at a time, so the first draw ends up adjacent to
    the real track and the last draw at index 0.

    Args:
        dedx: Conditioned dE/dx [T]
        target_length: Desired length
        mean: Gaussian mean for synthetic samples
        std: Gaussian standard deviation for synthetic samples
        rng: Random generator

    Returns:
        float32 array of length max(T, target_length)
    """
    n_pad = target_length - len(dedx)
    if n_pad <= 0:
        return np.asarray(dedx, dtype=np.float32)

    draws = [draw_non_negative(rng, mean, std) for _ in range(n_pad)]
    padding = np.array(draws[::-1], dtype=np.float32)
    return np.concatenate([padding, np.asarray(dedx, dtype=np.float32)])


def normalize_dedx(
    dedx: np.ndarray,
    target_length: int,
    min_points: int,
    rng: np.random.Generator,
) -> NormalizedDedx:
    """
    Build the fixed-length dE/dx input from a conditioned sequence.

    Window statistics are taken before padding. Sequences shorter than
    target_length are front-padded; the last target_length samples are kept.

    Args:
        dedx: Conditioned dE/dx [T], T >= min_points
        target_length: Fixed network input length
        min_points: Minimum accepted sequence length
        rng: Random generator used for padding

    Returns:
        NormalizedDedx
    """
    dedx = np.asarray(dedx, dtype=np.float32).reshape(-1)
    if len(dedx) < min_points:
        raise ValueError(
            f"dE/dx sequence has {len(dedx)} samples, need at least {min_points}"
        )

    mean, std = window_mean_and_std(dedx, target_length, min_points)

    n_padded = max(0, target_length - len(dedx))
    padded = pad_front(dedx, target_length, mean, std, rng)

    return NormalizedDedx(
        dedx=padded[-target_length:].copy(),
        window_mean=mean,
        window_std=std,
        n_padded=n_padded,
    )
