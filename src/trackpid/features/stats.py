"""
Summary statistics shared by the dE/dx window and the angular deflection
features.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


def mean_and_std(values: Sequence[float] | np.ndarray) -> tuple[float, float]:
    """
    Mean and population standard deviation (divides by N, not N-1).

    Sums are accumulated sequentially in float32, the precision the PID
    network's training inputs were computed with.

    Args:
        values: 1-D sequence of samples

    Returns:
        Tuple of (mean, std)
    """
    x = np.asarray(values, dtype=np.float32).reshape(-1)
    if x.size == 0:
        raise ValueError("Cannot compute mean/std of an empty sequence")

    n = np.float32(x.size)
    total = np.float32(0.0)
    for v in x:
        total += v
    mean = total / n

    sq = np.float32(0.0)
    for v in x:
        d = mean - v
        sq += d * d
    std = np.sqrt(sq / n)
    return float(mean), float(std)
