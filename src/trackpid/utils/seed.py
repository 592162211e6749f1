"""
Random generators for dE/dx padding.

Padding never touches numpy's global state; callers pass a Generator so
padded inputs are reproducible.
"""

from typing import Optional

import numpy as np


def get_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    Get a numpy random generator with specified seed.

    Args:
        seed: Random seed (None draws fresh OS entropy)

    Returns:
        numpy Generator instance
    """
    return np.random.default_rng(seed)
