"""Feature extraction for the track PID network."""

from .stats import mean_and_std
from .conditioning import (
    clamp_dedx,
    smooth_jumps,
    condition_dedx,
)
from .normalization import (
    average_window,
    window_mean_and_std,
    pad_front,
    normalize_dedx,
    NormalizedDedx,
)
from .geometry import (
    deflection_angles,
    deflection_mean_and_std,
)
from .topology import count_children, ChildCounts
from .schema import FeatureSchema, SCALAR_FEATURES_V1, schema_v1

__all__ = [
    "mean_and_std",
    "clamp_dedx",
    "smooth_jumps",
    "condition_dedx",
    "average_window",
    "window_mean_and_std",
    "pad_front",
    "normalize_dedx",
    "NormalizedDedx",
    "deflection_angles",
    "deflection_mean_and_std",
    "count_children",
    "ChildCounts",
    "FeatureSchema",
    "SCALAR_FEATURES_V1",
    "schema_v1",
]
