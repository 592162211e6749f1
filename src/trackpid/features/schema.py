"""
Versioned layout of the two-part PID network input.

The network was trained on a fixed ordering of scalar features. Vectors are
built from named values through a FeatureSchema so a reordering shows up as a
new schema version rather than a silent change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import numpy as np

SCALAR_FEATURES_V1: tuple[str, ...] = (
    "n_child_tracks",
    "n_child_showers",
    "n_grandchildren",
    "dedx_window_mean",
    "dedx_window_std",
    "deflection_mean",
    "deflection_std",
)


@dataclass(frozen=True)
class FeatureSchema:
    version: str
    dedx_length: int
    scalar_names: tuple[str, ...] = SCALAR_FEATURES_V1

    @property
    def n_scalars(self) -> int:
        return len(self.scalar_names)

    def scalar_vector(self, values: Mapping[str, float]) -> np.ndarray:
        """Order named scalar features into the network's [V] vector."""
        missing = [name for name in self.scalar_names if name not in values]
        extra = sorted(set(values) - set(self.scalar_names))
        if missing or extra:
            raise ValueError(
                f"Scalar features do not match schema {self.version}: "
                f"missing={missing}, unexpected={extra}"
            )
        return np.array([values[name] for name in self.scalar_names], dtype=np.float32)

    def scalar_dict(self, vector: np.ndarray) -> dict[str, float]:
        """Inverse of scalar_vector."""
        vector = np.asarray(vector).reshape(-1)
        if vector.shape[0] != self.n_scalars:
            raise ValueError(
                f"Expected {self.n_scalars} scalar features for schema {self.version}, "
                f"got {vector.shape[0]}"
            )
        return {name: float(v) for name, v in zip(self.scalar_names, vector)}

    def check_batch(self, dedx: np.ndarray, variables: np.ndarray) -> None:
        """Validate [B, L] / [B, V] network input shapes."""
        if dedx.ndim != 2 or dedx.shape[1] != self.dedx_length:
            raise ValueError(
                f"dE/dx input must have shape [B, {self.dedx_length}], got {dedx.shape}"
            )
        if variables.ndim != 2 or variables.shape[1] != self.n_scalars:
            raise ValueError(
                f"Scalar input must have shape [B, {self.n_scalars}], got {variables.shape}"
            )
        if dedx.shape[0] != variables.shape[0]:
            raise ValueError(
                f"Batch size mismatch: dE/dx {dedx.shape[0]} vs scalars {variables.shape[0]}"
            )


def schema_v1(dedx_length: int) -> FeatureSchema:
    return FeatureSchema(version="ctp-v1", dedx_length=int(dedx_length))
