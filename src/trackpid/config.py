"""
Track PID configuration.

Configs are plain YAML mappings; the PID options live either under a "pid"
section or at the top level:

    pid:
      network_path: $TRACKPID_NETWORK_DIR
      network_name: ctp_graph.pt
      min_points: 50
      target_length: 100
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass(frozen=True)
class PIDConfig:
    network_path: str = ""
    network_name: str = ""
    particle_label: str = "pandora"
    track_label: str = "pandoraTrack"
    calorimetry_label: str = "pandoracalo"
    min_points: int = 50  # minimum dE/dx samples for a track to be classified
    target_length: int = 100  # fixed dE/dx input length
    clamp_max: float = 1000.0
    jump_threshold: float = 500.0
    class_names: Optional[tuple[str, ...]] = None
    device: str = "auto"
    seed: int = 0
    legacy_parent_classification: bool = False

    def __post_init__(self) -> None:
        if self.min_points < 3:
            raise ValueError(f"min_points must be >= 3, got {self.min_points}")
        if self.target_length < self.min_points:
            raise ValueError(
                f"target_length={self.target_length} must be >= min_points={self.min_points}"
            )
        # dE/dx reference window: p samples ending p samples before the track end.
        window_points = (self.target_length - self.min_points) // 3
        if window_points < 1:
            raise ValueError(
                f"target_length - min_points must be >= 3 for a non-empty dE/dx window, "
                f"got {self.target_length} - {self.min_points}"
            )
        if self.min_points < 2 * window_points:
            raise ValueError(
                f"min_points={self.min_points} is too small for a dE/dx window of "
                f"{window_points} points: need min_points >= {2 * window_points} "
                f"so the window fits inside the shortest accepted track"
            )
        if self.clamp_max <= 0:
            raise ValueError(f"clamp_max must be positive, got {self.clamp_max}")
        if self.jump_threshold < 0:
            raise ValueError(f"jump_threshold must be >= 0, got {self.jump_threshold}")

    @property
    def network_file(self) -> Path:
        """Network file, with environment variables in network_path expanded."""
        return Path(os.path.expandvars(self.network_path)) / self.network_name

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PIDConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown PID config keys: {unknown}")

        kwargs = dict(data)
        for key in ("min_points", "target_length", "seed"):
            if key in kwargs:
                kwargs[key] = int(kwargs[key])
        for key in ("clamp_max", "jump_threshold"):
            if key in kwargs:
                kwargs[key] = float(kwargs[key])
        if kwargs.get("class_names") is not None:
            kwargs["class_names"] = tuple(str(c) for c in kwargs["class_names"])
        if "legacy_parent_classification" in kwargs:
            kwargs["legacy_parent_classification"] = bool(kwargs["legacy_parent_classification"])
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["class_names"] is not None:
            d["class_names"] = list(d["class_names"])
        return d


def load_config(path: str | Path) -> PIDConfig:
    """Load a PIDConfig from a YAML file."""
    with open(path) as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Config {path} must be a YAML mapping")
    section = cfg.get("pid", cfg)
    if not isinstance(section, dict):
        raise ValueError(f"'pid' section of {path} must be a mapping")
    return PIDConfig.from_dict(section)
