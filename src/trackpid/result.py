"""
PID network output wrapper.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np


@dataclass(frozen=True)
class PIDResult:
    """
    Class scores for one track.

    An empty result (no scores) marks a particle the network could not be run
    on; check is_valid before reading scores.
    """

    scores: np.ndarray  # [C] float32, empty when invalid
    class_names: Optional[tuple[str, ...]] = None

    @classmethod
    def invalid(cls, class_names: Optional[Sequence[str]] = None) -> "PIDResult":
        names = tuple(class_names) if class_names is not None else None
        return cls(scores=np.zeros((0,), dtype=np.float32), class_names=names)

    @classmethod
    def from_scores(
        cls,
        scores: Sequence[float] | np.ndarray,
        class_names: Optional[Sequence[str]] = None,
    ) -> "PIDResult":
        arr = np.asarray(scores, dtype=np.float32).reshape(-1)
        names = tuple(class_names) if class_names is not None else None
        if names is not None and len(names) != arr.shape[0]:
            raise ValueError(
                f"Got {arr.shape[0]} scores but {len(names)} class names"
            )
        return cls(scores=arr, class_names=names)

    @property
    def is_valid(self) -> bool:
        return self.scores.shape[0] > 0

    @property
    def n_classes(self) -> int:
        return int(self.scores.shape[0])

    def _require_valid(self) -> None:
        if not self.is_valid:
            raise ValueError("PID result is empty (track was not classified)")

    @property
    def best_class(self) -> int:
        """Index of the highest-scoring class."""
        self._require_valid()
        return int(np.argmax(self.scores))

    @property
    def best_class_name(self) -> Optional[str]:
        if self.class_names is None:
            return None
        return self.class_names[self.best_class]

    @property
    def best_score(self) -> float:
        self._require_valid()
        return float(self.scores[self.best_class])

    def score(self, cls: int | str) -> float:
        """Score for a class index or configured class name."""
        self._require_valid()
        if isinstance(cls, str):
            if self.class_names is None or cls not in self.class_names:
                raise KeyError(f"Unknown class name: {cls}")
            cls = self.class_names.index(cls)
        if not 0 <= cls < self.n_classes:
            raise IndexError(f"Class index {cls} out of range for {self.n_classes} classes")
        return float(self.scores[cls])
