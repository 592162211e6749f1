"""
Track PID helper: builds the network inputs for a particle and runs the PID.

For a track-like particle with enough calorimetry points the inputs are

  dedx       [target_length]  conditioned, fixed-length dE/dx ending at the track end
  variables  [7]              child counts, dE/dx window mean/std, deflection mean/std

Particles that are not track-like, or whose tracks have fewer than min_points
dE/dx samples, are not applicable: get_network_inputs returns None and
run_pid returns an invalid PIDResult.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

import numpy as np

from .config import PIDConfig
from .features.conditioning import condition_dedx
from .features.geometry import deflection_mean_and_std
from .features.normalization import normalize_dedx
from .features.schema import FeatureSchema, schema_v1
from .features.topology import count_children
from .interfaces import EventData, InferenceEngine
from .result import PIDResult
from .utils.logging import get_logger
from .utils.seed import get_rng


@dataclass(frozen=True)
class NetworkInputs:
    dedx: np.ndarray  # [L] float32
    variables: np.ndarray  # [V] float32
    schema: FeatureSchema

    def named_variables(self) -> dict[str, float]:
        return self.schema.scalar_dict(self.variables)


class TrackPIDHelper:
    def __init__(
        self,
        config: Optional[PIDConfig] = None,
        *,
        engine: Optional[InferenceEngine] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config if config is not None else PIDConfig()
        self.schema = schema_v1(self.config.target_length)
        self.rng = rng if rng is not None else get_rng(self.config.seed)
        self._engine = engine

        if self.config.legacy_parent_classification:
            get_logger().warning(
                "[trackpid] legacy_parent_classification is enabled: child track/shower "
                "counts classify the parent particle, not each child"
            )

    @property
    def engine(self) -> InferenceEngine:
        if self._engine is None:
            from .inference import TorchScriptEngine

            self._engine = TorchScriptEngine(
                self.config.network_file,
                device=self.config.device,
                schema=self.schema,
            )
        return self._engine

    def get_network_inputs(
        self,
        particle: Any,
        event: EventData,
        rng: Optional[np.random.Generator] = None,
    ) -> Optional[NetworkInputs]:
        cfg = self.config
        logger = get_logger()

        if not event.is_track_like(particle):
            logger.info("[trackpid] Particle is not track-like, no PID inputs")
            return None

        track = event.get_track(particle)
        raw_dedx = np.asarray(event.get_dedx(track), dtype=np.float32)
        if raw_dedx.shape[0] < cfg.min_points:
            logger.info(
                f"[trackpid] Track has {raw_dedx.shape[0]} dE/dx points "
                f"(< {cfg.min_points}), no PID inputs"
            )
            return None

        cleaned = condition_dedx(raw_dedx, cfg.clamp_max, cfg.jump_threshold)
        norm = normalize_dedx(
            cleaned,
            cfg.target_length,
            cfg.min_points,
            rng if rng is not None else self.rng,
        )

        counts = count_children(
            particle,
            event,
            legacy_parent_classification=cfg.legacy_parent_classification,
        )
        defl_mean, defl_std = deflection_mean_and_std(track)

        variables = self.schema.scalar_vector({
            "n_child_tracks": counts.n_tracks,
            "n_child_showers": counts.n_showers,
            "n_grandchildren": counts.n_grandchildren,
            "dedx_window_mean": norm.window_mean,
            "dedx_window_std": norm.window_std,
            "deflection_mean": defl_mean,
            "deflection_std": defl_std,
        })
        return NetworkInputs(dedx=norm.dedx, variables=variables, schema=self.schema)

    def get_dedx_vector(
        self,
        particle: Any,
        event: EventData,
        rng: Optional[np.random.Generator] = None,
    ) -> Optional[np.ndarray]:
        inputs = self.get_network_inputs(particle, event, rng)
        return None if inputs is None else inputs.dedx

    def get_variable_vector(
        self,
        particle: Any,
        event: EventData,
        rng: Optional[np.random.Generator] = None,
    ) -> Optional[np.ndarray]:
        inputs = self.get_network_inputs(particle, event, rng)
        return None if inputs is None else inputs.variables

    def run_pid(
        self,
        particle: Any,
        event: EventData,
        rng: Optional[np.random.Generator] = None,
    ) -> PIDResult:
        return self.run_pid_batch([particle], event, rng)[0]

    def run_pid_batch(
        self,
        particles: Sequence[Any],
        event: EventData,
        rng: Optional[np.random.Generator] = None,
    ) -> list[PIDResult]:
        """
        Classify several particles with a single network call.

        Returns one result per particle, in order; particles without inputs
        get an invalid result.
        """
        names = self.config.class_names
        results = [PIDResult.invalid(names) for _ in particles]

        rows: list[int] = []
        inputs: list[NetworkInputs] = []
        for i, particle in enumerate(particles):
            inp = self.get_network_inputs(particle, event, rng)
            if inp is not None:
                rows.append(i)
                inputs.append(inp)

        if not inputs:
            return results

        dedx = np.stack([inp.dedx for inp in inputs])
        variables = np.stack([inp.variables for inp in inputs])
        scores = np.asarray(self.engine.run(dedx, variables))
        if scores.ndim != 2 or scores.shape[0] != len(inputs):
            raise ValueError(
                f"Inference returned scores of shape {scores.shape} for {len(inputs)} tracks"
            )

        for row, i in enumerate(rows):
            results[i] = PIDResult.from_scores(scores[row], names)
        return results
