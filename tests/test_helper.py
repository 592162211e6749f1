"""
End-to-end tests for the PID helper with an in-memory event and a stub
inference engine.
"""

import logging

import numpy as np
import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from trackpid.config import PIDConfig
from trackpid.data.event import Event, EventView, Particle, Track, TRACK_PDG, SHOWER_PDG
from trackpid.helper import TrackPIDHelper
from trackpid.result import PIDResult
from trackpid.utils.logging import setup_logging

CONFIG = PIDConfig(min_points=50, target_length=100, clamp_max=1000.0, jump_threshold=500.0)


class SumEngine:
    """Scores each track by (sum of dE/dx, sum of scalars, 0)."""

    def __init__(self):
        self.calls = []

    def run(self, dedx, variables):
        self.calls.append((dedx.copy(), variables.copy()))
        return np.stack(
            [dedx.sum(axis=1), variables.sum(axis=1), np.zeros(dedx.shape[0])], axis=1
        )


def _scenario_dedx() -> np.ndarray:
    dedx = np.full(60, 10.0, dtype=np.float32)
    dedx[5] = 2000.0
    dedx[40] = -5.0
    return dedx


def _make_event(dedx_by_particle: dict, children: tuple = ()) -> Event:
    event = Event()
    for pid, dedx in dedx_by_particle.items():
        daughters = children if pid == 0 else ()
        event.add_particle(CONFIG.particle_label, Particle(id=pid, pdg=TRACK_PDG, daughters=daughters))
        directions = np.tile([0.0, 0.0, 1.0], (len(dedx), 1))
        event.add_track(CONFIG.track_label, pid, Track(id=1000 + pid, directions=directions))
        event.add_calorimetry(CONFIG.calorimetry_label, 1000 + pid, dedx)
    return event


class TestNetworkInputs:
    def test_scenario(self):
        """Spike and negative sample cleaned, 40 synthetic samples in front."""
        event = _make_event({0: _scenario_dedx()})
        view = event.view(CONFIG.particle_label, CONFIG.track_label, CONFIG.calorimetry_label)
        helper = TrackPIDHelper(CONFIG, engine=SumEngine())

        inputs = helper.get_network_inputs(view.particle(0), view, rng=np.random.default_rng(0))
        assert inputs is not None
        assert inputs.dedx.shape == (100,)
        assert inputs.variables.shape == (7,)

        expected_tail = np.full(60, 10.0, dtype=np.float32)
        expected_tail[40] = 0.0
        assert np.array_equal(inputs.dedx[40:], expected_tail)
        assert np.all(inputs.dedx[:40] >= 0.0)

        # Window = cleaned[28:44], fifteen 10s and one 0
        window = expected_tail[28:44]
        named = inputs.named_variables()
        assert named["n_child_tracks"] == 0
        assert named["n_child_showers"] == 0
        assert named["n_grandchildren"] == 0
        assert named["dedx_window_mean"] == pytest.approx(9.375)
        assert named["dedx_window_std"] == pytest.approx(float(np.std(window)), rel=1e-5)
        assert named["deflection_mean"] == pytest.approx(0.0, abs=1e-6)
        assert named["deflection_std"] == pytest.approx(0.0, abs=1e-6)

    def test_child_counts_in_variables(self):
        event = _make_event({0: np.full(80, 5.0)}, children=(10, 11))
        event.add_particle(CONFIG.particle_label, Particle(id=10, pdg=SHOWER_PDG, parent=0, daughters=(12,)))
        event.add_particle(CONFIG.particle_label, Particle(id=11, pdg=SHOWER_PDG, parent=0))
        event.add_particle(CONFIG.particle_label, Particle(id=12, pdg=SHOWER_PDG, parent=10))
        view = event.view(CONFIG.particle_label, CONFIG.track_label, CONFIG.calorimetry_label)

        variables = TrackPIDHelper(CONFIG).get_variable_vector(view.particle(0), view)
        assert variables[:3].tolist() == [0.0, 2.0, 1.0]

    def test_not_track_like_returns_none(self):
        event = Event()
        event.add_particle(CONFIG.particle_label, Particle(id=0, pdg=SHOWER_PDG))
        view = event.view(CONFIG.particle_label, CONFIG.track_label, CONFIG.calorimetry_label)
        helper = TrackPIDHelper(CONFIG)
        assert helper.get_network_inputs(view.particle(0), view) is None
        assert helper.get_dedx_vector(view.particle(0), view) is None

    def test_too_few_points_returns_none(self):
        event = _make_event({0: np.full(49, 10.0)})
        view = EventView.from_config(event, CONFIG)
        assert TrackPIDHelper(CONFIG).get_network_inputs(view.particle(0), view) is None

    def test_shortest_track_at_tightest_window(self):
        """min_points = 2 * window points: the window starts at index 0."""
        cfg = PIDConfig(min_points=32, target_length=80)
        event = _make_event({0: np.full(32, 4.0)})
        view = EventView.from_config(event, cfg)
        inputs = TrackPIDHelper(cfg).get_network_inputs(view.particle(0), view)
        assert inputs is not None
        assert inputs.dedx.shape == (80,)
        assert inputs.named_variables()["dedx_window_mean"] == pytest.approx(4.0)

    def test_missing_calorimetry_raises(self):
        event = _make_event({0: np.full(60, 10.0)})
        view = event.view(CONFIG.particle_label, CONFIG.track_label, "otherCalo")
        with pytest.raises(KeyError, match="calorimetry"):
            TrackPIDHelper(CONFIG).get_network_inputs(view.particle(0), view)

    def test_legacy_classification_warns(self, caplog):
        setup_logging(logging.INFO)
        with caplog.at_level(logging.WARNING, logger="trackpid"):
            TrackPIDHelper(PIDConfig(legacy_parent_classification=True))
        assert "legacy_parent_classification" in caplog.text

    def test_long_track_truncated_from_front(self):
        dedx = np.linspace(1.0, 30.0, 130).astype(np.float32)
        event = _make_event({0: dedx})
        view = event.view(CONFIG.particle_label, CONFIG.track_label, CONFIG.calorimetry_label)
        out = TrackPIDHelper(CONFIG).get_dedx_vector(view.particle(0), view)
        assert np.array_equal(out, dedx[-100:])

    def test_helper_rng_is_reproducible(self):
        event = _make_event({0: _scenario_dedx()})
        view = event.view(CONFIG.particle_label, CONFIG.track_label, CONFIG.calorimetry_label)
        a = TrackPIDHelper(CONFIG).get_dedx_vector(view.particle(0), view)
        b = TrackPIDHelper(CONFIG).get_dedx_vector(view.particle(0), view)
        assert np.array_equal(a, b)


class TestRunPid:
    def test_run_pid(self):
        event = _make_event({0: np.full(100, 10.0)})
        view = event.view(CONFIG.particle_label, CONFIG.track_label, CONFIG.calorimetry_label)
        engine = SumEngine()
        result = TrackPIDHelper(CONFIG, engine=engine).run_pid(view.particle(0), view)

        assert isinstance(result, PIDResult)
        assert result.is_valid
        assert result.best_class == 0
        assert result.score(0) == pytest.approx(1000.0)
        dedx, variables = engine.calls[0]
        assert dedx.shape == (1, 100)
        assert variables.shape == (1, 7)

    def test_run_pid_not_applicable(self):
        event = _make_event({0: np.full(10, 10.0)})
        view = event.view(CONFIG.particle_label, CONFIG.track_label, CONFIG.calorimetry_label)
        engine = SumEngine()
        result = TrackPIDHelper(CONFIG, engine=engine).run_pid(view.particle(0), view)
        assert not result.is_valid
        assert engine.calls == []

    def test_batch_keeps_particle_order(self):
        event = _make_event({
            0: np.full(100, 1.0),
            1: np.full(20, 1.0),
            2: np.full(100, 2.0),
        })
        view = event.view(CONFIG.particle_label, CONFIG.track_label, CONFIG.calorimetry_label)
        engine = SumEngine()
        particles = [view.particle(i) for i in (0, 1, 2)]
        results = TrackPIDHelper(CONFIG, engine=engine).run_pid_batch(particles, view)

        assert [r.is_valid for r in results] == [True, False, True]
        assert results[0].score(0) == pytest.approx(100.0)
        assert results[2].score(0) == pytest.approx(200.0)
        assert len(engine.calls) == 1
        assert engine.calls[0][0].shape == (2, 100)

    def test_bad_engine_output_raises(self):
        class WrongRows:
            def run(self, dedx, variables):
                return np.zeros((dedx.shape[0] + 1, 3))

        event = _make_event({0: np.full(100, 1.0)})
        view = event.view(CONFIG.particle_label, CONFIG.track_label, CONFIG.calorimetry_label)
        with pytest.raises(ValueError, match="shape"):
            TrackPIDHelper(CONFIG, engine=WrongRows()).run_pid(view.particle(0), view)
