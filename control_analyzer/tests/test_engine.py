"""
Integration tests for AnalysisEngine and the module-level analysis functions.
"""

import math

import pytest

from control_analyzer import (
    AnalysisEngine,
    AnalyzerConfig,
    DivisionByZeroError,
    InvalidParameterError,
    ModelKind,
    ModelParameters,
    SimulationConfig,
    SystemModel,
    analyze_stability,
    compute_bode,
    compute_nyquist,
    compute_performance,
    compute_root_locus,
    compute_step_response,
    tune_controller,
)
from control_analyzer.control_design.stability_analyzer import PID_STABLE, UNDERDAMPED


@pytest.fixture
def engine():
    return AnalysisEngine()


class TestModelManagement:
    """Validated swaps of the current model."""

    def test_default_model(self, engine):
        assert engine.model.kind is ModelKind.SECOND_ORDER
        assert engine.model.params.wn == 2.0
        assert engine.last_snapshot is None

    def test_set_model_partial_override(self, engine):
        engine.set_model("second_order", {'zeta': 0.3})
        assert engine.model.params.zeta == 0.3
        assert engine.model.params.wn == 2.0

    def test_set_model_keeps_params_across_kinds(self, engine):
        engine.set_model("second_order", {'zeta': 0.3})
        engine.set_model("pid")
        assert engine.model.kind is ModelKind.PID
        assert engine.model.params.zeta == 0.3

    def test_invalid_set_model_keeps_previous(self, engine):
        before = engine.model
        with pytest.raises(InvalidParameterError):
            engine.set_model("second_order", {'wn': 0.0})
        assert engine.model is before

    def test_invalid_kind_keeps_previous(self, engine):
        before = engine.model
        with pytest.raises(InvalidParameterError):
            engine.set_model("fourth_order")
        assert engine.model is before

    def test_invalid_initial_model(self):
        bad = SystemModel(ModelKind.FIRST_ORDER, ModelParameters(tau=0.0))
        with pytest.raises(InvalidParameterError):
            AnalysisEngine(model=bad)


class TestRefresh:
    """Full recomputation."""

    def test_second_order_snapshot(self, engine):
        snapshot = engine.refresh()
        assert snapshot.model is engine.model
        assert len(snapshot.step_response) == 1000
        assert len(snapshot.bode) == 100
        assert len(snapshot.nyquist) == 200
        assert len(snapshot.root_locus) == 202
        assert snapshot.stability.classification == UNDERDAMPED
        assert snapshot.performance.overshoot_pct == pytest.approx(4.6, abs=0.1)
        assert engine.last_snapshot is snapshot

    def test_pid_snapshot(self, engine):
        engine.set_model("pid")
        snapshot = engine.refresh()
        assert snapshot.step_response.control is not None
        assert snapshot.nyquist == []
        assert snapshot.root_locus == []
        assert len(snapshot.bode) == 100
        assert snapshot.stability.classification == PID_STABLE

    def test_failed_update_keeps_snapshot(self, engine):
        snapshot = engine.refresh()
        with pytest.raises(InvalidParameterError):
            engine.set_model("pid", {'tau': 0.0})
        assert engine.last_snapshot is snapshot

    def test_unstable_model_still_refreshes(self, engine):
        engine.set_model("second_order", {'zeta': -0.1})
        snapshot = engine.refresh()
        assert not snapshot.stability.is_stable
        assert all(math.isfinite(p.real) for p in snapshot.root_locus)

    def test_custom_config(self):
        engine = AnalysisEngine(AnalyzerConfig(simulation=SimulationConfig(dt=0.1, t_final=5.0)))
        snapshot = engine.refresh()
        assert len(snapshot.step_response) == 50


class TestTuning:
    """Controller tuning through the engine."""

    def test_tune_replaces_gains(self, engine):
        engine.set_model("pid", {'wn': 2.0})
        model = engine.tune_controller("ziegler-nichols")
        assert engine.model is model
        assert model.kind is ModelKind.PID
        assert model.params.kp == pytest.approx(2.4)

    def test_failed_tuning_keeps_model(self, engine):
        engine.set_model("pid", {'k': 0.0})
        before = engine.model
        with pytest.raises(DivisionByZeroError):
            engine.tune_controller("imc")
        assert engine.model is before


class TestComparison:
    """Comparison set wired to the current model."""

    def test_snapshot_current_model(self, engine):
        engine.set_model("second_order", {'zeta': 0.3})
        entry = engine.add_to_comparison()
        engine.set_model("second_order", {'zeta': 0.9})
        assert entry.model.params.zeta == 0.3
        assert engine.comparison.entries[0].model.params.zeta == 0.3

    def test_remove(self, engine):
        entry = engine.add_to_comparison()
        assert engine.remove_from_comparison(entry.id)
        assert engine.comparison.entries == ()


class TestModuleFunctions:
    """Stateless entry points."""

    def test_pipeline(self):
        model = SystemModel.create("second_order", {'wn': 2.0, 'zeta': 0.7})
        trajectory = compute_step_response(model)
        assert compute_performance(trajectory).overshoot_pct == pytest.approx(4.6, abs=0.1)
        assert len(compute_bode(model)) == 100
        assert len(compute_nyquist(model)) == 200
        assert len(compute_root_locus(model)) == 202
        assert analyze_stability(model).is_stable

    def test_tune_controller(self):
        params = tune_controller(SystemModel.create("pid"), "imc")
        assert params.kp == pytest.approx(3.0)
        assert params.kd == 0.0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
