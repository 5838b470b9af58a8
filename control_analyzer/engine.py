"""
Analysis Engine

Orchestration layer between a presentation shell and the analysis modules.

The shell owns the authoritative "current model". ``AnalysisEngine`` holds
that reference as an immutable snapshot: ``set_model`` builds and validates a
new model before swapping it in, and ``refresh`` recomputes all five analyses
(step response, Bode, Nyquist, root locus, stability) from scratch. A failed
``set_model`` or ``tune_controller`` leaves the previous model and the last
snapshot in place.

Every analysis is also available as a plain function taking the model
explicitly (``compute_step_response``, ``compute_bode``, ...).
"""

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Union

from .core.system_model import ModelKind, ModelParameters, SystemModel
from .core.simulation.time_domain_simulator import SimulationConfig, TimeDomainSimulator, Trajectory
from .core.simulation.performance_analyzer import (
    PerformanceAnalyzer,
    PerformanceIndices,
    PerformanceMetrics,
)
from .core.simulation.comparison_engine import (
    ComparisonEngine,
    ComparisonEntry,
    add_comparison_entry,
    compute_comparison_series,
    remove_comparison_entry,
)
from .core.frequency_response.frequency_response_sampler import (
    BODE_SWEEP,
    NYQUIST_SWEEP,
    FrequencyResponseSampler,
    FrequencySample,
    FrequencySweepConfig,
    NyquistSample,
)
from .control_design.root_locus import LocusPoint, RootLocusConfig, RootLocusGenerator
from .control_design.stability_analyzer import StabilityAnalyzer, StabilityVerdict
from .control_design.controller_tuner import ControllerTuner, TuningConstants, TuningRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyzerConfig:
    """
    Configuration for the analysis engine.

    Attributes
    ----------
    simulation : SimulationConfig
        Step-response grid (also used by the comparison engine)
    bode_sweep : FrequencySweepConfig
        Bode frequency sweep
    nyquist_sweep : FrequencySweepConfig
        Nyquist frequency sweep
    root_locus : RootLocusConfig
        Gain sweep of the root locus
    tuning : TuningConstants
        Assumed process constants of the tuning rules
    """
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    bode_sweep: FrequencySweepConfig = BODE_SWEEP
    nyquist_sweep: FrequencySweepConfig = NYQUIST_SWEEP
    root_locus: RootLocusConfig = field(default_factory=RootLocusConfig)
    tuning: TuningConstants = field(default_factory=TuningConstants)


@dataclass(frozen=True)
class AnalysisSnapshot:
    """Results of one refresh, all computed from ``model``."""
    model: SystemModel
    step_response: Trajectory
    performance: PerformanceMetrics
    indices: PerformanceIndices
    bode: List[FrequencySample]
    nyquist: List[NyquistSample]
    root_locus: List[LocusPoint]
    stability: StabilityVerdict


class AnalysisEngine:
    """
    Stateful façade over the pure analysis functions.

    Example Usage
    -------------
    >>> engine = AnalysisEngine()
    >>> engine.set_model('second_order', {'wn': 2.0, 'zeta': 0.7})
    >>> snapshot = engine.refresh()
    >>> snapshot.stability.classification
    'Underdamped – Oscillatory'
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None,
                 model: Optional[SystemModel] = None):
        self.config = config if config is not None else AnalyzerConfig()
        self.simulator = TimeDomainSimulator(self.config.simulation)
        self.performance_analyzer = PerformanceAnalyzer()
        self.sampler = FrequencyResponseSampler(self.config.bode_sweep, self.config.nyquist_sweep)
        self.locus_generator = RootLocusGenerator(self.config.root_locus)
        self.stability_analyzer = StabilityAnalyzer()
        self.tuner = ControllerTuner(self.config.tuning)
        self.comparison = ComparisonEngine(self.config.simulation)

        self._model = model if model is not None else SystemModel.create(ModelKind.SECOND_ORDER)
        self._model.validate()
        self._snapshot: Optional[AnalysisSnapshot] = None

    @property
    def model(self) -> SystemModel:
        return self._model

    @property
    def last_snapshot(self) -> Optional[AnalysisSnapshot]:
        """Most recent successful refresh, or None before the first one."""
        return self._snapshot

    def set_model(self, kind: Union[str, ModelKind],
                  params: Union[ModelParameters, Mapping[str, float], None] = None) -> SystemModel:
        """
        Validate and swap in a new current model.

        ``params`` given as a mapping only overrides the listed fields of the
        current parameter record.

        Raises
        ------
        InvalidParameterError
            The current model is kept
        """
        if params is None:
            params = self._model.params
        elif not isinstance(params, ModelParameters):
            params = ModelParameters.from_mapping(params, base=self._model.params)

        model = SystemModel.create(kind, params)
        self._model = model
        logger.info("Model set to %s %s", model.kind.value, model.params)
        return model

    def refresh(self) -> AnalysisSnapshot:
        """Recompute every analysis for the current model."""
        model = self._model
        trajectory = self.simulator.simulate(model)
        snapshot = AnalysisSnapshot(
            model=model,
            step_response=trajectory,
            performance=self.performance_analyzer.analyze(trajectory),
            indices=self.performance_analyzer.compute_indices(trajectory),
            bode=self.sampler.bode(model),
            nyquist=self.sampler.nyquist(model),
            root_locus=self.locus_generator.generate(model),
            stability=self.stability_analyzer.analyze(model),
        )
        self._snapshot = snapshot
        return snapshot

    def tune_controller(self, rule: Union[str, TuningRule]) -> SystemModel:
        """
        Replace the current model's parameters with tuned PID gains.

        Raises
        ------
        DivisionByZeroError
            The current model is kept
        """
        params = self.tuner.tune(self._model, rule)
        self._model = SystemModel.create(self._model.kind, params)
        return self._model

    def add_to_comparison(self, model: Optional[SystemModel] = None) -> ComparisonEntry:
        """Snapshot the current model (or ``model``) into the comparison set."""
        return self.comparison.add_entry(model if model is not None else self._model)

    def remove_from_comparison(self, entry_id: int) -> bool:
        return self.comparison.remove_entry(entry_id)


_DEFAULT_SIMULATOR = TimeDomainSimulator()
_DEFAULT_ANALYZER = PerformanceAnalyzer()
_DEFAULT_SAMPLER = FrequencyResponseSampler()
_DEFAULT_LOCUS = RootLocusGenerator()
_DEFAULT_STABILITY = StabilityAnalyzer()
_DEFAULT_TUNER = ControllerTuner()


def compute_step_response(model: SystemModel) -> Trajectory:
    return _DEFAULT_SIMULATOR.simulate(model)


def compute_performance(trajectory: Trajectory) -> PerformanceMetrics:
    return _DEFAULT_ANALYZER.analyze(trajectory)


def compute_bode(model: SystemModel) -> List[FrequencySample]:
    return _DEFAULT_SAMPLER.bode(model)


def compute_nyquist(model: SystemModel) -> List[NyquistSample]:
    return _DEFAULT_SAMPLER.nyquist(model)


def compute_root_locus(model: SystemModel) -> List[LocusPoint]:
    return _DEFAULT_LOCUS.generate(model)


def analyze_stability(model: SystemModel) -> StabilityVerdict:
    return _DEFAULT_STABILITY.analyze(model)


def tune_controller(model: SystemModel, rule: Union[str, TuningRule]) -> ModelParameters:
    return _DEFAULT_TUNER.tune(model, rule)


__all__ = [
    'AnalyzerConfig',
    'AnalysisSnapshot',
    'AnalysisEngine',
    'compute_step_response',
    'compute_performance',
    'compute_bode',
    'compute_nyquist',
    'compute_root_locus',
    'analyze_stability',
    'tune_controller',
    'add_comparison_entry',
    'remove_comparison_entry',
    'compute_comparison_series',
]
