"""
Control System Analyzer

Analysis engine for three fixed families of linear control-system models
(first-order lag, canonical second-order system, PID-controlled first-order
plant):

- Step response (closed form or forward-Euler integration)
- Transient performance metrics and integral error indices
- Bode and Nyquist frequency response samples
- Parametric root locus
- Stability classification with gain/phase margin estimates
- Ziegler-Nichols, Cohen-Coon and IMC PID tuning
- Side-by-side comparison of saved configurations

Rendering, persistence and user interaction belong to the calling shell.
"""

import logging

from .core.exceptions import (
    ControlAnalysisError,
    DivisionByZeroError,
    EmptyTrajectoryError,
    InvalidParameterError,
)
from .core.system_model import ModelKind, ModelParameters, SystemModel
from .core.simulation import (
    ComparisonEngine,
    ComparisonEntry,
    PerformanceAnalyzer,
    PerformanceIndex,
    PerformanceIndices,
    PerformanceMetrics,
    SimulationConfig,
    TimeDomainSimulator,
    Trajectory,
)
from .core.frequency_response import (
    FrequencyResponseSampler,
    FrequencySample,
    FrequencySweepConfig,
    NyquistSample,
)
from .control_design import (
    ControllerTuner,
    DesignRequirements,
    LocusPoint,
    RootLocusGenerator,
    StabilityAnalyzer,
    StabilityVerdict,
    TuningRule,
)
from .engine import (
    AnalysisEngine,
    AnalysisSnapshot,
    AnalyzerConfig,
    add_comparison_entry,
    analyze_stability,
    compute_bode,
    compute_comparison_series,
    compute_nyquist,
    compute_performance,
    compute_root_locus,
    compute_step_response,
    remove_comparison_entry,
    tune_controller,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    "ControlAnalysisError",
    "DivisionByZeroError",
    "EmptyTrajectoryError",
    "InvalidParameterError",
    "ModelKind",
    "ModelParameters",
    "SystemModel",
    "ComparisonEngine",
    "ComparisonEntry",
    "PerformanceAnalyzer",
    "PerformanceIndex",
    "PerformanceIndices",
    "PerformanceMetrics",
    "SimulationConfig",
    "TimeDomainSimulator",
    "Trajectory",
    "FrequencyResponseSampler",
    "FrequencySample",
    "FrequencySweepConfig",
    "NyquistSample",
    "ControllerTuner",
    "DesignRequirements",
    "LocusPoint",
    "RootLocusGenerator",
    "StabilityAnalyzer",
    "StabilityVerdict",
    "TuningRule",
    "AnalysisEngine",
    "AnalysisSnapshot",
    "AnalyzerConfig",
    "add_comparison_entry",
    "analyze_stability",
    "compute_bode",
    "compute_comparison_series",
    "compute_nyquist",
    "compute_performance",
    "compute_root_locus",
    "compute_step_response",
    "remove_comparison_entry",
    "tune_controller",
]
