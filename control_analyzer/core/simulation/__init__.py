"""
Time-domain simulation, performance metrics and model comparison.
"""

from .time_domain_simulator import (
    SimulationConfig,
    TimeDomainSimulator,
    Trajectory,
    TrajectorySample,
)
from .performance_analyzer import (
    PerformanceAnalyzer,
    PerformanceIndex,
    PerformanceIndices,
    PerformanceMetrics,
)
from .comparison_engine import (
    COLOR_PALETTE,
    ComparisonEngine,
    ComparisonEntry,
    add_comparison_entry,
    compute_comparison_series,
    remove_comparison_entry,
)

__all__ = [
    'SimulationConfig',
    'TimeDomainSimulator',
    'Trajectory',
    'TrajectorySample',
    'PerformanceAnalyzer',
    'PerformanceIndex',
    'PerformanceIndices',
    'PerformanceMetrics',
    'COLOR_PALETTE',
    'ComparisonEngine',
    'ComparisonEntry',
    'add_comparison_entry',
    'compute_comparison_series',
    'remove_comparison_entry',
]
