"""
Performance Analyzer for Step Responses

Derives the classical transient-response metrics from a ``Trajectory``.

Key Metrics:
-----------
1. Rise Time: 10% -> 90% of final value (first ascending crossings)
2. Peak Value / Peak Time: global maximum of the output
3. Overshoot: (peak - final) / final [%]
4. Settling Time: last excursion outside a 2% band around the final value
5. Steady-State Error: |1 - final| against a unit setpoint
6. Performance Indices: IAE, ISE, ITAE of the tracking error

The final value is the output of the last sample, not a true asymptotic
limit. Responses that have not settled within the horizon therefore report
metrics relative to wherever they ended.
"""

import logging
import warnings
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Optional, Union

import numpy as np
import pandas as pd

from ..exceptions import EmptyTrajectoryError
from .time_domain_simulator import Trajectory

logger = logging.getLogger(__name__)


class PerformanceIndex(Enum):
    """Integral error criteria."""
    IAE = "iae"     # Integral Absolute Error
    ISE = "ise"     # Integral Square Error
    ITAE = "itae"   # Integral Time-weighted Absolute Error

    @classmethod
    def parse(cls, value: Union[str, "PerformanceIndex"]) -> "PerformanceIndex":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


@dataclass(frozen=True)
class PerformanceMetrics:
    """
    Container for step-response metrics.

    All times in seconds.
    """
    rise_time: float = 0.0
    peak_time: float = 0.0
    overshoot_pct: float = 0.0  # %
    settling_time: float = 0.0
    steady_state_error: float = 0.0
    peak_value: float = 0.0

    def formatted(self) -> Dict[str, str]:
        """Fixed-precision rendering for display."""
        return {
            'rise_time': f"{self.rise_time:.3f}",
            'peak_time': f"{self.peak_time:.3f}",
            'overshoot_pct': f"{self.overshoot_pct:.2f}",
            'settling_time': f"{self.settling_time:.3f}",
            'steady_state_error': f"{self.steady_state_error:.4f}",
            'peak_value': f"{self.peak_value:.3f}",
        }

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class PerformanceIndices:
    """Integral error criteria of a trajectory."""
    iae: float = 0.0
    ise: float = 0.0
    itae: float = 0.0

    def value(self, index: Union[str, PerformanceIndex]) -> float:
        return getattr(self, PerformanceIndex.parse(index).value)


class PerformanceAnalyzer:
    """
    Transient-response analysis of step responses.

    Usage:
    ------
    >>> analyzer = PerformanceAnalyzer()
    >>> metrics = analyzer.analyze(trajectory)
    >>> print(f"Overshoot: {metrics.overshoot_pct:.2f} %")
    """

    def __init__(
        self,
        settling_threshold: float = 0.02,  # 2% of final value
        rise_low: float = 0.1,
        rise_high: float = 0.9,
        reference: float = 1.0,  # setpoint used for steady-state error
    ):
        """
        Parameters
        ----------
        settling_threshold : float
            Settling band as a fraction of the final value
        rise_low, rise_high : float
            Fractions of the final value bounding the rise time
        reference : float
            Setpoint the steady-state error is measured against
        """
        self.settling_threshold = settling_threshold
        self.rise_low = rise_low
        self.rise_high = rise_high
        self.reference = reference

    def analyze(self, trajectory: Trajectory) -> PerformanceMetrics:
        """
        Compute transient metrics.

        Raises
        ------
        EmptyTrajectoryError
            If the trajectory has no samples
        """
        if len(trajectory) == 0:
            raise EmptyTrajectoryError("Cannot analyze performance of an empty trajectory")

        time = np.asarray(trajectory.time, dtype=float)
        output = np.asarray(trajectory.output, dtype=float)

        final_value = float(output[-1])
        settling_band = self.settling_threshold * final_value

        t_low = self._first_crossing(time, output, self.rise_low * final_value)
        t_high = self._first_crossing(time, output, self.rise_high * final_value)
        rise_time = t_high - t_low

        peak_idx = int(np.argmax(output))
        peak_value = float(output[peak_idx])
        peak_time = float(time[peak_idx])

        if final_value == 0:
            warnings.warn("Final value is zero, overshoot is undefined; reporting 0%")
            overshoot = 0.0
        else:
            overshoot = (peak_value - final_value) / final_value * 100.0

        # Last sample outside the band, scanning backward
        outside = np.nonzero(np.abs(output - final_value) > settling_band)[0]
        settling_time = float(time[outside[-1]]) if len(outside) > 0 else 0.0

        steady_state_error = abs(self.reference - final_value)

        metrics = PerformanceMetrics(
            rise_time=rise_time,
            peak_time=peak_time,
            overshoot_pct=overshoot,
            settling_time=settling_time,
            steady_state_error=steady_state_error,
            peak_value=peak_value,
        )
        logger.debug("Performance metrics: %s", metrics)
        return metrics

    @staticmethod
    def _first_crossing(time: np.ndarray, output: np.ndarray, level: float) -> float:
        """Time of the first sample at or above ``level``; 0 if never reached."""
        hits = np.nonzero(output >= level)[0]
        return float(time[hits[0]]) if len(hits) > 0 else 0.0

    def compute_indices(self, trajectory: Trajectory) -> PerformanceIndices:
        """
        IAE, ISE and ITAE of e = setpoint - output.

        Uses rectangular integration at the trajectory time step, matching
        the forward-Euler grid of the simulator.
        """
        if len(trajectory) == 0:
            raise EmptyTrajectoryError("Cannot compute performance indices of an empty trajectory")

        time = np.asarray(trajectory.time, dtype=float)
        error = np.asarray(trajectory.setpoint, dtype=float) - np.asarray(trajectory.output, dtype=float)
        dt = trajectory.dt

        return PerformanceIndices(
            iae=float(np.sum(np.abs(error)) * dt),
            ise=float(np.sum(error ** 2) * dt),
            itae=float(np.sum(time * np.abs(error)) * dt),
        )

    def index_value(self, trajectory: Trajectory,
                    index: Union[str, PerformanceIndex] = PerformanceIndex.IAE) -> float:
        """Single selected performance index."""
        return self.compute_indices(trajectory).value(index)

    def generate_report(self, metrics: PerformanceMetrics,
                        indices: Optional[PerformanceIndices] = None) -> str:
        """
        Generate human-readable performance report.

        Parameters
        ----------
        metrics : PerformanceMetrics
            Computed metrics
        indices : PerformanceIndices, optional
            Integral criteria to append

        Returns
        -------
        str
            Formatted report text
        """
        shown = metrics.formatted()
        report = []
        report.append("=" * 70)
        report.append("STEP RESPONSE PERFORMANCE")
        report.append("=" * 70)
        report.append(f"  Rise Time:             {shown['rise_time']:>10} s")
        report.append(f"  Peak Time:             {shown['peak_time']:>10} s")
        report.append(f"  Peak Value:            {shown['peak_value']:>10}")
        report.append(f"  Overshoot:             {shown['overshoot_pct']:>10} %")
        report.append(f"  Settling Time (2%):    {shown['settling_time']:>10} s")
        report.append(f"  Steady-State Error:    {shown['steady_state_error']:>10}")

        if indices is not None:
            report.append("")
            report.append("PERFORMANCE INDICES:")
            report.append(f"  IAE:                   {indices.iae:10.4f}")
            report.append(f"  ISE:                   {indices.ise:10.4f}")
            report.append(f"  ITAE:                  {indices.itae:10.4f}")

        return "\n".join(report)

    def to_dataframe(self, metrics: PerformanceMetrics,
                     indices: Optional[PerformanceIndices] = None) -> pd.DataFrame:
        """Single-row DataFrame of metrics (and indices when given)."""
        data = metrics.to_dict()
        if indices is not None:
            data.update(asdict(indices))
        return pd.DataFrame([data])
