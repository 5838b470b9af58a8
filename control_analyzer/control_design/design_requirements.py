"""
Control System Design Requirements

Robustness thresholds and damping guidance used to annotate a stability
verdict with design advice.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..core.system_model import ModelKind, SystemModel
from .stability_analyzer import StabilityVerdict


class PerformanceMetric(Enum):
    """Metric a requirement applies to."""
    GAIN_MARGIN = "gain_margin"
    PHASE_MARGIN = "phase_margin"
    DAMPING_RATIO = "damping_ratio"


class GuidanceLevel(Enum):
    """Outcome of checking one requirement."""
    EXCELLENT = "excellent"
    MET = "met"
    NOT_MET = "not_met"
    INFO = "info"


@dataclass
class ControlRequirement:
    """Individual control requirement specification."""
    metric: PerformanceMetric
    value: float
    unit: str
    description: str = ""


@dataclass(frozen=True)
class GuidanceItem:
    """One line of design advice."""
    metric: PerformanceMetric
    level: GuidanceLevel
    message: str


@dataclass
class DesignRequirements:
    """
    Robustness thresholds.

    Attributes
    ----------
    min_gain_margin_db : float
        Gain margin above which robustness to gain variations is adequate
    min_phase_margin_deg : float
        Phase margin giving good stability with acceptable overshoot
    excellent_phase_margin_deg : float
        Phase margin giving excellent stability with minimal overshoot
    low_damping : float
        Damping ratio below which damping should be increased
    high_damping : float
        Damping ratio above which damping can be reduced for speed
    requirements : List[ControlRequirement]
        Margin requirements graded by ``assess``; built from the three
        margin fields above when left empty
    """
    min_gain_margin_db: float = 6.0
    min_phase_margin_deg: float = 45.0
    excellent_phase_margin_deg: float = 60.0
    low_damping: float = 0.4
    high_damping: float = 0.8
    requirements: List[ControlRequirement] = field(default_factory=list)

    def __post_init__(self):
        if not self.requirements:
            self._set_default_requirements()

    def _set_default_requirements(self):
        self.requirements = [
            ControlRequirement(
                metric=PerformanceMetric.GAIN_MARGIN,
                value=self.min_gain_margin_db,
                unit="dB",
                description="Adequate robustness to gain variations",
            ),
            ControlRequirement(
                metric=PerformanceMetric.PHASE_MARGIN,
                value=self.min_phase_margin_deg,
                unit="deg",
                description="Good stability with acceptable overshoot",
            ),
            ControlRequirement(
                metric=PerformanceMetric.PHASE_MARGIN,
                value=self.excellent_phase_margin_deg,
                unit="deg",
                description="Excellent stability with minimal overshoot",
            ),
        ]

    def damping_advice(self, zeta: float) -> str:
        if zeta < self.low_damping:
            return "Increase for better stability"
        if zeta > self.high_damping:
            return "Decrease for faster response"
        return "Optimal range"

    def thresholds(self, metric: PerformanceMetric) -> List[float]:
        """Ascending requirement values registered for ``metric``."""
        return sorted(r.value for r in self.requirements if r.metric is metric)

    def grade(self, metric: PerformanceMetric, value: float) -> Optional[GuidanceLevel]:
        """
        Grade ``value`` against the requirements on ``metric``.

        Exceeding the strictest of several thresholds is EXCELLENT, exceeding
        the loosest is MET. Returns None when no requirement covers ``metric``.
        """
        limits = self.thresholds(metric)
        if not limits:
            return None
        if len(limits) > 1 and value > limits[-1]:
            return GuidanceLevel.EXCELLENT
        if value > limits[0]:
            return GuidanceLevel.MET
        return GuidanceLevel.NOT_MET

    def assess(self, verdict: StabilityVerdict, model: SystemModel) -> List[GuidanceItem]:
        """
        Check a stability verdict against ``requirements``.

        Returns
        -------
        List[GuidanceItem]
            One item per required margin, plus damping advice for
            second-order models
        """
        items: List[GuidanceItem] = []

        if not verdict.is_stable:
            items.append(GuidanceItem(
                PerformanceMetric.GAIN_MARGIN, GuidanceLevel.NOT_MET,
                "System is unstable, margins are not meaningful",
            ))
        else:
            margins = [
                (PerformanceMetric.GAIN_MARGIN, "Gain margin", verdict.gain_margin_db, "dB"),
                (PerformanceMetric.PHASE_MARGIN, "Phase margin", verdict.phase_margin_deg, "deg"),
            ]
            for metric, name, value, unit in margins:
                level = self.grade(metric, value)
                if level is None:
                    continue
                items.append(GuidanceItem(
                    metric, level,
                    f"{name} {value:.2f} {unit} ({level.value}, "
                    f"required > {self.thresholds(metric)[0]:g} {unit})",
                ))

        if model.kind is ModelKind.SECOND_ORDER:
            zeta = model.params.zeta
            items.append(GuidanceItem(
                PerformanceMetric.DAMPING_RATIO, GuidanceLevel.INFO,
                f"Damping ratio {zeta:g}: {self.damping_advice(zeta)}",
            ))

        return items
