"""
Stability Analysis Tools

Classifies stability and estimates gain/phase margins directly from model
parameters.

Second-order margins use closed-form expressions in the damping ratio:

    PM = atan(2*zeta / sqrt(sqrt(1 + 4*zeta^4) - 2*zeta^2))   (zeta < 1)
    GM = 20*log10(1 / (2*zeta))

with fixed phase margins of 65.5 deg (critical damping) and 90 deg
(overdamped). PID-controlled models report fixed nominal margins whenever
Kp > 0. First-order lags are classified on the open-loop pole at -1/tau,
so they are stable for tau > 0 whatever the sign of K. Their margins are
those python-control reports for unity feedback around K/(tau*s + 1); a
negative K therefore shows up as a negative gain margin on an otherwise
stable verdict.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np
import control as ctrl

from ..core.system_model import ModelKind, SystemModel

logger = logging.getLogger(__name__)

UNDERDAMPED = "Underdamped – Oscillatory"
CRITICALLY_DAMPED = "Critically Damped – Optimal"
OVERDAMPED = "Overdamped – Slow Response"
PID_STABLE = "Stable with PID Control"
FIRST_ORDER_STABLE = "First-Order Lag – Stable"
UNSTABLE = "Unstable"

CRITICAL_PHASE_MARGIN_DEG = 65.5
OVERDAMPED_PHASE_MARGIN_DEG = 90.0
PID_GAIN_MARGIN_DB = 15.0
PID_PHASE_MARGIN_DEG = 60.0


@dataclass(frozen=True)
class StabilityVerdict:
    """Container for stability analysis results."""
    is_stable: bool = False
    gain_margin_db: float = 0.0
    phase_margin_deg: float = 0.0
    classification: str = UNSTABLE
    poles: np.ndarray = field(default_factory=lambda: np.array([]), compare=False)

    def formatted(self) -> dict:
        return {
            'is_stable': self.is_stable,
            'gain_margin_db': f"{self.gain_margin_db:.2f}",
            'phase_margin_deg': f"{self.phase_margin_deg:.2f}",
            'classification': self.classification,
        }


def second_order_phase_margin(zeta: float) -> float:
    """Phase margin [deg] of the underdamped canonical second-order loop."""
    return math.degrees(math.atan(
        2 * zeta / math.sqrt(math.sqrt(1 + 4 * zeta ** 4) - 2 * zeta ** 2)
    ))


class StabilityAnalyzer:
    """Stability classification and margin estimates."""

    def analyze(self, model: SystemModel) -> StabilityVerdict:
        if model.kind is ModelKind.SECOND_ORDER:
            verdict = self._analyze_second_order(model)
        elif model.kind is ModelKind.PID:
            verdict = self._analyze_pid(model)
        else:
            verdict = self._analyze_first_order(model)

        logger.debug("Stability of %s model: %s", model.kind.value, verdict.classification)
        return verdict

    def check_poles(self, model: SystemModel) -> Tuple[bool, np.ndarray]:
        """
        Poles of the model transfer function and whether all lie in the
        open left half-plane.
        """
        poles = np.atleast_1d(ctrl.poles(model.to_transfer_function()))
        stable = bool(np.all(np.real(poles) < 0))
        return stable, poles

    def _analyze_second_order(self, model: SystemModel) -> StabilityVerdict:
        zeta = model.params.zeta
        wn = model.params.wn
        _, poles = self.check_poles(model)

        if not (zeta > 0 and wn > 0):
            return StabilityVerdict(False, 0.0, 0.0, UNSTABLE, poles)

        if zeta < 1:
            classification = UNDERDAMPED
            phase_margin = second_order_phase_margin(zeta)
        elif zeta == 1:
            classification = CRITICALLY_DAMPED
            phase_margin = CRITICAL_PHASE_MARGIN_DEG
        else:
            classification = OVERDAMPED
            phase_margin = OVERDAMPED_PHASE_MARGIN_DEG

        gain_margin = 20 * math.log10(1 / (2 * zeta))
        return StabilityVerdict(True, gain_margin, phase_margin, classification, poles)

    def _analyze_pid(self, model: SystemModel) -> StabilityVerdict:
        _, poles = self.check_poles(model)
        if model.params.kp > 0:
            return StabilityVerdict(True, PID_GAIN_MARGIN_DB, PID_PHASE_MARGIN_DEG, PID_STABLE, poles)
        return StabilityVerdict(False, 0.0, 0.0, UNSTABLE, poles)

    def _analyze_first_order(self, model: SystemModel) -> StabilityVerdict:
        """
        Open-loop verdict for K/(tau*s + 1).

        ``is_stable`` and ``poles`` describe the plant itself. The margins
        are unity-feedback margins, so K < 0 gives a negative gain margin.
        """
        _, poles = self.check_poles(model)
        if model.params.tau <= 0:
            return StabilityVerdict(False, 0.0, 0.0, UNSTABLE, poles)

        gm, pm, _, _ = ctrl.margin(model.to_transfer_function())
        gain_margin = 20 * np.log10(gm) if gm is not None and np.isfinite(gm) else float('inf')
        phase_margin = float(pm) if pm is not None and np.isfinite(pm) else float('inf')
        return StabilityVerdict(True, float(gain_margin), phase_margin, FIRST_ORDER_STABLE, poles)
