"""
Root Locus Generator

Parametric pole positions of a second-order model as a gain K is swept.

The closed-loop poles are approximated by scaling both the damping ratio and
the natural frequency by sqrt(1 + K):

    zeta_eff = zeta * sqrt(1 + K)
    wn_eff   = wn   * sqrt(1 + K)

and placing the poles of s^2 + 2*zeta_eff*wn_eff*s + wn_eff^2. At K = 0 the
locus reduces to the open-loop poles.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..core.system_model import ModelKind, SystemModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RootLocusConfig:
    """Gain sweep K = i * gain_step for i = 0..n_gains-1."""
    gain_step: float = 0.1
    n_gains: int = 101

    def gains(self) -> np.ndarray:
        return np.arange(self.n_gains) * self.gain_step


@dataclass(frozen=True)
class LocusPoint:
    """
    Pole position at one gain.

    ``branch_id`` groups points into the two pole branches for plotting:
    branch 1 carries the positive-imaginary (or larger real) pole.
    """
    gain: float
    real: float
    imag: float
    branch_id: int


class RootLocusGenerator:
    """Root locus for second-order models; other kinds yield no points."""

    def __init__(self, config: Optional[RootLocusConfig] = None):
        self.config = config if config is not None else RootLocusConfig()

    def generate(self, model: SystemModel) -> List[LocusPoint]:
        if model.kind is not ModelKind.SECOND_ORDER:
            return []

        zeta = model.params.zeta
        wn = model.params.wn
        points: List[LocusPoint] = []

        for gain in self.config.gains():
            gain = float(gain)
            scale = np.sqrt(1 + gain)
            zeta_eff = zeta * scale
            wn_eff = wn * scale

            if abs(zeta_eff) < 1:
                real = -zeta_eff * wn_eff
                imag = wn_eff * np.sqrt(1 - zeta_eff ** 2)
                points.append(LocusPoint(gain, float(real), float(imag), 1))
                points.append(LocusPoint(gain, float(real), float(-imag), 2))
            else:
                root = np.sqrt(zeta_eff ** 2 - 1)
                s1 = wn_eff * (-zeta_eff + root)
                s2 = wn_eff * (-zeta_eff - root)
                points.append(LocusPoint(gain, float(s1), 0.0, 1))
                points.append(LocusPoint(gain, float(s2), 0.0, 2))

        logger.debug("Root locus: %d points over %d gains", len(points), self.config.n_gains)
        return points

    @staticmethod
    def branch(points: List[LocusPoint], branch_id: int) -> List[LocusPoint]:
        """Points of one branch, in gain order."""
        return [p for p in points if p.branch_id == branch_id]
