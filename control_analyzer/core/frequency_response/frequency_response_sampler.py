"""
Frequency Response Sampler

Evaluates Bode and Nyquist data on a logarithmic frequency sweep.

Bode
----
Second-order models, with r = w/wn:

$$|G| = \\frac{1}{\\sqrt{(1 - r^2)^2 + (2 \\zeta r)^2}}, \\quad
\\angle G = -\\operatorname{atan2}(2 \\zeta r, 1 - r^2)$$

All other kinds are treated as the first-order lag 1/(1 + j*w*tau).

Nyquist
-------
Second-order models only: the reciprocal of (1 - r^2) + j*2*zeta*r. This is
the normalised plant response itself rather than an open-loop contour
mapping; other kinds produce an empty sequence.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..system_model import ModelKind, SystemModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrequencySweepConfig:
    """
    Logarithmic sweep w_i = start * (end/start)^(i/(n-1)).

    Attributes
    ----------
    start_freq : float
        First frequency [rad/s]
    end_freq : float
        Last frequency [rad/s]
    n_points : int
        Number of frequency points
    """
    start_freq: float = 0.01
    end_freq: float = 100.0
    n_points: int = 100

    def get_frequency_vector(self) -> np.ndarray:
        """Generate logarithmically-spaced frequency vector [rad/s]."""
        return np.logspace(
            np.log10(self.start_freq),
            np.log10(self.end_freq),
            self.n_points
        )


BODE_SWEEP = FrequencySweepConfig(n_points=100)
NYQUIST_SWEEP = FrequencySweepConfig(n_points=200)


@dataclass(frozen=True)
class FrequencySample:
    """Bode sample."""
    frequency: float     # rad/s
    magnitude_db: float
    phase_deg: float


@dataclass(frozen=True)
class NyquistSample:
    """Nyquist sample (complex response at one frequency)."""
    frequency: float     # rad/s
    real: float
    imag: float


class FrequencyResponseSampler:
    """
    Bode and Nyquist sampler for ``SystemModel``.

    The two sweeps are independent of each other and of the time-domain
    simulator.

    Parameters
    ----------
    bode_sweep : FrequencySweepConfig, optional
        Sweep used by ``bode`` (100 points by default)
    nyquist_sweep : FrequencySweepConfig, optional
        Sweep used by ``nyquist`` (200 points by default)
    """

    def __init__(
        self,
        bode_sweep: Optional[FrequencySweepConfig] = None,
        nyquist_sweep: Optional[FrequencySweepConfig] = None,
    ):
        self.bode_sweep = bode_sweep if bode_sweep is not None else BODE_SWEEP
        self.nyquist_sweep = nyquist_sweep if nyquist_sweep is not None else NYQUIST_SWEEP

    def bode_arrays(self, model: SystemModel):
        """
        Vectorised Bode evaluation.

        Returns
        -------
        Tuple[np.ndarray, np.ndarray, np.ndarray]
            (frequency [rad/s], magnitude [dB], phase [deg])
        """
        w = self.bode_sweep.get_frequency_vector()
        p = model.params

        if model.kind is ModelKind.SECOND_ORDER:
            ratio = w / p.wn
            with np.errstate(divide='ignore'):
                magnitude_db = 20 * np.log10(
                    1 / np.sqrt((1 - ratio ** 2) ** 2 + (2 * p.zeta * ratio) ** 2)
                )
            phase_deg = -np.degrees(np.arctan2(2 * p.zeta * ratio, 1 - ratio ** 2))
        else:
            magnitude_db = 20 * np.log10(1 / np.sqrt(1 + (w * p.tau) ** 2))
            phase_deg = -np.degrees(np.arctan(w * p.tau))

        return w, magnitude_db, phase_deg

    def bode(self, model: SystemModel) -> List[FrequencySample]:
        w, magnitude_db, phase_deg = self.bode_arrays(model)
        logger.debug("Bode sweep for %s model: %d points", model.kind.value, len(w))
        return [
            FrequencySample(float(wi), float(m), float(ph))
            for wi, m, ph in zip(w, magnitude_db, phase_deg)
        ]

    def nyquist(self, model: SystemModel) -> List[NyquistSample]:
        """Nyquist samples; empty for kinds other than second_order."""
        if model.kind is not ModelKind.SECOND_ORDER:
            return []

        w = self.nyquist_sweep.get_frequency_vector()
        p = model.params
        ratio = w / p.wn

        denom_real = 1 - ratio ** 2
        denom_imag = 2 * p.zeta * ratio
        denom_mag_sq = denom_real ** 2 + denom_imag ** 2

        with np.errstate(divide='ignore', invalid='ignore'):
            real = denom_real / denom_mag_sq
            imag = -denom_imag / denom_mag_sq

        return [
            NyquistSample(float(wi), float(re), float(im))
            for wi, re, im in zip(w, real, imag)
        ]
