"""
Time-Domain Step Response Simulator

Produces the step response of a ``SystemModel`` on a fixed time grid.

Methods by model kind:
---------------------
- second_order: closed-form canonical step response
    underdamped  (zeta < 1):  y = 1 - e^(-zeta*wn*t)/sqrt(1-zeta^2) * cos(wd*t - atan(zeta/sqrt(1-zeta^2)))
    critical     (zeta = 1):  y = 1 - e^(-wn*t) * (1 + wn*t)
    overdamped   (zeta > 1):  y = 1 + (s2*e^(s1*t) - s1*e^(s2*t)) / (s1 - s2)
- first_order: closed form y = K * (1 - e^(-t/tau)), setpoint held at K
- pid: forward-Euler integration of tau*dy/dt = K*u - y with a PID law on
  the tracking error against a unit setpoint
"""

import logging
import warnings
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

import numpy as np
import pandas as pd

from ..system_model import ModelKind, SystemModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Fixed simulation grid.

    Attributes
    ----------
    dt : float
        Time step [s]
    t_final : float
        Simulation horizon [s]; the grid holds floor(t_final/dt) samples
    setpoint : float
        Unit step amplitude used by second_order and pid models
    """
    dt: float = 0.01
    t_final: float = 10.0
    setpoint: float = 1.0

    @property
    def n_samples(self) -> int:
        return int(np.floor(self.t_final / self.dt))

    def time_vector(self) -> np.ndarray:
        """Sample times t_i = i*dt for i = 0..N-1."""
        return np.arange(self.n_samples) * self.dt


@dataclass(frozen=True)
class TrajectorySample:
    """One step-response sample."""
    time: float
    output: float
    setpoint: float
    control: Optional[float] = None


@dataclass(frozen=True)
class Trajectory:
    """
    Fully materialised step response.

    Attributes
    ----------
    time : np.ndarray
        Sample times [s]
    output : np.ndarray
        System output
    setpoint : np.ndarray
        Reference value at each sample
    control : np.ndarray, optional
        Controller output u (pid models only)
    """
    time: np.ndarray
    output: np.ndarray
    setpoint: np.ndarray
    control: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return len(self.time)

    def __iter__(self) -> Iterator[TrajectorySample]:
        for i in range(len(self.time)):
            yield self[i]

    def __getitem__(self, i: int) -> TrajectorySample:
        return TrajectorySample(
            time=float(self.time[i]),
            output=float(self.output[i]),
            setpoint=float(self.setpoint[i]),
            control=None if self.control is None else float(self.control[i]),
        )

    @property
    def dt(self) -> float:
        if len(self.time) < 2:
            return 0.0
        return float(self.time[1] - self.time[0])

    def to_records(self) -> list:
        """List of per-sample dicts ('control' only present for pid runs)."""
        records = []
        for sample in self:
            record: Dict[str, float] = {
                'time': sample.time,
                'output': sample.output,
                'setpoint': sample.setpoint,
            }
            if sample.control is not None:
                record['control'] = sample.control
            records.append(record)
        return records

    def to_dataframe(self) -> pd.DataFrame:
        data = {'time': self.time, 'output': self.output, 'setpoint': self.setpoint}
        if self.control is not None:
            data['control'] = self.control
        return pd.DataFrame(data)


def second_order_step(t: np.ndarray, wn: float, zeta: float) -> np.ndarray:
    """
    Canonical second-order unit step response.

    Negative damping ratios use the same formulas: |zeta| < 1 takes the
    oscillatory branch, zeta = -1 the repeated-root branch and zeta < -1 the
    real-root branch, all of which diverge.
    """
    if abs(zeta) < 1:
        root = np.sqrt(1 - zeta ** 2)
        wd = wn * root
        return 1 - (np.exp(-zeta * wn * t) / root) * np.cos(wd * t - np.arctan(zeta / root))

    if abs(zeta) == 1:
        a = zeta * wn
        return 1 - np.exp(-a * t) * (1 + a * t)

    root = np.sqrt(zeta ** 2 - 1)
    s1 = wn * (-zeta + root)
    s2 = wn * (-zeta - root)
    return 1 + (s2 * np.exp(s1 * t) - s1 * np.exp(s2 * t)) / (s1 - s2)


def first_order_step(t: np.ndarray, k: float, tau: float) -> np.ndarray:
    """First-order lag step response K*(1 - e^(-t/tau))."""
    return k * (1 - np.exp(-t / tau))


class TimeDomainSimulator:
    """
    Step-response simulator for the three supported model families.

    Usage:
    ------
    >>> simulator = TimeDomainSimulator()
    >>> trajectory = simulator.simulate(SystemModel.create('second_order', {'wn': 2.0, 'zeta': 0.7}))
    >>> len(trajectory)
    1000
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config if config is not None else SimulationConfig()

    def simulate(self, model: SystemModel) -> Trajectory:
        """
        Compute the step response of ``model``.

        Parameters
        ----------
        model : SystemModel
            Validated model snapshot

        Returns
        -------
        Trajectory
            Exactly ``config.n_samples`` samples at t = i*dt
        """
        t = self.config.time_vector()
        p = model.params

        with np.errstate(over='ignore', invalid='ignore'):
            if model.kind is ModelKind.SECOND_ORDER:
                trajectory = Trajectory(
                    time=t,
                    output=second_order_step(t, p.wn, p.zeta),
                    setpoint=np.full_like(t, self.config.setpoint),
                )
            elif model.kind is ModelKind.FIRST_ORDER:
                trajectory = Trajectory(
                    time=t,
                    output=first_order_step(t, p.k, p.tau),
                    setpoint=np.full_like(t, p.k),
                )
            else:
                trajectory = self._simulate_pid(t, model)

        if not np.all(np.isfinite(trajectory.output)):
            warnings.warn(
                f"Step response of {model.kind.value} model contains non-finite samples "
                f"(unstable parameters {p})"
            )
        logger.debug("Simulated %s step response: %d samples", model.kind.value, len(trajectory))
        return trajectory

    def _simulate_pid(self, t: np.ndarray, model: SystemModel) -> Trajectory:
        """Forward-Euler closed loop: PID controller around K/(tau*s + 1)."""
        p = model.params
        dt = self.config.dt
        setpoint = self.config.setpoint

        output = np.zeros_like(t)
        control = np.zeros_like(t)

        y = 0.0
        integral = 0.0
        prev_error = 0.0

        for i in range(len(t)):
            error = setpoint - y
            integral += error * dt
            derivative = (error - prev_error) / dt

            u = p.kp * error + p.ki * integral + p.kd * derivative
            y += dt * (p.k * u - y) / p.tau
            prev_error = error

            output[i] = y
            control[i] = u

        return Trajectory(
            time=t,
            output=output,
            setpoint=np.full_like(t, setpoint),
            control=control,
        )
