"""
Controller Tuning Rules

Classical PID tuning formulas:

Ziegler-Nichols (ultimate-cycle):
    Ku = 4.0 (assumed), Pu = 2*pi/wn
    Kp = 0.6*Ku,  Ki = 1.2*Ku/Pu,  Kd = 0.075*Ku*Pu

Cohen-Coon (first-order plus dead time, theta = 0.1 assumed):
    R  = theta/tau
    Kp = (1/K) * (1/R) * (1.35 + 0.25*R)
    Ki = Kp / (tau * (2.5 - 2*R) / (1 + 0.6*R))
    Kd = Kp * tau * (0.37 - 0.37*R) / (1 + 0.2*R)

Internal Model Control (lambda = tau/3):
    Kp = tau / (K*lambda),  Ki = Kp/tau,  Kd = 0

Every rule returns a new ``ModelParameters`` with only the three gains
replaced.
"""

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Union

from ..core.exceptions import DivisionByZeroError
from ..core.system_model import ModelParameters, SystemModel

logger = logging.getLogger(__name__)


class TuningRule(Enum):
    """Supported tuning rules."""
    ZIEGLER_NICHOLS = "ziegler-nichols"
    COHEN_COON = "cohen-coon"
    IMC = "imc"

    @classmethod
    def parse(cls, value: Union[str, "TuningRule"]) -> "TuningRule":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "-")
        for rule in cls:
            if rule.value == key or rule.name.lower().replace("_", "-") == key:
                return rule
        raise ValueError(f"Unknown tuning rule: {value!r}, expected one of {[r.value for r in cls]}")

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_LABELS = {
    TuningRule.ZIEGLER_NICHOLS: "Ziegler-Nichols",
    TuningRule.COHEN_COON: "Cohen-Coon",
    TuningRule.IMC: "Internal Model Control (IMC)",
}

_DESCRIPTIONS = {
    TuningRule.ZIEGLER_NICHOLS: (
        "Classical tuning approach with good disturbance rejection. "
        "May produce significant overshoot but offers fast response."
    ),
    TuningRule.COHEN_COON: (
        "Effective for processes with significant dead time. "
        "Performs better than Ziegler-Nichols for lag-dominant processes."
    ),
    TuningRule.IMC: (
        "Robust performance with a single tuning parameter. "
        "Good setpoint tracking with minimal overshoot."
    ),
}


@dataclass(frozen=True)
class TuningConstants:
    """Assumed process constants used by the tuning rules."""
    ultimate_gain: float = 4.0       # Ku for Ziegler-Nichols
    dead_time: float = 0.1           # theta for Cohen-Coon [s]
    imc_lambda_ratio: float = 1.0 / 3.0  # lambda = ratio * tau


def _divide(numerator: float, denominator: float, what: str) -> float:
    if denominator == 0:
        raise DivisionByZeroError(f"{what} is zero")
    return numerator / denominator


class ControllerTuner:
    """
    PID gain suggestions from classical tuning rules.

    Usage:
    ------
    >>> tuner = ControllerTuner()
    >>> gains = tuner.tune(SystemModel.create('second_order', {'wn': 2.0}), 'ziegler-nichols')
    >>> round(gains.kp, 3)
    2.4
    """

    def __init__(self, constants: TuningConstants = TuningConstants()):
        self.constants = constants

    def tune(self, model: Union[SystemModel, ModelParameters],
             rule: Union[str, TuningRule]) -> ModelParameters:
        """
        Compute PID gains for ``model`` with ``rule``.

        Returns
        -------
        ModelParameters
            Copy of the model parameters with kp, ki, kd replaced

        Raises
        ------
        DivisionByZeroError
            If a parameter the rule divides by (wn, tau, k or a derived
            denominator) is zero
        """
        params = model.params if isinstance(model, SystemModel) else model
        rule = TuningRule.parse(rule)

        if rule is TuningRule.ZIEGLER_NICHOLS:
            kp, ki, kd = self._ziegler_nichols(params)
        elif rule is TuningRule.COHEN_COON:
            kp, ki, kd = self._cohen_coon(params)
        else:
            kp, ki, kd = self._imc(params)

        logger.info("Tuned with %s: kp=%.3f ki=%.3f kd=%.3f", rule.label, kp, ki, kd)
        return replace(params, kp=kp, ki=ki, kd=kd)

    def _ziegler_nichols(self, p: ModelParameters):
        ku = self.constants.ultimate_gain
        pu = _divide(2 * math.pi, p.wn, "natural frequency wn")

        kp = 0.6 * ku
        ki = 1.2 * ku / pu
        kd = 0.075 * ku * pu
        return kp, ki, kd

    def _cohen_coon(self, p: ModelParameters):
        theta = self.constants.dead_time
        r = _divide(theta, p.tau, "time constant tau")
        gain_inv = _divide(1.0, p.k, "plant gain k")

        kp = gain_inv * _divide(1.0, r, "dead-time ratio theta/tau") * (1.35 + 0.25 * r)
        integral_time = p.tau * _divide(2.5 - 2 * r, 1 + 0.6 * r, "Cohen-Coon term 1 + 0.6R")
        ki = _divide(kp, integral_time, "Cohen-Coon integral time")
        kd = kp * p.tau * _divide(0.37 - 0.37 * r, 1 + 0.2 * r, "Cohen-Coon term 1 + 0.2R")
        return kp, ki, kd

    def _imc(self, p: ModelParameters):
        lam = p.tau * self.constants.imc_lambda_ratio
        kp = _divide(p.tau, p.k * lam, "IMC denominator k*lambda")
        ki = _divide(kp, p.tau, "time constant tau")
        kd = 0.0
        return kp, ki, kd
