"""
System Model Definitions

Immutable descriptions of the three supported model families:

- ``first_order``:  G(s) = K / (tau*s + 1)
- ``second_order``: G(s) = wn^2 / (s^2 + 2*zeta*wn*s + wn^2)
- ``pid``:          first-order plant K / (tau*s + 1) in a unity-feedback
                    loop with a PID controller Kp + Ki/s + Kd*s

A model is never mutated. Every edit builds a new ``SystemModel`` through
``SystemModel.create`` (which validates) or ``with_params``.
"""

import math
from dataclasses import dataclass, field, fields, replace, asdict
from enum import Enum
from typing import Dict, Mapping, Optional, Union

import control as ctrl

from .exceptions import InvalidParameterError


class ModelKind(Enum):
    """Supported model families."""
    FIRST_ORDER = "first_order"
    SECOND_ORDER = "second_order"
    PID = "pid"

    @classmethod
    def parse(cls, value: Union[str, "ModelKind"]) -> "ModelKind":
        """Accept enum members, values and hyphenated spellings ('second-order')."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_")
        for kind in cls:
            if kind.value == key or kind.name.lower() == key:
                return kind
        raise InvalidParameterError(
            "kind", value, f"expected one of {[k.value for k in cls]}"
        )


@dataclass(frozen=True)
class ModelParameters:
    """
    Full parameter record carried by every model.

    Only the subset relevant to the model kind is used; the rest is carried
    so that switching kinds keeps the user's values.

    Attributes
    ----------
    k : float
        Plant static gain
    tau : float
        Plant time constant [s]
    wn : float
        Natural frequency [rad/s]
    zeta : float
        Damping ratio (any sign)
    kp, ki, kd : float
        PID gains
    """
    k: float = 1.0
    tau: float = 1.0
    wn: float = 2.0
    zeta: float = 0.7
    kp: float = 1.0
    ki: float = 0.5
    kd: float = 0.1

    @classmethod
    def from_mapping(cls, values: Mapping[str, float],
                     base: Optional["ModelParameters"] = None) -> "ModelParameters":
        """Build parameters from a mapping, unknown keys rejected."""
        base = base if base is not None else cls()
        names = {f.name for f in fields(cls)}
        unknown = set(values) - names
        if unknown:
            raise InvalidParameterError(
                "params", sorted(unknown), f"unknown parameter(s), expected {sorted(names)}"
            )
        try:
            converted = {name: float(value) for name, value in values.items()}
        except (TypeError, ValueError) as exc:
            raise InvalidParameterError("params", dict(values), "values must be real numbers") from exc
        return replace(base, **converted)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class SystemModel:
    """Plant/controller configuration: a kind plus its parameter record."""
    kind: ModelKind = ModelKind.SECOND_ORDER
    params: ModelParameters = field(default_factory=ModelParameters)

    @classmethod
    def create(cls, kind: Union[str, ModelKind],
               params: Union[ModelParameters, Mapping[str, float], None] = None) -> "SystemModel":
        """
        Build and validate a model.

        Raises
        ------
        InvalidParameterError
            If ``kind`` is unknown or a parameter violates the kind's invariants
        """
        if params is None:
            params = ModelParameters()
        elif not isinstance(params, ModelParameters):
            params = ModelParameters.from_mapping(params)
        model = cls(ModelKind.parse(kind), params)
        model.validate()
        return model

    def with_params(self, **changes: float) -> "SystemModel":
        """Return a validated copy with some parameters replaced."""
        return SystemModel.create(self.kind, replace(self.params, **changes))

    def validate(self) -> None:
        for f in fields(self.params):
            value = getattr(self.params, f.name)
            if not math.isfinite(value):
                raise InvalidParameterError(f.name, value, "must be a finite number")

        if self.kind is ModelKind.SECOND_ORDER:
            if self.params.wn <= 0:
                raise InvalidParameterError(
                    "wn", self.params.wn, "natural frequency must be positive for second_order models"
                )
        elif self.params.tau == 0:
            raise InvalidParameterError(
                "tau", self.params.tau, f"time constant must be non-zero for {self.kind.value} models"
            )

    def to_transfer_function(self) -> ctrl.TransferFunction:
        """
        Convert to a python-control transfer function.

        For ``pid`` models this is the unity-feedback closed loop
        T(s) = C(s)G(s) / (1 + C(s)G(s)).
        """
        p = self.params
        if self.kind is ModelKind.SECOND_ORDER:
            return ctrl.tf([p.wn ** 2], [1.0, 2.0 * p.zeta * p.wn, p.wn ** 2])

        plant = ctrl.tf([p.k], [p.tau, 1.0])
        if self.kind is ModelKind.FIRST_ORDER:
            return plant

        controller = ctrl.tf([p.kd, p.kp, p.ki], [1.0, 0.0])
        return ctrl.feedback(controller * plant, 1)
