"""
Core model definitions, simulation and frequency-response sampling.
"""

from .exceptions import (
    ControlAnalysisError,
    DivisionByZeroError,
    EmptyTrajectoryError,
    InvalidParameterError,
)
from .system_model import ModelKind, ModelParameters, SystemModel

__all__ = [
    'ControlAnalysisError',
    'DivisionByZeroError',
    'EmptyTrajectoryError',
    'InvalidParameterError',
    'ModelKind',
    'ModelParameters',
    'SystemModel',
]
