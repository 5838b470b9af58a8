"""
Control Design Module

Root locus, stability classification with margin estimates, classical PID
tuning rules and design guidance for the supported model families.
"""

from .root_locus import LocusPoint, RootLocusConfig, RootLocusGenerator
from .stability_analyzer import StabilityAnalyzer, StabilityVerdict
from .controller_tuner import ControllerTuner, TuningConstants, TuningRule
from .design_requirements import DesignRequirements, GuidanceItem, GuidanceLevel

__all__ = [
    "LocusPoint",
    "RootLocusConfig",
    "RootLocusGenerator",
    "StabilityAnalyzer",
    "StabilityVerdict",
    "ControllerTuner",
    "TuningConstants",
    "TuningRule",
    "DesignRequirements",
    "GuidanceItem",
    "GuidanceLevel",
]
