"""
Unit tests for DesignRequirements guidance.
"""

import pytest

from control_analyzer.core.system_model import SystemModel
from control_analyzer.control_design.design_requirements import (
    ControlRequirement,
    DesignRequirements,
    GuidanceLevel,
    PerformanceMetric,
)
from control_analyzer.control_design.stability_analyzer import StabilityAnalyzer, StabilityVerdict


@pytest.fixture
def requirements():
    return DesignRequirements()


class TestDampingAdvice:

    @pytest.mark.parametrize("zeta,advice", [
        (0.2, "Increase for better stability"),
        (0.4, "Optimal range"),
        (0.7, "Optimal range"),
        (0.8, "Optimal range"),
        (1.5, "Decrease for faster response"),
    ])
    def test_bands(self, requirements, zeta, advice):
        assert requirements.damping_advice(zeta) == advice


class TestAssess:

    def test_default_requirements(self, requirements):
        assert [r.metric for r in requirements.requirements] == [
            PerformanceMetric.GAIN_MARGIN,
            PerformanceMetric.PHASE_MARGIN,
            PerformanceMetric.PHASE_MARGIN,
        ]

    def test_unstable(self, requirements):
        model = SystemModel.create("pid", {'kp': 0.0})
        items = requirements.assess(StabilityVerdict(), model)
        assert len(items) == 1
        assert items[0].level is GuidanceLevel.NOT_MET

    def test_pid_margins(self, requirements):
        model = SystemModel.create("pid")
        items = requirements.assess(StabilityAnalyzer().analyze(model), model)
        levels = {item.metric: item.level for item in items}
        assert levels[PerformanceMetric.GAIN_MARGIN] is GuidanceLevel.MET
        # 60 deg is not above the excellent threshold
        assert levels[PerformanceMetric.PHASE_MARGIN] is GuidanceLevel.MET
        assert PerformanceMetric.DAMPING_RATIO not in levels

    def test_second_order(self, requirements):
        model = SystemModel.create("second_order", {'zeta': 0.7})
        items = requirements.assess(StabilityAnalyzer().analyze(model), model)
        levels = {item.metric: item.level for item in items}
        # GM = -2.92 dB
        assert levels[PerformanceMetric.GAIN_MARGIN] is GuidanceLevel.NOT_MET
        assert levels[PerformanceMetric.PHASE_MARGIN] is GuidanceLevel.EXCELLENT
        assert levels[PerformanceMetric.DAMPING_RATIO] is GuidanceLevel.INFO
        assert "Optimal range" in items[-1].message


class TestCustomRequirements:
    """Grading follows the requirement list, not the scalar defaults."""

    @pytest.fixture
    def pid(self):
        model = SystemModel.create("pid")
        return model, StabilityAnalyzer().analyze(model)

    def test_strict_gain_margin(self, pid):
        model, verdict = pid
        requirements = DesignRequirements(requirements=[
            ControlRequirement(PerformanceMetric.GAIN_MARGIN, 100.0, "dB"),
        ])
        items = requirements.assess(verdict, model)
        assert [item.metric for item in items] == [PerformanceMetric.GAIN_MARGIN]
        assert items[0].level is GuidanceLevel.NOT_MET
        assert "required > 100 dB" in items[0].message

    def test_relaxed_phase_margin_excellent(self, pid):
        model, verdict = pid
        requirements = DesignRequirements(requirements=[
            ControlRequirement(PerformanceMetric.PHASE_MARGIN, 30.0, "deg"),
            ControlRequirement(PerformanceMetric.PHASE_MARGIN, 50.0, "deg"),
        ])
        items = requirements.assess(verdict, model)
        assert [item.level for item in items] == [GuidanceLevel.EXCELLENT]

    def test_grade_without_requirement(self):
        requirements = DesignRequirements(requirements=[
            ControlRequirement(PerformanceMetric.PHASE_MARGIN, 45.0, "deg"),
        ])
        assert requirements.grade(PerformanceMetric.GAIN_MARGIN, 20.0) is None
        # A single threshold can only be met, never excellent
        assert requirements.grade(PerformanceMetric.PHASE_MARGIN, 90.0) is GuidanceLevel.MET

    def test_thresholds_from_scalar_fields(self):
        requirements = DesignRequirements(min_phase_margin_deg=40.0, excellent_phase_margin_deg=70.0)
        assert requirements.thresholds(PerformanceMetric.PHASE_MARGIN) == [40.0, 70.0]
        assert requirements.grade(PerformanceMetric.PHASE_MARGIN, 65.0) is GuidanceLevel.MET


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
