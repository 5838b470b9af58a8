"""
Unit tests for TimeDomainSimulator.

Test coverage:
- Time grid (sample count, spacing)
- Second-order closed forms (under/critical/over damped)
- First-order closed form and setpoint
- PID forward-Euler loop (first step, control signal, convergence)
- Trajectory export helpers
"""

import numpy as np
import pytest
import control as ctrl

from control_analyzer.core.system_model import SystemModel
from control_analyzer.core.simulation.time_domain_simulator import (
    SimulationConfig,
    TimeDomainSimulator,
    Trajectory,
    second_order_step,
)


@pytest.fixture
def simulator():
    return TimeDomainSimulator()


class TestTimeGrid:
    """Fixed simulation grid."""

    def test_sample_count(self, simulator):
        trajectory = simulator.simulate(SystemModel.create("second_order"))
        assert len(trajectory) == 1000

    def test_time_values(self, simulator):
        trajectory = simulator.simulate(SystemModel.create("first_order"))
        assert trajectory.time[0] == 0.0
        assert trajectory.time[1] == pytest.approx(0.01)
        assert trajectory.time[-1] == pytest.approx(9.99)
        assert np.allclose(np.diff(trajectory.time), 0.01)

    def test_custom_config(self):
        simulator = TimeDomainSimulator(SimulationConfig(dt=0.5, t_final=2.0))
        trajectory = simulator.simulate(SystemModel.create("second_order"))
        assert len(trajectory) == 4


class TestSecondOrder:
    """Closed-form canonical second-order response."""

    @pytest.mark.parametrize("zeta", [0.05, 0.3, 0.5, 0.7, 0.95])
    def test_underdamped_starts_at_zero_and_settles_at_one(self, simulator, zeta):
        model = SystemModel.create("second_order", {'wn': 10.0, 'zeta': zeta})
        trajectory = simulator.simulate(model)
        assert trajectory.output[0] == pytest.approx(0.0, abs=1e-12)
        assert trajectory.output[-1] == pytest.approx(1.0, abs=0.02)

    def test_setpoint_is_unit(self, simulator):
        trajectory = simulator.simulate(SystemModel.create("second_order"))
        assert np.all(trajectory.setpoint == 1.0)
        assert trajectory.control is None

    def test_critically_damped_monotonic(self, simulator):
        model = SystemModel.create("second_order", {'wn': 2.0, 'zeta': 1.0})
        trajectory = simulator.simulate(model)
        assert trajectory.output[0] == pytest.approx(0.0)
        assert np.all(np.diff(trajectory.output) >= -1e-12)
        t = trajectory.time
        assert np.allclose(trajectory.output, 1 - np.exp(-2.0 * t) * (1 + 2.0 * t))

    def test_overdamped_formula(self, simulator):
        model = SystemModel.create("second_order", {'wn': 1.0, 'zeta': 2.0})
        trajectory = simulator.simulate(model)
        t = trajectory.time
        s1 = -2.0 + np.sqrt(3.0)
        s2 = -2.0 - np.sqrt(3.0)
        expected = 1 + (s2 * np.exp(s1 * t) - s1 * np.exp(s2 * t)) / (s1 - s2)
        assert np.allclose(trajectory.output, expected)
        assert trajectory.output[0] == pytest.approx(0.0, abs=1e-12)
        assert np.all(np.diff(trajectory.output) >= -1e-12)

    @pytest.mark.parametrize("wn,zeta", [(1.0, 1.5), (1.0, 2.0), (3.0, 5.0)])
    def test_overdamped_rises_from_zero_without_overshoot(self, simulator, wn, zeta):
        trajectory = simulator.simulate(SystemModel.create("second_order", {'wn': wn, 'zeta': zeta}))
        assert trajectory.output[0] == pytest.approx(0.0, abs=1e-12)
        assert np.all(np.diff(trajectory.output) >= -1e-12)
        assert np.all(trajectory.output <= 1.0 + 1e-12)

    def test_overdamped_matches_python_control(self, simulator):
        model = SystemModel.create("second_order", {'wn': 1.0, 'zeta': 2.0})
        trajectory = simulator.simulate(model)
        _, reference = ctrl.step_response(model.to_transfer_function(), T=trajectory.time)
        assert np.allclose(trajectory.output, np.squeeze(reference), atol=1e-6)

    def test_underdamped_matches_textbook_form(self, simulator):
        """Phase-shifted cosine form equals the cos + sin form."""
        wn, zeta = 2.0, 0.7
        trajectory = simulator.simulate(SystemModel.create("second_order", {'wn': wn, 'zeta': zeta}))
        t = trajectory.time
        wd = wn * np.sqrt(1 - zeta ** 2)
        textbook = 1 - np.exp(-zeta * wn * t) * (
            np.cos(wd * t) + zeta / np.sqrt(1 - zeta ** 2) * np.sin(wd * t)
        )
        assert np.allclose(trajectory.output, textbook)

    def test_negative_damping_diverges(self):
        t = np.linspace(0, 10, 100)
        y = second_order_step(t, wn=2.0, zeta=-0.2)
        assert y[0] == pytest.approx(0.0, abs=1e-12)
        assert np.max(np.abs(y[-20:])) > 10.0


class TestFirstOrder:
    """First-order lag response."""

    def test_closed_form(self, simulator):
        model = SystemModel.create("first_order", {'k': 2.0, 'tau': 0.5})
        trajectory = simulator.simulate(model)
        t = trajectory.time
        assert np.allclose(trajectory.output, 2.0 * (1 - np.exp(-t / 0.5)))

    def test_setpoint_held_at_gain(self, simulator):
        model = SystemModel.create("first_order", {'k': 3.0, 'tau': 1.0})
        trajectory = simulator.simulate(model)
        assert np.all(trajectory.setpoint == 3.0)

    def test_one_time_constant(self, simulator):
        model = SystemModel.create("first_order", {'k': 1.0, 'tau': 1.0})
        trajectory = simulator.simulate(model)
        assert trajectory.output[100] == pytest.approx(1 - np.exp(-1.0))


class TestPidLoop:
    """Forward-Euler closed loop around a first-order plant."""

    @pytest.fixture
    def pid_model(self):
        return SystemModel.create("pid", {'k': 1.0, 'tau': 1.0, 'kp': 1.0, 'ki': 0.5, 'kd': 0.1})

    def test_first_step(self, simulator, pid_model):
        """First sample already contains the Euler update."""
        trajectory = simulator.simulate(pid_model)
        # error = 1, integral = 0.01, derivative = 100
        expected_u = 1.0 * 1.0 + 0.5 * 0.01 + 0.1 * 100.0
        assert trajectory.control[0] == pytest.approx(expected_u)
        assert trajectory.output[0] == pytest.approx(0.01 * expected_u)

    def test_second_step(self, simulator, pid_model):
        trajectory = simulator.simulate(pid_model)
        y0 = trajectory.output[0]
        error = 1.0 - y0
        integral = 0.01 + error * 0.01
        derivative = (error - 1.0) / 0.01
        u = 1.0 * error + 0.5 * integral + 0.1 * derivative
        assert trajectory.control[1] == pytest.approx(u)
        assert trajectory.output[1] == pytest.approx(y0 + 0.01 * (u - y0))

    def test_control_present(self, simulator, pid_model):
        trajectory = simulator.simulate(pid_model)
        assert trajectory.control is not None
        assert len(trajectory.control) == len(trajectory)
        assert np.all(trajectory.setpoint == 1.0)

    def test_integral_action_converges(self, simulator, pid_model):
        trajectory = simulator.simulate(pid_model)
        assert trajectory.output[-1] == pytest.approx(1.0, abs=0.05)

    def test_proportional_only_offset(self, simulator):
        """P-only control leaves the classical K*Kp/(1 + K*Kp) offset."""
        model = SystemModel.create("pid", {'k': 1.0, 'tau': 0.5, 'kp': 3.0, 'ki': 0.0, 'kd': 0.0})
        trajectory = simulator.simulate(model)
        assert trajectory.output[-1] == pytest.approx(3.0 / 4.0, abs=1e-3)


class TestTrajectoryExport:
    """Record and DataFrame helpers."""

    def test_records_without_control(self, simulator):
        records = simulator.simulate(SystemModel.create("second_order")).to_records()
        assert len(records) == 1000
        assert set(records[0]) == {'time', 'output', 'setpoint'}

    def test_records_with_control(self, simulator):
        records = simulator.simulate(SystemModel.create("pid")).to_records()
        assert set(records[0]) == {'time', 'output', 'setpoint', 'control'}

    def test_dataframe(self, simulator):
        df = simulator.simulate(SystemModel.create("pid")).to_dataframe()
        assert list(df.columns) == ['time', 'output', 'setpoint', 'control']
        assert len(df) == 1000

    def test_sample_access(self):
        trajectory = Trajectory(
            time=np.array([0.0, 0.1]),
            output=np.array([0.0, 0.5]),
            setpoint=np.array([1.0, 1.0]),
        )
        sample = trajectory[1]
        assert sample.time == 0.1
        assert sample.output == 0.5
        assert sample.control is None
        assert trajectory.dt == pytest.approx(0.1)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
