import numpy as np
import pytest

from minperiod.system_analysis.system import DiscreteDynamicalSystem, ContinuousDynamicalSystem
from minperiod.system_analysis.builtin import (harmonic_oscillator, logistic_map, henon_map,
                                               third_order_system, create_system)


def test_stepper_correctness():
    """
    Проверка корректности для маятника.
    """
    g, l = 9.8, 1.0
    omega = np.sqrt(g / l)
    ds = harmonic_oscillator(omega, u0=(0.1, 0.0), dt=1e-3)

    def analytic_solution(t):
        return 0.1 * np.cos(omega * t), -0.1 * omega * np.sin(omega * t)

    for step in range(1000):
        ds.step()
        y_exact, y_exact_derivative = analytic_solution(ds.current_time())
        y_curr = ds.current_state()
        assert np.isclose(y_curr[0], y_exact, atol=1e-8), f"step {step}"
        assert np.isclose(y_curr[1], y_exact_derivative, atol=1e-8), f"step {step}"


def test_python_rhs_is_supported():
    def decay_rhs(params, y, dydt):
        dydt[0] = -params[0] * y[0]

    ds = ContinuousDynamicalSystem(decay_rhs, [1.0], [1.0], dt=0.01)
    ds.advance_time(1.0)
    assert np.isclose(ds.current_time(), 1.0)
    assert np.isclose(ds.current_state()[0], np.exp(-1.0), atol=1e-9)


def test_advance_time_is_exact_for_uneven_durations():
    ds = harmonic_oscillator(1.0, dt=0.01)
    ds.advance_time(0.123)
    assert ds.current_time() == pytest.approx(0.123)
    assert np.allclose(ds.current_state(), [np.cos(0.123), -np.sin(0.123)], atol=1e-10)


def test_reinit_copies_state():
    ds = harmonic_oscillator(1.0)
    u0 = np.array([1.0, 0.0])
    ds.reinit(u0)
    ds.step(10)
    assert np.array_equal(u0, [1.0, 0.0])

    state = ds.current_state()
    state[0] = 100.0
    assert ds.current_state()[0] != 100.0


def test_reinit_resets_time():
    ds = logistic_map(3.2)
    ds.step(5)
    assert ds.current_time() == 5
    ds.reinit([0.3])
    assert ds.current_time() == 0
    assert ds.current_state()[0] == 0.3


def test_reinit_rejects_wrong_dimension():
    ds = henon_map()
    with pytest.raises(ValueError):
        ds.reinit([0.1, 0.2, 0.3])


def test_discrete_step_iterates_map():
    ds = logistic_map(4.0, u0=(0.2,))
    ds.step(2)
    x1 = 4.0 * 0.2 * 0.8
    assert np.isclose(ds.current_state()[0], 4.0 * x1 * (1 - x1))


def test_python_map_is_supported():
    def doubling(params, x, x_next):
        x_next[0] = (2.0 * x[0]) % 1.0

    ds = DiscreteDynamicalSystem(doubling, [0.125], [])
    ds.step(3)
    assert ds.current_state()[0] == 0.0
    assert ds.is_discrete_time()


def test_params():
    ds = third_order_system(0.5, 0.5)
    assert ds.getParams() == {'a': 0.5, 'b': 0.5}
    ds.setParams({'a': 1.0})
    assert ds.params[0] == 1.0
    with pytest.raises(KeyError):
        ds.setParams({'c': 1.0})


def test_create_system():
    ds = create_system('hopf', [1.0, 2.0], dt=0.005)
    assert not ds.is_discrete_time()
    assert ds.dt == 0.005
    assert ds.getParams() == {'mu': 1.0, 'omega': 2.0}

    with pytest.raises(ValueError):
        create_system('lorenz')
    with pytest.raises(ValueError):
        create_system('logistic', [3.2], dt=0.1)


def test_compiled_steppers_are_shared():
    from minperiod.system_analysis.builtin import harmonic_rhs
    from minperiod.system_analysis.system import make_stepper_rk4

    assert make_stepper_rk4(harmonic_rhs) is make_stepper_rk4(harmonic_rhs)
    assert harmonic_oscillator(1.0).stepper is harmonic_oscillator(2.0).stepper


def test_python_steppers_are_not_cached():
    from minperiod.system_analysis.system import make_stepper_rk4

    def decay_rhs(params, y, dydt):
        dydt[0] = -y[0]

    assert make_stepper_rk4(decay_rhs) is not make_stepper_rk4(decay_rhs)
