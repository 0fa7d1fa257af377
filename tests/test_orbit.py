import numpy as np
import pytest

from minperiod.mapping.orbit import PeriodicOrbit, complete_orbit, orbit_to_dataframe, DEFAULT_DT_PARTITION
from minperiod.system_analysis.builtin import rotation_map, harmonic_oscillator


def test_orbit_timing_follows_period_type():
    assert PeriodicOrbit([[1.0, 0.0]], 3).is_discrete_time()
    assert PeriodicOrbit([[1.0, 0.0]], np.int64(3)).is_discrete_time()
    assert not PeriodicOrbit([[1.0, 0.0]], 3.0).is_discrete_time()


def test_orbit_rejects_bad_input():
    with pytest.raises(ValueError):
        PeriodicOrbit(np.empty((0, 2)), 1)
    with pytest.raises(ValueError):
        PeriodicOrbit([[1.0]], 0)
    with pytest.raises(ValueError):
        PeriodicOrbit([[1.0]], -2.5)
    with pytest.raises(ValueError):
        PeriodicOrbit([[1.0]], True)


def test_one_dimensional_points_become_column():
    po = PeriodicOrbit([0.1, 0.2], 2)
    assert po.points.shape == (2, 1)
    assert po.u0[0] == 0.1


def test_complete_discrete_orbit():
    ds = rotation_map(4)
    points = complete_orbit(ds, [1.0, 0.0], 4)
    expected = [[1.0, 0.0], [0.0, 1.0], [-1.0, 0.0], [0.0, -1.0]]
    assert np.allclose(points, expected, atol=1e-12)

    with pytest.raises(ValueError):
        complete_orbit(ds, [1.0, 0.0], 4, dt=0.5)


def test_complete_continuous_orbit():
    ds = harmonic_oscillator(1.0)
    points = complete_orbit(ds, [1.0, 0.0], 2 * np.pi)
    assert points.shape == (DEFAULT_DT_PARTITION + 1, 2)
    assert np.array_equal(points[0], [1.0, 0.0])
    assert np.allclose(points[-1], points[0], atol=1e-8)
    ts = np.linspace(0.0, 2 * np.pi, DEFAULT_DT_PARTITION + 1)
    assert np.allclose(points[:, 0], np.cos(ts), atol=1e-8)

    coarse = complete_orbit(ds, [1.0, 0.0], np.pi, dt=np.pi / 4)
    assert coarse.shape == (5, 2)


def test_orbit_to_dataframe():
    ds = harmonic_oscillator(1.0)
    po = PeriodicOrbit(complete_orbit(ds, [1.0, 0.0], 2 * np.pi), 2 * np.pi)
    df = orbit_to_dataframe(po, ['x', 'y'])
    assert list(df.columns) == ['x', 'y', 't']
    assert df['t'].iloc[-1] == pytest.approx(2 * np.pi)

    po = PeriodicOrbit(complete_orbit(rotation_map(3), [1.0, 0.0], 3), 3)
    df = orbit_to_dataframe(po)
    assert list(df.columns) == ['x0', 'x1', 't']
    assert list(df['t']) == [0, 1, 2]

    with pytest.raises(ValueError):
        orbit_to_dataframe(po, ['x'])
