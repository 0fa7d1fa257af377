import numbers

import numpy as np
import pandas as pd

# number of samples per period of a continuous orbit
DEFAULT_DT_PARTITION = 100


class PeriodicOrbit:
    """
    Periodic orbit given by its points, period and stability flag.

    points[0] is the reference point the period is measured from. An integer
    period marks a discrete-time orbit, a real one a continuous-time orbit.
    """

    def __init__(self, points, T, stable=None):
        points = np.asarray(points, dtype=np.float64)
        if points.ndim == 1:
            points = points.reshape(-1, 1)
        if points.ndim != 2 or points.shape[0] == 0:
            raise ValueError("Periodic orbit must contain at least one point")
        if isinstance(T, bool) or not isinstance(T, numbers.Real):
            raise ValueError(f"Period must be a real number, got {T!r}")
        if T <= 0:
            raise ValueError(f"Period must be positive, got {T}")
        self.points = points
        self.T = T
        self.stable = stable

    @property
    def u0(self):
        return self.points[0]

    def is_discrete_time(self):
        return isinstance(self.T, numbers.Integral)

    def __len__(self):
        return self.points.shape[0]

    def __repr__(self):
        return (f"PeriodicOrbit(T={self.T}, points={len(self)}, "
                f"dimension={self.points.shape[1]}, stable={self.stable})")


def complete_orbit(ds, u0, T, dt=None):
    """
    Samples one period of the orbit through u0.

    Discrete systems give the T points u0, f(u0), ..., f^(T-1)(u0).
    Continuous systems give the states at times 0, dt, ..., T with
    dt = T / DEFAULT_DT_PARTITION by default.
    """
    u0 = np.array(u0, dtype=np.float64)
    ds.reinit(u0)

    if ds.is_discrete_time():
        if dt is not None and dt != 1:
            raise ValueError(f"Discrete orbits are sampled with dt=1, got dt={dt}")
        points = np.empty((int(T), ds.dimension))
        for k in range(int(T)):
            points[k] = ds.current_state()
            ds.step()
        return points

    dt = T / DEFAULT_DT_PARTITION if dt is None else dt
    if dt <= 0:
        raise ValueError(f"Sampling interval must be positive, got dt={dt}")
    n_samples = max(1, int(round(T / dt)))
    points = np.empty((n_samples + 1, ds.dimension))
    points[0] = ds.current_state()
    for k in range(1, n_samples + 1):
        ds.advance_time(dt)
        points[k] = ds.current_state()
    return points


def orbit_to_dataframe(po, coord_names=None):
    """Table of the orbit points with one column per coordinate and the sample time `t`"""
    dim = po.points.shape[1]
    if coord_names is None:
        coord_names = [f"x{i}" for i in range(dim)]
    if len(coord_names) != dim:
        raise ValueError(f"Expected {dim} coordinate names, got {len(coord_names)}")

    if po.is_discrete_time():
        ts = np.arange(len(po))
    else:
        ts = np.linspace(0.0, po.T, len(po))

    dataDict = {colName: x for colName, x in zip(coord_names, po.points.T)}
    dataDict['t'] = ts
    return pd.DataFrame(dataDict)
