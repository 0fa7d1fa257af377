from functools import lru_cache

import numpy as np
from numba import njit
from numba.core.dispatcher import Dispatcher


def build_stepper_rk4(rhs):
    """Builds an RK-4 stepper for the right-hand side `rhs(params, y, dydt)`"""
    def stepper_rk4(params, y_curr, dt):
        """Makes RK-4 step and saves the value in y_curr"""
        dim = y_curr.shape[0]
        k1 = np.empty(dim)
        k2 = np.empty(dim)
        k3 = np.empty(dim)
        k4 = np.empty(dim)
        y_temp = np.empty(dim)

        rhs(params, y_curr, k1)

        for i in range(dim):
            y_temp[i] = y_curr[i] + k1[i] * dt / 2.0
        rhs(params, y_temp, k2)

        for i in range(dim):
            y_temp[i] = y_curr[i] + k2[i] * dt / 2.0
        rhs(params, y_temp, k3)

        for i in range(dim):
            y_temp[i] = y_curr[i] + k3[i] * dt
        rhs(params, y_temp, k4)

        for i in range(dim):
            y_curr[i] = y_curr[i] + (k1[i] + 2 * k2[i] + 2 * k3[i] + k4[i]) * dt / 6.0

    return stepper_rk4


def build_iterator(map_func):
    """Builds an iterator applying the map `map_func(params, x, x_next)` n times in place"""
    def iterate_map(params, x_curr, n):
        dim = x_curr.shape[0]
        x_next = np.empty(dim)
        for _ in range(n):
            map_func(params, x_curr, x_next)
            for i in range(dim):
                x_curr[i] = x_next[i]

    return iterate_map


@lru_cache(maxsize=64)
def compile_stepper_rk4(rhs):
    return njit(build_stepper_rk4(rhs))


@lru_cache(maxsize=64)
def compile_iterator(map_func):
    return njit(build_iterator(map_func))


def make_stepper_rk4(rhs):
    """Compiled right-hand sides get a compiled stepper, shared between systems"""
    if isinstance(rhs, Dispatcher):
        return compile_stepper_rk4(rhs)
    return build_stepper_rk4(rhs)


def make_iterator(map_func):
    if isinstance(map_func, Dispatcher):
        return compile_iterator(map_func)
    return build_iterator(map_func)


class DynamicalSystem:
    """
    Simulation state of a dynamical system.

    The system owns a private copy of its state; `reinit` copies the given
    vector and `current_state` returns a copy, so arrays passed in by the
    caller are never modified.
    """

    def __init__(self, u0, params, param_names=()):
        self.u0 = np.atleast_1d(np.asarray(u0, dtype=np.float64)).copy()
        self.params = np.atleast_1d(np.asarray(params, dtype=np.float64)).copy()
        self.param_names = tuple(param_names)
        self._state = self.u0.copy()
        self._time = 0

    @property
    def dimension(self):
        return self.u0.shape[0]

    def getParams(self):
        return dict(zip(self.param_names, self.params))

    def setParams(self, paramDict):
        for key in paramDict:
            if key in self.param_names:
                self.params[self.param_names.index(key)] = paramDict[key]
            else:
                raise KeyError(f"System has no parameter '{key}'")

    def reinit(self, state=None):
        state = self.u0 if state is None else state
        state = np.atleast_1d(np.asarray(state, dtype=np.float64))
        if state.shape != self.u0.shape:
            raise ValueError(f"State of shape {state.shape} does not match system dimension {self.dimension}")
        self._state = state.copy()
        self._time = 0

    def current_state(self):
        return self._state.copy()

    def current_time(self):
        return self._time

    def is_discrete_time(self):
        raise NotImplementedError

    def step(self, n=1):
        raise NotImplementedError

    def __repr__(self):
        return (f"{self.__class__.__name__}(dimension={self.dimension}, "
                f"params={self.getParams() or list(self.params)})")


class DiscreteDynamicalSystem(DynamicalSystem):
    """Iterated map `x_{k+1} = f(x_k)`; one step is one iteration"""

    def __init__(self, map_func, u0, params, param_names=()):
        super().__init__(u0, params, param_names)
        self.map_func = map_func
        self.iterator = make_iterator(map_func)

    def is_discrete_time(self):
        return True

    def step(self, n=1):
        self.iterator(self.params, self._state, int(n))
        self._time += int(n)


class ContinuousDynamicalSystem(DynamicalSystem):
    """Flow of `dy/dt = rhs(y)` integrated by fixed RK-4 steps of size dt"""

    def __init__(self, rhs, u0, params, param_names=(), dt=0.01):
        super().__init__(u0, params, param_names)
        if dt <= 0:
            raise ValueError(f"Integration step must be positive, got dt={dt}")
        self.rhs = rhs
        self.dt = float(dt)
        self.stepper = make_stepper_rk4(rhs)
        self._time = 0.0

    def reinit(self, state=None):
        super().reinit(state)
        self._time = 0.0

    def is_discrete_time(self):
        return False

    def step(self, n=1):
        for _ in range(int(n)):
            self.stepper(self.params, self._state, self.dt)
            self._time += self.dt

    def advance_time(self, duration):
        """Integrates exactly `duration` with equal sub-steps not larger than dt"""
        if duration <= 0:
            return
        sub_steps = max(1, int(np.ceil(duration / self.dt - 1e-9)))
        h = duration / sub_steps
        for _ in range(sub_steps):
            self.stepper(self.params, self._state, h)
        self._time += duration
