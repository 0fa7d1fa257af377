import numpy as np
from scipy.optimize import brentq


class NoCrossingError(RuntimeError):
    pass


def plane_func(pt, normal, offset):
    """Signed value a.u - b of the hyperplane a.u = b at the point pt"""
    return np.dot(normal, pt) - offset


def event_cross_plane(prev_pl_val, curr_pl_val):
    return prev_pl_val < 0 <= curr_pl_val


class SectionMap:
    """
    Poincare map of a continuous system on the hyperplane normal . u = offset.

    Only crossings in the direction of the normal are counted. The system is
    integrated step by step; when a step crosses the plane the exact crossing
    is located with a partial RK-4 step, so crossing states and times do not
    depend on the integration grid. The system itself stays on the grid.
    """

    def __init__(self, ds, normal, offset, u0=None, t_max=1000.0, xtol=1e-12):
        if ds.is_discrete_time():
            raise ValueError("Section map requires a continuous-time system")
        self.ds = ds
        self.normal = np.asarray(normal, dtype=np.float64).copy()
        self.offset = float(offset)
        if not np.any(self.normal):
            raise ValueError("Normal vector of the section hyperplane must be non-zero")
        self.t_max = t_max
        self.xtol = xtol

        self.ds.reinit(u0)
        self.t_start = self.ds.current_time()
        self._crossing_state = None
        self._crossing_time = None
        self.crossings = 0
        self.step()

    def _refine_crossing(self, state_prev, time_prev, h):
        """Finds the time tau in [0, h] at which the step from state_prev hits the plane"""
        stepper = self.ds.stepper
        params = self.ds.params

        def pl_val_after(tau):
            pt = state_prev.copy()
            stepper(params, pt, tau)
            return plane_func(pt, self.normal, self.offset)

        if pl_val_after(h) == 0.0:
            tau = h
        else:
            tau = brentq(pl_val_after, 0.0, h, xtol=self.xtol)
        pt = state_prev.copy()
        stepper(params, pt, tau)
        return pt, time_prev + tau

    def step(self):
        """Advances the system to the next crossing of the section"""
        ds = self.ds
        state_prev = ds.current_state()
        prev_pl_val = plane_func(state_prev, self.normal, self.offset)
        t_start = ds.current_time()

        while ds.current_time() - t_start <= self.t_max:
            time_prev = ds.current_time()
            ds.step()
            state_curr = ds.current_state()
            curr_pl_val = plane_func(state_curr, self.normal, self.offset)

            if event_cross_plane(prev_pl_val, curr_pl_val):
                self._crossing_state, self._crossing_time = self._refine_crossing(
                    state_prev, time_prev, ds.dt)
                self.crossings += 1
                return self._crossing_state.copy()

            state_prev = state_curr
            prev_pl_val = curr_pl_val

        raise NoCrossingError(f"No crossing of the section within t_max={self.t_max} "
                              f"after t={t_start}")

    def current_state(self):
        return self._crossing_state.copy()

    def current_crossing_time(self):
        return self._crossing_time
