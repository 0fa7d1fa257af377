"""
Minimal (prime) period of a periodic orbit.

Orbit detectors often converge to a harmonic of the fundamental orbit and
report a multiple of its period. `minimal_period` recovers the smallest period
measured from the orbit's reference point and returns the reduced orbit.
"""
import warnings
from collections import namedtuple

import numpy as np

from minperiod.mapping.orbit import PeriodicOrbit, complete_orbit, DEFAULT_DT_PARTITION
from minperiod.mapping.section import SectionMap, NoCrossingError

ATOL = 1e-4
MAXITER = 40

PeriodSearchResult = namedtuple('PeriodSearchResult', ['period', 'converged'])


class MinimalPeriodWarning(RuntimeWarning):
    pass


def recurs(p, q, atol=ATOL):
    """True if the points p and q are within Euclidean distance atol"""
    return np.linalg.norm(np.asarray(p) - np.asarray(q)) <= atol


def minimal_period(ds, po, atol=ATOL, maxiter=MAXITER):
    """
    Computes the minimal period of the periodic orbit `po` of the system `ds`.

    Returns the orbit with the minimal period. If the period is already
    minimal, `po` itself is returned.

    atol : after stepping the reference point for the candidate period it
        must return to the atol neighborhood of itself.
    maxiter : maximum number of section crossings checked, continuous-time
        systems only. When it is exceeded the original period is kept and a
        MinimalPeriodWarning is emitted.
    """
    if ds.is_discrete_time() != po.is_discrete_time():
        raise ValueError("Both the periodic orbit and the dynamical system have to be "
                         "either discrete or continuous.")

    u0 = po.points[0]
    if ds.is_discrete_time():
        new_T = minimal_period_discrete(ds, u0, po.T, atol=atol)
    else:
        new_T = minimal_period_continuous(ds, u0, po.T, atol=atol, maxiter=maxiter).period
    return set_period(ds, po, new_T)


def set_period(ds, po, new_T):
    if new_T == po.T:
        return po
    # continuous orbits keep the same number of points
    dt = 1 if ds.is_discrete_time() else new_T / DEFAULT_DT_PARTITION
    return PeriodicOrbit(complete_orbit(ds, po.points[0], new_T, dt=dt), new_T, po.stable)


def minimal_period_discrete(ds, u0, T, atol=ATOL):
    """Smallest divisor n of T such that f^n(u0) returns to u0"""
    for n in range(1, T):
        if T % n != 0:
            continue
        ds.reinit(u0)
        ds.step(n)
        # strict, unlike recurs: a distance of exactly atol is not a return
        if np.linalg.norm(u0 - ds.current_state()) < atol:
            return n
    return T


def minimal_period_continuous(ds, u0, T, atol=ATOL, maxiter=MAXITER):
    """
    First return time of u0 to itself on a section transversal to the flow.

    The hyperplane passes through u0 with the normal a = u1 - u0, where u1 is
    u0 after one integration step. u0 itself lies on the section and is the
    time origin; the crossings that follow are checked for recurrence in turn
    and the period is the time of the first recurrent one. A trajectory that
    stops crossing the section counts as not returning.
    """
    u0_ = np.array(u0, dtype=np.float64)
    ds.reinit(u0_)
    ds.step()
    u1 = ds.current_state()
    a = u1 - u0_
    if not np.any(a):
        raise ValueError(f"Point {u0_} is an equilibrium, no section is transversal to the flow")
    b = np.dot(a, u0_)

    # a crossing of a periodic orbit is expected at least once per reported period
    t_max = max(1000.0, 2 * T)
    try:
        pmap = SectionMap(ds, a, b, u0=u0_, t_max=t_max)
        t0 = pmap.t_start
        for i in range(maxiter):
            if i > 0:
                pmap.step()
            if recurs(u0_, pmap.current_state(), atol):
                return PeriodSearchResult(pmap.current_crossing_time() - t0, True)
    except NoCrossingError:
        pass

    warnings.warn("The section map did not return to the initial point within the maximum number "
                  "of iterations. Consider increasing `maxiter` or decreasing the integration step.",
                  MinimalPeriodWarning, stacklevel=2)
    return PeriodSearchResult(T, False)
