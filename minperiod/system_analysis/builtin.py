import numpy as np
from numba import njit

from minperiod.system_analysis.system import DiscreteDynamicalSystem, ContinuousDynamicalSystem


@njit
def logistic_rule(params, x, x_next):
    r = params[0]
    x_next[0] = r * x[0] * (1.0 - x[0])


@njit
def henon_rule(params, x, x_next):
    a = params[0]
    b = params[1]
    x_next[0] = 1.0 - a * x[0] ** 2 + x[1]
    x_next[1] = b * x[0]


@njit
def rotation_rule(params, x, x_next):
    """Rotation of the plane by the angle params[0]"""
    c = np.cos(params[0])
    s = np.sin(params[0])
    x_next[0] = c * x[0] - s * x[1]
    x_next[1] = s * x[0] + c * x[1]


@njit
def harmonic_rhs(params, y, dydt):
    omega = params[0]
    dydt[0] = y[1]
    dydt[1] = -(omega ** 2) * y[0]


@njit
def hopf_rhs(params, y, dydt):
    """Normal form of the Andronov-Hopf bifurcation"""
    mu = params[0]
    omega = params[1]
    rho2 = y[0] ** 2 + y[1] ** 2
    dydt[0] = mu * y[0] - omega * y[1] - y[0] * rho2
    dydt[1] = omega * y[0] + mu * y[1] - y[1] * rho2


@njit
def third_order_rhs(params, y, dydt):
    """Calculates the right-hand side of the system x''' = -b x'' - x' + a x - a x^3"""
    a = params[0]
    b = params[1]
    dydt[0] = y[1]
    dydt[1] = y[2]
    dydt[2] = -b * y[2] - y[1] + a * y[0] - a * (y[0] ** 3)


def logistic_map(r=3.2, u0=(0.5,)):
    return DiscreteDynamicalSystem(logistic_rule, u0, [r], ('r',))


def henon_map(a=1.4, b=0.3, u0=(0.0, 0.0)):
    return DiscreteDynamicalSystem(henon_rule, u0, [a, b], ('a', 'b'))


def rotation_map(m=3, u0=(1.0, 0.0)):
    """Every point except the origin has prime period m"""
    return DiscreteDynamicalSystem(rotation_rule, u0, [2 * np.pi / m], ('theta',))


def harmonic_oscillator(omega=1.0, u0=(1.0, 0.0), dt=0.01):
    return ContinuousDynamicalSystem(harmonic_rhs, u0, [omega], ('omega',), dt=dt)


def hopf_normal_form(mu=1.0, omega=1.0, u0=(1.0, 0.0), dt=0.01):
    """
    For mu > 0 the circle of radius sqrt(mu) is a stable limit cycle with
    period 2pi/omega; for mu < 0 all trajectories spiral into the origin.
    """
    return ContinuousDynamicalSystem(hopf_rhs, u0, [mu, omega], ('mu', 'omega'), dt=dt)


def third_order_system(a=0.5, b=0.5, u0=(1e-8, 0.0, 0.0), dt=0.01):
    return ContinuousDynamicalSystem(third_order_rhs, u0, [a, b], ('a', 'b'), dt=dt)


SYSTEMS = {
    'logistic': logistic_map,
    'henon': henon_map,
    'rotation': rotation_map,
    'harmonic': harmonic_oscillator,
    'hopf': hopf_normal_form,
    'third_order': third_order_system,
}


def create_system(name, params=(), u0=None, dt=None):
    """Builds a builtin system by name, e.g. create_system('hopf', [1.0, 2.0], dt=0.005)"""
    if name not in SYSTEMS:
        raise ValueError(f"Unknown system '{name}', available: {sorted(SYSTEMS)}")
    kwargs = {}
    if u0 is not None:
        kwargs['u0'] = u0
    if dt is not None:
        if name in ('logistic', 'henon', 'rotation'):
            raise ValueError(f"System '{name}' is discrete, dt is not applicable")
        kwargs['dt'] = dt
    return SYSTEMS[name](*params, **kwargs)
