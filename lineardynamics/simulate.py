"""
The `simulate` module numerically integrates dynamical systems driven by open-
loop `ControlInterval`s. It provides a convenient interface between `Dynamics`
and `ControlInterval` classes with `scipy.integrate.solve_ivp`, which is used
to propagate nonlinear systems and to cross-check the closed-form propagation
of linear systems.
"""

import numpy as np
from scipy.integrate import solve_ivp


def integrate(dynamics, x0, control, t_eval=None, s=None, method='RK45',
              atol=1e-09, rtol=1e-06):
    """
    Integrate continuous-time system dynamics driven by an open-loop control
    over the length of a control interval.

    Parameters
    ----------
    dynamics : `Dynamics`
        An instance of a `Dynamics` subclass implementing `__call__` and `jac`.
    x0 : (`dynamics.n_states`,) array
        Initial state.
    control : `ControlInterval`
        Control signal, evaluated along the trajectory by `control.control_at`.
    t_eval : array_like, optional
        Times at which to store the computed solution, must be sorted and lie
        within `[0, s]`. If `None` (default), use points selected by the solver.
    s : float, optional
        Time to integrate until. Defaults to `control.duration()`.
    method : string or `OdeSolver`, default='RK45'
        See `scipy.integrate.solve_ivp`.
    atol : float or array_like, default=1e-09
        See `scipy.integrate.solve_ivp`.
    rtol : float or array_like, default=1e-06
        See `scipy.integrate.solve_ivp`.

    Returns
    -------
    t : (n_points,) array
        Time points.
    x : (`dynamics.n_states`, n_points) array
        System states at times `t`.
    status : int
        Reason for algorithm termination:

            * -1: Integration step failed.
            *  0: The solver successfully reached the end of the interval.
    """
    if s is None:
        s = control.duration()
    else:
        s = control._check_time(s)

    x0 = np.reshape(x0, -1).astype(float)

    if s == 0.:
        return np.zeros(1), x0.reshape(-1, 1), 0

    def fun(t, x):
        # Guard against the solver overshooting the interval end by round-off
        u = control.control_at(min(t, s))
        return dynamics(x, u)

    def jac(t, x):
        u = control.control_at(min(t, s))
        return dynamics.jac(x, u, return_dfdu=False)

    # Explicit solvers warn about any jac keyword, even None
    if isinstance(method, str) and method in ('RK23', 'RK45', 'DOP853'):
        options = {}
    else:
        options = {'jac': jac}

    ode_sol = solve_ivp(fun, (0., s), x0, t_eval=t_eval, method=method,
                        rtol=rtol, atol=atol, **options)

    return ode_sol.t, ode_sol.y, ode_sol.status


def rollout(dynamics, x0, controls):
    """
    Apply a sequence of control intervals one after another, recording the
    state at each interval boundary.

    Parameters
    ----------
    dynamics : `Dynamics`
        An instance of a `Dynamics` subclass implementing `propagate`.
    x0 : (`dynamics.n_states`,) array
        Initial state.
    controls : iterable of `ControlInterval`s
        Controls applied in order.

    Returns
    -------
    t : (n_controls + 1,) array
        Cumulative times at the interval boundaries, starting from 0.
    x : (`dynamics.n_states`, n_controls + 1) array
        System states at times `t`.
    """
    x = [np.reshape(x0, -1).astype(float)]
    t = [0.]

    for control in controls:
        x.append(dynamics.propagate(x[-1], control))
        t.append(t[-1] + control.duration())

    return np.asarray(t), np.stack(x, axis=1)
