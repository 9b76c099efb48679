r"""
Discrete-time linear approximations of nonlinear dynamics. Given a nominal
state and control, the dynamics are linearized to
$dx/dt \approx A x + B u + c$ and then discretized exactly over one sample
interval under a zero-order hold (ZOH, control constant over the interval) or
first-order hold (FOH, control varying linearly from the start to the end of
the interval). All discretization error is due to the linearization itself.
"""

import numpy as np

from .dynamics import Dynamics
from .integrals import expm_ramp_integral
from .utilities import approx_derivative, check_duration


__all__ = ['ZeroOrderHold', 'FirstOrderHold', 'ZeroOrderHoldLinearization',
           'FirstOrderHoldLinearization', 'linearize']


ZeroOrderHold = 'zoh'
FirstOrderHold = 'foh'


class LinearizedModel:
    """Base class for discrete-time models valid over a single sample interval
    of length `dt`."""
    def __init__(self, A, c, dt):
        self.A = np.asarray(A)
        """(n_states, n_states) array. Discrete state transition matrix."""
        self.c = np.asarray(c)
        """(n_states,) array. Discrete affine term."""
        self.dt = float(dt)
        """float. Sample interval."""

    @property
    def n_states(self):
        return self.A.shape[0]

    def propagate(self, x, *u):
        """Map the state at the start of an interval to the state at its end."""
        raise NotImplementedError


class ZeroOrderHoldLinearization(LinearizedModel):
    """Discrete-time model `x[k+1] = A @ x[k] + B @ u[k] + c` for controls held
    constant over each interval."""
    def __init__(self, A, B, c, dt):
        super().__init__(A, c, dt)
        self.B = np.asarray(B)
        """(n_states, n_controls) array. Discrete control matrix."""

    def propagate(self, x, u):
        return self.A @ np.reshape(x, -1) + self.B @ np.reshape(u, -1) + self.c


class FirstOrderHoldLinearization(LinearizedModel):
    """Discrete-time model `x[k+1] = A @ x[k] + B0 @ u[k] + B1 @ u[k+1] + c` for
    controls interpolated linearly between `u[k]` and `u[k+1]`."""
    def __init__(self, A, B0, B1, c, dt):
        super().__init__(A, c, dt)
        self.B0 = np.asarray(B0)
        """(n_states, n_controls) array. Effect of the control at the start of
        the interval."""
        self.B1 = np.asarray(B1)
        """(n_states, n_controls) array. Effect of the control at the end of
        the interval."""

    def propagate(self, x, u0, u1):
        return (self.A @ np.reshape(x, -1) + self.B0 @ np.reshape(u0, -1)
                + self.B1 @ np.reshape(u1, -1) + self.c)


def _get_jacobian_provider(dynamics, jac):
    if jac is not None:
        if not callable(jac):
            raise TypeError("jac must be callable as jac(x, u)")
        return jac

    if isinstance(dynamics, Dynamics):
        return dynamics.jac

    def fin_diff_jac(x, u):
        f0 = np.asarray(dynamics(x, u))
        dfdx = approx_derivative(lambda x: dynamics(x, u), x, f0=f0)
        dfdu = approx_derivative(lambda u: dynamics(x, u), u, f0=f0)
        return dfdx, dfdu

    return fin_diff_jac


def linearize(dynamics, x, u, dt, hold=ZeroOrderHold, jac=None):
    """
    Linearize continuous-time dynamics about a nominal state and control and
    discretize the result exactly over one sample interval.

    Parameters
    ----------
    dynamics : `Dynamics` or callable
        Dynamics $f(x, u)$, called as `dynamics(x, u)` with `x` of shape
        `(n_states,)` and `u` of shape `(n_controls,)`.
    x : (n_states,) array
        Nominal state.
    u : (n_controls,) array
        Nominal control.
    dt : float
        Non-negative sample interval.
    hold : {'zoh', 'foh'}, default='zoh'
        Control hold assumption over the interval.
    jac : callable, optional
        Jacobian provider called as `dfdx, dfdu = jac(x, u)`. If not given,
        `dynamics.jac` is used if `dynamics` is a `Dynamics` instance, and
        finite differences are used otherwise.

    Returns
    -------
    model : `ZeroOrderHoldLinearization` or `FirstOrderHoldLinearization`
        The discretized model.
    """
    if hold not in (ZeroOrderHold, FirstOrderHold):
        raise ValueError(f"hold={hold} is not one of the allowed options, "
                         f"'{ZeroOrderHold}' or '{FirstOrderHold}'")

    dt = check_duration(dt, 'dt')
    x = np.reshape(x, -1).astype(float)
    u = np.reshape(u, -1).astype(float)

    f0 = np.reshape(dynamics(x, u), -1)
    if f0.shape != x.shape:
        raise ValueError("dynamics(x, u) must have the same shape as x")

    dfdx, dfdu = _get_jacobian_provider(dynamics, jac)(x, u)
    A = np.reshape(dfdx, (x.shape[0], x.shape[0]))
    B = np.reshape(dfdu, (x.shape[0], u.shape[0]))
    c = f0 - A @ x - B @ u

    # A single exponential serves both the control and affine terms
    eAt, int_Bc, int_Bc_s = expm_ramp_integral(A, np.column_stack((B, c)), dt)
    Bd, cd = int_Bc[:, :-1], int_Bc[:, -1]

    if hold == ZeroOrderHold:
        return ZeroOrderHoldLinearization(eAt, Bd, cd, dt)

    B0 = int_Bc_s[:, :-1]
    return FirstOrderHoldLinearization(eAt, B0, Bd - B0, cd, dt)
