import numpy as np
from scipy.integrate import cumulative_trapezoid as cumtrapz

from .parameters import ProblemParameters


class TimePlusQuadraticControl:
    r"""
    Cost functional trading off maneuver duration against control effort,
    $J = t + \int_0^t u^T R u ds$. Takes the following parameters upon
    initialization. `R` cannot be changed afterwards.

    Parameters
    ----------
    R : (n_controls, n_controls) array
        Control effort weight. Must be symmetric positive definite.
    """
    def __init__(self, R=None):
        self.parameters = ProblemParameters(
            required=['R'], update_fun=type(self)._parameter_update_fun, R=R)
        """`ProblemParameters`. Cost function parameters."""
        self.parameters.freeze()

    def __str__(self):
        return f"{type(self).__name__}(n_controls={self.n_controls:d})"

    @property
    def n_controls(self):
        """The number of control inputs penalized (positive int)."""
        return self.parameters.n_controls

    @property
    def R(self):
        """(n_controls, n_controls) array. Control effort weight."""
        return self.parameters.R

    @staticmethod
    def _parameter_update_fun(obj, **new_params):
        if 'R' in new_params:
            try:
                R = np.atleast_1d(np.array(obj.R, dtype=float))
                if R.ndim > 2:
                    raise ValueError
                obj.n_controls = R.shape[0]
                R = R.reshape(obj.n_controls, obj.n_controls)
                if not np.allclose(R, R.T):
                    raise ValueError
                if not np.all(np.linalg.eigvalsh(R) > 0.):
                    raise ValueError
            except ValueError:
                raise ValueError("Control cost matrix R must have shape "
                                 "(n_controls, n_controls) and be positive "
                                 "definite")
            obj.R = R
            obj.R.setflags(write=False)

    def running_cost(self, u):
        """
        Evaluate the running cost $L(u) = 1 + u^T R u$ at one or more controls.

        Parameters
        ----------
        u : (n_controls,) or (n_controls, n_points) array
            Control(s) arranged by (dimension, time).

        Returns
        -------
        L : float or (n_points,) array
            Running cost(s) $L(u)$.
        """
        u = np.asarray(u)
        if u.ndim < 2:
            return 1. + u @ self.R @ u
        # Batch multiply u.T @ R @ u
        return 1. + np.einsum('ij,ij->j', u, self.R @ u)

    def total_cost(self, t, u):
        """
        Computes the accumulated cost as a function of time, $J(t)$, given a
        sampled control signal, using trapezoidal integration.

        Parameters
        ----------
        t : (n_points,) array
            Time values at which control vectors are given.
        u : (n_controls, n_points) array
            Time series of control inputs.

        Returns
        -------
        J : (n_points,) array
            Integrated cost at each time `t`.
        """
        u = np.reshape(u, (self.n_controls, -1))
        L = self.running_cost(u)
        return cumtrapz(L, t, initial=0.)
