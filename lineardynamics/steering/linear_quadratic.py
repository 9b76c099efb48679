import warnings

import numpy as np

from ..costs import TimePlusQuadraticControl
from ..dynamics import LinearDynamics
from ..integrals import expm_integral, gramian
from ..utilities import check_duration, check_int_input, resize_vector
from ._search import bisection, golden_section
from .problem import SteeringBVP, register_solver
from .solutions import LinearQuadraticSteeringControl


class LinearQuadraticSteering(SteeringBVP):
    r"""
    Steering problem for linear dynamics `dx/dt = A @ x + B @ u + c` with the
    time plus quadratic control cost `t + integral(u.T @ R @ u)`.

    For a fixed duration $t$ the optimal cost is
    $J(t) = t + d(t)^T G(t)^{-1} d(t)$ where $d(t) = x_f - \bar{x}(t)$ is the
    difference between the goal and the drift trajectory
    $\bar{x}(t) = e^{At} x_0 + \int_0^t e^{As} c ds$, and
    $G(t) = \int_0^t e^{As} B R^{-1} B^T e^{A^T s} ds$ is the weighted
    reachability Gramian. The optimal duration is found by bisection on
    $dJ/dt$, falling back to bounded Brent minimization of $J$ if $dJ/dt$ does
    not change sign over the search interval `[t_min_ratio * t_max, t_max]`.

    The Gramian must be invertible over the search interval, which holds when
    `(A, B)` is controllable. This is not checked; a singular Gramian raises
    `numpy.linalg.LinAlgError`.

    Solver options, set at initialization or with `self.parameters.update`:

    Parameters
    ----------
    t_min_ratio : float, default=0.01
        Lower end of the duration search interval as a fraction of `t_max`.
        Must be in `(0, 1)`.
    xtol : float, default=2e-12
        Absolute tolerance for bisection.
    rtol : float, default=8.9e-16
        Relative tolerance for bisection.
    maxiter : int, default=100
        Maximum number of bisection or Brent iterations.
    golden_xtol : float, default=1e-10
        Absolute tolerance for Brent minimization.
    """
    _optional_parameters = {'t_min_ratio': 0.01,
                            'xtol': 2e-12,
                            'rtol': 8.881784197001252e-16,
                            'maxiter': 100,
                            'golden_xtol': 1e-10}

    def __init__(self, dynamics, cost, **options):
        if dynamics.n_controls != cost.n_controls:
            raise ValueError(f"dynamics has {dynamics.n_controls:d} controls "
                             f"but cost has {cost.n_controls:d}")
        super().__init__(dynamics, cost, **options)

    @staticmethod
    def _parameter_update_fun(obj, **new_params):
        if 't_min_ratio' in new_params:
            obj.t_min_ratio = float(obj.t_min_ratio)
            if not 0. < obj.t_min_ratio < 1.:
                raise ValueError("t_min_ratio must be in (0, 1)")

        for key in ('xtol', 'rtol', 'golden_xtol'):
            if key in new_params:
                setattr(obj, key, float(getattr(obj, key)))
                if not getattr(obj, key) > 0.:
                    raise ValueError(f"{key} must be a positive float")

        if 'maxiter' in new_params:
            obj.maxiter = check_int_input(obj.maxiter, 'maxiter', low=1)

    @property
    def n_states(self):
        return self.dynamics.n_states

    def _matrices(self):
        A, B, c = self.dynamics.A, self.dynamics.B, self.dynamics.c
        R = self.cost_functional.R
        Q = B @ np.linalg.solve(R, B.T)
        return A, B, c, R, Q

    def _costate(self, x0, xf, t):
        """Compute the Gramian `G(t)`, the difference `d(t)` between the goal
        and the drift trajectory, `w = inv(G) @ d`, and `z = expm(A.T t) @ w`."""
        A, _, c, _, Q = self._matrices()
        G = gramian(A, Q, t)
        eAt, int_c = expm_integral(A, c, t)
        d = xf - (eAt @ x0 + int_c)
        w = np.linalg.solve(G, d)
        return d, w, eAt.T @ w

    def _check_states(self, x0, xf):
        return (resize_vector(x0, self.n_states, 'x0'),
                resize_vector(xf, self.n_states, 'xf'))

    def cost(self, x0, xf, t):
        """
        Evaluate the minimum cost of steering from `x0` to `xf` in exactly
        time `t`, `J(t) = t + d.T @ inv(G(t)) @ d`.

        Parameters
        ----------
        x0 : (n_states,) array
            Initial state.
        xf : (n_states,) array
            Goal state.
        t : float
            Positive duration.

        Returns
        -------
        J : float
            Optimal fixed-duration cost.
        """
        x0, xf = self._check_states(x0, xf)
        t = check_duration(t)
        d, w, _ = self._costate(x0, xf, t)
        return float(t + d @ w)

    def dcost(self, x0, xf, t):
        """
        Evaluate the derivative of the fixed-duration cost with respect to the
        duration, `dJ/dt = 1 - 2 (A @ x0 + c).T @ z - z.T @ Q @ z` where
        `Q = B @ inv(R) @ B.T`.

        Parameters
        ----------
        x0 : (n_states,) array
            Initial state.
        xf : (n_states,) array
            Goal state.
        t : float
            Positive duration.

        Returns
        -------
        dJdt : float
            Derivative of `self.cost(x0, xf, t)` with respect to `t`.
        """
        x0, xf = self._check_states(x0, xf)
        A, _, c, _, Q = self._matrices()
        _, _, z = self._costate(x0, xf, check_duration(t))
        return float(1. - 2. * (A @ x0 + c) @ z - z @ Q @ z)

    def optimal_time(self, x0, xf, t_max, verbose=0):
        """
        Find the duration minimizing `self.cost(x0, xf, t)` over
        `[t_min_ratio * t_max, t_max]`.

        Parameters
        ----------
        x0 : (n_states,) array
            Initial state.
        xf : (n_states,) array
            Goal state.
        t_max : float
            Positive upper bound on the duration.
        verbose : {0, 1, 2}, default=0
            Level of algorithm's verbosity.

        Returns
        -------
        t : float
            Optimal duration.
        """
        x0, xf = self._check_states(x0, xf)
        t_max = self._check_t_max(t_max)
        t_min = self.parameters.t_min_ratio * t_max

        def dcost(t):
            dJdt = self.dcost(x0, xf, t)
            if verbose >= 2:
                print(f"    t = {t:1.6e}, dJ/dt = {dJdt:1.6e}")
            return dJdt

        t = bisection(dcost, t_min, t_max, xtol=self.parameters.xtol,
                      rtol=self.parameters.rtol,
                      maxiter=self.parameters.maxiter)

        if t is None:
            if verbose:
                print(f"dJ/dt does not change sign on [{t_min:.4g}, "
                      f"{t_max:.4g}]. Minimizing cost by Brent "
                      f"search...")
            t = golden_section(lambda t: self.cost(x0, xf, t), t_min, t_max,
                               xtol=self.parameters.golden_xtol,
                               maxiter=self.parameters.maxiter)

        return t

    def _check_t_max(self, t_max):
        t_max = check_duration(t_max, 't_max')
        if t_max <= 0.:
            raise ValueError("t_max must be a positive float")
        return t_max

    def __call__(self, x0, xf, t_max, verbose=0):
        x0, xf = self._check_states(x0, xf)
        t_max = self._check_t_max(t_max)
        A, B, c, R, _ = self._matrices()

        if np.array_equal(x0, xf):
            return LinearQuadraticSteeringControl(
                0., x0, xf, A, B, c, R, np.zeros_like(x0), 0.)

        t = self.optimal_time(x0, xf, t_max, verbose=verbose)

        d, w, z = self._costate(x0, xf, t)
        cost = t + d @ w

        if verbose:
            print(f"Optimal duration t = {t:1.6e}, cost = {cost:1.6e}")
            if np.isclose(t, t_max):
                warnings.warn(f"The optimal duration {t:.4g} is at the upper "
                              f"bound t_max; a larger bound may give a lower "
                              f"cost", RuntimeWarning)

        return LinearQuadraticSteeringControl(t, x0, xf, A, B, c, R, z, cost)


register_solver(LinearDynamics, TimePlusQuadraticControl,
                LinearQuadraticSteering)
