import numpy as np
from scipy.linalg import expm

from ..controls import ControlInterval, _frozen
from ..integrals import expm_integral, gramian
from ..utilities import pack_dataframe, resize_vector


class LinearQuadraticSteeringControl(ControlInterval):
    """
    Optimal open-loop control steering a linear system
    `dx/dt = A @ x + B @ u + c` from `x0` to `xf` in time `t`, minimizing
    `t + integral(u.T @ R @ u)`. The solution is fully determined by the costate
    vector `z`, with the optimal control given by
    `u(s) = inv(R) @ B.T @ expm(-A.T s) @ z`.

    All arrays are read-only copies, so a solution is unaffected by later
    changes to the dynamics or cost it was computed from.
    """
    def __init__(self, t, x0, xf, A, B, c, R, z, cost):
        self.t = float(t)
        """float. Duration of the maneuver."""
        self.x0 = _frozen(x0)
        """(n_states,) array. Initial state."""
        self.xf = _frozen(xf)
        """(n_states,) array. Goal state."""
        self.A = _frozen(A)
        self.B = _frozen(B)
        self.c = _frozen(c)
        self.R = _frozen(R)
        self.z = _frozen(z)
        """(n_states,) array. Costate at the final time, rotated back to the
        initial time."""
        self.cost = float(cost)
        """float. Optimal cost `t + integral(u.T @ R @ u)`."""

        self._RinvBT = np.linalg.solve(self.R, self.B.T)
        self._Q = self.B @ self._RinvBT

    def __str__(self):
        return (f"{type(self).__name__}(t={self.t:.4g}, "
                f"cost={self.cost:.4g})")

    @property
    def n_states(self):
        return self.A.shape[0]

    @property
    def n_controls(self):
        return self.B.shape[1]

    def duration(self):
        return self.t

    def costate_at(self, s):
        """
        Evaluate the costate `expm(-A.T s) @ z` at a time `s` into the maneuver.

        Parameters
        ----------
        s : float
            Time in `[0, self.duration()]`.

        Returns
        -------
        p : (n_states,) array
            Costate at time `s`.
        """
        s = self._check_time(s)
        return np.linalg.solve(expm(self.A * s).T, self.z)

    def control_at(self, s):
        return self._RinvBT @ self.costate_at(s)

    def propagate_at(self, s, x=None):
        """
        Evaluate the state at a time `s` into the maneuver. If a different
        initial state `x` is given, the same control is applied from `x`, which
        shifts the whole trajectory by `x - x0`.

        Parameters
        ----------
        s : float
            Time in `[0, self.duration()]`.
        x : (n_states,) array, optional
            Initial state to start from. Defaults to `self.x0`.

        Returns
        -------
        x : (n_states,) array
            State at time `s`.
        """
        s = self._check_time(s)
        if x is None:
            x = self.x0
        else:
            x = resize_vector(x, self.n_states, 'x')

        if s == self.t:
            return (x - self.x0) + self.xf

        eAs, int_c = expm_integral(self.A, self.c, s)
        G = gramian(self.A, self._Q, s)
        return ((x - self.x0) + eAs @ self.x0 + int_c
                + G @ np.linalg.solve(eAs.T, self.z))

    def propagate_linear(self, dynamics, x, s):
        return self.propagate_at(s, x)

    def __call__(self, t, return_x=True, return_u=True, return_p=True):
        """
        Evaluate the optimal solution at multiple times `t`.

        Parameters
        ----------
        t : (n_points,) array
            Time points in `[0, self.duration()]`.
        return_x : bool, default=True
            If True (default), return the state `x`.
        return_u : bool, default=True
            If True (default), return the control `u`.
        return_p : bool, default=True
            If True (default), return the costate `p`.

        Returns
        -------
        x : (n_states, n_points) array
            Optimal state trajectory at times `t`. Returned if `return_x=True`.
        u : (n_controls, n_points) array
            Optimal control at times `t`. Returned if `return_u=True`.
        p : (n_states, n_points) array
            Costate at times `t`. Returned if `return_p=True`.
        """
        t = np.reshape(t, -1)

        args = []
        if return_x:
            args.append(np.stack([self.propagate_at(s) for s in t], axis=1))
        if return_u or return_p:
            p = np.stack([self.costate_at(s) for s in t], axis=1)
            if return_u:
                args.append(self._RinvBT @ p)
            if return_p:
                args.append(p)

        if len(args) == 0:
            return
        if len(args) == 1:
            return args[0]
        return args

    def to_dataframe(self, n_points=101):
        """
        Sample the solution on a uniform time grid and collect it into a
        `DataFrame`.

        Parameters
        ----------
        n_points : int, default=101
            Number of time points, including both endpoints.

        Returns
        -------
        data : DataFrame
            `DataFrame` with columns 't', 'x1', ..., 'xn', 'u1', ..., 'um', and
            'p1', ..., 'pn'. See `utilities.pack_dataframe`.
        """
        t = np.linspace(0., self.t, n_points)
        x, u, p = self(t)
        return pack_dataframe(t, x, u, p)
