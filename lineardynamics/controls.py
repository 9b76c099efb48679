"""
The `controls` module contains the `ControlInterval` template class for open-
loop control signals defined over a finite duration, along with the two
elementary signals used to propagate linear systems in closed form:
`StepControl` (piecewise constant) and `RampControl` (linearly interpolated).
The optimal steering controls computed by `lineardynamics.steering` are also
`ControlInterval`s.
"""

import numpy as np

from . import simulate
from .integrals import expm_integral, expm_ramp_integral
from .utilities import check_duration


def _frozen(array):
    array = np.array(array, dtype=float)
    array.setflags(write=False)
    return array


class ControlInterval:
    """Base class for an open-loop control signal applied over `[0, t]`."""
    def __str__(self):
        return f"{type(self).__name__}(t={self.duration():.4g})"

    def duration(self):
        """The length of time the control is applied for (float)."""
        raise NotImplementedError

    def control_at(self, s):
        """
        Evaluate the control at a time `s` since the start of the interval.

        Parameters
        ----------
        s : float
            Time in `[0, self.duration()]`.

        Returns
        -------
        u : (n_controls,) array
            Control input at time `s`.
        """
        raise NotImplementedError

    def propagate_linear(self, dynamics, x, s):
        """
        Propagate a linear system `dx/dt = A x + B u + c` from state `x` under
        this control for a time `s`. The default implementation integrates the
        dynamics numerically; subclasses override this with closed forms.

        Parameters
        ----------
        dynamics : `LinearDynamics`
            The system to propagate.
        x : (n_states,) array
            State at the start of the interval.
        s : float
            Time in `[0, self.duration()]` to propagate for.

        Returns
        -------
        x : (n_states,) array
            State at time `s`.
        """
        _, x, _ = simulate.integrate(dynamics, x, self, s=s)
        return x[:, -1]

    def _check_time(self, s):
        """Check that `s` is a float in `[0, self.duration()]`."""
        s = check_duration(s, 's')
        if s > self.duration():
            raise ValueError(f"s = {s:.6g} is outside of the control interval "
                             f"[0, {self.duration():.6g}]")
        return s


class StepControl(ControlInterval):
    """A constant control `u` held for a duration `t`."""
    def __init__(self, u, t):
        """
        Parameters
        ----------
        u : (n_controls,) array
            Control input.
        t : float
            Non-negative duration.
        """
        self.u = _frozen(np.reshape(u, -1))
        """(n_controls,) array. Control input."""
        self.t = check_duration(t)
        """float. Duration of the control."""

    def duration(self):
        return self.t

    def control_at(self, s):
        self._check_time(s)
        return self.u

    def propagate_linear(self, dynamics, x, s):
        y = dynamics.B @ self.u + dynamics.c
        eAs, int_y = expm_integral(dynamics.A, y, s)
        return eAs @ x + int_y


class RampControl(ControlInterval):
    """A control linearly interpolated from `u0` to `uf` over a duration `t`."""
    def __init__(self, u0, uf, t):
        """
        Parameters
        ----------
        u0 : (n_controls,) array
            Control input at the start of the interval.
        uf : (n_controls,) array
            Control input at the end of the interval.
        t : float
            Non-negative duration.
        """
        self.u0 = _frozen(np.reshape(u0, -1))
        """(n_controls,) array. Control input at time 0."""
        self.uf = _frozen(np.reshape(uf, -1))
        """(n_controls,) array. Control input at time `t`."""
        if self.u0.shape != self.uf.shape:
            raise ValueError("u0 and uf must have the same shape")
        self.t = check_duration(t)
        """float. Duration of the control."""

    def duration(self):
        return self.t

    def control_at(self, s):
        s = self._check_time(s)
        if self.t == 0.:
            return self.u0
        return self.u0 + (self.uf - self.u0) * (s / self.t)

    def propagate_linear(self, dynamics, x, s):
        # Stopping early is the same as a shorter ramp ending at u(s)
        uf = self.control_at(s)
        y = dynamics.B @ uf + dynamics.c
        z = dynamics.B @ (self.u0 - uf)
        eAs, int_yz, int_yz_s = expm_ramp_integral(
            dynamics.A, np.stack((y, z), axis=1), s)
        return eAs @ x + int_yz[:, 0] + int_yz_s[:, 1]
