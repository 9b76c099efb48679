"""
The `dynamics` module implements the `Dynamics` template class for continuous-
time control systems $dx/dt = f(x, u)$, and its linear time-invariant
specialization `LinearDynamics`, $dx/dt = A x + B u + c$, which can be
propagated in closed form. As with problem definitions elsewhere in the
package, the matrices defining a system are stored in a `ProblemParameters`
instance attached to the class instance rather than hard-coded.
"""

import numpy as np

from .controls import ControlInterval
from .parameters import ProblemParameters
from .utilities import approx_derivative, check_int_input, resize_vector
from . import simulate


class Dynamics:
    """
    Template superclass defining continuous-time, possibly nonlinear, system
    dynamics $dx/dt = f(x, u)$ together with their Jacobians and open-loop
    propagation.
    """
    # Dicts of default dynamics parameters, separated into required and
    # optional parameters. To be overwritten by subclass implementations.
    _required_parameters = {}
    _optional_parameters = {}
    # Finite difference method for default Jacobian approximations
    _fin_diff_method = '3-point'

    def __init__(self, **parameters):
        """
        Parameters
        ----------
        parameters : dict, default={}
            Parameters specifying the system dynamics. If empty, defaults
            defined by the subclass will be used.
        """
        parameters = {**self._required_parameters,
                      **self._optional_parameters,
                      **parameters}
        # type(self) is used here in case subclass implementations forget to
        # make _parameter_update_fun a staticmethod.
        self.parameters = ProblemParameters(
            required=self._required_parameters.keys(),
            optional=self._optional_parameters.keys(),
            update_fun=type(self)._parameter_update_fun)
        """`ProblemParameters`. System dynamics parameters."""
        self.parameters.update(**parameters)

    def __str__(self):
        return (f"{type(self).__name__}(n_states={self.n_states:d}, "
                f"n_controls={self.n_controls:d})")

    @property
    def n_states(self):
        """The number of system states (positive int)."""
        raise NotImplementedError

    @property
    def n_controls(self):
        """The number of control inputs to the system (positive int)."""
        raise NotImplementedError

    @staticmethod
    def _parameter_update_fun(obj, **new_params):
        """
        Performs operations on `self.parameters` during initialization and each
        time `self.parameters.update` is called. This is used for checking
        parameter shapes and performing other needed calculations.

        Parameters
        ----------
        obj : `ProblemParameters`
            In standard use, `obj` refers to `self.parameters`.
        **new_params : dict
            Parameters which are being set or changing.
        """
        pass

    def __call__(self, x, u):
        """
        Evaluate the dynamics at one or more state-control pairs.

        Parameters
        ----------
        x : (n_states,) or (n_states, n_points) array
            State(s) arranged by (dimension, time).
        u : (n_controls,) or (n_controls, n_points) array
            Control(s) arranged by (dimension, time).

        Returns
        -------
        dxdt : (n_states,) or (n_states, n_points) array
            System dynamics $dx/dt = f(x,u)$ evaluated at pairs (`x`, `u`).
        """
        raise NotImplementedError

    def jac(self, x, u, return_dfdx=True, return_dfdu=True, f0=None):
        """
        Evaluate the Jacobians of the dynamics $df/dx (x,u)$ and $df/du (x,u)$,
        at one or more state-control pairs. Default implementation approximates
        the Jacobians with finite differences.

        Parameters
        ----------
        x : (n_states,) or (n_states, n_points) array
            State(s) arranged by (dimension, time).
        u : (n_controls,) or (n_controls, n_points) array
            Control(s) arranged by (dimension, time).
        return_dfdx : bool, default=True
            If `True`, compute the Jacobian with respect to states.
        return_dfdu : bool, default=True
            If `True`, compute the Jacobian with respect to controls.
        f0 : (n_states,) or (n_states, n_points) array, optional
            Dynamics evaluated at state-control pairs (`x`, `u`).

        Returns
        -------
        dfdx : (n_states, n_states) or (n_states, n_states, n_points) array
            State Jacobians $df/dx (x,u)$ evaluated at pairs (`x`, `u`).
        dfdu : (n_states, n_controls) or (n_states, n_controls, n_points) array
            Control Jacobians $df/du (x,u)$ evaluated at pairs (`x`, `u`).
        """
        x = np.asarray(x, dtype=float)
        u = np.asarray(u, dtype=float)

        if f0 is None:
            f0 = self(x, u)

        if return_dfdx:
            dfdx = approx_derivative(lambda x: self(x, u), x, f0=f0,
                                     method=self._fin_diff_method)
            if not return_dfdu:
                return dfdx

        if return_dfdu:
            dfdu = approx_derivative(lambda u: self(x, u), u, f0=f0,
                                     method=self._fin_diff_method)
            if not return_dfdx:
                return dfdu

        return dfdx, dfdu

    def propagate(self, x, controls, s=None):
        """
        Propagate the system from state `x` under one or more open-loop
        controls.

        Parameters
        ----------
        x : (n_states,) array
            Initial state.
        controls : `ControlInterval` or iterable of `ControlInterval`s
            Control(s) to apply. A sequence is applied in order.
        s : float, optional
            If `controls` is a single `ControlInterval`, propagate only for a
            time `s` in `[0, controls.duration()]`. Defaults to the full
            duration.

        Returns
        -------
        x : (n_states,) array
            State reached at the end of the control(s).
        """
        x = resize_vector(x, self.n_states, 'x')

        if isinstance(controls, ControlInterval):
            if s is None:
                s = controls.duration()
            else:
                s = controls._check_time(s)
            return self._propagate_interval(x, controls, s)

        if s is not None:
            raise ValueError("s can only be specified when propagating a "
                             "single ControlInterval")

        for control in controls:
            x = self._propagate_interval(x, control, control.duration())

        return x

    def _propagate_interval(self, x, control, s):
        """Propagate a single control interval for time `s`. The default
        implementation integrates the dynamics numerically."""
        _, x, status = simulate.integrate(self, x, control, s=s)
        if status != 0:
            raise RuntimeError(f"Integration of {self} failed before reaching "
                               f"s = {s:.6g}")
        return x[:, -1]


class LinearDynamics(Dynamics):
    """
    Continuous-time linear time-invariant dynamics, $dx/dt = A x + B u + c$.
    Takes the following parameters upon initialization. The system is read-only
    once constructed: `self.parameters.update` raises a `RuntimeError`, so
    solvers holding the instance never see it change.

    Parameters
    ----------
    A : (n_states, n_states) array
        State matrix.
    B : (n_states, n_controls) array
        Control matrix.
    c : {(n_states,) array, float}, default=0.
        Constant drift term. If float, will be broadcast into an array of shape
        `(n_states,)`.
    """
    _required_parameters = {'A': None, 'B': None}
    _optional_parameters = {'c': 0.}

    def __init__(self, A=None, B=None, c=0.):
        super().__init__(A=A, B=B, c=c)
        self.parameters.freeze()

    @property
    def n_states(self):
        return self.parameters.n_states

    @property
    def n_controls(self):
        return self.parameters.n_controls

    @property
    def A(self):
        """(n_states, n_states) array. State matrix."""
        return self.parameters.A

    @property
    def B(self):
        """(n_states, n_controls) array. Control matrix."""
        return self.parameters.B

    @property
    def c(self):
        """(n_states,) array. Constant drift term."""
        return self.parameters.c

    @staticmethod
    def _parameter_update_fun(obj, **new_params):
        if 'A' in new_params:
            try:
                A = np.array(obj.A, dtype=float)
                if A.ndim > 2:
                    raise ValueError
                A = np.atleast_1d(A)
                obj.n_states = A.shape[0]
                obj.A = A.reshape(obj.n_states, obj.n_states)
            except ValueError:
                raise ValueError("State matrix A must have shape "
                                 "(n_states, n_states)")
            obj.A.setflags(write=False)

        if 'A' in new_params or 'B' in new_params:
            try:
                B = np.array(obj.B, dtype=float)
                if B.ndim == 2 and B.shape[0] != obj.n_states:
                    raise ValueError
                if B.ndim > 2:
                    raise ValueError
                obj.B = np.reshape(B, (obj.n_states, -1))
                obj.n_controls = obj.B.shape[1]
                if obj.n_controls < 1:
                    raise ValueError
            except ValueError:
                raise ValueError("Control matrix B must have shape "
                                 "(n_states, n_controls)")
            obj.B.setflags(write=False)

        if 'A' in new_params or 'c' in new_params:
            obj.c = resize_vector(obj.c, obj.n_states, 'c')
            obj.c.setflags(write=False)

    def __call__(self, x, u):
        x = np.asarray(x)
        u = np.asarray(u)
        c = self.c if x.ndim < 2 else self.c[:, None]
        return self.A @ x + self.B @ u + c

    def jac(self, x, u, return_dfdx=True, return_dfdu=True, f0=None):
        n_points = np.shape(x)[1:]

        if return_dfdx:
            dfdx = np.array(self.A)
            if n_points:
                dfdx = np.tile(dfdx[..., None], (1, 1) + n_points)
            if not return_dfdu:
                return dfdx

        if return_dfdu:
            dfdu = np.array(self.B)
            if n_points:
                dfdu = np.tile(dfdu[..., None], (1, 1) + n_points)
            if not return_dfdx:
                return dfdu

        return dfdx, dfdu

    def _propagate_interval(self, x, control, s):
        return control.propagate_linear(self, x, s)


def n_integrator_dynamics(order, dim):
    """
    Construct a chain of `order` integrators in each of `dim` independent
    dimensions, controlled through the highest derivative. The state is ordered
    as `[q, dq/dt, ..., d^(order-1)q/dt^(order-1)]` with `q` in $R^{dim}$.

    Parameters
    ----------
    order : int
        Number of integrators per dimension (e.g. 2 for a double integrator).
    dim : int
        Number of independent dimensions.

    Returns
    -------
    dynamics : `LinearDynamics`
        System with `n_states = order * dim` and `n_controls = dim`.
    """
    order = check_int_input(order, 'order', low=1)
    dim = check_int_input(dim, 'dim', low=1)

    n_states = order * dim
    A = np.eye(n_states, k=dim)
    B = np.zeros((n_states, dim))
    B[-dim:] = np.eye(dim)

    return LinearDynamics(A=A, B=B)


def double_integrator_dynamics(dim):
    """Double integrator in `dim` dimensions, see `n_integrator_dynamics`."""
    return n_integrator_dynamics(2, dim)


def triple_integrator_dynamics(dim):
    """Triple integrator in `dim` dimensions, see `n_integrator_dynamics`."""
    return n_integrator_dynamics(3, dim)
