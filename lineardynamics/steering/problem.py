from ..parameters import ProblemParameters


# Backends which accelerate an existing solver but are not shipped with this
# package
_OPTIONAL_BACKENDS = ('compiled', 'symbolic')

# {(dynamics class, cost class): {backend name: SteeringBVP subclass}}
_SOLVER_REGISTRY = {}


class UnsupportedConfigurationError(RuntimeError):
    """Raised when a steering solver backend is requested which is not
    available."""
    pass


class SteeringBVP:
    """
    Template superclass for steering boundary value problems: given dynamics,
    a cost functional, an initial state `x0`, a goal state `xf`, and a bound
    on the maneuver duration, find the cheapest control connecting `x0` to
    `xf`. Solver options are stored in a `ProblemParameters` instance.
    """
    # Dict of default solver options. To be overwritten by subclass
    # implementations.
    _optional_parameters = {}

    def __init__(self, dynamics, cost, **options):
        """
        Parameters
        ----------
        dynamics : `Dynamics`
            System dynamics.
        cost : cost functional
            Cost to minimize, e.g. `TimePlusQuadraticControl`.
        **options : dict
            Solver options overriding the subclass defaults.
        """
        self.dynamics = dynamics
        """`Dynamics`. System dynamics."""
        self.cost_functional = cost
        """Cost functional to minimize."""

        options = {**self._optional_parameters, **options}
        self.parameters = ProblemParameters(
            optional=self._optional_parameters.keys(),
            update_fun=type(self)._parameter_update_fun)
        """`ProblemParameters`. Solver options."""
        self.parameters.update(**options)

    def __str__(self):
        return (f"{type(self).__name__}({self.dynamics}, "
                f"{self.cost_functional})")

    @staticmethod
    def _parameter_update_fun(obj, **new_params):
        """
        Performs operations on `self.parameters` during initialization and each
        time `self.parameters.update` is called, such as checking options.

        Parameters
        ----------
        obj : `ProblemParameters`
            In standard use, `obj` refers to `self.parameters`.
        **new_params : dict
            Options which are being set or changing.
        """
        pass

    def __call__(self, x0, xf, t_max, verbose=0):
        """
        Solve the steering problem from `x0` to `xf`.

        Parameters
        ----------
        x0 : (n_states,) array
            Initial state.
        xf : (n_states,) array
            Goal state.
        t_max : float
            Upper bound on the maneuver duration searched over.
        verbose : {0, 1, 2}, default=0
            Level of algorithm's verbosity:

                * 0 (default) : work silently.
                * 1 : display a termination report.
                * 2 : display progress during iterations.

        Returns
        -------
        controls : `ControlInterval`
            The optimal control, which exposes its cost as `controls.cost`.
        """
        raise NotImplementedError


def register_solver(dynamics_type, cost_type, solver, backend='numeric'):
    """
    Register a `SteeringBVP` subclass as the solver for a combination of
    dynamics and cost types.

    Parameters
    ----------
    dynamics_type : type
        `Dynamics` subclass the solver applies to.
    cost_type : type
        Cost functional class the solver applies to.
    solver : type
        `SteeringBVP` subclass, instantiated as
        `solver(dynamics, cost, **options)`.
    backend : str, default='numeric'
        Name under which the solver is registered for this combination.
    """
    if not (isinstance(solver, type) and issubclass(solver, SteeringBVP)):
        raise TypeError("solver must be a SteeringBVP subclass")

    _SOLVER_REGISTRY.setdefault((dynamics_type, cost_type), {})[backend] = solver


def steering_bvp(dynamics, cost, backend='numeric', **options):
    """
    Construct the steering problem solver appropriate for a given combination
    of dynamics and cost.

    Parameters
    ----------
    dynamics : `Dynamics`
        System dynamics.
    cost : cost functional
        Cost to minimize.
    backend : str, default='numeric'
        Which implementation of the solver to use. Only the `'numeric'` backend
        is distributed with this package.
    **options : dict
        Options passed to the solver.

    Returns
    -------
    bvp : `SteeringBVP`
        Solver instance, callable as `bvp(x0, xf, t_max)`.

    Raises
    ------
    UnsupportedConfigurationError
        If an optional backend such as `'compiled'` is requested but not
        installed.
    NotImplementedError
        If no solver is registered for the types of `dynamics` and `cost`.
    """
    for (dynamics_type, cost_type), solvers in _SOLVER_REGISTRY.items():
        if isinstance(dynamics, dynamics_type) and isinstance(cost, cost_type):
            if backend in solvers:
                return solvers[backend](dynamics, cost, **options)
            if backend in _OPTIONAL_BACKENDS:
                raise UnsupportedConfigurationError(
                    f"The '{backend}' steering backend is not available for "
                    f"{type(dynamics).__name__} with {type(cost).__name__}; "
                    f"use backend='numeric'")
            raise ValueError(f"backend={backend} is not one of the registered "
                             f"options, {', '.join(map(repr, solvers))}")

    raise NotImplementedError(f"No steering solver is registered for "
                              f"{type(dynamics).__name__} with "
                              f"{type(cost).__name__}")
