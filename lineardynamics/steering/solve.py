import numpy as np
from tqdm import tqdm

from .problem import steering_bvp


def steer(dynamics, cost, x0, xf, t_max, backend='numeric', verbose=0,
          **options):
    """
    Solve a single steering problem from `x0` to `xf`, constructing the
    appropriate solver with `steering_bvp`.

    Parameters
    ----------
    dynamics : `Dynamics`
        System dynamics.
    cost : cost functional
        Cost to minimize.
    x0 : (n_states,) array
        Initial state.
    xf : (n_states,) array
        Goal state.
    t_max : float
        Upper bound on the maneuver duration.
    backend : str, default='numeric'
        See `steering_bvp`.
    verbose : {0, 1, 2}, default=0
        Level of algorithm's verbosity.
    **options : dict
        Options passed to the solver.

    Returns
    -------
    controls : `ControlInterval`
        The optimal control.
    """
    bvp = steering_bvp(dynamics, cost, backend=backend, **options)
    return bvp(x0, xf, t_max, verbose=verbose)


def solve_many(bvp, x0, xf, t_max, verbose=0):
    """
    Solve a steering problem for a batch of initial and goal states.

    Parameters
    ----------
    bvp : `SteeringBVP`
        Steering problem solver.
    x0 : (n_states,) or (n_states, n_problems) array
        Initial states. A single state is used for every problem.
    xf : (n_states,) or (n_states, n_problems) array
        Goal states. A single state is used for every problem.
    t_max : float
        Upper bound on the maneuver duration.
    verbose : {0, 1, 2}, default=0
        Level of algorithm's verbosity. If `verbose >= 1`, show a progress bar.
        If `verbose >= 2`, also display the output of each solve.

    Returns
    -------
    solutions : (n_problems,) object array
        `solutions[i]` is the optimal control from `x0[:, i]` to `xf[:, i]`,
        or `None` if the problem could not be solved.
    status : (n_problems,) integer array
        `status[i]` contains the reason for algorithm termination for
        `solutions[i]`:

            * 0: The problem was solved successfully.
            * 1: The reachability Gramian was singular.
    """
    n_states = bvp.dynamics.n_states
    x0 = np.reshape(x0, (n_states, -1))
    xf = np.reshape(xf, (n_states, -1))
    x0, xf = np.broadcast_arrays(x0, xf)
    n_problems = x0.shape[1]

    solutions = np.empty(n_problems, dtype=object)
    status = np.zeros(n_problems, dtype=int)

    if verbose:
        print(f"Solving {n_problems:d} steering problems "
              f"({type(bvp).__name__:s})...")
    for i in tqdm(range(n_problems), disable=not verbose):
        try:
            solutions[i] = bvp(x0[:, i], xf[:, i], t_max,
                               verbose=max(verbose - 1, 0))
        except np.linalg.LinAlgError:
            status[i] = 1

    return solutions, status
