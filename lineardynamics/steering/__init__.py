"""
The `steering` module solves two-point steering problems: given dynamics, a
cost functional, an initial state `x0`, and a goal state `xf`, find the
duration and open-loop control which connect `x0` to `xf` at minimum cost.

For linear time-invariant dynamics $dx/dt = A x + B u + c$ with the cost
$J = t + \\int_0^t u^T R u ds$, the fixed-duration problem has a closed-form
solution in terms of the weighted reachability Gramian, and the optimal
duration is a root of the scalar function $dJ/dt$. See refs. [1, 2] for
details. The resulting optimal controls are `ControlInterval`s, so they can be
propagated and concatenated like any other open-loop control.

Solvers are looked up by the types of the dynamics and cost through
`steering_bvp`. Only the numerical backend is distributed with this package;
requesting another backend raises `UnsupportedConfigurationError`.

##### References

1. D. J. Webb and J. van den Berg, *Kinodynamic RRT\\*: Asymptotically optimal
    motion planning for robots with linear dynamics*, in IEEE International
    Conference on Robotics and Automation, 2013, pp. 5054-5061.
    https://doi.org/10.1109/ICRA.2013.6631299
2. F. L. Lewis, D. Vrabie, and V. L. Syrmos, *Optimal Control*, John Wiley &
    Sons, 3rd ed., 2012.

---

* [`steering_bvp`](steering/problem#steering_bvp):
    Construct the steering solver for a combination of dynamics and cost.

* [`steer`](steering/solve#steer):
    Solve a single steering problem.

* [`solve_many`](steering/solve#solve_many):
    Solve steering problems for a batch of initial and goal states.

* [`LinearQuadraticSteering`](steering/linear_quadratic#LinearQuadraticSteering):
    Steering solver for linear dynamics with time plus quadratic control cost.

* [`LinearQuadraticSteeringControl`](steering/solutions#LinearQuadraticSteeringControl):
    Optimal open-loop control returned by `LinearQuadraticSteering`.
"""

from .problem import (SteeringBVP, UnsupportedConfigurationError,
                      register_solver, steering_bvp)
from .linear_quadratic import LinearQuadraticSteering
from .solutions import LinearQuadraticSteeringControl
from .solve import steer, solve_many
