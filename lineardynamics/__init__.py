"""
`lineardynamics` computes exact, closed-form quantities for continuous-time
linear time-invariant (LTI) systems $dx/dt = A x + B u + c$ using matrix
exponentials: propagation under piecewise constant and piecewise linear
controls, exact discretization of linearized nonlinear dynamics, and optimal
steering between states with a time plus quadratic control cost.

---

* [`integrals`](lineardynamics/integrals):
    Integrals of matrix exponentials and reachability Gramians computed from
    augmented matrix exponentials.

* [`dynamics`](lineardynamics/dynamics):
    The `Dynamics` template class and `LinearDynamics`, along with factories
    for multi-integrator systems.

* [`controls`](lineardynamics/controls):
    Open-loop `ControlInterval`s, including `StepControl` and `RampControl`.

* [`costs`](lineardynamics/costs):
    The `TimePlusQuadraticControl` cost functional.

* [`linearization`](lineardynamics/linearization):
    Zero- and first-order hold discretization of linearized dynamics.

* [`steering`](lineardynamics/steering):
    Optimal steering between states of LTI systems.

* [`simulate`](lineardynamics/simulate):
    Numerical integration of dynamics driven by open-loop controls.

* [`parameters`](lineardynamics/parameters):
    The `ProblemParameters` container for validated problem parameters.

* [`utilities`](lineardynamics/utilities):
    General utility functions.
"""

__version__ = '0.1.0'

from .controls import ControlInterval, StepControl, RampControl
from .costs import TimePlusQuadraticControl
from .dynamics import (Dynamics, LinearDynamics, n_integrator_dynamics,
                       double_integrator_dynamics, triple_integrator_dynamics)
from .linearization import linearize
from .parameters import ProblemParameters
from . import steering
