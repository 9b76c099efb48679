import numpy as np
import pytest

from lineardynamics import simulate
from lineardynamics.controls import RampControl, StepControl
from lineardynamics.dynamics import LinearDynamics
from lineardynamics.integrals import expm_integral
from lineardynamics.linearization import (linearize, ZeroOrderHold,
                                          FirstOrderHold,
                                          ZeroOrderHoldLinearization,
                                          FirstOrderHoldLinearization)

from ._problems import VanDerPol
from ._utilities import make_LQ_params, make_states


rng = np.random.default_rng(123)


@pytest.mark.parametrize('n_states', [1, 2, 3])
@pytest.mark.parametrize('n_controls', [1, 2])
def test_zoh_linear_system(n_states, n_controls):
    """The ZOH model of linear dynamics is exact for any state and control."""
    A, B, c, _ = make_LQ_params(n_states, n_controls)
    dynamics = LinearDynamics(A=A, B=B, c=c)
    dt = rng.uniform(0.1, 1.)

    model = linearize(dynamics, make_states(n_states), make_states(n_controls),
                      dt, hold=ZeroOrderHold)
    assert isinstance(model, ZeroOrderHoldLinearization)
    assert model.n_states == n_states
    assert model.B.shape == (n_states, n_controls)
    assert model.dt == dt

    # Same matrices as exact discretization with the integral engine
    eAt, int_B = expm_integral(A, B, dt)
    _, int_c = expm_integral(A, c, dt)
    np.testing.assert_allclose(model.A, eAt, rtol=1e-10, atol=1e-12)
    np.testing.assert_allclose(model.B, int_B, rtol=1e-10, atol=1e-12)
    np.testing.assert_allclose(model.c, int_c, rtol=1e-08, atol=1e-10)

    for _ in range(3):
        x, u = make_states(n_states), make_states(n_controls)
        x1 = dynamics.propagate(x, StepControl(u, dt))
        np.testing.assert_allclose(model.propagate(x, u), x1,
                                   rtol=1e-10, atol=1e-12)


@pytest.mark.parametrize('n_states', [1, 2, 3])
@pytest.mark.parametrize('n_controls', [1, 2])
def test_foh_linear_system(n_states, n_controls):
    """The FOH model of linear dynamics reproduces ramp propagation."""
    A, B, c, _ = make_LQ_params(n_states, n_controls)
    dynamics = LinearDynamics(A=A, B=B, c=c)
    dt = rng.uniform(0.1, 1.)

    model = linearize(dynamics, make_states(n_states), make_states(n_controls),
                      dt, hold=FirstOrderHold)
    assert isinstance(model, FirstOrderHoldLinearization)

    for _ in range(3):
        x = make_states(n_states)
        u0, u1 = make_states(n_controls), make_states(n_controls)
        x1 = dynamics.propagate(x, RampControl(u0, u1, dt))
        np.testing.assert_allclose(model.propagate(x, u0, u1), x1,
                                   rtol=1e-10, atol=1e-12)


@pytest.mark.parametrize('dt', [0.01, 0.5])
def test_foh_matches_zoh(dt):
    """With equal start and end controls, the FOH and ZOH models agree."""
    dynamics = VanDerPol()
    x, u = np.array([0.5, -1.]), np.array([0.3])

    zoh = linearize(dynamics, x, u, dt, hold='zoh')
    foh = linearize(dynamics, x, u, dt, hold='foh')

    np.testing.assert_allclose(foh.A, zoh.A, rtol=1e-12, atol=1e-12)
    np.testing.assert_allclose(foh.c, zoh.c, rtol=1e-12, atol=1e-12)
    np.testing.assert_allclose(foh.B0 + foh.B1, zoh.B, rtol=1e-12, atol=1e-12)

    for v in (u, -u, 2. * u):
        np.testing.assert_allclose(foh.propagate(x, v, v), zoh.propagate(x, v),
                                   rtol=1e-12, atol=1e-12)


def test_nonlinear_jacobian_providers():
    """Explicit Jacobians, `Dynamics.jac`, and finite differences of a plain
    callable all give the same model."""
    dynamics = VanDerPol()
    x, u, dt = np.array([0.5, -1.]), np.array([0.3]), 0.2

    model = linearize(dynamics, x, u, dt, jac=dynamics.analytic_jac)
    model_dyn = linearize(dynamics, x, u, dt)
    model_fun = linearize(lambda x, u: dynamics(x, u), x, u, dt)

    for other in (model_dyn, model_fun):
        np.testing.assert_allclose(other.A, model.A, rtol=1e-06, atol=1e-09)
        np.testing.assert_allclose(other.B, model.B, rtol=1e-06, atol=1e-09)
        np.testing.assert_allclose(other.c, model.c, rtol=1e-06, atol=1e-09)


def test_nonlinear_local_accuracy():
    """Over a short interval the ZOH model tracks the nonlinear dynamics."""
    dynamics = VanDerPol()
    x, u, dt = np.array([0.5, -1.]), np.array([0.3]), 0.01

    model = linearize(dynamics, x, u, dt, jac=dynamics.analytic_jac)
    _, x_sim, _ = simulate.integrate(dynamics, x, StepControl(u, dt),
                                     rtol=1e-10, atol=1e-12)

    np.testing.assert_allclose(model.propagate(x, u), x_sim[:, -1],
                               rtol=1e-05, atol=1e-06)


def test_zero_interval():
    dynamics = VanDerPol()
    x, u = np.array([0.5, -1.]), np.array([0.3])

    zoh = linearize(dynamics, x, u, 0., hold='zoh')
    foh = linearize(dynamics, x, u, 0., hold='foh')

    for model in (zoh, foh):
        np.testing.assert_array_equal(model.A, np.eye(2))
        np.testing.assert_array_equal(model.c, np.zeros(2))

    np.testing.assert_array_equal(zoh.propagate(x, u), x)
    np.testing.assert_array_equal(foh.propagate(x, u, -u), x)


def test_bad_inputs():
    dynamics = VanDerPol()
    x, u = np.array([0.5, -1.]), np.array([0.3])

    with pytest.raises(ValueError):
        linearize(dynamics, x, u, -0.1)
    with pytest.raises(ValueError):
        linearize(dynamics, x, u, 0.1, hold='soh')
    with pytest.raises(TypeError):
        linearize(dynamics, x, u, 0.1, jac=np.eye(2))
    with pytest.raises(ValueError):
        linearize(lambda x, u: x[:1], x, u, 0.1)
