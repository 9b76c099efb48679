import numpy as np

from lineardynamics.dynamics import Dynamics


class VanDerPol(Dynamics):
    """Controlled Van der Pol oscillator, `dx1/dt = x2`,
    `dx2/dt = mu * (1 - x1^2) * x2 - x1 + b * u`. Jacobians use the default
    finite difference implementation."""
    _required_parameters = {'mu': 2., 'b': 1.}

    @property
    def n_states(self):
        return 2

    @property
    def n_controls(self):
        return 1

    @staticmethod
    def _parameter_update_fun(obj, **new_params):
        for key in ('mu', 'b'):
            if key in new_params:
                setattr(obj, key, float(getattr(obj, key)))

    def __call__(self, x, u):
        x1, x2 = x[0], x[1]
        dx2dt = (self.parameters.mu * (1. - x1 ** 2) * x2 - x1
                 + self.parameters.b * u[0])
        return np.stack((x2, dx2dt), axis=0)

    def analytic_jac(self, x, u):
        x1, x2 = x[0], x[1]
        mu = self.parameters.mu
        dfdx = np.array([[0., 1.],
                         [-2. * mu * x1 * x2 - 1., mu * (1. - x1 ** 2)]])
        dfdu = np.array([[0.], [self.parameters.b]])
        return dfdx, dfdu
