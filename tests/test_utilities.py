import pytest

import numpy as np

from lineardynamics import utilities


rng = np.random.default_rng()


@pytest.mark.parametrize('n', [0., 1.5, np.array([[5], [6]]), [7, 8], 'n'])
def test_check_int_input_bad_type(n):
    """Make sure `check_int_input` catches a range of bad input types."""
    with pytest.raises(TypeError):
        utilities.check_int_input(n, 'n')


@pytest.mark.parametrize('shape', [(), (1,), (1, 1)])
def test_check_int_input(shape):
    """Make sure `check_int_input` works with a variety of acceptable inputs."""
    n = rng.choice(100, size=shape) - 50
    _n = int(np.squeeze(n))
    assert utilities.check_int_input(n.tolist(), 'n') == _n
    for dtype in [np.int8, np.int16, np.int32, np.int64]:
        assert utilities.check_int_input(n.astype(dtype), 'n') == _n


@pytest.mark.parametrize('low', [0, 1, -5, 10])
def test_check_int_input_with_low(low):
    """Make sure `check_int_input` works with minimum inputs and throws an error
    if the desired minimum is not found."""
    assert utilities.check_int_input(low, 'n', low=low) == low
    assert utilities.check_int_input(low + 1, 'n', low=low) == low + 1
    with pytest.raises(ValueError):
        utilities.check_int_input(low - 1, 'n', low=low)


@pytest.mark.parametrize('t', [0, 0., 1.5, [2.], np.array([[3.]]), np.int8(4)])
def test_check_duration(t):
    t_checked = utilities.check_duration(t)
    assert isinstance(t_checked, float)
    assert t_checked == float(np.squeeze(t))


@pytest.mark.parametrize('t', [-1., -1e-300, np.inf, np.nan, [1., 2.], []])
def test_check_duration_bad(t):
    with pytest.raises(ValueError, match='dt'):
        utilities.check_duration(t, 'dt')


@pytest.mark.parametrize('n_rows', [1, 2, 3])
def test_resize_vector(n_rows):
    x = rng.normal(size=n_rows)

    for x_in in (x, x.reshape(-1, 1), x.reshape(1, -1), x.tolist()):
        y = utilities.resize_vector(x_in, n_rows)
        assert y.shape == (n_rows,)
        np.testing.assert_allclose(y, x)

    # Output is a copy
    y = utilities.resize_vector(x, n_rows)
    y[0] += 1.
    assert y[0] != x[0]

    if n_rows > 1:
        with pytest.raises(ValueError, match='x0 must have'):
            utilities.resize_vector(x, n_rows + 1, 'x0')


@pytest.mark.parametrize('n_rows', [2, 3])
def test_resize_vector_float_in(n_rows):
    x = np.full(n_rows, rng.normal())

    for x_in in (x[0], x[:1], [x[0]]):
        y = utilities.resize_vector(x_in, n_rows)
        np.testing.assert_allclose(y, x)


def _cosine_waves(x, n_out):
    """Stack of `n_out` plane waves `cos(i w.x)` and their exact Jacobians,
    for single points or batches."""
    w = np.pi * np.arange(1., x.shape[0] + 1.)
    if x.ndim > 1:
        w = w[:, None]
    phase = (w * x).sum(axis=0)

    f = np.stack([np.cos(i * phase) for i in range(1, n_out + 1)])
    dfdx = np.stack([-i * np.sin(i * phase) * w for i in range(1, n_out + 1)])
    return f, dfdx


@pytest.mark.parametrize('method', ['2-point', '3-point'])
@pytest.mark.parametrize('n_points', [0, 1, 3])
@pytest.mark.parametrize('n_states', [1, 2, 3])
@pytest.mark.parametrize('n_out', [1, 2])
def test_approx_derivative(method, n_states, n_out, n_points):
    if n_points:
        x = rng.uniform(low=-1., high=1., size=(n_states, n_points))
    else:
        x = rng.uniform(low=-1., high=1., size=(n_states,))

    _, dfdx_expected = _cosine_waves(x, n_out)

    dfdx = utilities.approx_derivative(lambda x: _cosine_waves(x, n_out)[0],
                                       x, method=method)
    assert dfdx.shape == dfdx_expected.shape
    np.testing.assert_allclose(dfdx, dfdx_expected, rtol=1e-03, atol=1e-05)

    # Scalar-valued functions give gradients
    grad = utilities.approx_derivative(lambda x: _cosine_waves(x, 1)[0][0],
                                       x, method=method)
    np.testing.assert_allclose(grad, _cosine_waves(x, 1)[1][0],
                               rtol=1e-03, atol=1e-05)


def test_approx_derivative_f0():
    """A supplied `f0` replaces the unperturbed evaluation in forward
    differences."""
    calls = []
    A = rng.normal(size=(2, 3))

    def fun(x):
        calls.append(np.copy(x))
        return A @ x

    x = rng.normal(size=3)
    dfdx = utilities.approx_derivative(fun, x, method='2-point', f0=A @ x)
    np.testing.assert_allclose(dfdx, A, rtol=1e-06, atol=1e-07)
    assert len(calls) == 3

    calls.clear()
    dfdx = utilities.approx_derivative(fun, x, method='3-point')
    np.testing.assert_allclose(dfdx, A, rtol=1e-08, atol=1e-09)
    assert len(calls) == 6


def test_approx_derivative_int_input():
    """Integer inputs are promoted to floats before differencing."""
    dfdx = utilities.approx_derivative(lambda x: x ** 2, np.array([1, 2]))
    np.testing.assert_allclose(dfdx, np.diag([2., 4.]), rtol=1e-06)

    with pytest.raises(ValueError, match='method'):
        utilities.approx_derivative(lambda x: x, [1.], method='cs')


@pytest.mark.parametrize('with_p', [False, True])
def test_pack_dataframe(with_p):
    t = np.linspace(0., 1., 7)
    x = rng.normal(size=(3, 7))
    u = rng.normal(size=(2, 7))
    p = rng.normal(size=(3, 7)) if with_p else None

    data = utilities.pack_dataframe(t, x, u, p=p)

    columns = ['t', 'x1', 'x2', 'x3', 'u1', 'u2']
    if with_p:
        columns += ['p1', 'p2', 'p3']
    assert list(data.columns) == columns
    assert len(data) == 7

    np.testing.assert_array_equal(data['t'], t)
    np.testing.assert_array_equal(data[columns[1:4]].to_numpy().T, x)
    np.testing.assert_array_equal(data[columns[4:6]].to_numpy().T, u)
    if with_p:
        np.testing.assert_array_equal(data[columns[6:]].to_numpy().T, p)

    with pytest.raises(ValueError, match='p must have shape'):
        utilities.pack_dataframe(t, x, u, p=x[:2])
