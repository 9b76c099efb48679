import numpy as np
import pandas as pd


def check_int_input(n, argname, low=None):
    """
    Convert a size-1 input to an int, raising errors if the conversion would
    lose information or the result is smaller than `low`.

    Parameters
    ----------
    n : array_like, size 1
        Input to check.
    argname : str
        How to refer to the argument `n` in error messages.
    low : int, optional
        Smallest allowed value.

    Returns
    -------
    n : int
        Input `n` as an int.

    Raises
    ------
    TypeError
        If `n` is not integer-valued with size 1.
    ValueError
        If `n < low`.
    """
    try:
        # Safe casting refuses floats, strings, and other non-integer types
        n = int(np.squeeze(n).astype(np.int64, casting='safe'))
    except TypeError:
        raise TypeError(f"{argname} must be an int")

    if low is not None and n < low:
        raise ValueError(f"{argname} must be at least {low}")

    return n


def check_duration(t, argname='t'):
    """
    Convert an input to a non-negative, finite float.

    Parameters
    ----------
    t : array_like, size 1
        Time duration to check.
    argname : str, default='t'
        How to refer to the argument `t` in error messages.

    Raises
    ------
    ValueError
        If `t` does not have size 1, is negative, or is not finite.

    Returns
    -------
    t : float
        Input `t` converted to a float.
    """
    if np.size(t) != 1:
        raise ValueError(f"{argname} must be a float")

    t = float(np.squeeze(t))

    if not np.isfinite(t) or t < 0.:
        raise ValueError(f"{argname} must be a non-negative, finite float")

    return t


def resize_vector(array, n_rows, argname='array'):
    """
    Reshapes or resizes an array_like to a 1d float array with a specified
    number of elements.

    Parameters
    ----------
    array : array_like
        Array to reshape or resize into shape `(n_rows,)`. A scalar or an array
        with a single element is broadcast to every entry.
    n_rows : int
        Number of elements desired in the output.
    argname : str, default='array'
        How to refer to the argument `array` in error messages.

    Returns
    -------
    reshaped_array : (n_rows,) array
        A float copy of `array` with the desired shape.
    """
    n_rows = check_int_input(n_rows, "n_rows", low=1)

    array = np.array(array, dtype=float).reshape(-1)
    if array.shape[0] == n_rows:
        return array
    elif array.shape[0] == 1:
        return np.full(n_rows, array[0])
    else:
        raise ValueError(f"{argname} must have {n_rows:d} elements but has "
                         f"{array.shape[0]:d}")


# Relative finite difference steps, eps ** power for each scheme
_FIN_DIFF_STEP_POWERS = {'2-point': 1 / 2, '3-point': 1 / 3}


def approx_derivative(fun, x0, method='3-point', f0=None):
    """
    Finite difference Jacobian of an array-valued function, evaluated at one
    point or at a batch of points in a single call per perturbed coordinate.

    Parameters
    ----------
    fun : callable
        Function `fun(x)` to differentiate. Takes `x` of shape `(n,)` or
        `(n, n_points)` and returns an array of shape `(m_1, ..., m_l)` or
        `(m_1, ..., m_l, n_points)` respectively.
    x0 : (n,) or (n, n_points) array
        Point(s) at which to differentiate. Integer inputs are converted to
        floats.
    method : {'3-point', '2-point'}, default='3-point'
        Central ('3-point') or forward ('2-point') differences.
    f0 : array_like, optional
        `fun(x0)`, if already available. Only used by forward differences.

    Returns
    -------
    dfdx : (m_1, ..., m_l, n) or (m_1, ..., m_l, n, n_points) array
        Jacobian(s) of `fun` at `x0`, `dfdx[..., i, k]` being the derivative
        with respect to `x0[i, k]`.
    """
    if method not in _FIN_DIFF_STEP_POWERS:
        raise ValueError(f"method must be one of "
                         f"{list(_FIN_DIFF_STEP_POWERS)}, got {method!r}")

    x0 = np.atleast_1d(np.asarray(x0, dtype=float))

    if method == '2-point' and f0 is None:
        f0 = fun(x0)

    h = (np.finfo(float).eps ** _FIN_DIFF_STEP_POWERS[method]
         * np.maximum(1., np.abs(x0)))

    dfdx = []
    for i in range(x0.shape[0]):
        x_plus = np.copy(x0)
        x_plus[i] += h[i]
        if method == '2-point':
            x_minus = x0
            f_minus = np.asarray(f0)
        else:
            x_minus = np.copy(x0)
            x_minus[i] -= h[i]
            f_minus = fun(x_minus)
        # Divide by the representable step, not h
        dx = x_plus[i] - x_minus[i]
        dfdx.append((np.asarray(fun(x_plus)) - f_minus) / dx)

    # Stack the differentiated coordinate ahead of the batch axis, if any
    axis = -1 if x0.ndim < 2 else -2
    return np.stack(dfdx, axis=axis)


def pack_dataframe(t, x, u, p=None):
    """
    Collect a trajectory into a `DataFrame` with one row per time point, e.g.
    for saving as a .csv file.

    Parameters
    ----------
    t : (n_data,) array
        Time points.
    x : (n_states, n_data) array
        States at times `t`.
    u : (n_controls, n_data) array
        Controls at times `t`.
    p : (n_states, n_data) array, optional
        Costates at times `t`.

    Returns
    -------
    data : DataFrame
        Columns 't', 'x1', ..., 'xn', 'u1', ..., 'um', and, if `p` is given,
        'p1', ..., 'pn'.
    """
    t = np.reshape(t, -1)
    x = np.reshape(x, (np.shape(x)[0], -1))
    u = np.reshape(u, (np.shape(u)[0], -1))

    fields = [('x', x), ('u', u)]
    if p is not None:
        if np.shape(p) != x.shape:
            raise ValueError(f"p must have shape {x.shape} to match x")
        fields.append(('p', np.asarray(p)))

    columns = {'t': t}
    for name, values in fields:
        for i, row in enumerate(values, start=1):
            columns[name + str(i)] = row

    return pd.DataFrame(columns)
