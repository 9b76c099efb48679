import numpy as np
from scipy.optimize import bisect, minimize_scalar


def bisection(fun, a, b, xtol=2e-12, rtol=8.881784197001252e-16, maxiter=100):
    """
    Find a root of a scalar function on `[a, b]` by bisection, if the function
    changes sign on the interval.

    Parameters
    ----------
    fun : callable
        Scalar function `fun(t)`.
    a, b : float
        Interval endpoints, `a < b`.
    xtol, rtol, maxiter
        See `scipy.optimize.bisect`.

    Returns
    -------
    t : float or None
        A root of `fun` in `[a, b]`, or `None` if `fun(a)` and `fun(b)` have
        the same sign.
    """
    fa, fb = fun(a), fun(b)
    if fa == 0.:
        return a
    if fb == 0.:
        return b
    if np.sign(fa) == np.sign(fb):
        return None

    return bisect(fun, a, b, xtol=xtol, rtol=rtol, maxiter=maxiter)


def golden_section(fun, a, b, xtol=1e-10, maxiter=500):
    """
    Minimize a scalar function on `[a, b]`, assumed unimodal, with the bounded
    Brent method of `scipy.optimize.minimize_scalar`, which combines
    golden-section steps with parabolic interpolation. The interval endpoints
    are also evaluated so that a minimum attained on the boundary is returned
    exactly.

    Parameters
    ----------
    fun : callable
        Scalar function `fun(t)`.
    a, b : float
        Interval endpoints, `a < b`.
    xtol : float, default=1e-10
        Absolute tolerance on the minimizer.
    maxiter : int, default=500
        Maximum number of iterations.

    Returns
    -------
    t : float
        Minimizer of `fun` on `[a, b]`.
    """
    res = minimize_scalar(fun, bounds=(a, b), method='bounded',
                          options={'xatol': xtol, 'maxiter': maxiter})

    candidates = [(fun(a), a), (fun(b), b)]
    if np.isfinite(res.fun):
        candidates.append((res.fun, float(res.x)))

    return min(candidates)[1]
