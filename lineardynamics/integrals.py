"""
Closed-form integrals of matrix exponentials. Each routine computes $e^{At}$
together with one or more definite integrals of $e^{As}$ weighted by constant
or linear forcing, using a single matrix exponential of an augmented block
matrix. No quadrature is performed and $A$ is never inverted, so singular and
nilpotent state matrices are handled the same as any other.

##### References

1. C. F. Van Loan, *Computing integrals involving the matrix exponential*,
    IEEE Transactions on Automatic Control, 23 (1978), pp. 395-404.
    https://doi.org/10.1109/TAC.1978.1101743
"""

import numpy as np
from scipy.linalg import expm

from .utilities import check_duration


__all__ = ['expm_integral', 'expm_ramp_integral', 'gramian']


def _check_square(A):
    A = np.array(A, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError("A must have shape (n_states, n_states)")
    return A


def _check_forcing(A, Y):
    Y = np.array(Y, dtype=float)
    squeeze = Y.ndim < 2
    if squeeze:
        Y = Y.reshape(-1, 1)
    if Y.ndim != 2 or Y.shape[0] != A.shape[0]:
        raise ValueError("Y must have shape (n_states,) or (n_states, k)")
    return Y, squeeze


def expm_integral(A, Y, t):
    r"""
    Compute $e^{At}$ and the integral $\int_0^t e^{As} Y ds$.

    The two are read off of the exponential of the augmented matrix
    ```
    [[A, Y],
     [0, 0]] * t,
    ```
    which equals `[[expm(A t), int_0^t expm(A s) ds Y], [0, I]]`.

    Parameters
    ----------
    A : (n_states, n_states) array
        State matrix.
    Y : (n_states,) or (n_states, k) array
        Constant forcing vector or matrix.
    t : float
        Non-negative integration horizon.

    Returns
    -------
    eAt : (n_states, n_states) array
        Matrix exponential $e^{At}$.
    int_eAs_Y : (n_states,) or (n_states, k) array
        $\int_0^t e^{As} Y ds$, with the same shape as `Y`.
    """
    A = _check_square(A)
    Y, squeeze = _check_forcing(A, Y)
    t = check_duration(t)

    n, k = Y.shape

    if t == 0.:
        eAt, int_Y = np.eye(n), np.zeros((n, k))
    else:
        M = np.zeros((n + k, n + k))
        M[:n, :n] = A
        M[:n, n:] = Y
        eMt = expm(M * t)
        eAt, int_Y = eMt[:n, :n], eMt[:n, n:]

    if squeeze:
        int_Y = int_Y[:, 0]

    return eAt, int_Y


def expm_ramp_integral(A, Y, t):
    r"""
    Compute $e^{At}$, $\int_0^t e^{As} Y ds$, and the ramp-weighted integral
    $\int_0^t e^{As} Y s/t ds$, which together describe the response to a
    forcing term varying linearly in time.

    The three-block augmented matrix
    ```
    [[A, Y, 0],
     [0, 0, I],
     [0, 0, 0]] * t
    ```
    has an exponential whose `[0, 1]` block is $\int_0^t e^{As} Y ds$ and
    whose `[0, 2]` block is $\int_0^t e^{A(t-s)} Y s ds$
    $= t \int_0^t e^{As} Y ds - \int_0^t e^{As} Y s ds$.

    Parameters
    ----------
    A : (n_states, n_states) array
        State matrix.
    Y : (n_states,) or (n_states, k) array
        Forcing vector or matrix.
    t : float
        Non-negative integration horizon. If `t == 0` all integrals are zero.

    Returns
    -------
    eAt : (n_states, n_states) array
        Matrix exponential $e^{At}$.
    int_eAs_Y : (n_states,) or (n_states, k) array
        $\int_0^t e^{As} Y ds$, with the same shape as `Y`.
    int_eAs_Y_s_tinv : (n_states,) or (n_states, k) array
        $\int_0^t e^{As} Y s/t ds$, with the same shape as `Y`.
    """
    A = _check_square(A)
    Y, squeeze = _check_forcing(A, Y)
    t = check_duration(t)

    n, k = Y.shape

    if t == 0.:
        eAt, int_Y, int_Ys = np.eye(n), np.zeros((n, k)), np.zeros((n, k))
    else:
        M = np.zeros((n + 2 * k, n + 2 * k))
        M[:n, :n] = A
        M[:n, n:n + k] = Y
        M[n:n + k, n + k:] = np.eye(k)
        eMt = expm(M * t)
        eAt, int_Y = eMt[:n, :n], eMt[:n, n:n + k]
        # [0, 2] block divided by t is int_Y - int_Ys
        int_Ys = int_Y - eMt[:n, n + k:] / t

    if squeeze:
        int_Y, int_Ys = int_Y[:, 0], int_Ys[:, 0]

    return eAt, int_Y, int_Ys


def gramian(A, Q, t):
    r"""
    Compute the weighted reachability Gramian
    $G(t) = \int_0^t e^{As} Q e^{A^T s} ds$ by Van Loan's method: with
    ```
    expm([[-A, Q], [0, A.T]] * t) = [[F11, F12], [0, F22]],
    ```
    we have `G = F22.T @ F12`.

    Parameters
    ----------
    A : (n_states, n_states) array
        State matrix.
    Q : (n_states, n_states) array
        Symmetric positive semi-definite weight, typically `B @ inv(R) @ B.T`.
    t : float
        Non-negative integration horizon.

    Returns
    -------
    G : (n_states, n_states) array
        Symmetric positive semi-definite Gramian. Zero if `t == 0`.
    """
    A = _check_square(A)
    n = A.shape[0]
    Q = np.array(Q, dtype=float)
    if Q.shape != (n, n):
        raise ValueError("Q must have shape (n_states, n_states)")
    t = check_duration(t)

    if t == 0.:
        return np.zeros((n, n))

    M = np.zeros((2 * n, 2 * n))
    M[:n, :n] = -A
    M[:n, n:] = Q
    M[n:, n:] = A.T
    eMt = expm(M * t)

    G = eMt[n:, n:].T @ eMt[:n, n:]

    return (G + G.T) / 2.
