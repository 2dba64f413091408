"""
Low-level numerics – JIT-accelerated kernels used by the curve fitters.

All routines are purely functional: they receive the grid arrays together
with an explicit point count ``n`` (the backing arrays carry spare capacity)
and write their results into caller-owned output arrays.

Segment convention
------------------
On ``[t_k, t_{k+1}]`` with ``dt = t - t_k``::

    f(t) = y_k + b_k dt + c_k dt² + d_k dt³
"""

from __future__ import annotations

import numpy as np
from numba import njit

# ---------------------------------------------------------------------------
# Integration
# ---------------------------------------------------------------------------


@njit(cache=True, fastmath=True)
def antiderivative(h: float, a: float, b: float, c: float, d: float) -> float:
    """∫₀ʰ (a + b s + c s² + d s³) ds in Horner form."""
    return h * (a + h * (b / 2.0 + h * (c / 3.0 + h * d / 4.0)))


@njit(cache=True, fastmath=True)
def integral_sweep(
    t: np.ndarray,
    y: np.ndarray,
    b: np.ndarray,
    c: np.ndarray,
    d: np.ndarray,
    n: int,
    out: np.ndarray,
) -> None:
    """Prefix sums ``out[k] = ∫_{t_0}^{t_k} f``; ``out[0] = 0``."""
    out[0] = 0.0
    for k in range(1, n):
        out[k] = out[k - 1] + antiderivative(t[k] - t[k - 1], y[k - 1], b[k - 1], c[k - 1], d[k - 1])


# ---------------------------------------------------------------------------
# Common (global) cubic spline
# ---------------------------------------------------------------------------


@njit(cache=True, fastmath=True)
def tridiagonal_interior(
    t: np.ndarray,
    n: int,
    sub: np.ndarray,
    diag: np.ndarray,
    sup: np.ndarray,
) -> None:
    """Interior rows of the second-derivative continuity system.

    Row ``j`` (``1 ≤ j ≤ n-2``) reads
    ``h_{j-1} c_{j-1} + 2(h_{j-1} + h_j) c_j + h_j c_{j+1}``.
    """
    for j in range(1, n - 1):
        h_prev = t[j] - t[j - 1]
        h = t[j + 1] - t[j]
        sub[j - 1] = h_prev
        diag[j] = 2.0 * (h_prev + h)
        sup[j] = h


@njit(cache=True, fastmath=True)
def continuity_rhs(t: np.ndarray, y: np.ndarray, n: int, rhs: np.ndarray) -> None:
    """Interior right-hand side ``3[(y_{j+1}-y_j)/h_j - (y_j-y_{j-1})/h_{j-1}]``."""
    for j in range(1, n - 1):
        rhs[j] = 3.0 * ((y[j + 1] - y[j]) / (t[j + 1] - t[j]) - (y[j] - y[j - 1]) / (t[j] - t[j - 1]))


@njit(cache=True, fastmath=True)
def coefficients_from_curvature(
    t: np.ndarray,
    y: np.ndarray,
    c_full: np.ndarray,
    n: int,
    b: np.ndarray,
    c: np.ndarray,
    d: np.ndarray,
) -> None:
    """Derive ``b`` and ``d`` from the solved ``c`` (length ``n``)."""
    for k in range(n - 1):
        h = t[k + 1] - t[k]
        c[k] = c_full[k]
        d[k] = (c_full[k + 1] - c_full[k]) / (3.0 * h)
        b[k] = (y[k + 1] - y[k]) / h - h * (2.0 * c_full[k] + c_full[k + 1]) / 3.0


# ---------------------------------------------------------------------------
# Bessel (local) cubic spline
# ---------------------------------------------------------------------------


@njit(cache=True, fastmath=True)
def bessel_coefficients(
    t: np.ndarray,
    y: np.ndarray,
    n: int,
    b: np.ndarray,
    c: np.ndarray,
    d: np.ndarray,
) -> None:
    """Hermite cubic with slopes of the parabola through three neighbours.

    Requires ``n ≥ 3``.  The slope at ``t_j`` only depends on
    ``y_{j-1}, y_j, y_{j+1}`` (one-sided three-point formulas at the ends).
    """
    h0 = t[1] - t[0]
    h1 = t[2] - t[1]
    b[0] = ((t[2] + t[1] - 2.0 * t[0]) * (y[1] - y[0]) / h0 - h0 * (y[2] - y[1]) / h1) / (t[2] - t[0])

    for j in range(1, n - 1):
        h_prev = t[j] - t[j - 1]
        h = t[j + 1] - t[j]
        next_b = (h * (y[j] - y[j - 1]) / h_prev + h_prev * (y[j + 1] - y[j]) / h) / (t[j + 1] - t[j - 1])

        k = j - 1
        m = (y[j] - y[k]) / h_prev
        c[k] = (3.0 * m - next_b - 2.0 * b[k]) / h_prev
        d[k] = (next_b + b[k] - 2.0 * m) / (h_prev * h_prev)
        b[j] = next_b

    h_last = t[n - 1] - t[n - 2]
    h_prev = t[n - 2] - t[n - 3]
    last_b = -(
        h_last * (y[n - 2] - y[n - 3]) / h_prev
        - (2.0 * t[n - 1] - t[n - 2] - t[n - 3]) * (y[n - 1] - y[n - 2]) / h_last
    ) / (t[n - 1] - t[n - 3])

    k = n - 2
    m = (y[n - 1] - y[k]) / h_last
    c[k] = (3.0 * m - last_b - 2.0 * b[k]) / h_last
    d[k] = (last_b + b[k] - 2.0 * m) / (h_last * h_last)
