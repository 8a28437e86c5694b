"""Solvers for the symmetric Sylvester equation AX + XA = C."""

from __future__ import annotations

import numpy as np

DUMMY_PRECISION = 1e-12


def solve_diagonal_sylvester(d, c) -> np.ndarray:
    """Solve DX + XD = C where D is the diagonal matrix of the vector d."""
    d = np.asarray(d, dtype=float)
    c = np.asarray(c, dtype=float)
    denom = d[:, None] + d[None, :]
    small = np.abs(denom) < DUMMY_PRECISION
    safe = np.where(small, 1.0, denom)
    return np.where(small, 0.0, c / safe)


def solve_symmetric_sylvester(a, c) -> np.ndarray:
    """Solve AX + XA = C for a symmetric matrix A, by eigendecomposition."""
    a = np.asarray(a, dtype=float)
    c = np.asarray(c, dtype=float)
    eigenvalues, p = np.linalg.eigh(a)
    f = p.T @ c @ p
    y = solve_diagonal_sylvester(eigenvalues, f)
    return p @ y @ p.T


def solve_symmetric_sylvester_2(a, c) -> np.ndarray:
    """Solve AX + XA = C for symmetric 3x3 A and C as a 6x6 linear system.

    Other sizes give a zero matrix.
    """
    a = np.asarray(a, dtype=float)
    c = np.asarray(c, dtype=float)
    if a.shape != (3, 3):
        return np.zeros_like(a)

    ea, eb, ec = a[0, 0], a[1, 0], a[2, 0]
    ed, ee, ef = a[1, 1], a[2, 1], a[2, 2]
    m = np.array(
        [
            [2 * ea, 2 * eb, 2 * ec, 0.0, 0.0, 0.0],
            [eb, ea + ed, ee, eb, ec, 0.0],
            [ec, ee, ea + ef, 0.0, eb, ec],
            [0.0, 2 * eb, 0.0, 2 * ed, 2 * ee, 0.0],
            [0.0, ec, eb, ee, ed + ef, ee],
            [0.0, 0.0, 2 * ec, 0.0, 2 * ee, 2 * ef],
        ]
    )
    b = np.array([c[0, 0], c[1, 0], c[2, 0], c[1, 1], c[2, 1], c[2, 2]])
    x, *_ = np.linalg.lstsq(m, b, rcond=None)
    return np.array(
        [
            [x[0], x[1], x[2]],
            [x[1], x[3], x[4]],
            [x[2], x[4], x[5]],
        ]
    )