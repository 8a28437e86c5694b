"""Algebraic sphere fitting on points without normals."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from .algebraic_sphere import AlgebraicSphere, FitResult


def _position(point) -> np.ndarray:
    return np.asarray(getattr(point, "pos", point), dtype=float)


class SphereFit(AlgebraicSphere):
    """Pratt-constrained algebraic sphere fit.

    Minimizes the weighted squared algebraic distance under the unit
    gradient constraint, by solving a generalized eigenvalue problem.
    """

    def __init__(self, weight_func=None, dim: int = 3) -> None:
        super().__init__(weight_func, dim)
        self._mat_a = np.zeros((dim + 2, dim + 2))
        self._nb_neighbors = 0
        self._sum_w = 0.0

    def set_weight_func(self, weight_func) -> None:
        """Set the weighting function used by add_neighbor."""
        self.weight_func = weight_func

    def init(self, eval_pos=None) -> None:
        """Reset the fit around the evaluation position."""
        super().init(eval_pos)
        n = self.dim + 2
        self._mat_a = np.zeros((n, n))
        self._nb_neighbors = 0
        self._sum_w = 0.0

    @property
    def sum_weights(self) -> float:
        """Sum of the weights of the accepted neighbors."""
        return self._sum_w

    def num_neighbors(self) -> int:
        """Number of neighbors with a positive weight."""
        return self._nb_neighbors

    def add_neighbor(self, point) -> bool:
        """Add a neighbor; return False when its weight is not positive."""
        if self.weight_func is None:
            raise RuntimeError("no weighting function has been set")
        weight, local = self.weight_func.w(_position(point), point)
        if weight > 0:
            self._add_local_neighbor(weight, np.asarray(local, dtype=float))
            return True
        return False

    def _add_local_neighbor(self, weight: float, local: np.ndarray) -> None:
        self._nb_neighbors += 1
        self._sum_w += weight
        a = np.concatenate(([1.0], local, [float(local @ local)]))
        self._mat_a += weight * np.outer(a, a)

    def finalize(self) -> FitResult:
        """Solve for the sphere parameters and return the fit status."""
        if self._nb_neighbors == 0 or self._sum_w == 0.0:
            self.init(self.basis_center)
            self.state = FitResult.UNDEFINED
            return self.state

        dim = self.dim
        if self._nb_neighbors < dim:
            self.state = FitResult.UNDEFINED
            return self.state
        if self.is_valid():
            self.state = FitResult.CONFLICT_ERROR_FOUND
        else:
            self.state = FitResult.UNSTABLE if self._nb_neighbors < 2 * dim else FitResult.STABLE

        inv_c = np.eye(dim + 2)
        inv_c[0, -1] = inv_c[-1, 0] = -0.5
        inv_c[0, 0] = inv_c[-1, -1] = 0.0

        eigenvalues, eigenvectors = np.linalg.eig(inv_c @ self._mat_a)
        real = eigenvalues.real
        positive = np.flatnonzero(real > 0)
        if positive.size == 0:
            self.state = FitResult.UNDEFINED
            return self.state
        min_id = positive[np.argmin(real[positive])]

        u = eigenvectors[:, min_id].real
        self.uc = float(u[0])
        self.ul = u[1 : dim + 1].copy()
        self.uq = float(u[dim + 1])
        self._is_normalized = False
        return self.state

    def compute(self, points: Iterable) -> FitResult:
        """Add every point and finalize, repeating while another pass is needed."""
        points = list(points)
        while True:
            for point in points:
                self.add_neighbor(point)
            result = self.finalize()
            if result is not FitResult.NEED_OTHER_PASS:
                return result

    def is_stable(self) -> bool:
        """Tell whether the fit ended in the stable state."""
        return self.state is FitResult.STABLE