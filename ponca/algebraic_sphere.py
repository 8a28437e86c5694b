"""Algebraic hypersphere primitive and fitting status codes."""

from __future__ import annotations

import math
from enum import Enum

import numpy as np

DUMMY_PRECISION = 1e-12


class FitResult(Enum):
    """Status of a fitting procedure."""

    STABLE = 0
    UNSTABLE = 1
    UNDEFINED = 2
    NEED_OTHER_PASS = 3
    CONFLICT_ERROR_FOUND = 4


def _is_approx(a: np.ndarray, b: np.ndarray, precision: float = DUMMY_PRECISION) -> bool:
    diff = float(np.linalg.norm(a - b))
    return diff <= precision * min(float(np.linalg.norm(a)), float(np.linalg.norm(b)))


class AlgebraicSphere:
    """Zero isosurface of s(x) = uc + ul.x + uq x.x, stored in a local basis.

    Public methods taking a query expect it in global coordinates.
    """

    def __init__(self, weight_func=None, dim: int = 3) -> None:
        self.weight_func = weight_func
        self.state = FitResult.UNDEFINED
        self._basis_center = np.zeros(dim)
        self.uc = 0.0
        self.ul = np.zeros(dim)
        self.uq = 0.0
        self._is_normalized = False

    @property
    def dim(self) -> int:
        """Dimension of the ambient space."""
        return int(self._basis_center.shape[0])

    @property
    def basis_center(self) -> np.ndarray:
        """Center of the local basis the scalar field is expressed in."""
        return self._basis_center

    def _set_basis(self, center) -> None:
        self._basis_center = np.asarray(center, dtype=float).copy()
        if self.weight_func is not None:
            self.weight_func.init(self._basis_center)

    def _to_local(self, q) -> np.ndarray:
        return np.asarray(q, dtype=float) - self._basis_center

    def _to_global(self, lq: np.ndarray) -> np.ndarray:
        return lq + self._basis_center

    def init(self, basis_center=None) -> None:
        """Reset the scalar field to zero and set the local basis center."""
        if basis_center is None:
            basis_center = np.zeros(self.dim)
        self._set_basis(basis_center)
        self.state = FitResult.UNDEFINED
        self.uc = 0.0
        self.ul = np.zeros(self.dim)
        self.uq = 0.0
        self._is_normalized = False

    def is_ready(self) -> bool:
        """Tell whether the last fit ended in a usable state."""
        return self.state in (FitResult.STABLE, FitResult.UNSTABLE)

    def is_valid(self) -> bool:
        """False when every parameter is zero, as right after init."""
        ul_zero = not np.any(self.ul)
        return not (ul_zero and self.uc == 0.0 and self.uq == 0.0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AlgebraicSphere):
            return NotImplemented
        eps2 = DUMMY_PRECISION * DUMMY_PRECISION
        return (
            (self.uc - other.uc) ** 2 < eps2
            and (self.uq - other.uq) ** 2 < eps2
            and _is_approx(np.asarray(self.ul, dtype=float), np.asarray(other.ul, dtype=float))
        )

    __hash__ = None

    def change_basis(self, new_basis) -> None:
        """Express the scalar field relatively to a new basis center."""
        new_basis = np.asarray(new_basis, dtype=float)
        diff = self._basis_center - new_basis
        self._set_basis(new_basis)
        self.uc = self.uc - float(np.dot(self.ul, diff)) + self.uq * float(np.dot(diff, diff))
        self.ul = self.ul - 2.0 * self.uq * diff
        self._is_normalized = False
        self.apply_pratt_norm()

    def pratt_norm(self) -> float:
        """Pratt norm of the scalar field."""
        return math.sqrt(self.pratt_norm2())

    def pratt_norm2(self) -> float:
        """Squared Pratt norm of the scalar field."""
        return float(np.dot(self.ul, self.ul)) - 4.0 * self.uc * self.uq

    def apply_pratt_norm(self) -> bool:
        """Normalize the scalar field by its Pratt norm, once."""
        if not self._is_normalized:
            pn = self.pratt_norm()
            self.uc /= pn
            self.ul = self.ul * (1.0 / pn)
            self.uq /= pn
            self._is_normalized = True
        return True

    def radius(self) -> float:
        """Radius of the sphere; infinity when the fit is planar."""
        if self.is_plane():
            return math.inf
        b = 1.0 / self.uq
        v = (-0.5 * b) * self.ul
        return math.sqrt(float(np.dot(v, v)) - self.uc * b)

    def center(self) -> np.ndarray:
        """Center of the sphere in global coordinates; infinite when planar."""
        if self.is_plane():
            return np.full(self.dim, math.inf)
        b = 1.0 / self.uq
        return (-0.5 * b) * self.ul + self._basis_center

    def is_normalized(self) -> bool:
        """Tell whether the field has been normalized by the Pratt norm."""
        return self._is_normalized

    def potential(self, q=None) -> float:
        """Value of the scalar field at q, or at the basis center by default."""
        if q is None:
            return float(self.uc)
        lq = self._to_local(q)
        return float(self.uc + np.dot(lq, self.ul) + self.uq * np.dot(lq, lq))

    def project(self, q) -> np.ndarray:
        """Closed-form orthogonal projection of q on the primitive."""
        lq = self._to_local(q)
        pot = self.uc + float(np.dot(lq, self.ul)) + self.uq * float(np.dot(lq, lq))
        grad = self.ul + 2.0 * self.uq * lq
        norm = float(np.linalg.norm(grad))
        if self.is_plane() or self.uq == 0.0:
            t = -pot / (norm * norm)
        else:
            disc = max(norm * norm - 4.0 * self.uq * pot, 0.0)
            t = -(norm - math.sqrt(disc)) / (2.0 * self.uq * norm)
        return self._to_global(lq + t * grad)

    def project_descent(self, q, nb_iter: int = 16) -> np.ndarray:
        """Projection of q by following the gradient of the scalar field."""
        lq = self._to_local(q)
        direction = self.ul + 2.0 * self.uq * lq
        ilg = 1.0 / float(np.linalg.norm(direction))
        direction = direction * ilg
        ad = self.uc + float(np.dot(self.ul, lq)) + self.uq * float(np.dot(lq, lq))
        proj = lq + direction * (-ad * min(ilg, 1.0))
        for _ in range(nb_iter):
            grad = self.ul + 2.0 * self.uq * proj
            ilg = 1.0 / float(np.linalg.norm(grad))
            value = self.uc + float(np.dot(proj, self.ul)) + self.uq * float(np.dot(proj, proj))
            proj = proj + direction * (-value * min(ilg, 1.0))
        return self._to_global(proj)

    def primitive_gradient(self, q=None) -> np.ndarray:
        """Unnormalized gradient of the field at q, or at the basis center."""
        if q is None:
            return self.ul
        return self.ul + 2.0 * self.uq * self._to_local(q)

    def is_plane(self) -> bool:
        """Tell whether a ready fit degenerated to a plane."""
        planar = abs(self.uq) <= DUMMY_PRECISION
        return self.is_ready() and planar

    def hessian(self, q=None) -> np.ndarray:
        """Hessian of the scalar field (constant)."""
        return 2.0 * self.uq * np.eye(self.dim)