"""Distance-based weighting functions and weight kernels."""

from __future__ import annotations

import math
from typing import Any, NamedTuple, Protocol

import numpy as np


class WeightKernel(Protocol):
    """A one-dimensional kernel evaluated on normalized distances."""

    def f(self, x: float) -> float: ...


class WeightReturn(NamedTuple):
    """Weight of a neighbor together with its position in the local basis."""

    weight: float
    local_q: np.ndarray


class VarifoldWeightKernel:
    """Kernel returning the opposite of the derivative of the varifold profile.

    The profile derivative is negative, and negative weights are ignored
    by the fitting procedures, so the positive opposite is returned.
    """

    is_d_valid = False
    is_dd_valid = False

    def f(self, x: float) -> float:
        denom = 1.0 - x * x
        if denom == 0.0:
            return 0.0
        y = 1.0 / denom
        return 2.0 * x * y * y * math.exp(-y)


def _requires(kernel: Any, flag: str, what: str) -> None:
    if not getattr(kernel, flag, False):
        raise TypeError(f"{what} order derivatives are required by the weight kernel")


class DistWeightFunc:
    """Weight a neighbor by its distance to a basis center, within a support t."""

    def __init__(self, kernel: WeightKernel, t: float = 1.0, basis_center=None) -> None:
        if t <= 0:
            raise ValueError("the evaluation scale must be positive")
        self.kernel = kernel
        self.t = float(t)
        self._p = None if basis_center is None else np.asarray(basis_center, dtype=float)

    def init(self, basis_center) -> None:
        """Set the center of the local basis."""
        self._p = np.asarray(basis_center, dtype=float).copy()

    def basis_center(self) -> np.ndarray:
        """Center of the local basis."""
        if self._p is None:
            raise ValueError("the basis center has not been set")
        return self._p

    def convert_to_local_basis(self, q) -> np.ndarray:
        """Express q relatively to the basis center."""
        q = np.asarray(q, dtype=float)
        return q.copy() if self._p is None else q - self._p

    def w(self, q, point=None) -> WeightReturn:
        """Weight of q and its local coordinates."""
        local = self.convert_to_local_basis(q)
        d = float(np.linalg.norm(local))
        weight = self.kernel.f(d / self.t) if d <= self.t else 0.0
        return WeightReturn(weight, local)

    def spacedw(self, q, point=None) -> np.ndarray:
        """First order derivative of the weight with respect to space."""
        _requires(self.kernel, "is_d_valid", "First")
        local = self.convert_to_local_basis(q)
        d = float(np.linalg.norm(local))
        if d <= self.t and d != 0.0:
            return (local / (d * self.t)) * self.kernel.df(d / self.t)
        return np.zeros_like(local)

    def spaced2w(self, q, point=None) -> np.ndarray:
        """Second order derivative of the weight with respect to space."""
        _requires(self.kernel, "is_dd_valid", "Second")
        local = self.convert_to_local_basis(q)
        dim = local.shape[0]
        d = float(np.linalg.norm(local))
        if not (d <= self.t and d != 0.0):
            return np.zeros((dim, dim))
        t = self.t
        der = self.kernel.df(d / t)
        result = np.outer(local, local) / d * (self.kernel.ddf(d / t) / t - der / d)
        result = result + der * np.eye(dim)
        return result / (t * d)

    def scaledw(self, q, point=None) -> float:
        """First order derivative of the weight with respect to the scale."""
        _requires(self.kernel, "is_d_valid", "First")
        d = float(np.linalg.norm(self.convert_to_local_basis(q)))
        t = self.t
        return -d * self.kernel.df(d / t) / (t * t) if d <= t else 0.0

    def scaled2w(self, q, point=None) -> float:
        """Second order derivative of the weight with respect to the scale."""
        _requires(self.kernel, "is_dd_valid", "Second")
        d = float(np.linalg.norm(self.convert_to_local_basis(q)))
        t = self.t
        if d > t:
            return 0.0
        return 2.0 * d / t**3 * self.kernel.df(d / t) + d * d / t**4 * self.kernel.ddf(d / t)

    def scale_spaced2w(self, q, point=None) -> np.ndarray:
        """Cross derivative of the weight with respect to scale and space."""
        _requires(self.kernel, "is_dd_valid", "Second")
        local = self.convert_to_local_basis(q)
        d = float(np.linalg.norm(local))
        t = self.t
        if d <= t and d != 0.0:
            return -local / (t * t) * (self.kernel.df(d / t) / d + self.kernel.ddf(d / t) / t)
        return np.zeros_like(local)