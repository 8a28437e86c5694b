"""Storage of principal curvatures for 3D curvature estimators."""

from __future__ import annotations

import numpy as np


def _as_vec3(v) -> np.ndarray:
    arr = np.asarray(v, dtype=float)
    if arr.shape != (3,):
        raise ValueError("curvature directions must be 3D vectors")
    return arr.copy()


class CurvatureEstimator:
    """Principal curvatures and directions, kept such that kmin <= kmax."""

    def __init__(self) -> None:
        self.init()

    def init(self) -> None:
        """Reset to default, invalid values."""
        self._kmin = 0.0
        self._kmax = 0.0
        self._vmin = np.zeros(3)
        self._vmax = np.zeros(3)
        self._is_valid = False

    def is_valid(self) -> bool:
        """Tell whether curvature values have been set."""
        return self._is_valid

    def kmin(self) -> float:
        """Minimal principal curvature."""
        return self._kmin

    def kmax(self) -> float:
        """Maximal principal curvature."""
        return self._kmax

    def kmin_direction(self) -> np.ndarray:
        """Direction of the minimal principal curvature."""
        return self._vmin

    def kmax_direction(self) -> np.ndarray:
        """Direction of the maximal principal curvature."""
        return self._vmax

    def k_mean(self) -> float:
        """Mean curvature."""
        return (self._kmin + self._kmax) / 2.0

    def gaussian_curvature(self) -> float:
        """Gaussian curvature."""
        return self._kmin * self._kmax

    def set_curvature_values(self, kmin, kmax, vmin, vmax) -> None:
        """Store curvature values, swapping them when kmin > kmax."""
        vmin = _as_vec3(vmin)
        vmax = _as_vec3(vmax)
        if kmin <= kmax:
            self._kmin, self._kmax = float(kmin), float(kmax)
            self._vmin, self._vmax = vmin, vmax
        else:
            self._kmin, self._kmax = float(kmax), float(kmin)
            self._vmin, self._vmax = vmax, vmin
        self._is_valid = True