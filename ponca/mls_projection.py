"""Quasi-orthogonal moving least squares projection onto a point set surface."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

import numpy as np

from .algebraic_sphere import FitResult

NeighborQuery = Callable[[np.ndarray, float], Iterable[Any]]


class QuasiOrthogonalMLSProjection:
    """Iteratively fit a primitive around a moving point and project onto it.

    The procedure stops when the displacement falls below ``conv_ratio * scale``,
    when ``step_max - 1`` fitting steps have run, or when a fit is not usable.
    A final fit, which may be of another kind, is always run last and is kept
    in ``fit_final``.

    ``fit_factory`` and ``final_fit_factory`` build fitting procedures exposing
    ``set_weight_func``, ``init``, ``add_neighbor``, ``finalize``, ``project``
    and ``primitive_gradient``.  ``weight_factory`` and ``final_weight_factory``
    build a weighting function from a scale.
    """

    def __init__(
        self,
        fit_factory: Callable[[], Any],
        weight_factory: Callable[[float], Any],
        final_fit_factory: Optional[Callable[[], Any]] = None,
        final_weight_factory: Optional[Callable[[float], Any]] = None,
        *,
        scale: float = 0.0,
        step_max: int = 20,
        conv_ratio: float = 0.001,
    ) -> None:
        self._fit_factory = fit_factory
        self._weight_factory = weight_factory
        self._final_fit_factory = final_fit_factory or fit_factory
        self._final_weight_factory = final_weight_factory or weight_factory
        self.scale = float(scale)
        self.step_max = int(step_max)
        self.conv_ratio = float(conv_ratio)
        self.fit_final = self._final_fit_factory()
        self.step = 0
        self.converged = False

    def set_scale(self, scale: float) -> None:
        """Set the support size of the weighting kernel."""
        self.scale = float(scale)

    def set_step_max(self, step: int) -> None:
        """Set the maximal number of iterations."""
        self.step_max = int(step)

    def set_conv_ratio(self, conv_ratio: float) -> None:
        """Set the convergence threshold, as a ratio of the scale."""
        self.conv_ratio = float(conv_ratio)

    def _run(self, fit, q: np.ndarray, nei: NeighborQuery) -> FitResult:
        status = FitResult.NEED_OTHER_PASS
        while status is FitResult.NEED_OTHER_PASS:
            for neighbor in nei(q, self.scale):
                fit.add_neighbor(neighbor)
            status = fit.finalize()
        return status

    def _epsilon2(self) -> float:
        epsilon = self.conv_ratio * self.scale
        return epsilon * epsilon

    def project(self, p, nei: NeighborQuery) -> np.ndarray:
        """Project p using the neighbors returned by ``nei(q, scale)``."""
        p = np.asarray(p, dtype=float)
        q = p.copy()

        fit = self._fit_factory()
        self.fit_final = self._final_fit_factory()
        fit.set_weight_func(self._weight_factory(self.scale))
        self.fit_final.set_weight_func(self._final_weight_factory(self.scale))

        epsilon2 = self._epsilon2()
        usable = (FitResult.STABLE, FitResult.UNSTABLE)

        self.converged = False
        self.step = 0
        while self.step < self.step_max - 1 and not self.converged:
            fit.init(q)
            if self._run(fit, q, nei) not in usable:
                return q
            proj = np.asarray(fit.project(p), dtype=float)
            dist2 = float(np.dot(proj - q, proj - q))
            self.converged = dist2 < epsilon2
            q = proj
            self.step += 1

        self.step += 1
        self.fit_final.init(q)
        status = self._run(self.fit_final, q, nei)
        if status in usable:
            return np.asarray(self.fit_final.project(p), dtype=float)
        return q

    def project_oriented(self, p, n, nei: NeighborQuery) -> np.ndarray:
        """Project p with an initial normal n; fits must accept ``init(q, n)``.

        Only stable fits are accepted, and the normal follows the gradient of
        each intermediate fit.
        """
        p = np.asarray(p, dtype=float)
        q = p.copy()
        m = np.asarray(n, dtype=float).copy()

        fit = self._fit_factory()
        fit.set_weight_func(self._weight_factory(self.scale))
        self.fit_final.set_weight_func(self._final_weight_factory(self.scale))

        epsilon2 = self._epsilon2()

        self.converged = False
        self.step = 0
        while self.step < self.step_max - 1 and not self.converged:
            fit.init(q, m)
            if self._run(fit, q, nei) is not FitResult.STABLE:
                return q
            proj = np.asarray(fit.project(p), dtype=float)
            dist2 = float(np.dot(proj - q, proj - q))
            self.converged = dist2 < epsilon2
            q = proj
            grad = np.asarray(fit.primitive_gradient(q), dtype=float)
            m = grad / float(np.linalg.norm(grad))
            self.step += 1

        self.step += 1
        self.fit_final.init(q, m)
        status = self._run(self.fit_final, q, nei)
        if status is FitResult.STABLE:
            return np.asarray(self.fit_final.project(p), dtype=float)
        return q