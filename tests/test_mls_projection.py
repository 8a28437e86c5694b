import math

import numpy as np
import pytest

from ponca.mls_projection import QuasiOrthogonalMLSProjection
from ponca.sphere_fit import SphereFit
from ponca.weight_func import DistWeightFunc

CENTER = np.array([1.0, 2.0, 3.0])
RADIUS = 2.0


class _ConstantKernel:
    is_d_valid = False
    is_dd_valid = False

    def f(self, x):
        return 1.0


class _OrientedSphereFit(SphereFit):
    def init(self, eval_pos=None, normal=None):
        super().init(eval_pos)
        self.init_normal = normal


def _sphere_points(n=200):
    golden = math.pi * (3.0 - math.sqrt(5.0))
    points = []
    for i in range(n):
        z = 1.0 - 2.0 * (i + 0.5) / n
        r = math.sqrt(1.0 - z * z)
        theta = golden * i
        direction = np.array([r * math.cos(theta), r * math.sin(theta), z])
        noisy = RADIUS * (1.0 + 0.01 * math.sin(7.0 * i))
        points.append(CENTER + noisy * direction)
    return points


POINTS = _sphere_points()


def _all_neighbors(q, scale):
    return POINTS


def _no_neighbors(q, scale):
    return []


def _weight(scale):
    return DistWeightFunc(_ConstantKernel(), scale)


def _projector(fit_factory=SphereFit):
    proj = QuasiOrthogonalMLSProjection(fit_factory, _weight)
    proj.set_scale(5.0)
    return proj


def test_projection_lands_on_sphere():
    proj = _projector()
    direction = np.array([0.0, 0.6, 0.8])
    p = CENTER + 3.0 * direction
    result = proj.project(p, _all_neighbors)
    assert abs(np.linalg.norm(result - CENTER) - RADIUS) < 0.05
    unit = (result - CENTER) / np.linalg.norm(result - CENTER)
    assert np.dot(unit, direction) > 0.99
    assert proj.converged
    assert 1 <= proj.step <= proj.step_max
    assert proj.fit_final.is_stable()


def test_projection_from_inside():
    proj = _projector()
    direction = np.array([1.0, 0.0, 0.0])
    p = CENTER + 0.5 * direction
    result = proj.project(p, _all_neighbors)
    assert abs(np.linalg.norm(result - CENTER) - RADIUS) < 0.05
    assert np.dot(result - CENTER, direction) > 0


def test_failed_fit_returns_input_point():
    proj = _projector()
    p = np.array([4.0, 5.0, 6.0])
    result = proj.project(p, _no_neighbors)
    np.testing.assert_array_equal(result, p)
    assert proj.step == 0
    assert proj.converged is False


def test_single_step_runs_only_final_fit():
    proj = _projector()
    proj.set_step_max(1)
    p = CENTER + np.array([0.0, 0.0, 2.5])
    result = proj.project(p, _all_neighbors)
    assert proj.step == 1
    assert proj.converged is False
    assert abs(np.linalg.norm(result - CENTER) - RADIUS) < 0.05


def test_single_step_failure_returns_point():
    proj = _projector()
    proj.set_step_max(1)
    p = np.array([0.5, 0.5, 0.5])
    result = proj.project(p, _no_neighbors)
    np.testing.assert_array_equal(result, p)
    assert proj.step == 1


def test_conv_ratio_zero_never_converges_early():
    proj = _projector()
    proj.set_conv_ratio(0.0)
    proj.set_step_max(4)
    p = CENTER + np.array([0.0, 3.0, 0.0])
    result = proj.project(p, _all_neighbors)
    assert proj.converged is False
    assert proj.step == proj.step_max
    assert abs(np.linalg.norm(result - CENTER) - RADIUS) < 0.05


def test_oriented_projection_lands_on_sphere():
    proj = _projector(_OrientedSphereFit)
    direction = np.array([0.6, 0.0, 0.8])
    p = CENTER + 2.6 * direction
    result = proj.project_oriented(p, direction, _all_neighbors)
    assert abs(np.linalg.norm(result - CENTER) - RADIUS) < 0.05
    assert proj.fit_final.is_stable()
    normal = proj.fit_final.init_normal
    assert abs(np.linalg.norm(normal) - 1.0) < 1e-9
    assert abs(abs(np.dot(normal, direction)) - 1.0) < 0.05


def test_oriented_projection_failure_returns_point():
    proj = _projector(_OrientedSphereFit)
    p = np.array([1.0, 1.0, 1.0])
    result = proj.project_oriented(p, np.array([0.0, 0.0, 1.0]), _no_neighbors)
    np.testing.assert_array_equal(result, p)
    assert proj.step == 0


def test_invalid_scale_raises():
    proj = QuasiOrthogonalMLSProjection(SphereFit, _weight)
    with pytest.raises(ValueError):
        proj.project(CENTER, _all_neighbors)