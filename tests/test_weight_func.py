import numpy as np
import pytest

from ponca.weight_func import DistWeightFunc, VarifoldWeightKernel


class SmoothKernel:
    is_d_valid = True
    is_dd_valid = True

    def f(self, x):
        return (x * x - 1.0) ** 2

    def df(self, x):
        return 4.0 * x * (x * x - 1.0)

    def ddf(self, x):
        return 12.0 * x * x - 4.0


CENTER = np.array([0.3, -0.2, 1.1])
QUERY = np.array([0.6, 0.1, 1.4])
H = 1e-6


def make(t=1.0):
    wf = DistWeightFunc(SmoothKernel(), t)
    wf.init(CENTER)
    return wf


def test_weight_and_local_basis():
    wf = make()
    weight, local = wf.w(QUERY)
    assert np.allclose(local, QUERY - CENTER)
    assert weight == pytest.approx(SmoothKernel().f(np.linalg.norm(QUERY - CENTER)))
    assert np.allclose(wf.convert_to_local_basis(QUERY), QUERY - CENTER)
    assert np.allclose(wf.basis_center(), CENTER)


def test_weight_outside_support_is_zero():
    wf = make(0.1)
    assert wf.w(QUERY).weight == 0.0
    assert wf.scaledw(QUERY) == 0.0
    assert np.allclose(wf.spacedw(QUERY), 0.0)


def test_spacedw_matches_finite_differences():
    wf = make()
    grad = wf.spacedw(QUERY)
    for axis in range(3):
        step = np.zeros(3)
        step[axis] = H
        fd = (wf.w(QUERY + step).weight - wf.w(QUERY - step).weight) / (2 * H)
        assert grad[axis] == pytest.approx(fd, abs=1e-6)


def test_spaced2w_matches_finite_differences():
    wf = make()
    hess = wf.spaced2w(QUERY)
    assert np.allclose(hess, hess.T)
    for axis in range(3):
        step = np.zeros(3)
        step[axis] = H
        fd = (wf.spacedw(QUERY + step) - wf.spacedw(QUERY - step)) / (2 * H)
        assert np.allclose(hess[:, axis], fd, atol=1e-5)


def test_scale_derivatives_match_finite_differences():
    t = 1.0
    wf = make(t)
    lo, hi = make(t - H), make(t + H)
    fd1 = (hi.w(QUERY).weight - lo.w(QUERY).weight) / (2 * H)
    assert wf.scaledw(QUERY) == pytest.approx(fd1, abs=1e-6)
    fd2 = (hi.scaledw(QUERY) - lo.scaledw(QUERY)) / (2 * H)
    assert wf.scaled2w(QUERY) == pytest.approx(fd2, abs=1e-5)
    fd3 = (hi.spacedw(QUERY) - lo.spacedw(QUERY)) / (2 * H)
    assert np.allclose(wf.scale_spaced2w(QUERY), fd3, atol=1e-5)


def test_derivatives_vanish_at_center():
    wf = make()
    assert np.allclose(wf.spacedw(CENTER), 0.0)
    assert np.allclose(wf.spaced2w(CENTER), 0.0)
    assert np.allclose(wf.scale_spaced2w(CENTER), 0.0)


def test_invalid_scale_rejected():
    with pytest.raises(ValueError):
        DistWeightFunc(SmoothKernel(), 0.0)


def test_varifold_kernel_values():
    kernel = VarifoldWeightKernel()
    assert kernel.f(0.0) == 0.0
    assert all(kernel.f(x) > 0 for x in (0.1, 0.5, 0.9))


def test_varifold_kernel_in_weight_function():
    kernel = VarifoldWeightKernel()
    wf = DistWeightFunc(kernel, 2.0)
    wf.init(CENTER)
    d = np.linalg.norm(QUERY - CENTER)
    assert wf.w(QUERY).weight == pytest.approx(kernel.f(d / 2.0))


def test_varifold_kernel_has_no_derivatives():
    wf = DistWeightFunc(VarifoldWeightKernel(), 1.0)
    wf.init(CENTER)
    with pytest.raises(TypeError):
        wf.spacedw(QUERY)
    with pytest.raises(TypeError):
        wf.scaled2w(QUERY)