import numpy as np

from conicipm.presolver import ConeKind, ConeSpec, Presolver
from conicipm.problemdata import ProblemData
from conicipm.residuals import Residuals
from conicipm.settings import DefaultSettings
from conicipm.variables import Variables

P0 = np.array([[4.0, 1.0], [1.0, 2.0]])
Q0 = np.array([1.0, -1.0])
A0 = np.array([[1.0, 1.0], [2.0, 0.0], [0.0, 3.0]])
B0 = np.array([1.0, 2.0, 3.0])


def _data():
    settings = DefaultSettings()
    pre = Presolver(A0, B0, [ConeSpec(ConeKind.NONNEGATIVE, 3)], settings)
    return ProblemData(P0, Q0, A0, B0, pre)


def _variables():
    v = Variables(2, 3)
    v.x = np.array([0.5, -1.5])
    v.s = np.array([1.0, 2.0, 0.5])
    v.z = np.array([0.2, 0.3, 0.4])
    v.tau = 2.0
    v.kappa = 0.5
    return v


def test_initial_state():
    r = Residuals(2, 3)
    assert r.rx.shape == (2,)
    assert r.rz.shape == (3,)
    assert r.rtau == 1.0
    assert r.dot_sz == 0.0


def test_zero_variables():
    data = _data()
    r = Residuals(2, 3)
    r.update(Variables(2, 3), data)
    assert np.allclose(r.rx, -Q0)
    assert np.allclose(r.rz, -B0)
    assert r.rtau == 1.0


def test_px_uses_full_symmetric_matrix():
    data = _data()
    v = _variables()
    r = Residuals(2, 3)
    r.update(v, data)
    assert np.allclose(r.px, P0 @ v.x)
    assert np.isclose(r.dot_xpx, v.x @ P0 @ v.x)


def test_residual_components():
    data = _data()
    v = _variables()
    r = Residuals(2, 3)
    r.update(v, data)
    assert np.allclose(r.rx_inf, -A0.T @ v.z)
    assert np.allclose(r.rz_inf, A0 @ v.x + v.s)
    assert np.allclose(r.rx, r.rx_inf - r.px - v.tau * Q0)
    assert np.allclose(r.rz, r.rz_inf - v.tau * B0)


def test_inner_products_and_rtau():
    data = _data()
    v = _variables()
    r = Residuals(2, 3)
    r.update(v, data)
    assert np.isclose(r.dot_qx, Q0 @ v.x)
    assert np.isclose(r.dot_bz, B0 @ v.z)
    assert np.isclose(r.dot_sz, v.s @ v.z)
    assert np.isclose(r.rtau, r.dot_qx + r.dot_bz + v.kappa + r.dot_xpx / v.tau)