import numpy as np
import pytest
import scipy.sparse as sp

from conicipm.infbounds import default_infinity, get_infinity
from conicipm.presolver import ConeKind, ConeSpec, Presolver
from conicipm.problemdata import ProblemData, limit_scaling
from conicipm.settings import DefaultSettings

P0 = np.array([[4.0, 1.0], [1.0, 2.0]])
Q0 = np.array([1.0, -1.0])
A0 = np.array([[1.0, 1.0], [2.0, 0.0], [0.0, 3.0]])
B0 = np.array([1.0, 2.0, 3.0])


@pytest.fixture(autouse=True)
def _restore_infinity():
    default_infinity()
    yield
    default_infinity()


def _make(P=P0, q=Q0, A=A0, b=B0, cones=None, **kwargs):
    settings = DefaultSettings(**kwargs)
    if cones is None:
        cones = [ConeSpec(ConeKind.NONNEGATIVE, len(b))]
    pre = Presolver(A, b, cones, settings)
    return ProblemData(P, q, A, b, pre), settings


class _DoublingCones:
    def rectify_equilibration(self, work, e):
        work[:] = 2.0
        return True


def test_P_is_stored_upper_triangular():
    data, _ = _make()
    assert np.allclose(data.P.toarray(), np.triu(P0))
    assert (data.m, data.n) == A0.shape


def test_norms_are_infinity_norms():
    data, _ = _make()
    assert data.normq == np.max(np.abs(Q0))
    assert data.normb == np.max(np.abs(B0))


def test_presolve_removes_rows():
    b = np.array([1.0, 1e30, 3.0])
    data, _ = _make(b=b)
    assert data.m == 2
    assert np.allclose(data.A.toarray(), A0[[0, 2]])
    assert np.allclose(data.b, b[[0, 2]])


def test_b_capped_at_infinity():
    b = np.array([1e30, 2.0, 3.0])
    cones = [ConeSpec(ConeKind.ZERO, 1), ConeSpec(ConeKind.NONNEGATIVE, 2)]
    data, _ = _make(b=b, cones=cones)
    assert data.b[0] == get_infinity()
    assert np.allclose(data.b[1:], b[1:])


def test_equilibrate_disabled_is_identity():
    data, settings = _make(equilibrate_enable=False)
    data.equilibrate(None, settings)
    assert np.all(data.equilibration.d == 1.0)
    assert np.all(data.equilibration.e == 1.0)
    assert np.allclose(data.A.toarray(), A0)


def test_equilibrate_scaling_is_consistent():
    data, settings = _make()
    data.equilibrate(None, settings)
    eq = data.equilibration
    D, E = np.diag(eq.d), np.diag(eq.e)
    assert np.allclose(data.P.toarray(), eq.c * D @ np.triu(P0) @ D)
    assert np.allclose(data.A.toarray(), E @ A0 @ D)
    assert np.allclose(data.q, eq.c * eq.d * Q0)
    assert np.allclose(data.b, eq.e * B0)
    assert np.allclose(eq.d * eq.dinv, 1.0)
    assert np.allclose(eq.e * eq.einv, 1.0)


def test_equilibrate_zero_iterations_leaves_data():
    data, settings = _make(equilibrate_max_iter=0)
    data.equilibrate(None, settings)
    assert np.all(data.equilibration.d == 1.0)
    assert np.allclose(data.P.toarray(), np.triu(P0))


def test_rectified_cones_rescale_rows():
    plain, settings = _make()
    plain.equilibrate(None, settings)
    rect, settings = _make()
    rect.equilibrate(_DoublingCones(), settings)
    assert np.allclose(rect.equilibration.e, 2.0 * plain.equilibration.e)
    E, D = np.diag(rect.equilibration.e), np.diag(rect.equilibration.d)
    assert np.allclose(rect.A.toarray(), E @ A0 @ D)
    assert np.allclose(rect.b, rect.equilibration.e * B0)


def test_equilibrate_accepts_sparse_input():
    data, settings = _make(P=sp.csc_matrix(P0), A=sp.csc_matrix(A0))
    data.equilibrate(None, settings)
    assert np.all(np.isfinite(data.equilibration.d))
    assert np.allclose(
        data.A.toarray(),
        np.diag(data.equilibration.e) @ A0 @ np.diag(data.equilibration.d),
    )


def test_limit_scaling_scalar():
    assert limit_scaling(1e-6, 1e-4, 1e4) == 1.0
    assert limit_scaling(1e6, 1e-4, 1e4) == 1e4
    assert limit_scaling(3.5, 1e-4, 1e4) == 3.5


def test_limit_scaling_array():
    out = limit_scaling(np.array([0.0, 2.0, 1e9]), 1e-4, 1e4)
    assert out.tolist() == [1.0, 2.0, 1e4]