import math

import numpy as np

from conicipm.infbounds import default_infinity, get_infinity
from conicipm.info import Info, SolverStatus
from conicipm.presolver import ConeKind, ConeSpec, Presolver
from conicipm.problemdata import ProblemData
from conicipm.settings import DefaultSettings
from conicipm.solution import Solution
from conicipm.variables import Variables


def _data(b):
    default_infinity()
    settings = DefaultSettings(verbose=False)
    m = len(b)
    A = -np.eye(m, 2)
    cones = [ConeSpec(ConeKind.NONNEGATIVE, m)]
    presolver = Presolver(A, b, cones, settings)
    return ProblemData(np.zeros((2, 2)), [1.0, 1.0], A, b, presolver)


def _variables(data, tau=2.0, kappa=4.0):
    variables = Variables(data.n, data.m)
    variables.x = np.arange(1.0, data.n + 1.0)
    variables.s = np.arange(1.0, data.m + 1.0)
    variables.z = np.arange(1.0, data.m + 1.0) * 3.0
    variables.tau = tau
    variables.kappa = kappa
    return variables


def test_new_solution_is_unsolved():
    solution = Solution(3, 2)
    assert solution.x.shape == (2,)
    assert solution.z.shape == (3,) and solution.s.shape == (3,)
    assert solution.status is SolverStatus.UNSOLVED
    assert math.isnan(solution.obj_val)
    assert math.isnan(solution.r_prim) and math.isnan(solution.r_dual)
    assert solution.iterations == 0


def test_finalize_solved_scales_by_tau():
    data = _data([1.0, 2.0])
    variables = _variables(data)
    info = Info(cost_primal=3.5, res_primal=1e-9, res_dual=2e-9,
                solve_time=0.25, status=SolverStatus.SOLVED)
    info.iterations = 12
    solution = Solution(data.presolver.mfull, data.n)
    solution.finalize(data, variables, info)

    assert solution.status is SolverStatus.SOLVED
    assert solution.obj_val == info.cost_primal
    np.testing.assert_allclose(solution.x * variables.tau, variables.x)
    np.testing.assert_allclose(solution.z * variables.tau, variables.z)
    np.testing.assert_allclose(solution.s * variables.tau, variables.s)
    assert solution.iterations == info.iterations
    assert solution.solve_time == info.solve_time
    assert solution.r_prim == info.res_primal
    assert solution.r_dual == info.res_dual


def test_finalize_infeasible_scales_by_kappa():
    data = _data([1.0, 2.0])
    variables = _variables(data)
    info = Info(cost_primal=3.5, status=SolverStatus.PRIMAL_INFEASIBLE)
    solution = Solution(data.presolver.mfull, data.n)
    solution.finalize(data, variables, info)

    assert math.isnan(solution.obj_val)
    np.testing.assert_allclose(solution.x * variables.kappa, variables.x)
    np.testing.assert_allclose(solution.z * variables.kappa, variables.z)


def test_finalize_undoes_equilibration():
    data = _data([1.0, 2.0])
    data.A = data.A * 10.0
    data.equilibrate(None, DefaultSettings(verbose=False))
    variables = _variables(data, tau=1.0)
    solution = Solution(data.presolver.mfull, data.n)
    solution.finalize(data, variables, Info(status=SolverStatus.SOLVED))
    eq = data.equilibration
    np.testing.assert_allclose(solution.x / eq.d, variables.x)
    np.testing.assert_allclose(solution.s / eq.einv, variables.s)
    np.testing.assert_allclose(solution.z * eq.c / eq.e, variables.z)


def test_finalize_restores_presolved_rows():
    data = _data([1.0, 1e30, 2.0])
    assert data.presolver.is_reduced()
    variables = _variables(data)
    solution = Solution(data.presolver.mfull, data.n)
    solution.finalize(data, variables, Info(status=SolverStatus.SOLVED))

    kept = data.presolver.reduce_map.keep_index
    assert solution.s.shape == (data.presolver.mfull,)
    np.testing.assert_allclose(solution.s[kept] * variables.tau, variables.s)
    np.testing.assert_allclose(solution.z[kept] * variables.tau, variables.z)
    dropped = ~data.presolver.reduce_map.keep_logical
    assert np.all(solution.s[dropped] == get_infinity())
    assert np.all(solution.z[dropped] == 0.0)