"""Solver settings for standard-form conic problems."""

import math
import sys
from dataclasses import dataclass

_EPS = sys.float_info.epsilon


@dataclass
class DefaultSettings:
    """All tunable parameters of the interior point solver."""

    # main algorithm settings
    max_iter: int = 200
    time_limit: float = math.inf
    verbose: bool = True
    max_step_fraction: float = 0.99

    # full accuracy settings
    tol_gap_abs: float = 1e-8
    tol_gap_rel: float = 1e-8
    tol_feas: float = 1e-8
    tol_infeas_abs: float = 1e-8
    tol_infeas_rel: float = 1e-8
    tol_ktratio: float = 1e-6

    # reduced accuracy settings
    reduced_tol_gap_abs: float = 5e-5
    reduced_tol_gap_rel: float = 5e-5
    reduced_tol_feas: float = 1e-4
    reduced_tol_infeas_abs: float = 5e-5
    reduced_tol_infeas_rel: float = 5e-5
    reduced_tol_ktratio: float = 1e-4

    # data equilibration settings
    equilibrate_enable: bool = True
    equilibrate_max_iter: int = 10
    equilibrate_min_scaling: float = 1e-4
    equilibrate_max_scaling: float = 1e4

    # step size settings
    linesearch_backtrack_step: float = 0.8
    min_switch_step_length: float = 1e-1
    min_terminate_step_length: float = 1e-4

    # linear solver settings
    direct_kkt_solver: bool = True
    direct_solve_method: str = "qdldl"

    # static regularization
    static_regularization_enable: bool = True
    static_regularization_constant: float = 1e-8
    static_regularization_proportional: float = _EPS * _EPS

    # dynamic regularization
    dynamic_regularization_enable: bool = True
    dynamic_regularization_eps: float = 1e-13
    dynamic_regularization_delta: float = 2e-7

    # iterative refinement
    iterative_refinement_enable: bool = True
    iterative_refinement_reltol: float = 1e-13
    iterative_refinement_abstol: float = 1e-12
    iterative_refinement_max_iter: int = 10
    iterative_refinement_stop_ratio: float = 5.0

    # preprocessing
    presolve_enable: bool = True