"""Solver progress information, convergence checks and termination status."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from conicipm.problemdata import ProblemData
    from conicipm.residuals import Residuals
    from conicipm.settings import DefaultSettings
    from conicipm.timers import Timers
    from conicipm.variables import Variables

_EPS = sys.float_info.epsilon
_FLOAT_MAX = sys.float_info.max


class SolverStatus(Enum):
    """Outcome of a solve."""

    UNSOLVED = "Unsolved"
    SOLVED = "Solved"
    PRIMAL_INFEASIBLE = "PrimalInfeasible"
    DUAL_INFEASIBLE = "DualInfeasible"
    ALMOST_SOLVED = "AlmostSolved"
    ALMOST_PRIMAL_INFEASIBLE = "AlmostPrimalInfeasible"
    ALMOST_DUAL_INFEASIBLE = "AlmostDualInfeasible"
    MAX_ITERATIONS = "MaxIterations"
    MAX_TIME = "MaxTime"
    NUMERICAL_ERROR = "NumericalError"
    INSUFFICIENT_PROGRESS = "InsufficientProgress"

    def __str__(self) -> str:
        return self.value

    def is_infeasible(self) -> bool:
        """True for (almost) primal or dual infeasibility."""
        return self in (
            SolverStatus.PRIMAL_INFEASIBLE,
            SolverStatus.DUAL_INFEASIBLE,
            SolverStatus.ALMOST_PRIMAL_INFEASIBLE,
            SolverStatus.ALMOST_DUAL_INFEASIBLE,
        )

    def is_errored(self) -> bool:
        """True if the solve stopped because of a numerical failure."""
        return self in (
            SolverStatus.NUMERICAL_ERROR,
            SolverStatus.INSUFFICIENT_PROGRESS,
        )


def _norm_scaled(v: np.ndarray, scale: np.ndarray) -> float:
    return float(np.linalg.norm(np.asarray(v) * np.asarray(scale)))


@dataclass
class Info:
    """Per-iteration progress measures and the current solver status."""

    mu: float = 0.0
    sigma: float = 0.0
    step_length: float = 0.0
    iterations: int = 0
    cost_primal: float = 0.0
    cost_dual: float = 0.0
    res_primal: float = 0.0
    res_dual: float = 0.0
    res_primal_inf: float = 0.0
    res_dual_inf: float = 0.0
    gap_abs: float = 0.0
    gap_rel: float = 0.0
    ktratio: float = 0.0

    prev_cost_primal: float = field(default=0.0, repr=False)
    prev_cost_dual: float = field(default=0.0, repr=False)
    prev_res_primal: float = field(default=0.0, repr=False)
    prev_res_dual: float = field(default=0.0, repr=False)
    prev_gap_abs: float = field(default=0.0, repr=False)
    prev_gap_rel: float = field(default=0.0, repr=False)

    solve_time: float = 0.0
    status: SolverStatus = SolverStatus.UNSOLVED

    def reset(self, timers: Timers) -> None:
        """Clear status, iteration count and the ``solve`` timer."""
        self.status = SolverStatus.UNSOLVED
        self.iterations = 0
        self.solve_time = 0.0
        timers.reset_timer("solve")

    def finalize(
        self, residuals: Residuals, settings: DefaultSettings, timers: Timers
    ) -> None:
        """Check for partial convergence after a failed solve and record time."""
        if self.status.is_errored() or self.status in (
            SolverStatus.MAX_ITERATIONS,
            SolverStatus.MAX_TIME,
        ):
            self._check_convergence_almost(residuals, settings)
        self.solve_time = timers.total_time()

    def update(
        self,
        data: ProblemData,
        variables: Variables,
        residuals: Residuals,
        timers: Timers,
    ) -> None:
        """Recompute costs, residual norms and gaps for the current iterate."""
        tauinv = 1.0 / variables.tau
        equil = data.equilibration
        dinv, einv, cscale = equil.dinv, equil.einv, equil.c

        xpx_half = residuals.dot_xpx * tauinv * tauinv / 2.0
        self.cost_primal = (residuals.dot_qx * tauinv + xpx_half) / cscale
        self.cost_dual = (-residuals.dot_bz * tauinv - xpx_half) / cscale

        normx = _norm_scaled(variables.x, dinv) * tauinv
        normz = _norm_scaled(variables.z, einv) * tauinv
        norms = _norm_scaled(variables.s, einv) * tauinv

        self.res_primal = (
            _norm_scaled(residuals.rz, einv)
            * tauinv
            / max(1.0, data.normb + normx + norms)
        )
        self.res_dual = (
            _norm_scaled(residuals.rx, dinv)
            * tauinv
            / max(1.0, data.normq + normx + normz)
        )

        self.res_primal_inf = _norm_scaled(residuals.rx_inf, dinv) / max(1.0, normz)
        self.res_dual_inf = max(
            _norm_scaled(residuals.px, dinv) / max(1.0, normx),
            _norm_scaled(residuals.rz_inf, einv) / max(1.0, normx + norms),
        )

        self.gap_abs = abs(self.cost_primal - self.cost_dual)
        if self.cost_primal > 0.0 and self.cost_dual < 0.0:
            self.gap_rel = _FLOAT_MAX
        else:
            self.gap_rel = self.gap_abs / max(
                1.0, min(abs(self.cost_primal), abs(self.cost_dual))
            )

        self.ktratio = variables.kappa / variables.tau
        self.solve_time = timers.total_time()

    def check_termination(
        self, residuals: Residuals, settings: DefaultSettings, iteration: int
    ) -> bool:
        """Update the status and return True once it is final."""
        self._check_convergence_full(residuals, settings)

        if (
            self.status is SolverStatus.UNSOLVED
            and iteration > 1
            and (
                self.res_dual > self.prev_res_dual
                or self.res_primal > self.prev_res_primal
            )
        ):
            # poor progress at high tolerance
            if self.ktratio < _EPS * 100.0 and (
                self.prev_gap_abs < settings.tol_gap_abs
                or self.prev_gap_rel < settings.tol_gap_rel
            ):
                self.status = SolverStatus.INSUFFICIENT_PROGRESS

            # residuals diverging out of feasibility tolerance
            if (
                self.res_dual > settings.tol_feas
                and self.res_dual > self.prev_res_dual * 100.0
            ) or (
                self.res_primal > settings.tol_feas
                and self.res_primal > self.prev_res_primal * 100.0
            ):
                self.status = SolverStatus.INSUFFICIENT_PROGRESS

        if self.status is SolverStatus.UNSOLVED:
            if settings.max_iter == self.iterations:
                self.status = SolverStatus.MAX_ITERATIONS
            elif self.solve_time > settings.time_limit:
                self.status = SolverStatus.MAX_TIME

        return self.status is not SolverStatus.UNSOLVED

    def save_prev_iterate(
        self, variables: Variables, prev_variables: Variables
    ) -> None:
        """Remember the current measures and copy ``variables`` aside."""
        self.prev_cost_primal = self.cost_primal
        self.prev_cost_dual = self.cost_dual
        self.prev_res_primal = self.res_primal
        self.prev_res_dual = self.res_dual
        self.prev_gap_abs = self.gap_abs
        self.prev_gap_rel = self.gap_rel
        prev_variables.copy_from(variables)

    def reset_to_prev_iterate(
        self, variables: Variables, prev_variables: Variables
    ) -> None:
        """Restore the measures and variables saved by :meth:`save_prev_iterate`."""
        self.cost_primal = self.prev_cost_primal
        self.cost_dual = self.prev_cost_dual
        self.res_primal = self.prev_res_primal
        self.res_dual = self.prev_res_dual
        self.gap_abs = self.prev_gap_abs
        self.gap_rel = self.prev_gap_rel
        variables.copy_from(prev_variables)

    def save_scalars(
        self, mu: float, alpha: float, sigma: float, iteration: int
    ) -> None:
        """Record the normalized gap, step length, centering and iteration."""
        self.mu = mu
        self.step_length = alpha
        self.sigma = sigma
        self.iterations = iteration

    def _check_convergence_full(
        self, residuals: Residuals, settings: DefaultSettings
    ) -> None:
        self._check_convergence(
            residuals,
            settings.tol_gap_abs,
            settings.tol_gap_rel,
            settings.tol_feas,
            settings.tol_infeas_abs,
            settings.tol_infeas_rel,
            settings.tol_ktratio,
            SolverStatus.SOLVED,
            SolverStatus.PRIMAL_INFEASIBLE,
            SolverStatus.DUAL_INFEASIBLE,
        )

    def _check_convergence_almost(
        self, residuals: Residuals, settings: DefaultSettings
    ) -> None:
        self._check_convergence(
            residuals,
            settings.reduced_tol_gap_abs,
            settings.reduced_tol_gap_rel,
            settings.reduced_tol_feas,
            settings.reduced_tol_infeas_abs,
            settings.reduced_tol_infeas_rel,
            settings.reduced_tol_ktratio,
            SolverStatus.ALMOST_SOLVED,
            SolverStatus.ALMOST_PRIMAL_INFEASIBLE,
            SolverStatus.ALMOST_DUAL_INFEASIBLE,
        )

    def _check_convergence(
        self,
        residuals: Residuals,
        tol_gap_abs: float,
        tol_gap_rel: float,
        tol_feas: float,
        tol_infeas_abs: float,
        tol_infeas_rel: float,
        tol_ktratio: float,
        solved_status: SolverStatus,
        pinf_status: SolverStatus,
        dinf_status: SolverStatus,
    ) -> None:
        if self.ktratio < tol_ktratio and self._is_solved(
            tol_gap_abs, tol_gap_rel, tol_feas
        ):
            self.status = solved_status
        elif self.ktratio > (1.0 / tol_ktratio) * 1000.0:
            if self._is_primal_infeasible(residuals, tol_infeas_abs, tol_infeas_rel):
                self.status = pinf_status
            elif self._is_dual_infeasible(residuals, tol_infeas_abs, tol_infeas_rel):
                self.status = dinf_status

    def _is_solved(self, tol_gap_abs: float, tol_gap_rel: float, tol_feas: float) -> bool:
        return (
            (self.gap_abs < tol_gap_abs or self.gap_rel < tol_gap_rel)
            and self.res_primal < tol_feas
            and self.res_dual < tol_feas
        )

    def _is_primal_infeasible(
        self, residuals: Residuals, tol_infeas_abs: float, tol_infeas_rel: float
    ) -> bool:
        return (
            residuals.dot_bz < -tol_infeas_abs
            and self.res_primal_inf < -tol_infeas_rel * residuals.dot_bz
        )

    def _is_dual_infeasible(
        self, residuals: Residuals, tol_infeas_abs: float, tol_infeas_rel: float
    ) -> bool:
        return (
            residuals.dot_qx < -tol_infeas_abs
            and self.res_dual_inf < -tol_infeas_rel * residuals.dot_qx
        )