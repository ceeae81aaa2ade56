"""User-facing solution recovered from the final solver iterate."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from conicipm.info import SolverStatus

if TYPE_CHECKING:
    from conicipm.info import Info
    from conicipm.problemdata import ProblemData
    from conicipm.variables import Variables


def _recip(value: float) -> float:
    with np.errstate(divide="ignore"):
        return float(np.float64(1.0) / np.float64(value))


class Solution:
    """Primal ``x``, dual ``z`` and slack ``s`` over the user's full set of rows."""

    def __init__(self, m: int, n: int) -> None:
        self.x = np.zeros(n)
        self.z = np.zeros(m)
        self.s = np.zeros(m)
        self.status = SolverStatus.UNSOLVED
        self.obj_val = float("nan")
        self.solve_time = 0.0
        self.iterations = 0
        self.r_prim = float("nan")
        self.r_dual = float("nan")

    def __repr__(self) -> str:
        return (
            f"Solution(status={self.status}, obj_val={self.obj_val}, "
            f"iterations={self.iterations})"
        )

    def finalize(self, data: ProblemData, variables: Variables, info: Info) -> None:
        """Undo homogenization, equilibration and presolve on the final iterate."""
        self.status = info.status
        self.obj_val = info.cost_primal

        # infeasible problems are normalized by kappa to give a certificate
        if info.status.is_infeasible():
            scaleinv = _recip(variables.kappa)
            self.obj_val = float("nan")
        else:
            scaleinv = _recip(variables.tau)

        equil = data.equilibration
        cscale = equil.c

        self.x = variables.x * equil.d * scaleinv
        z = variables.z * equil.e * (scaleinv / cscale)
        s = variables.s * equil.einv * scaleinv

        reduce_map = data.presolver.reduce_map
        if reduce_map is not None:
            self.z[reduce_map.keep_index] = z
            self.s[reduce_map.keep_index] = s
            # eliminated constraints get huge slacks and are nonbinding
            dropped = ~reduce_map.keep_logical
            self.s[dropped] = data.presolver.infbound
            self.z[dropped] = 0.0
        else:
            self.z = z
            self.s = s

        self.iterations = info.iterations
        self.solve_time = info.solve_time
        self.r_prim = info.res_primal
        self.r_dual = info.res_dual