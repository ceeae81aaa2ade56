"""Residuals of the homogeneous embedding of a conic program."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from conicipm.problemdata import ProblemData
    from conicipm.variables import Variables


class Residuals:
    """KKT residuals, infeasibility residuals and cached inner products."""

    def __init__(self, n: int, m: int) -> None:
        self.rx = np.zeros(n)
        self.rz = np.zeros(m)
        self.rtau = 1.0

        # partial residuals for infeasibility checks
        self.rx_inf = np.zeros(n)
        self.rz_inf = np.zeros(m)

        # inner products, invariant under equilibration
        self.dot_qx = 0.0
        self.dot_bz = 0.0
        self.dot_sz = 0.0
        self.dot_xpx = 0.0

        self.px = np.zeros(n)

    def update(self, variables: Variables, data: ProblemData) -> None:
        """Recompute all residuals for ``variables``."""
        x, s, z = variables.x, variables.s, variables.z
        tau, kappa = variables.tau, variables.kappa

        qx = float(data.q @ x)
        bz = float(data.b @ z)
        sz = float(s @ z)

        # P holds only the upper triangle of a symmetric matrix
        P = data.P
        self.px = np.asarray(P @ x + P.T @ x - P.diagonal() * x, dtype=float)
        xpx = float(x @ self.px)

        self.rx_inf = -np.asarray(data.A.T @ z, dtype=float)
        self.rz_inf = np.asarray(data.A @ x, dtype=float) + s

        self.rx = self.rx_inf - self.px - tau * data.q
        self.rz = self.rz_inf - tau * data.b
        self.rtau = qx + bz + kappa + xpx / tau

        self.dot_qx = qx
        self.dot_bz = bz
        self.dot_sz = sz
        self.dot_xpx = xpx