"""Iterate of the homogeneous embedding: ``x, s, z, tau, kappa``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from conicipm.residuals import Residuals


class Variables:
    """Primal ``x``, slack ``s``, dual ``z`` and homogenization scalars."""

    def __init__(self, n: int, m: int) -> None:
        self.x = np.zeros(n)
        self.s = np.zeros(m)
        self.z = np.zeros(m)
        self.tau = 1.0
        self.kappa = 1.0

    def __repr__(self) -> str:
        return (
            f"Variables(x={self.x!r}, s={self.s!r}, z={self.z!r}, "
            f"tau={self.tau!r}, kappa={self.kappa!r})"
        )

    def calc_mu(self, residuals: Residuals, degree: int) -> float:
        """Scaled duality gap for a cone collection of the given degree."""
        return (residuals.dot_sz + self.tau * self.kappa) / (degree + 1)

    def add_step(self, step: Variables, alpha: float) -> None:
        """Move by ``alpha`` along ``step``."""
        self.x = self.x + alpha * step.x
        self.s = self.s + alpha * step.s
        self.z = self.z + alpha * step.z
        self.tau += alpha * step.tau
        self.kappa += alpha * step.kappa

    def copy_from(self, src: Variables) -> None:
        """Overwrite all values with copies of those in ``src``."""
        self.x = src.x.copy()
        self.s = src.s.copy()
        self.z = src.z.copy()
        self.tau = src.tau
        self.kappa = src.kappa

    def rescale(self) -> None:
        """Divide everything by ``max(tau, kappa)``."""
        invscale = 1.0 / max(self.tau, self.kappa)
        self.x = self.x * invscale
        self.z = self.z * invscale
        self.s = self.s * invscale
        self.tau *= invscale
        self.kappa *= invscale