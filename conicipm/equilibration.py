"""Diagonal scaling data from Ruiz equilibration."""

import numpy as np


class EquilibrationData:
    """Left/right diagonal scalings ``d``, ``e``, their inverses, and cost scale ``c``."""

    def __init__(self, n: int, m: int) -> None:
        if n < 0 or m < 0:
            raise ValueError("dimensions must be non-negative")
        self.d = np.ones(n)
        self.dinv = np.ones(n)
        self.e = np.ones(m)
        self.einv = np.ones(m)
        self.c = 1.0

    def __repr__(self) -> str:
        return (
            f"EquilibrationData(n={self.d.size}, m={self.e.size}, c={self.c})"
        )