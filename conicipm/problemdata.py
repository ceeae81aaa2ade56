"""Problem data for the standard conic form, with Ruiz equilibration."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

import numpy as np
import scipy.sparse as sp

from conicipm.equilibration import EquilibrationData
from conicipm.presolver import Presolver
from conicipm.settings import DefaultSettings


class _RectifyingCones(Protocol):
    def rectify_equilibration(self, work: np.ndarray, e: np.ndarray) -> bool: ...


def limit_scaling(s: Any, minval: float, maxval: float) -> Any:
    """Map values below ``minval`` to 1 and cap values above ``maxval``."""
    arr = np.asarray(s, dtype=float)
    out = np.where(arr < minval, 1.0, np.where(arr > maxval, maxval, arr))
    return float(out) if out.ndim == 0 else out


def _norm_inf(v: np.ndarray) -> float:
    return float(np.max(np.abs(v))) if v.size else 0.0


def _col_norms(M: sp.spmatrix) -> np.ndarray:
    coo = M.tocoo()
    norms = np.zeros(M.shape[1])
    np.maximum.at(norms, coo.col, np.abs(coo.data))
    return norms


def _row_norms(M: sp.spmatrix) -> np.ndarray:
    coo = M.tocoo()
    norms = np.zeros(M.shape[0])
    np.maximum.at(norms, coo.row, np.abs(coo.data))
    return norms


def _sym_col_norms(M: sp.spmatrix) -> np.ndarray:
    # column norms of the symmetric matrix whose upper triangle is M
    coo = M.tocoo()
    norms = np.zeros(M.shape[1])
    absdata = np.abs(coo.data)
    np.maximum.at(norms, coo.col, absdata)
    np.maximum.at(norms, coo.row, absdata)
    return norms


def _lrscale(M: sp.spmatrix, left: np.ndarray, right: np.ndarray) -> sp.csc_matrix:
    coo = M.tocoo()
    data = coo.data * left[coo.row] * right[coo.col]
    return sp.csc_matrix((data, (coo.row, coo.col)), shape=M.shape)


class ProblemData:
    """The data ``P, q, A, b`` of a conic program after presolve."""

    def __init__(
        self,
        P: Any,
        q: Sequence[float],
        A: Any,
        b: Sequence[float],
        presolver: Presolver,
    ) -> None:
        self.P: sp.csc_matrix = sp.triu(sp.csc_matrix(P, dtype=float), format="csc")
        self.q: np.ndarray = np.array(q, dtype=float)

        A = sp.csc_matrix(A, dtype=float)
        b = np.array(b, dtype=float)
        if presolver.reduce_map is not None:
            mask = presolver.reduce_map.keep_logical
            A = A.tocsr()[mask].tocsc()
            b = b[mask]

        # cap bounds that were not removed by presolve
        self.b: np.ndarray = np.minimum(b, presolver.infbound)
        self.A: sp.csc_matrix = A

        self.m, self.n = A.shape
        self.equilibration = EquilibrationData(self.n, self.m)
        self.normq: float = _norm_inf(self.q)
        self.normb: float = _norm_inf(self.b)
        self.presolver = presolver

    def _scale_data(self, d: np.ndarray | None, e: np.ndarray) -> None:
        if d is not None:
            self.P = _lrscale(self.P, d, d)
            self.A = _lrscale(self.A, e, d)
            self.q = self.q * d
        else:
            self.A = _lrscale(self.A, e, np.ones(self.n))
        self.b = self.b * e

    def equilibrate(
        self, cones: _RectifyingCones | None, settings: DefaultSettings
    ) -> None:
        """Apply Ruiz equilibration in place, recording the scalings.

        ``cones``, if given, may adjust the row scaling for cones that
        cannot be scaled elementwise through ``rectify_equilibration``.
        """
        if not settings.equilibrate_enable:
            return

        equil = self.equilibration
        d, e = equil.d, equil.e
        smin = settings.equilibrate_min_scaling
        smax = settings.equilibrate_max_scaling
        ework = np.ones(self.m)

        for _ in range(settings.equilibrate_max_iter):
            dwork = np.maximum(_sym_col_norms(self.P), _col_norms(self.A))
            ework = _row_norms(self.A)

            dwork = 1.0 / np.sqrt(limit_scaling(dwork, smin, smax))
            ework = 1.0 / np.sqrt(limit_scaling(ework, smin, smax))

            self._scale_data(dwork, ework)
            d *= dwork
            e *= ework

            col_norms = _col_norms(self.P)
            mean_col_norm_p = float(col_norms.mean()) if col_norms.size else 0.0
            inf_norm_q = _norm_inf(self.q)

            if mean_col_norm_p != 0.0 and inf_norm_q != 0.0:
                scale_cost = limit_scaling(max(inf_norm_q, mean_col_norm_p), smin, smax)
                ctmp = 1.0 / scale_cost
                self.P = self.P * ctmp
                self.q = self.q * ctmp
                equil.c *= ctmp

        if cones is not None and cones.rectify_equilibration(ework, e):
            self._scale_data(None, ework)
            e *= ework

        equil.dinv = 1.0 / d
        equil.einv = 1.0 / e