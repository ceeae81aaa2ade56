"""Presolve step that drops nonnegative constraints with infinite bounds."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np

from conicipm.infbounds import get_infinity

if TYPE_CHECKING:
    from conicipm.settings import DefaultSettings


class ConeKind(Enum):
    """The families of cone constraint the solver accepts."""

    ZERO = "ZeroCone"
    NONNEGATIVE = "NonnegativeCone"
    SECOND_ORDER = "SecondOrderCone"
    EXPONENTIAL = "ExponentialCone"
    POWER = "PowerCone"
    PSD_TRIANGLE = "PSDTriangleCone"


@dataclass(frozen=True)
class ConeSpec:
    """A user cone constraint.

    ``dim`` is the number of rows for zero, nonnegative and second-order
    cones, and the matrix side length for the PSD triangle cone.
    Exponential and power cones always span three rows; a power cone
    also carries its exponent ``alpha``.
    """

    kind: ConeKind
    dim: int = 0
    alpha: float | None = None

    def __post_init__(self) -> None:
        if self.dim < 0:
            raise ValueError("cone dimension must be non-negative")
        if self.kind is ConeKind.POWER and self.alpha is None:
            raise ValueError("a power cone needs an exponent alpha")

    @property
    def nvars(self) -> int:
        """Number of constraint rows covered by this cone."""
        if self.kind in (ConeKind.EXPONENTIAL, ConeKind.POWER):
            return 3
        if self.kind is ConeKind.PSD_TRIANGLE:
            return self.dim * (self.dim + 1) // 2
        return self.dim


@dataclass
class RowReductionIndex:
    """Which rows of the original constraints survive presolve."""

    keep_logical: np.ndarray
    keep_index: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        self.keep_logical = np.asarray(self.keep_logical, dtype=bool)
        self.keep_index = np.flatnonzero(self.keep_logical)


def reduce_cones(
    cone_specs: Sequence[ConeSpec], b: Sequence[float], infbound: float
) -> tuple[list[ConeSpec], RowReductionIndex | None, int]:
    """Drop rows of nonnegative cones whose bound is at least ``infbound``.

    Returns the (possibly contracted) cone list, the row reduction index
    or ``None`` if nothing was removed, and the reduced row count.
    """
    b = np.asarray(b, dtype=float)
    total = sum(cone.nvars for cone in cone_specs)
    if total > b.size:
        raise ValueError("cones cover more rows than the constraint vector has")

    keep_logical = np.ones(b.size, dtype=bool)
    # slight contraction so that kept entries are firmly below the bound
    bound = (1.0 - np.finfo(float).eps * 10.0) * infbound

    reduced_specs: list[ConeSpec] = []
    is_reduced = False
    start = 0
    for cone in cone_specs:
        stop = start + cone.nvars
        if cone.kind is ConeKind.NONNEGATIVE:
            finite = b[start:stop] < bound
            keep_logical[start:stop] = finite
            num_finite = int(finite.sum())
            if num_finite < cone.nvars:
                cone = ConeSpec(ConeKind.NONNEGATIVE, num_finite)
                is_reduced = True
        reduced_specs.append(cone)
        start = stop

    mreduced = int(keep_logical.sum())
    reduce_map = RowReductionIndex(keep_logical) if is_reduced else None
    return reduced_specs, reduce_map, mreduced


class Presolver:
    """Holds the presolved cone list and the mapping back to original rows."""

    def __init__(
        self,
        A: Any,
        b: Sequence[float],
        cone_specs: Sequence[ConeSpec],
        settings: DefaultSettings,
    ) -> None:
        # captured once so a later module-level change cannot affect a solve
        self.infbound: float = get_infinity()
        self.mfull: int = len(b)

        if settings.presolve_enable:
            specs, reduce_map, mreduced = reduce_cones(cone_specs, b, self.infbound)
        else:
            specs, reduce_map, mreduced = list(cone_specs), None, self.mfull

        self.cone_specs: list[ConeSpec] = specs
        self.reduce_map: RowReductionIndex | None = reduce_map
        self.mreduced: int = mreduced

    def is_reduced(self) -> bool:
        """True if any constraint rows were removed."""
        return self.reduce_map is not None

    def count_reduced(self) -> int:
        """Number of constraint rows removed."""
        return self.mfull - self.mreduced