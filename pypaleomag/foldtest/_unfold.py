"""
Fold-test kernel: the eigenvalue approach of Tauxe & Watson (1994).

A direction set is progressively unfolded by applying a percentage of
each bedding correction. The percentage at which the principal
eigenvalue t1 of the orientation matrix peaks is the unfolding of
maximum clustering. The search is a coarse pass in steps of 10 % over
[unfolding_min, unfolding_max], then a fine pass in steps of 1 % within
9 % of the coarse maximum.

Both passes update the running maximum only on a strictly larger t1, so
ties resolve to the earliest percentage in scan order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pypaleomag.core.exceptions import ValidationError
from pypaleomag.core.validation import check_min_directions
from pypaleomag.directions._geometry import tilt_correct, to_cartesian
from pypaleomag.directions._statistics import principal_eigenvalues
from pypaleomag.directions.design import DirectionSet
from pypaleomag.montecarlo._common import KernelOutcome

MIN_DIRECTIONS = 2

DEFAULT_UNFOLDING_MIN = -50
DEFAULT_UNFOLDING_MAX = 150
DEFAULT_COARSE_STEP = 10
DEFAULT_FINE_HALFWIDTH = 9


@dataclass(frozen=True)
class UnfoldingResult:
    """
    Outcome of progressive unfolding for one direction set.

    Attributes:
        index: Unfolding percentage of maximum t1 (coarse then fine).
        max_tau: t1 at `index`.
        percentages: Coarse grid, unfolding_min..unfolding_max.
        taus: t1 at each coarse percentage.
    """
    index: int
    max_tau: float
    percentages: NDArray[np.int_]
    taus: NDArray[np.floating[Any]]

    def as_array(self) -> NDArray[np.floating[Any]]:
        """Columns (unfolding percentage, t1) over the coarse grid."""
        return np.column_stack([self.percentages.astype(np.float64), self.taus])


def check_unfolding_range(
    unfolding_min: int,
    unfolding_max: int,
    coarse_step: int = DEFAULT_COARSE_STEP,
    fine_halfwidth: int = DEFAULT_FINE_HALFWIDTH,
) -> None:
    """
    Raises:
        ValidationError: On non-integer bounds, an empty range or a
            non-positive step.
    """
    for value, label in (
        (unfolding_min, "unfolding_min"),
        (unfolding_max, "unfolding_max"),
        (coarse_step, "coarse_step"),
        (fine_halfwidth, "fine_halfwidth"),
    ):
        if isinstance(value, bool) or int(value) != value:
            raise ValidationError(f"{label} must be an integer, got {value!r}")

    if unfolding_min >= unfolding_max:
        raise ValidationError(
            f"unfolding_min must be below unfolding_max, "
            f"got {unfolding_min} and {unfolding_max}"
        )
    if coarse_step < 1:
        raise ValidationError(f"coarse_step must be >= 1, got {coarse_step}")
    if fine_halfwidth < 0:
        raise ValidationError(f"fine_halfwidth must be >= 0, got {fine_halfwidth}")


def principal_taus(directions: DirectionSet, percentages: NDArray) -> NDArray[np.floating[Any]]:
    """
    t1 of the direction set unfolded by each percentage.

    Returns:
        Array of shape (len(percentages),).
    """
    fractions = np.asarray(percentages, dtype=np.float64)[:, np.newaxis] * 0.01
    dec, inc = tilt_correct(
        directions.strike,
        directions.dip * fractions,
        directions.dec,
        directions.inc,
    )
    return principal_eigenvalues(to_cartesian(dec, inc))[..., 0]


def _first_strict_max(taus: NDArray, current: float) -> int | None:
    """Position of the first maximum of taus if it exceeds `current`, else None."""
    scan = np.where(np.isnan(taus), -np.inf, taus)
    if scan.size == 0:
        return None
    best = int(np.argmax(scan))
    return best if scan[best] > current else None


def unfold_directions(
    directions: DirectionSet,
    unfolding_min: int = DEFAULT_UNFOLDING_MIN,
    unfolding_max: int = DEFAULT_UNFOLDING_MAX,
    coarse_step: int = DEFAULT_COARSE_STEP,
    fine_halfwidth: int = DEFAULT_FINE_HALFWIDTH,
) -> UnfoldingResult:
    """
    Find the unfolding percentage that maximises t1.

    Args:
        directions: At least two directions with bedding.
        unfolding_min: Lowest percentage (may be negative).
        unfolding_max: Highest percentage.
        coarse_step: Step of the first pass.
        fine_halfwidth: Half-width of the 1 % refinement window.

    Returns:
        UnfoldingResult; `index` lies in [unfolding_min, unfolding_max]
        and within `fine_halfwidth` of the coarse maximum.

    Raises:
        EmptyInputError / InsufficientDirectionsError: Fewer than 2 directions.
        ValidationError: Invalid range.
    """
    check_min_directions(directions.n_observations, MIN_DIRECTIONS, "foldtest")
    check_unfolding_range(unfolding_min, unfolding_max, coarse_step, fine_halfwidth)

    percentages = np.arange(unfolding_min, unfolding_max + 1, coarse_step)
    taus = principal_taus(directions, percentages)

    index = 0
    max_tau = 0.0
    best = _first_strict_max(taus, max_tau)
    if best is not None:
        index = int(percentages[best])
        max_tau = float(taus[best])

    # The coarse maximum itself is not re-evaluated.
    fine = index + np.arange(-fine_halfwidth, fine_halfwidth + 1)
    fine = fine[(fine >= unfolding_min) & (fine <= unfolding_max) & (fine != index)]
    if fine.size:
        fine_taus = principal_taus(directions, fine)
        best = _first_strict_max(fine_taus, max_tau)
        if best is not None:
            index = int(fine[best])
            max_tau = float(fine_taus[best])

    return UnfoldingResult(index=index, max_tau=max_tau, percentages=percentages, taus=taus)


class UnfoldKernel:
    """
    Fold-test estimator kernel for the bootstrap engine.

    The scalar outcome is the unfolding percentage of maximum t1; the
    curve is the coarse (percentage, t1) grid. Every set has a defined
    outcome.
    """

    name = 'foldtest'
    min_directions = MIN_DIRECTIONS
    yield_every = 5

    def __init__(
        self,
        unfolding_min: int = DEFAULT_UNFOLDING_MIN,
        unfolding_max: int = DEFAULT_UNFOLDING_MAX,
        coarse_step: int = DEFAULT_COARSE_STEP,
        fine_halfwidth: int = DEFAULT_FINE_HALFWIDTH,
    ):
        check_unfolding_range(unfolding_min, unfolding_max, coarse_step, fine_halfwidth)
        self.unfolding_min = int(unfolding_min)
        self.unfolding_max = int(unfolding_max)
        self.coarse_step = int(coarse_step)
        self.fine_halfwidth = int(fine_halfwidth)

    def __call__(self, directions: DirectionSet) -> KernelOutcome:
        unfolded = unfold_directions(
            directions,
            self.unfolding_min,
            self.unfolding_max,
            self.coarse_step,
            self.fine_halfwidth,
        )
        return KernelOutcome(value=float(unfolded.index), curve=unfolded.as_array())

    def __repr__(self) -> str:
        return (
            f"UnfoldKernel(unfolding_min={self.unfolding_min}, "
            f"unfolding_max={self.unfolding_max})"
        )
