"""
Elongation/Inclination kernel (Tauxe & Kent, 2004; Tauxe et al., 2008).

For one direction set, unflatten the inclinations with King's (1955)
relation tan(I_o) = f tan(I_f) for f = 1.00 down to 0.20 and follow the
(mean inclination, elongation) path of the unflattened sets. The
answer is the first point at which that path reaches the TK03.GAD
elongation/inclination polynomial from below.

The 81 trial sets are evaluated as one batch; the crossing search then
walks the batch in descending-f order exactly as a sequential scan
would, so the result does not depend on the vectorisation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pypaleomag.core.exceptions import ValidationError
from pypaleomag.core.validation import check_min_directions
from pypaleomag.directions._geometry import to_cartesian, unflatten
from pypaleomag.directions._statistics import mean_inclination, principal_eigenvalues
from pypaleomag.directions.design import DirectionSet
from pypaleomag.montecarlo._common import KernelOutcome

# TK03.GAD best-fit cubic, highest power first (PmagPy find_EI)
TK03_COEFFICIENTS = (3.15976125e-06, -3.52459817e-04, -1.46641090e-02, 2.89538539e+00)

# 1.00, 0.99, ..., 0.20; built from integers so every factor is i / 100 exactly
FLATTENING_FACTORS = np.arange(100, 19, -1) / 100.0

MIN_DIRECTIONS = 2

NO_INTERSECTION_POLICIES = ('zero', 'drop')


def tk03_elongation(inc: ArrayLike) -> NDArray[np.floating[Any]]:
    """Expected TK03.GAD elongation at inclination(s) `inc` in degrees."""
    return np.polyval(TK03_COEFFICIENTS, np.asarray(inc, dtype=np.float64))


@dataclass(frozen=True)
class FlatteningCurve:
    """
    Path of one direction set through elongation/inclination space.

    Rows are in scan order (decreasing flattening factor). A curve
    that intersects the TK03.GAD polynomial has at least two points
    and ends at the crossing; an empty curve means no intersection.
    """
    flattening_factors: NDArray[np.floating[Any]]
    inclinations: NDArray[np.floating[Any]]
    elongations: NDArray[np.floating[Any]]

    def __len__(self) -> int:
        return int(self.flattening_factors.shape[0])

    @property
    def intersects(self) -> bool:
        return len(self) > 0

    @property
    def flattening_factor(self) -> float:
        """Flattening factor at the crossing, 0 without intersection."""
        return float(self.flattening_factors[-1]) if self.intersects else 0.0

    @property
    def inclination(self) -> float:
        """Unflattened mean inclination at the crossing, 0 without intersection."""
        return float(self.inclinations[-1]) if self.intersects else 0.0

    @property
    def elongation(self) -> float:
        """Elongation at the crossing, 0 without intersection."""
        return float(self.elongations[-1]) if self.intersects else 0.0

    def as_array(self) -> NDArray[np.floating[Any]]:
        """Columns (flattening factor, mean inclination, elongation)."""
        return np.column_stack(
            [self.flattening_factors, self.inclinations, self.elongations]
        ).reshape(-1, 3)


_EMPTY = np.empty(0, dtype=np.float64)
NO_INTERSECTION = FlatteningCurve(_EMPTY, _EMPTY, _EMPTY)


def elongation_path(
    directions: DirectionSet,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Mean inclination and elongation for every flattening factor.

    Returns:
        (|mean inclination|, elongation t2/t3), each of shape (81,)
        aligned with FLATTENING_FACTORS.
    """
    check_min_directions(directions.n_observations, MIN_DIRECTIONS, "ei")

    inc = unflatten(directions.inc[np.newaxis, :], FLATTENING_FACTORS[:, np.newaxis])
    xyz = to_cartesian(directions.dec, inc)

    inclinations = np.abs(mean_inclination(xyz))
    tau = principal_eigenvalues(xyz)
    with np.errstate(divide='ignore', invalid='ignore'):
        elongations = tau[:, 1] / tau[:, 2]
    return inclinations, elongations


def unflatten_directions(directions: DirectionSet) -> FlatteningCurve:
    """
    Find the flattening factor at which a direction set meets TK03.GAD.

    A point has crossed when |E_TK03(I)| <= E_data. A crossing counts
    only if an uncrossed point precedes it; leading crossed points (a
    set that starts above the polynomial) are skipped.

    Args:
        directions: At least two directions.

    Returns:
        FlatteningCurve from the first uncrossed point up to and
        including the first crossing after it, or NO_INTERSECTION.

    Raises:
        EmptyInputError / InsufficientDirectionsError: Fewer than 2 directions.
    """
    inclinations, elongations = elongation_path(directions)
    crossed = np.abs(tk03_elongation(inclinations)) <= elongations

    below = np.flatnonzero(~crossed)
    if below.size == 0:
        return NO_INTERSECTION
    start = below[0]

    after = np.flatnonzero(crossed[start:])
    if after.size == 0:
        return NO_INTERSECTION
    stop = start + after[0] + 1

    return FlatteningCurve(
        flattening_factors=FLATTENING_FACTORS[start:stop].copy(),
        inclinations=inclinations[start:stop],
        elongations=elongations[start:stop],
    )


class UnflattenKernel:
    """
    E/I estimator kernel for the bootstrap engine.

    The scalar outcome is the unflattened mean inclination at the
    crossing; the curve is FlatteningCurve.as_array().

    Args:
        no_intersection: 'zero' records a set without intersection as a
            degenerate outcome of 0; 'drop' leaves it out of the
            outcome array.
    """

    name = 'ei'
    min_directions = MIN_DIRECTIONS
    yield_every = 10

    def __init__(self, no_intersection: str = 'zero'):
        if no_intersection not in NO_INTERSECTION_POLICIES:
            raise ValidationError(
                f"no_intersection must be one of {NO_INTERSECTION_POLICIES}, "
                f"got {no_intersection!r}"
            )
        self.no_intersection = no_intersection

    def __call__(self, directions: DirectionSet) -> KernelOutcome:
        curve = unflatten_directions(directions)
        if curve.intersects:
            return KernelOutcome(value=curve.inclination, curve=curve.as_array())
        if self.no_intersection == 'drop':
            return KernelOutcome(value=None, curve=curve.as_array())
        return KernelOutcome(value=0.0, curve=curve.as_array(), degenerate=True)

    def __repr__(self) -> str:
        return f"UnflattenKernel(no_intersection={self.no_intersection!r})"
