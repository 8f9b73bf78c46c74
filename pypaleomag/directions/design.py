"""
DirectionSet: the input container for every estimator.

Wraps declination/inclination pairs with optional bedding (strike, dip)
and provenance names. Immutable after construction: resampling and tilt
correction return new sets and never touch the original arrays.
Follows the pypaleomag Design pattern.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pypaleomag.core.capabilities import (
    CAPABILITY_BEDDING,
    CAPABILITY_MATERIALIZED,
    CAPABILITY_PROVENANCE,
    CAPABILITY_REPEATABLE,
)
from pypaleomag.core.exceptions import DimensionError, ValidationError
from pypaleomag.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_in_range,
)
from pypaleomag.directions._geometry import tilt_correct


@dataclass(frozen=True, eq=False)
class DirectionSet:
    """
    Ordered set of paleomagnetic directions.

    Attributes:
        dec: Declinations in degrees, shape (n,).
        inc: Inclinations in degrees, shape (n,).
        strike: Bedding strike in degrees (right-hand rule), shape (n,).
        dip: Bedding dip in degrees, shape (n,).
        names: Optional provenance tag per direction.
        has_bedding: Whether bedding was supplied (otherwise 0/0).

    Construction:
        DirectionSet.from_array([[dec, inc], ...])
        DirectionSet.from_array([[dec, inc, strike, dip], ...])
        DirectionSet.from_components(dec, inc, strike=..., dip=...)
    """
    dec: NDArray[np.floating[Any]]
    inc: NDArray[np.floating[Any]]
    strike: NDArray[np.floating[Any]]
    dip: NDArray[np.floating[Any]]
    names: tuple[str, ...] | None = None
    has_bedding: bool = False

    @classmethod
    def from_array(cls, data: ArrayLike, names: Sequence[str] | None = None) -> DirectionSet:
        """
        Build a DirectionSet from rows of (dec, inc) or (dec, inc, strike, dip).

        Parameters
        ----------
        data : array-like
            Shape (n, 2) or (n, 4). An empty sequence yields an empty set.
        names : sequence of str, optional
            Provenance tag per row.
        """
        arr = check_array(data, "data")
        if arr.size == 0:
            arr = arr.reshape(0, 2)
        check_2d(arr, "data")
        if arr.shape[1] not in (2, 4):
            raise DimensionError(
                f"data: expected shape (n, 2) or (n, 4), got {arr.shape}"
            )

        if arr.shape[1] == 4:
            return cls.from_components(
                arr[:, 0], arr[:, 1], strike=arr[:, 2], dip=arr[:, 3], names=names,
            )
        return cls.from_components(arr[:, 0], arr[:, 1], names=names)

    @classmethod
    def from_components(
        cls,
        dec: ArrayLike,
        inc: ArrayLike,
        *,
        strike: ArrayLike | None = None,
        dip: ArrayLike | None = None,
        names: Sequence[str] | None = None,
    ) -> DirectionSet:
        """
        Build a DirectionSet from separate component arrays.

        strike and dip must be given together; omitting both means
        horizontal bedding.
        """
        if (strike is None) != (dip is None):
            raise ValidationError("strike and dip must be given together")

        dec_arr = np.atleast_1d(check_array(dec, "dec"))
        inc_arr = np.atleast_1d(check_array(inc, "inc"))
        has_bedding = strike is not None
        if has_bedding:
            strike_arr = np.atleast_1d(check_array(strike, "strike"))
            dip_arr = np.atleast_1d(check_array(dip, "dip"))
        else:
            strike_arr = np.zeros_like(dec_arr)
            dip_arr = np.zeros_like(dec_arr)

        return cls._build(
            dec_arr, inc_arr, strike_arr, dip_arr,
            names=names, has_bedding=has_bedding,
        )

    @classmethod
    def concat(cls, *sets: DirectionSet) -> DirectionSet:
        """Pool several direction sets (e.g. sites) into one, in order."""
        if not sets:
            return cls.from_components([], [])

        names = None
        if all(s.names is not None for s in sets):
            names = tuple(name for s in sets for name in s.names)

        return cls._build(
            np.concatenate([s.dec for s in sets]),
            np.concatenate([s.inc for s in sets]),
            np.concatenate([s.strike for s in sets]),
            np.concatenate([s.dip for s in sets]),
            names=names,
            has_bedding=any(s.has_bedding for s in sets),
        )

    @classmethod
    def _build(
        cls,
        dec: NDArray,
        inc: NDArray,
        strike: NDArray,
        dip: NDArray,
        *,
        names: Sequence[str] | None,
        has_bedding: bool,
    ) -> DirectionSet:
        """Internal builder with validation."""
        for arr, label in ((dec, "dec"), (inc, "inc"), (strike, "strike"), (dip, "dip")):
            check_1d(arr, label)
            check_finite(arr, label)
        check_consistent_length(dec, inc, strike, dip, names=("dec", "inc", "strike", "dip"))
        check_in_range(inc, -90.0, 90.0, "inc")
        check_in_range(dip, 0.0, 180.0, "dip")

        name_tuple = None
        if names is not None:
            name_tuple = tuple(str(n) for n in names)
            if len(name_tuple) != dec.shape[0]:
                raise DimensionError(
                    f"Inconsistent lengths: names={len(name_tuple)}, dec={dec.shape[0]}"
                )

        return cls(
            dec=np.array(dec, dtype=np.float64),
            inc=np.array(inc, dtype=np.float64),
            strike=np.array(strike, dtype=np.float64),
            dip=np.array(dip, dtype=np.float64),
            names=name_tuple,
            has_bedding=has_bedding,
        )

    def __post_init__(self):
        for arr in (self.dec, self.inc, self.strike, self.dip):
            arr.setflags(write=False)

    # --- DataSource protocol ---

    @property
    def n_observations(self) -> int:
        return int(self.dec.shape[0])

    @property
    def metadata(self) -> dict[str, Any]:
        return {
            'n': self.n_observations,
            'has_bedding': self.has_bedding,
            'has_names': self.names is not None,
        }

    def supports(self, capability: str) -> bool:
        if capability in (CAPABILITY_MATERIALIZED, CAPABILITY_REPEATABLE):
            return True
        if capability == CAPABILITY_BEDDING:
            return self.has_bedding
        if capability == CAPABILITY_PROVENANCE:
            return self.names is not None
        return False

    def __len__(self) -> int:
        return self.n_observations

    # --- Derived sets ---

    def take(self, indices: ArrayLike) -> DirectionSet:
        """New set built from the given row indices (repeats allowed)."""
        idx = np.asarray(indices, dtype=np.intp)
        names = None
        if self.names is not None:
            names = tuple(self.names[i] for i in idx)
        return DirectionSet(
            dec=self.dec[idx],
            inc=self.inc[idx],
            strike=self.strike[idx],
            dip=self.dip[idx],
            names=names,
            has_bedding=self.has_bedding,
        )

    def resample(self, rng: np.random.Generator) -> DirectionSet:
        """Uniform resample with replacement, same length as this set."""
        n = self.n_observations
        return self.take(rng.choice(n, size=n, replace=True))

    def tilt_corrected(self, fraction: float = 1.0) -> DirectionSet:
        """
        Directions after applying `fraction` of the bedding correction.

        fraction=1.0 gives tectonic coordinates. The returned set keeps
        the bedding only for partial corrections; a full correction
        leaves horizontal bedding.
        """
        dec, inc = tilt_correct(self.strike, self.dip * fraction, self.dec, self.inc)
        if fraction == 1.0:
            strike = np.zeros_like(self.strike)
            dip = np.zeros_like(self.dip)
            has_bedding = False
        else:
            strike = self.strike
            dip = self.dip * (1.0 - fraction)
            has_bedding = self.has_bedding
        return DirectionSet(
            dec=np.asarray(dec, dtype=np.float64),
            inc=np.asarray(inc, dtype=np.float64),
            strike=np.array(strike, dtype=np.float64),
            dip=np.array(dip, dtype=np.float64),
            names=self.names,
            has_bedding=has_bedding,
        )

    def __repr__(self) -> str:
        return (
            f"DirectionSet(n={self.n_observations}, "
            f"has_bedding={self.has_bedding})"
        )


def ensure_direction_set(data: ArrayLike | DirectionSet) -> DirectionSet:
    """Convert raw rows to a DirectionSet if needed."""
    if isinstance(data, DirectionSet):
        return data
    return DirectionSet.from_array(data)
