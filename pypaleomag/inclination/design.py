"""
Design class for the elongation/inclination (E/I) analysis.

EIDesign fixes the direction set to analyse, the coordinate system and
the bootstrap configuration. Immutable, validated at construction.
"""

from __future__ import annotations

from dataclasses import dataclass

from numpy.typing import ArrayLike

from pypaleomag.core.exceptions import ValidationError
from pypaleomag.directions.design import DirectionSet, ensure_direction_set
from pypaleomag.inclination._unflatten import NO_INTERSECTION_POLICIES, UnflattenKernel
from pypaleomag.montecarlo.design import BootstrapDesign

COORDINATE_SYSTEMS = ('geographic', 'tectonic')


@dataclass(frozen=True)
class EIDesign:
    """
    Frozen design for an E/I bootstrap.

    Attributes:
        directions: Directions as analysed (tilt corrected when
            coordinates == 'tectonic').
        source: Directions as supplied.
        coordinates: 'geographic' or 'tectonic'.
        no_intersection: 'zero' or 'drop', see UnflattenKernel.
        bootstrap: Engine configuration.
    """
    directions: DirectionSet
    source: DirectionSet
    coordinates: str
    no_intersection: str
    bootstrap: BootstrapDesign

    @classmethod
    def for_ei(
        cls,
        data: ArrayLike | DirectionSet,
        *,
        n_bootstraps: int = 5000,
        seed: int | None = None,
        coordinates: str = 'geographic',
        no_intersection: str = 'zero',
        n_saved_curves: int = 25,
        yield_every: int = UnflattenKernel.yield_every,
    ) -> EIDesign:
        """
        Create an E/I design with validation.

        Args:
            data: DirectionSet or rows of (dec, inc[, strike, dip]).
            n_bootstraps: Number of resampled iterations.
            seed: Random seed.
            coordinates: 'geographic' (as measured) or 'tectonic'
                (fully tilt corrected before unflattening).
            no_intersection: Policy for sets that never meet TK03.GAD.
            n_saved_curves: Bootstrap curves kept for plotting.
            yield_every: Iterations per batch.

        Raises:
            ValidationError: If inputs are invalid.
        """
        source = ensure_direction_set(data)

        if coordinates not in COORDINATE_SYSTEMS:
            raise ValidationError(
                f"coordinates must be one of {COORDINATE_SYSTEMS}, got {coordinates!r}"
            )
        if no_intersection not in NO_INTERSECTION_POLICIES:
            raise ValidationError(
                f"no_intersection must be one of {NO_INTERSECTION_POLICIES}, "
                f"got {no_intersection!r}"
            )

        directions = source.tilt_corrected() if coordinates == 'tectonic' else source

        return cls(
            directions=directions,
            source=source,
            coordinates=coordinates,
            no_intersection=no_intersection,
            bootstrap=BootstrapDesign.for_bootstrap(
                n_bootstraps,
                seed=seed,
                yield_every=yield_every,
                n_saved_curves=n_saved_curves,
            ),
        )

    def kernel(self) -> UnflattenKernel:
        return UnflattenKernel(self.no_intersection)
