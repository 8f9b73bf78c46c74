"""
Design class for the fold test.

FoldtestDesign fixes the direction set with its bedding, the unfolding
range searched by the kernel and the bootstrap configuration.
"""

from __future__ import annotations

from dataclasses import dataclass

from numpy.typing import ArrayLike

from pypaleomag.directions.design import DirectionSet, ensure_direction_set
from pypaleomag.foldtest._unfold import (
    DEFAULT_COARSE_STEP,
    DEFAULT_FINE_HALFWIDTH,
    DEFAULT_UNFOLDING_MAX,
    DEFAULT_UNFOLDING_MIN,
    UnfoldKernel,
    check_unfolding_range,
)
from pypaleomag.montecarlo.design import BootstrapDesign


@dataclass(frozen=True)
class FoldtestDesign:
    """
    Frozen design for a fold-test bootstrap.

    Attributes:
        directions: Directions in geographic coordinates with bedding.
        unfolding_min: Lowest unfolding percentage searched.
        unfolding_max: Highest unfolding percentage searched.
        coarse_step: Step of the coarse pass, in percent.
        fine_halfwidth: Half-width of the 1 % refinement window.
        bootstrap: Engine configuration.
    """
    directions: DirectionSet
    unfolding_min: int
    unfolding_max: int
    coarse_step: int
    fine_halfwidth: int
    bootstrap: BootstrapDesign

    @classmethod
    def for_foldtest(
        cls,
        data: ArrayLike | DirectionSet,
        *,
        n_bootstraps: int = 1000,
        seed: int | None = None,
        unfolding_min: int = DEFAULT_UNFOLDING_MIN,
        unfolding_max: int = DEFAULT_UNFOLDING_MAX,
        coarse_step: int = DEFAULT_COARSE_STEP,
        fine_halfwidth: int = DEFAULT_FINE_HALFWIDTH,
        n_saved_curves: int = 25,
        yield_every: int = UnfoldKernel.yield_every,
    ) -> FoldtestDesign:
        """
        Create a fold-test design with validation.

        Args:
            data: DirectionSet or rows of (dec, inc, strike, dip).
            n_bootstraps: Number of resampled iterations.
            seed: Random seed.
            unfolding_min: Lowest unfolding percentage (integer).
            unfolding_max: Highest unfolding percentage (integer).
            coarse_step: Step of the coarse pass.
            fine_halfwidth: Half-width of the refinement window.
            n_saved_curves: Bootstrap t1 curves kept for plotting.
            yield_every: Iterations per batch.

        Raises:
            ValidationError: If inputs are invalid.
        """
        directions = ensure_direction_set(data)
        check_unfolding_range(unfolding_min, unfolding_max, coarse_step, fine_halfwidth)

        return cls(
            directions=directions,
            unfolding_min=int(unfolding_min),
            unfolding_max=int(unfolding_max),
            coarse_step=int(coarse_step),
            fine_halfwidth=int(fine_halfwidth),
            bootstrap=BootstrapDesign.for_bootstrap(
                n_bootstraps,
                seed=seed,
                yield_every=yield_every,
                n_saved_curves=n_saved_curves,
            ),
        )

    @property
    def has_bedding(self) -> bool:
        """Whether any direction has a non-zero bedding dip."""
        return bool((self.directions.dip != 0).any())

    def kernel(self) -> UnfoldKernel:
        return UnfoldKernel(
            self.unfolding_min,
            self.unfolding_max,
            self.coarse_step,
            self.fine_halfwidth,
        )
