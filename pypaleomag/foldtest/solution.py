"""
Solution wrapper for fold-test results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pypaleomag.directions.design import DirectionSet
from pypaleomag.foldtest.design import FoldtestDesign
from pypaleomag.montecarlo.engine import BootstrapRun
from pypaleomag.montecarlo.solution import BootstrapSolution


@dataclass(repr=False)
class FoldtestSolution(BootstrapSolution):
    """
    User-facing fold-test results.

    The confidence bounds, mean and CDF apply to the unfolding
    percentage of maximum clustering.
    """
    _design: FoldtestDesign

    @classmethod
    def from_run(cls, run: BootstrapRun, design: FoldtestDesign) -> FoldtestSolution:
        """Wrap a finished run; raises like BootstrapRun.result()."""
        return cls(_result=run.result(), _design=design)

    @property
    def design(self) -> FoldtestDesign:
        return self._design

    @property
    def best_unfolding(self) -> int:
        """Unfolding percentage of maximum t1 for the actual data."""
        return int(self.params.actual)

    @property
    def unfolding_grid(self) -> NDArray[np.floating[Any]]:
        """Coarse unfolding percentages of the t1 curves."""
        return self.actual_curve[:, 0]

    @property
    def taus(self) -> NDArray[np.floating[Any]]:
        """t1 of the actual data over unfolding_grid."""
        return self.actual_curve[:, 1]

    @property
    def geographic(self) -> DirectionSet:
        """Directions at 0 % unfolding."""
        return self._design.directions

    @property
    def tectonic(self) -> DirectionSet:
        """Directions at 100 % unfolding."""
        return self._design.directions.tilt_corrected()

    @property
    def interpretation(self) -> str:
        """
        Which unfolding extremes the confidence interval admits.

        'pre-folding' when only 100 % lies inside the bounds,
        'post-folding' when only 0 % does, 'syn-folding' when neither
        does, 'inconclusive' when both do.
        """
        tilted = self.lower <= 0 <= self.upper
        untilted = self.lower <= 100 <= self.upper
        if untilted and not tilted:
            return 'pre-folding'
        if tilted and not untilted:
            return 'post-folding'
        if tilted and untilted:
            return 'inconclusive'
        return 'syn-folding'

    def summary(self) -> str:
        """Fold-test report."""
        design = self._design
        lines = [
            "\nFOLDTEST (EIGENVALUE APPROACH)",
            "",
            f"Directions: {design.directions.n_observations}",
            f"Unfolding range: {design.unfolding_min}% to {design.unfolding_max}%",
            f"Maximum clustering (actual data): {self.best_unfolding}%",
            "",
            f"Bootstraps: {self.success_label}",
            f"Mean bootstrapped unfolding: {self.mean:.1f}%",
            f"95% bounds: ({self.lower:.0f}%, {self.upper:.0f}%)",
            f"Interpretation: {self.interpretation}",
            f"Computation time: {self.elapsed_seconds:.2f} s",
            "",
        ]
        return "\n".join(lines)
