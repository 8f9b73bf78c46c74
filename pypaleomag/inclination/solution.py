"""
Solution wrapper for E/I results.

EISolution adds the inclination-shallowing view of a finished run: the
observed mean inclination, the unflattened inclination and flattening
factor of the actual data, and the bootstrap interval on the corrected
inclination.
"""

from __future__ import annotations

from dataclasses import dataclass

from pypaleomag.directions._statistics import fisher_mean
from pypaleomag.montecarlo.engine import BootstrapRun
from pypaleomag.montecarlo.solution import BootstrapSolution
from pypaleomag.inclination.design import EIDesign


@dataclass(repr=False)
class EISolution(BootstrapSolution):
    """
    User-facing E/I results.

    The confidence bounds and mean apply to the unflattened inclination.
    """
    _design: EIDesign

    @classmethod
    def from_run(cls, run: BootstrapRun, design: EIDesign) -> EISolution:
        """Wrap a finished run; raises like BootstrapRun.result()."""
        return cls(_result=run.result(), _design=design)

    @property
    def design(self) -> EIDesign:
        return self._design

    @property
    def coordinates(self) -> str:
        return self._design.coordinates

    @property
    def original_inclination(self) -> float:
        """Absolute Fisher mean inclination of the analysed directions."""
        d = self._design.directions
        return abs(fisher_mean(d.dec, d.inc).inc)

    @property
    def intersects(self) -> bool:
        """Whether the actual data meets the TK03.GAD polynomial."""
        return self.actual_curve.shape[0] > 0

    @property
    def unflattened_inclination(self) -> float:
        """Corrected inclination of the actual data (0 without intersection)."""
        actual = self.params.actual
        return 0.0 if actual is None else actual

    @property
    def mean_inclination(self) -> float:
        """Mean of the bootstrapped unflattened inclinations."""
        return self.mean

    @property
    def flattening_factor(self) -> float:
        """Flattening factor of the actual data, 0 without intersection."""
        if not self.intersects:
            return 0.0
        return float(self.actual_curve[-1, 0])

    @property
    def n_intersections(self) -> int:
        """Bootstrap iterations that met the polynomial."""
        return self.params.n_success - self.params.n_degenerate

    def summary(self) -> str:
        """E/I report."""
        lines = [
            "\nELONGATION/INCLINATION (TK03.GAD)",
            "",
            f"Coordinates: {self.coordinates}",
            f"Directions: {self._design.directions.n_observations}",
            f"Original inclination: {self.original_inclination:.2f}",
            f"Unflattened inclination: {self.unflattened_inclination:.2f}",
            f"Flattening factor: {self.flattening_factor:.2f}"
            f"{'' if self.intersects else ' (no intersection)'}",
            "",
            f"Bootstrap intersections: {self.success_label}",
            f"Mean bootstrapped inclination: {self.mean:.2f}",
            f"95% bounds: ({self.lower:.2f}, {self.upper:.2f})",
            f"Computation time: {self.elapsed_seconds:.2f} s",
            "",
        ]
        return "\n".join(lines)
