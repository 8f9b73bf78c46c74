"""
Design class for bootstrap runs.

BootstrapDesign encapsulates the run configuration the engine needs
independently of any estimator: how many replicates, the resampling
seed, the yield cadence, how many curves to keep and which percentiles
bound the interval. Immutable, validated at construction.
"""

from __future__ import annotations

from dataclasses import dataclass

from pypaleomag.core.exceptions import ValidationError


@dataclass(frozen=True)
class BootstrapDesign:
    """
    Frozen design for a bootstrap run.

    Attributes:
        n_iterations: Number of resampled iterations (iteration 0 on the
            actual data is additional).
        seed: Random seed for reproducibility.
        yield_every: Iterations per batch before yielding to the host.
        n_saved_curves: Number of successful replicate curves kept.
        lower: Lower percentile bound as a fraction.
        upper: Upper percentile bound as a fraction.
    """
    n_iterations: int
    seed: int | None
    yield_every: int
    n_saved_curves: int
    lower: float
    upper: float

    @classmethod
    def for_bootstrap(
        cls,
        n_iterations: int,
        *,
        seed: int | None = None,
        yield_every: int = 10,
        n_saved_curves: int = 25,
        lower: float = 0.025,
        upper: float = 0.975,
    ) -> BootstrapDesign:
        """
        Create a bootstrap design with validation.

        Raises:
            ValidationError: If any parameter is out of range.
        """
        if int(n_iterations) != n_iterations or n_iterations < 1:
            raise ValidationError(f"n_iterations must be an integer >= 1, got {n_iterations}")

        if int(yield_every) != yield_every or yield_every < 1:
            raise ValidationError(f"yield_every must be an integer >= 1, got {yield_every}")

        if int(n_saved_curves) != n_saved_curves or n_saved_curves < 0:
            raise ValidationError(
                f"n_saved_curves must be an integer >= 0, got {n_saved_curves}"
            )

        if not (0.0 <= lower < upper <= 1.0):
            raise ValidationError(
                f"percentile bounds must satisfy 0 <= lower < upper <= 1, "
                f"got lower={lower}, upper={upper}"
            )

        return cls(
            n_iterations=int(n_iterations),
            seed=seed,
            yield_every=int(yield_every),
            n_saved_curves=int(n_saved_curves),
            lower=float(lower),
            upper=float(upper),
        )
