"""
Generic result container for all pypaleomag computations.

The Result class provides a standardized envelope that all estimator
results use. This enables shared tooling for timing, reporting and
reproducibility while allowing each estimator to define its own
parameter structure.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (estimator, seed, iteration counts)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for bootstrap computations.

    Type Parameters:
        P: The estimator-specific parameter payload type

    Attributes:
        params: Estimator-specific parameters (bounds, outcomes, curves)
        info: Structured metadata (estimator name, seed, counts)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the kernel that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=BootstrapParams(...),
        ...     info={'estimator': 'foldtest', 'n_iterations': 1000},
        ...     timing={'total_seconds': 4.2, 'replicates': 4.1},
        ...     backend_name='foldtest'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
