"""
Common data structures for the bootstrap engine.

KernelOutcome is what one kernel invocation hands back to the engine.
BootstrapParams is the finished run's confidence summary, the payload
wrapped by Result[P] and exposed through the estimator Solution classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np
from numpy.typing import NDArray


class RunStatus(Enum):
    """Lifecycle of a BootstrapRun."""
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class KernelOutcome:
    """
    Result of one kernel invocation on one direction set.

    - value: scalar outcome, or None when the kernel has no defined
      result for this set (the iteration is then not counted)
    - curve: auxiliary curve, rows are grid points (may be empty)
    - degenerate: value is defined but only as a documented fallback
      (E/I "no intersection" recorded as 0)
    """
    value: float | None
    curve: NDArray[np.floating[Any]]
    degenerate: bool = False


@dataclass(frozen=True)
class BootstrapParams:
    """
    Confidence summary of a finished bootstrap run.

    - actual: outcome of iteration 0 (unresampled data), excluded
      from every statistic below
    - outcomes: successful bootstrap outcomes, sorted ascending (stable)
    - lower / upper: nearest-rank percentile bounds
    - mean: arithmetic mean of outcomes
    - cdf: empirical CDF, shape (n_success, 2): (value, i / (n - 1))
    - n_success: iterations that produced a defined outcome
    - n_degenerate: of those, how many were degenerate fallbacks
    - n_iterations: bootstrap iterations attempted (excluding iteration 0)
    - actual_curve: auxiliary curve of iteration 0
    - curves: auxiliary curves of the first K successful iterations
    """
    actual: float | None
    outcomes: NDArray[np.floating[Any]]
    lower: float
    upper: float
    mean: float
    cdf: NDArray[np.floating[Any]]
    n_success: int
    n_degenerate: int
    n_iterations: int
    actual_curve: NDArray[np.floating[Any]]
    curves: tuple[NDArray[np.floating[Any]], ...] = field(default_factory=tuple)
    elapsed_seconds: float = 0.0

    @property
    def success_label(self) -> str:
        """Human-readable count of non-degenerate outcomes, e.g. '4876 out of 5000'."""
        return f"{self.n_success - self.n_degenerate} out of {self.n_iterations}"
