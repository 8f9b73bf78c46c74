"""
Solution wrapper shared by the bootstrap estimators.

BootstrapSolution wraps Result[BootstrapParams] and provides the
accessors every estimator exposes. Estimator packages subclass it to add
domain names (unflattened inclination, best unfolding) and their own
summary() text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pypaleomag.core.result import Result
from pypaleomag.montecarlo._common import BootstrapParams


@dataclass
class BootstrapSolution:
    """
    User-facing bootstrap results.

    Exposes the confidence summary (bounds, mean, CDF), the saved curves
    for plotting and the run metadata.
    """
    _result: Result[BootstrapParams]

    @property
    def params(self) -> BootstrapParams:
        return self._result.params

    # --- Confidence summary ---

    @property
    def outcomes(self) -> NDArray[np.floating[Any]]:
        """Sorted bootstrap outcomes."""
        return self._result.params.outcomes

    @property
    def lower(self) -> float:
        """Lower nearest-rank bound (2.5th percentile by default)."""
        return self._result.params.lower

    @property
    def upper(self) -> float:
        """Upper nearest-rank bound (97.5th percentile by default)."""
        return self._result.params.upper

    @property
    def mean(self) -> float:
        """Mean of the bootstrap outcomes."""
        return self._result.params.mean

    @property
    def cdf(self) -> NDArray[np.floating[Any]]:
        """Empirical CDF, shape (n_success, 2)."""
        return self._result.params.cdf

    @property
    def n_success(self) -> int:
        return self._result.params.n_success

    @property
    def n_iterations(self) -> int:
        return self._result.params.n_iterations

    @property
    def success_label(self) -> str:
        """e.g. '4876 out of 5000'."""
        return self._result.params.success_label

    # --- Curves ---

    @property
    def actual_curve(self) -> NDArray[np.floating[Any]]:
        """Auxiliary curve of the unresampled data."""
        return self._result.params.actual_curve

    @property
    def curves(self) -> tuple[NDArray[np.floating[Any]], ...]:
        """Auxiliary curves of the first saved bootstrap iterations."""
        return self._result.params.curves

    # --- Metadata ---

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def elapsed_seconds(self) -> float:
        return self._result.params.elapsed_seconds

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(n_iterations={self.n_iterations}, "
            f"n_success={self.n_success}, "
            f"bounds=({self.lower:.4g}, {self.upper:.4g}))"
        )
