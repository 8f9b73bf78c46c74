"""
Order statistics over bootstrap outcomes.

Bounds use nearest-rank indexing, index = floor(p * n) clamped to
[0, n - 1], so they are always actual outcomes rather than
interpolated values. An empty outcome array reports bounds of 0.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray


def sort_outcomes(outcomes: ArrayLike) -> NDArray[np.floating[Any]]:
    """Ascending stable sort (ties keep iteration order)."""
    return np.sort(np.asarray(outcomes, dtype=np.float64), kind='stable')


def nearest_rank_bound(sorted_outcomes: NDArray[np.floating[Any]], p: float) -> float:
    """
    Nearest-rank percentile of an already sorted array.

    Args:
        sorted_outcomes: Outcomes in ascending order.
        p: Percentile as a fraction in [0, 1].

    Returns:
        sorted_outcomes[floor(p * n)] (clamped), or 0.0 when empty.
    """
    n = sorted_outcomes.shape[0]
    if n == 0:
        return 0.0
    index = min(int(np.floor(p * n)), n - 1)
    return float(sorted_outcomes[index])


def empirical_cdf(sorted_outcomes: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    Empirical CDF points (value_i, i / (n - 1)), shape (n, 2).

    A single outcome is given cumulative probability 1.
    """
    n = sorted_outcomes.shape[0]
    if n == 0:
        return np.empty((0, 2), dtype=np.float64)
    if n == 1:
        return np.array([[sorted_outcomes[0], 1.0]])
    return np.column_stack([sorted_outcomes, np.arange(n) / (n - 1)])


def summarize(
    outcomes: ArrayLike,
    lower: float,
    upper: float,
) -> tuple[NDArray[np.floating[Any]], float, float, float, NDArray[np.floating[Any]]]:
    """
    Sort outcomes and derive the confidence summary.

    Returns:
        (sorted outcomes, lower bound, upper bound, mean, cdf). The mean
        of an empty array is NaN.
    """
    ordered = sort_outcomes(outcomes)
    mean = float(ordered.mean()) if ordered.size else float('nan')
    return (
        ordered,
        nearest_rank_bound(ordered, lower),
        nearest_rank_bound(ordered, upper),
        mean,
        empirical_cdf(ordered),
    )
