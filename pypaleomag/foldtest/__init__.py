"""
pypaleomag fold test.

Bootstrapped eigenvalue fold test (Tauxe & Watson, 1994): the unfolding
percentage that maximises the principal eigenvalue of the orientation
matrix, with a confidence interval from resampled data.

Usage:
    from pypaleomag.foldtest import foldtest

    result = foldtest(rows, n_bootstraps=1000, seed=42)
    print(result.summary())
"""

from pypaleomag.foldtest._unfold import (
    UnfoldingResult,
    UnfoldKernel,
    principal_taus,
    unfold_directions,
)
from pypaleomag.foldtest.design import FoldtestDesign
from pypaleomag.foldtest.solution import FoldtestSolution
from pypaleomag.foldtest.solvers import foldtest, start_foldtest

__all__ = [
    "FoldtestDesign",
    "FoldtestSolution",
    "UnfoldKernel",
    "UnfoldingResult",
    "foldtest",
    "principal_taus",
    "start_foldtest",
    "unfold_directions",
]
