"""
Solver entry points for the fold test.
"""

from __future__ import annotations

import warnings

from numpy.typing import ArrayLike

from pypaleomag.core.protocols import ProgressSink
from pypaleomag.directions.design import DirectionSet
from pypaleomag.foldtest.design import FoldtestDesign
from pypaleomag.foldtest.solution import FoldtestSolution
from pypaleomag.montecarlo.engine import (
    BootstrapEngine,
    BootstrapRun,
    require_finished,
)


def start_foldtest(
    data: ArrayLike | DirectionSet | FoldtestDesign,
    *,
    engine: BootstrapEngine,
    progress: ProgressSink | None = None,
    **options,
) -> BootstrapRun:
    """
    Start a fold-test bootstrap on `engine` without waiting for it.

    Args:
        data: FoldtestDesign, DirectionSet or rows of (dec, inc, strike, dip).
        engine: Engine (and therefore controller and scheduler) to use.
        progress: Optional presentation callbacks.
        **options: Passed to FoldtestDesign.for_foldtest when data is
            not a design.

    Returns:
        The live run. Wrap it with FoldtestSolution.from_run once done.
    """
    if isinstance(data, FoldtestDesign):
        design = data
    else:
        design = FoldtestDesign.for_foldtest(data, **options)
    return engine.start(design.directions, design.kernel(), design.bootstrap, progress)


def foldtest(
    data: ArrayLike | DirectionSet,
    *,
    n_bootstraps: int = 1000,
    seed: int | None = None,
    unfolding_min: int = -50,
    unfolding_max: int = 150,
    n_saved_curves: int = 25,
    engine: BootstrapEngine | None = None,
    progress: ProgressSink | None = None,
) -> FoldtestSolution:
    """
    Bootstrapped fold test (Tauxe & Watson, 1994).

    Parameters
    ----------
    data : array-like or DirectionSet
        Rows of (dec, inc, strike, dip) in geographic coordinates.
    n_bootstraps : int
        Number of resampled iterations. Default 1000.
    seed : int, optional
        Random seed.
    unfolding_min, unfolding_max : int
        Unfolding range in percent. Default -50 to 150.
    n_saved_curves : int
        Bootstrap t1 curves kept for plotting.
    engine : BootstrapEngine, optional
        Engine to run on. Must complete synchronously; defaults to a
        private engine with an InlineScheduler. A run the engine defers
        is abandoned and RunNotFinishedError is raised.
    progress : ProgressSink, optional
        Presentation callbacks.

    Returns
    -------
    FoldtestSolution
    """
    if engine is None:
        engine = BootstrapEngine()

    design = FoldtestDesign.for_foldtest(
        data,
        n_bootstraps=n_bootstraps,
        seed=seed,
        unfolding_min=unfolding_min,
        unfolding_max=unfolding_max,
        n_saved_curves=n_saved_curves,
    )
    if not design.has_bedding and design.directions.n_observations > 0:
        warnings.warn(
            "All bedding is horizontal; every unfolding percentage gives "
            "the same directions and the fold test is uninformative.",
            UserWarning,
            stacklevel=2,
        )

    run = start_foldtest(design, engine=engine, progress=progress)
    return FoldtestSolution.from_run(require_finished(run), design)
