"""
Solver entry points for the E/I analysis.

ei() runs a full bootstrap and returns an EISolution; it blocks unless
an engine with a deferring scheduler is injected, in which case use
start_ei() and wrap the finished run with EISolution.from_run().
"""

from __future__ import annotations

import warnings

from numpy.typing import ArrayLike

from pypaleomag.core.protocols import ProgressSink
from pypaleomag.directions.design import DirectionSet
from pypaleomag.inclination.design import EIDesign
from pypaleomag.inclination.solution import EISolution
from pypaleomag.montecarlo.engine import (
    BootstrapEngine,
    BootstrapRun,
    require_finished,
)


def start_ei(
    data: ArrayLike | DirectionSet | EIDesign,
    *,
    engine: BootstrapEngine,
    progress: ProgressSink | None = None,
    **options,
) -> BootstrapRun:
    """
    Start an E/I bootstrap on `engine` without waiting for it.

    Args:
        data: EIDesign, DirectionSet or rows of (dec, inc[, strike, dip]).
        engine: Engine (and therefore controller and scheduler) to use.
        progress: Optional presentation callbacks.
        **options: Passed to EIDesign.for_ei when data is not a design.

    Returns:
        The live run. To wrap it with EISolution.from_run, build the
        EIDesign first and pass it here as `data`.
    """
    design = data if isinstance(data, EIDesign) else EIDesign.for_ei(data, **options)
    run = engine.start(design.directions, design.kernel(), design.bootstrap, progress)
    return run


def ei(
    data: ArrayLike | DirectionSet,
    *,
    n_bootstraps: int = 5000,
    seed: int | None = None,
    coordinates: str = 'geographic',
    no_intersection: str = 'zero',
    n_saved_curves: int = 25,
    engine: BootstrapEngine | None = None,
    progress: ProgressSink | None = None,
) -> EISolution:
    """
    Elongation/inclination correction for inclination shallowing.

    Parameters
    ----------
    data : array-like or DirectionSet
        Directions, rows of (dec, inc) or (dec, inc, strike, dip).
    n_bootstraps : int
        Number of resampled iterations. Default 5000.
    seed : int, optional
        Random seed.
    coordinates : str
        'geographic' or 'tectonic'.
    no_intersection : str
        'zero' (record as 0) or 'drop' (exclude) for resamples that
        never meet the TK03.GAD polynomial.
    n_saved_curves : int
        Bootstrap curves kept for plotting.
    engine : BootstrapEngine, optional
        Engine to run on. Must complete synchronously; defaults to a
        private engine with an InlineScheduler. A run the engine defers
        is abandoned and RunNotFinishedError is raised.
    progress : ProgressSink, optional
        Presentation callbacks.

    Returns
    -------
    EISolution
    """
    if engine is None:
        engine = BootstrapEngine()

    design = EIDesign.for_ei(
        data,
        n_bootstraps=n_bootstraps,
        seed=seed,
        coordinates=coordinates,
        no_intersection=no_intersection,
        n_saved_curves=n_saved_curves,
    )
    run = start_ei(design, engine=engine, progress=progress)
    solution = EISolution.from_run(require_finished(run), design)

    if not solution.intersects:
        warnings.warn(
            "The actual data never reaches the TK03.GAD polynomial for "
            "flattening factors 1.00-0.20; no unflattened inclination.",
            RuntimeWarning,
            stacklevel=2,
        )
    if solution.n_intersections < 0.5 * solution.n_iterations:
        warnings.warn(
            f"Only {solution.success_label} bootstrap iterations intersect "
            f"the TK03.GAD polynomial; the interval is unreliable.",
            RuntimeWarning,
            stacklevel=2,
        )

    return solution
