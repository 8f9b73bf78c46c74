"""
pypaleomag Monte Carlo engine.

Runs an estimator kernel over bootstrap resamples of a direction set in
batches, yielding to the host between batches, with at most one live
run per estimator type.

Usage:
    from pypaleomag.montecarlo import (
        BootstrapDesign, BootstrapEngine, RunController, AsyncioScheduler,
    )

    engine = BootstrapEngine(RunController(), AsyncioScheduler())
    run = engine.start(directions, kernel, BootstrapDesign.for_bootstrap(1000))
    result = await run.wait()
"""

from pypaleomag.montecarlo._common import BootstrapParams, KernelOutcome, RunStatus
from pypaleomag.montecarlo._ci import (
    empirical_cdf,
    nearest_rank_bound,
    sort_outcomes,
    summarize,
)
from pypaleomag.montecarlo.controller import RunController
from pypaleomag.montecarlo.design import BootstrapDesign
from pypaleomag.montecarlo.engine import (
    BootstrapEngine,
    BootstrapRun,
    require_finished,
    run_bootstrap,
)
from pypaleomag.montecarlo.scheduling import (
    AsyncioScheduler,
    InlineScheduler,
    ManualScheduler,
)
from pypaleomag.montecarlo.solution import BootstrapSolution

__all__ = [
    "AsyncioScheduler",
    "BootstrapDesign",
    "BootstrapEngine",
    "BootstrapParams",
    "BootstrapRun",
    "BootstrapSolution",
    "InlineScheduler",
    "KernelOutcome",
    "ManualScheduler",
    "RunController",
    "RunStatus",
    "empirical_cdf",
    "nearest_rank_bound",
    "require_finished",
    "run_bootstrap",
    "sort_outcomes",
    "summarize",
]
