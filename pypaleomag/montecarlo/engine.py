"""
Chunked, cancellable bootstrap engine.

BootstrapEngine.start() validates, takes the estimator's running flag,
evaluates the kernel on the actual data (iteration 0) and then hands
the first batch of resampled iterations to the scheduler. Each batch
runs `yield_every` iterations and defers the next one, so the host
regains control between batches. The run finalises itself after the
last iteration, or discards itself when a cancellation request is seen
at the next batch boundary.

Iteration numbering: 0 is the actual data, 1..N are resamples. Only
resampled outcomes enter the order statistics.
"""

from __future__ import annotations

import asyncio
from typing import Callable

import numpy as np

from pypaleomag.core.compute.timing import Timer
from pypaleomag.core.exceptions import (
    AlreadyRunningError,
    KernelError,
    RunCancelledError,
    RunNotFinishedError,
)
from pypaleomag.core.protocols import EstimatorKernel, ProgressSink, Scheduler
from pypaleomag.core.result import Result
from pypaleomag.core.validation import check_min_directions
from pypaleomag.directions.design import DirectionSet
from pypaleomag.montecarlo._ci import summarize
from pypaleomag.montecarlo._common import BootstrapParams, KernelOutcome, RunStatus
from pypaleomag.montecarlo.controller import RunController
from pypaleomag.montecarlo.design import BootstrapDesign
from pypaleomag.montecarlo.scheduling import InlineScheduler


class BootstrapRun:
    """
    Handle on one in-progress or finished bootstrap run.

    Created by BootstrapEngine.start(); not constructed directly.
    """

    def __init__(
        self,
        directions: DirectionSet,
        kernel: EstimatorKernel,
        design: BootstrapDesign,
        controller: RunController,
        scheduler: Scheduler,
        progress: ProgressSink | None,
    ):
        self._directions = directions
        self._kernel = kernel
        self._design = design
        self._controller = controller
        self._scheduler = scheduler
        self._progress = progress
        self._rng = np.random.default_rng(design.seed)
        self._timer = Timer()

        self._status = RunStatus.RUNNING
        self._iteration = 0
        self._cancel_requested = False
        self._actual: KernelOutcome | None = None
        self._outcomes: list[float] = []
        self._n_degenerate = 0
        self._curves: list[np.ndarray] = []
        self._result: Result[BootstrapParams] | None = None
        self._error: BaseException | None = None
        self._callbacks: list[Callable[[BootstrapRun], None]] = []

    # --- State ---

    @property
    def estimator(self) -> str:
        return self._kernel.name

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def done(self) -> bool:
        return self._status is not RunStatus.RUNNING

    @property
    def iteration(self) -> int:
        """Index of the last completed iteration (0 = actual data only)."""
        return self._iteration

    @property
    def n_iterations(self) -> int:
        return self._design.n_iterations

    @property
    def n_success(self) -> int:
        """Iterations so far that produced a defined outcome."""
        return len(self._outcomes)

    @property
    def error(self) -> BaseException | None:
        return self._error

    @property
    def design(self) -> BootstrapDesign:
        return self._design

    @property
    def directions(self) -> DirectionSet:
        return self._directions

    def cancel(self) -> None:
        """
        Request cancellation.

        Cooperative: the request is observed at the next batch boundary,
        so up to one batch may still execute. No effect on a finished run.
        """
        if self._status is RunStatus.RUNNING:
            self._cancel_requested = True

    def result(self) -> Result[BootstrapParams]:
        """
        Finished result.

        Raises:
            RunNotFinishedError: If the run is still in progress.
            RunCancelledError: If the run was cancelled.
            KernelError: If a kernel invocation failed.
        """
        if self._status is RunStatus.RUNNING:
            raise RunNotFinishedError(
                f"{self.estimator!r} run is at iteration "
                f"{self._iteration}/{self.n_iterations}"
            )
        if self._status is RunStatus.CANCELLED:
            raise RunCancelledError(f"{self.estimator!r} run was cancelled")
        if self._status is RunStatus.FAILED:
            raise self._error
        return self._result

    def add_done_callback(self, fn: Callable[[BootstrapRun], None]) -> None:
        """Call fn(run) once the run finishes; immediately if it already has."""
        if self.done:
            fn(self)
        else:
            self._callbacks.append(fn)

    async def wait(self) -> Result[BootstrapParams]:
        """Await completion on the running event loop and return result()."""
        if not self.done:
            future = asyncio.get_running_loop().create_future()

            def _resolve(_run: BootstrapRun) -> None:
                if not future.done():
                    future.set_result(None)

            self.add_done_callback(_resolve)
            await future
        return self.result()

    # --- Execution ---

    def _begin(self) -> None:
        """Start timing and evaluate the kernel on the actual data."""
        self._timer.start()
        try:
            with self._timer.section('actual_data'):
                self._actual = self._invoke(self._directions)
        except KernelError as err:
            self._fail(err)
            raise

    def _step(self) -> None:
        """Run one batch of resampled iterations, then defer or finish."""
        if self._status is not RunStatus.RUNNING:
            return
        if self._cancel_requested:
            self._finish_cancelled()
            return

        design = self._design
        try:
            with self._timer.section('replicates'):
                while True:
                    self._iteration += 1
                    self._record(self._invoke(self._directions.resample(self._rng)))
                    if self._progress is not None:
                        self._progress.update(self._iteration, design.n_iterations)
                    if self._iteration >= design.n_iterations:
                        break
                    if self._iteration % design.yield_every == 0:
                        break
        except KernelError as err:
            self._fail(err)
            return
        except Exception as err:
            self._fail(err)
            raise

        if self._iteration >= design.n_iterations:
            self._finish_completed()
        else:
            self._defer_step()

    def _defer_step(self) -> None:
        """Hand the next batch to the scheduler; a refused hand-off fails the run."""
        try:
            self._scheduler.defer(self._step)
        except BaseException as err:
            if not self.done:
                self._fail(err)
            raise

    def _abandon(self) -> None:
        """Discard a run that will not be driven further and free its flag."""
        if not self.done:
            self._finish_cancelled()

    def _invoke(self, directions: DirectionSet) -> KernelOutcome:
        try:
            return self._kernel(directions)
        except Exception as exc:
            raise KernelError(
                f"{self.estimator!r} kernel failed at iteration "
                f"{self._iteration}: {exc}",
                iteration=self._iteration,
                estimator=self.estimator,
            ) from exc

    def _record(self, outcome: KernelOutcome) -> None:
        if outcome.value is None:
            return
        self._outcomes.append(float(outcome.value))
        if outcome.degenerate:
            self._n_degenerate += 1
        elif len(self._curves) < self._design.n_saved_curves:
            self._curves.append(outcome.curve)

    # --- Finalisation ---

    def _finish_completed(self) -> None:
        self._timer.stop()
        timing = self._timer.result()
        design = self._design

        outcomes, lower, upper, mean, cdf = summarize(
            self._outcomes, design.lower, design.upper,
        )
        n_success = outcomes.shape[0]

        warnings_list: list[str] = []
        if self._n_degenerate:
            warnings_list.append(
                f"{self._n_degenerate} of {design.n_iterations} iterations "
                f"produced a degenerate outcome "
                f"({self._n_degenerate / design.n_iterations:.1%})"
            )
        if n_success < design.n_iterations:
            warnings_list.append(
                f"{design.n_iterations - n_success} of {design.n_iterations} "
                f"iterations produced no outcome and were excluded"
            )

        actual = self._actual
        params = BootstrapParams(
            actual=actual.value,
            outcomes=outcomes,
            lower=lower,
            upper=upper,
            mean=mean,
            cdf=cdf,
            n_success=n_success,
            n_degenerate=self._n_degenerate,
            n_iterations=design.n_iterations,
            actual_curve=actual.curve,
            curves=tuple(self._curves),
            elapsed_seconds=timing['total_seconds'],
        )

        self._result = Result(
            params=params,
            info={
                'estimator': self.estimator,
                'n_directions': self._directions.n_observations,
                'n_iterations': design.n_iterations,
                'seed': design.seed,
                'yield_every': design.yield_every,
                'actual_degenerate': actual.degenerate,
            },
            timing=timing,
            backend_name=self.estimator,
            warnings=tuple(warnings_list),
        )
        self._settle(RunStatus.COMPLETED)
        if self._progress is not None:
            self._progress.done(self._result)
        self._notify()

    def _finish_cancelled(self) -> None:
        self._discard()
        self._settle(RunStatus.CANCELLED)
        cancelled = getattr(self._progress, 'cancelled', None)
        if cancelled is not None:
            cancelled()
        self._notify()

    def _fail(self, err: BaseException) -> None:
        self._error = err
        self._discard()
        self._settle(RunStatus.FAILED)
        failed = getattr(self._progress, 'failed', None)
        if failed is not None:
            failed(err)
        self._notify()

    def _discard(self) -> None:
        self._outcomes = []
        self._curves = []
        self._actual = None

    def _settle(self, status: RunStatus) -> None:
        self._status = status
        self._controller.release(self.estimator)

    def _notify(self) -> None:
        callbacks, self._callbacks = self._callbacks, []
        for fn in callbacks:
            fn(self)

    def __repr__(self) -> str:
        return (
            f"BootstrapRun(estimator={self.estimator!r}, "
            f"status={self._status.value!r}, "
            f"iteration={self._iteration}/{self.n_iterations})"
        )


class BootstrapEngine:
    """
    Drives estimator kernels over bootstrap resamples.

    Args:
        controller: Mutual-exclusion registry shared by every engine that
            must not run the same estimator concurrently. A private one
            is created when omitted.
        scheduler: Host task mechanism for deferring batches. Defaults to
            InlineScheduler, which completes the run inside start().
    """

    def __init__(
        self,
        controller: RunController | None = None,
        scheduler: Scheduler | None = None,
    ):
        self.controller = controller if controller is not None else RunController()
        self.scheduler = scheduler if scheduler is not None else InlineScheduler()

    def start(
        self,
        directions: DirectionSet,
        kernel: EstimatorKernel,
        design: BootstrapDesign,
        progress: ProgressSink | None = None,
    ) -> BootstrapRun:
        """
        Start a bootstrap run.

        Args:
            directions: Direction set; read only, never mutated.
            kernel: Estimator kernel, also providing the exclusion key.
            design: Iteration count, seed, cadence and bounds.
            progress: Optional presentation callbacks.

        Returns:
            The live BootstrapRun (already finished with InlineScheduler).

        Raises:
            AlreadyRunningError: A run of this estimator is active.
            EmptyInputError: directions is empty.
            InsufficientDirectionsError: Fewer than kernel.min_directions.
            KernelError: The kernel failed on the actual data, or (with a
                synchronous scheduler) on any resample.
        """
        name = kernel.name
        if self.controller.is_running(name):
            raise AlreadyRunningError(
                f"A {name!r} bootstrap is already running; wait for it "
                f"to finish or cancel it",
                estimator=name,
            )
        check_min_directions(directions.n_observations, kernel.min_directions, name)

        self.controller.acquire(name)
        run = BootstrapRun(
            directions, kernel, design, self.controller, self.scheduler, progress,
        )
        run._begin()
        run._defer_step()

        if run.status is RunStatus.FAILED and isinstance(run.error, KernelError):
            raise run.error
        return run

    def __repr__(self) -> str:
        return f"BootstrapEngine(controller={self.controller!r})"


def run_bootstrap(
    directions: DirectionSet,
    kernel: EstimatorKernel,
    design: BootstrapDesign,
    *,
    engine: BootstrapEngine | None = None,
    progress: ProgressSink | None = None,
) -> Result[BootstrapParams]:
    """
    Blocking convenience: start a run and return its result.

    The engine's scheduler must complete runs synchronously (the default
    InlineScheduler does); otherwise RunNotFinishedError is raised.
    """
    if engine is None:
        engine = BootstrapEngine()
    run = engine.start(directions, kernel, design, progress)
    return require_finished(run).result()


def require_finished(run: BootstrapRun) -> BootstrapRun:
    """
    Return run if it has finished.

    A run still in progress is abandoned, which releases its estimator's
    running flag, and RunNotFinishedError is raised. Blocking entry
    points use this so an engine whose scheduler defers cannot leave an
    unreachable run holding the flag.
    """
    if not run.done:
        iteration = run.iteration
        run._abandon()
        raise RunNotFinishedError(
            f"{run.estimator!r} run deferred after iteration "
            f"{iteration}/{run.n_iterations}; blocking calls need a "
            f"scheduler that completes synchronously (use start_* and "
            f"BootstrapRun.wait() otherwise)"
        )
    return run
