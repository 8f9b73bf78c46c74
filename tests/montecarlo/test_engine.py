"""
Tests for the chunked, cancellable bootstrap engine.

Uses small synthetic kernels so that the engine contract (iteration
numbering, batching, cancellation, mutual exclusion, failure handling)
is tested independently of the paleomagnetic estimators.
"""

import asyncio

import numpy as np
import pytest

from pypaleomag.core.exceptions import (
    AlreadyRunningError,
    EmptyInputError,
    InsufficientDirectionsError,
    KernelError,
    RunCancelledError,
    RunNotFinishedError,
)
from pypaleomag.core.protocols import EstimatorKernel, ProgressSink
from pypaleomag.directions import DirectionSet
from pypaleomag.montecarlo import (
    AsyncioScheduler,
    BootstrapDesign,
    BootstrapEngine,
    KernelOutcome,
    ManualScheduler,
    RunController,
    RunStatus,
    require_finished,
    run_bootstrap,
)


# ---------------------------------------------------------------------------
# Kernels and sinks
# ---------------------------------------------------------------------------

class MeanDecKernel:
    """Outcome: mean declination of the set; curve: the sorted declinations."""

    name = 'mean_dec'
    min_directions = 2
    yield_every = 4

    def __init__(self):
        self.calls = 0

    def __call__(self, directions):
        self.calls += 1
        dec = np.sort(directions.dec)
        return KernelOutcome(value=float(dec.mean()), curve=dec[:, np.newaxis])


class FailingKernel(MeanDecKernel):
    """Raises on the call with index `fail_at` (0 = actual data)."""

    name = 'failing'

    def __init__(self, fail_at):
        super().__init__()
        self.fail_at = fail_at

    def __call__(self, directions):
        if self.calls == self.fail_at:
            self.calls += 1
            raise FloatingPointError("kernel exploded")
        return super().__call__(directions)


class FallbackKernel(MeanDecKernel):
    """Every other resample is degenerate, every third has no outcome."""

    name = 'fallback'

    def __call__(self, directions):
        outcome = super().__call__(directions)
        if self.calls > 1 and self.calls % 3 == 0:
            return KernelOutcome(value=None, curve=outcome.curve)
        if self.calls > 1 and self.calls % 2 == 0:
            return KernelOutcome(value=0.0, curve=outcome.curve, degenerate=True)
        return outcome


class RecordingSink:
    """Progress sink that records every callback."""

    def __init__(self):
        self.updates = []
        self.summaries = []
        self.errors = []
        self.n_cancelled = 0

    def update(self, current, total):
        self.updates.append((current, total))

    def done(self, summary):
        self.summaries.append(summary)

    def failed(self, error):
        self.errors.append(error)

    def cancelled(self):
        self.n_cancelled += 1


class RefusingScheduler(ManualScheduler):
    """Accepts the first `accept` callbacks, then refuses with RuntimeError."""

    def __init__(self, accept=0):
        super().__init__()
        self.accept = accept

    def defer(self, callback):
        if self.accept == 0:
            raise RuntimeError("scheduler is closed")
        self.accept -= 1
        super().defer(callback)


@pytest.fixture
def directions():
    return DirectionSet.from_array([[float(d), 45.0] for d in range(0, 100, 10)])


def design(n_iterations=20, yield_every=4, seed=1, n_saved_curves=25):
    return BootstrapDesign.for_bootstrap(
        n_iterations, seed=seed, yield_every=yield_every, n_saved_curves=n_saved_curves,
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestProtocols:

    def test_kernel_and_sink(self):
        assert isinstance(MeanDecKernel(), EstimatorKernel)
        assert isinstance(RecordingSink(), ProgressSink)


class TestInlineRun:
    """Default engine: the run completes inside start()."""

    def test_completes(self, directions):
        kernel = MeanDecKernel()
        run = BootstrapEngine().start(directions, kernel, design())
        assert run.status is RunStatus.COMPLETED
        assert run.iteration == 20
        assert kernel.calls == 21

        params = run.result().params
        assert params.actual == pytest.approx(45.0)
        assert params.n_success == 20
        assert params.n_iterations == 20
        assert params.outcomes.shape == (20,)
        assert np.all(np.diff(params.outcomes) >= 0)
        assert params.cdf.shape == (20, 2)
        assert params.lower <= params.mean <= params.upper
        assert params.success_label == "20 out of 20"

    def test_actual_data_excluded_from_statistics(self, directions):
        result = run_bootstrap(directions, MeanDecKernel(), design(n_iterations=1))
        assert result.params.outcomes.shape == (1,)
        np.testing.assert_array_equal(result.params.actual_curve[:, 0], directions.dec)

    def test_progress_reports_every_iteration(self, directions):
        sink = RecordingSink()
        BootstrapEngine().start(directions, MeanDecKernel(), design(), sink)
        assert sink.updates == [(i, 20) for i in range(1, 21)]
        assert len(sink.summaries) == 1
        assert sink.summaries[0].params.n_success == 20

    def test_seed_reproducible(self, directions):
        a = run_bootstrap(directions, MeanDecKernel(), design(seed=9))
        b = run_bootstrap(directions, MeanDecKernel(), design(seed=9))
        np.testing.assert_array_equal(a.params.outcomes, b.params.outcomes)

    def test_curve_cap(self, directions):
        result = run_bootstrap(directions, MeanDecKernel(), design(n_saved_curves=3))
        assert len(result.params.curves) == 3

    def test_flag_released(self, directions):
        engine = BootstrapEngine()
        engine.start(directions, MeanDecKernel(), design())
        assert not engine.controller.is_running('mean_dec')

    def test_result_metadata(self, directions):
        result = run_bootstrap(directions, MeanDecKernel(), design(seed=5))
        assert result.info['estimator'] == 'mean_dec'
        assert result.info['n_directions'] == 10
        assert result.info['seed'] == 5
        assert result.backend_name == 'mean_dec'
        assert {'total_seconds', 'actual_data', 'replicates'} <= set(result.timing)
        assert result.params.elapsed_seconds == result.timing['total_seconds']


class TestOutcomeAccounting:

    def test_degenerate_and_missing(self, directions):
        result = run_bootstrap(directions, FallbackKernel(), design(n_iterations=12))
        params = result.params
        # calls 2..13 are resamples: 3, 6, 9, 12 have no outcome;
        # 2, 4, 8, 10 are degenerate.
        assert params.n_success == 8
        assert params.n_degenerate == 4
        assert params.success_label == "4 out of 12"
        assert np.count_nonzero(params.outcomes == 0.0) == 4
        assert len(params.curves) == 4
        assert result.has_warning("degenerate")
        assert result.has_warning("excluded")


class TestValidation:

    def test_empty(self):
        engine = BootstrapEngine()
        with pytest.raises(EmptyInputError):
            engine.start(DirectionSet.from_array([]), MeanDecKernel(), design())
        assert not engine.controller.is_running('mean_dec')

    def test_too_few(self):
        engine = BootstrapEngine()
        with pytest.raises(InsufficientDirectionsError):
            engine.start(DirectionSet.from_array([[1.0, 2.0]]), MeanDecKernel(), design())
        assert not engine.controller.is_running('mean_dec')


class TestSteppedRun:
    """ManualScheduler: one batch per run_next()."""

    def test_batches(self, directions):
        scheduler = ManualScheduler()
        run = BootstrapEngine(scheduler=scheduler).start(
            directions, MeanDecKernel(), design(n_iterations=10, yield_every=4),
        )
        assert run.status is RunStatus.RUNNING
        assert run.iteration == 0

        scheduler.run_next()
        assert run.iteration == 4
        scheduler.run_next()
        assert run.iteration == 8
        scheduler.run_next()
        assert run.iteration == 10
        assert run.status is RunStatus.COMPLETED
        assert scheduler.pending == 0

    def test_result_before_finish(self, directions):
        run = BootstrapEngine(scheduler=ManualScheduler()).start(
            directions, MeanDecKernel(), design(),
        )
        with pytest.raises(RunNotFinishedError):
            run.result()

    def test_cancel_at_batch_boundary(self, directions):
        scheduler = ManualScheduler()
        sink = RecordingSink()
        engine = BootstrapEngine(scheduler=scheduler)
        run = engine.start(directions, MeanDecKernel(), design(yield_every=4), sink)

        scheduler.run_next()
        run.cancel()
        assert run.status is RunStatus.RUNNING
        scheduler.run_all()

        assert run.status is RunStatus.CANCELLED
        assert run.iteration == 4
        assert run.n_success == 0
        assert sink.n_cancelled == 1
        assert sink.summaries == []
        assert not engine.controller.is_running('mean_dec')
        with pytest.raises(RunCancelledError):
            run.result()

    def test_cancel_finished_run_is_noop(self, directions):
        run = BootstrapEngine().start(directions, MeanDecKernel(), design())
        run.cancel()
        assert run.status is RunStatus.COMPLETED
        assert run.result().params.n_success == 20

    def test_done_callback(self, directions):
        scheduler = ManualScheduler()
        run = BootstrapEngine(scheduler=scheduler).start(
            directions, MeanDecKernel(), design(),
        )
        seen = []
        run.add_done_callback(lambda r: seen.append(r.status))
        assert seen == []
        scheduler.run_all()
        assert seen == [RunStatus.COMPLETED]
        run.add_done_callback(lambda r: seen.append('late'))
        assert seen == [RunStatus.COMPLETED, 'late']


class TestMutualExclusion:

    def test_second_start_rejected(self, directions):
        scheduler = ManualScheduler()
        engine = BootstrapEngine(scheduler=scheduler)
        first = engine.start(directions, MeanDecKernel(), design())

        with pytest.raises(AlreadyRunningError) as info:
            engine.start(directions, MeanDecKernel(), design())
        assert info.value.estimator == 'mean_dec'

        scheduler.run_all()
        assert first.status is RunStatus.COMPLETED
        assert first.result().params.n_success == 20

    def test_running_checked_before_input(self, directions):
        engine = BootstrapEngine(scheduler=ManualScheduler())
        engine.start(directions, MeanDecKernel(), design())
        with pytest.raises(AlreadyRunningError):
            engine.start(DirectionSet.from_array([]), MeanDecKernel(), design())

    def test_shared_controller(self, directions):
        controller = RunController()
        a = BootstrapEngine(controller, ManualScheduler())
        b = BootstrapEngine(controller, ManualScheduler())
        a.start(directions, MeanDecKernel(), design())
        with pytest.raises(AlreadyRunningError):
            b.start(directions, MeanDecKernel(), design())

    def test_different_estimators_run_together(self, directions):
        scheduler = ManualScheduler()
        engine = BootstrapEngine(scheduler=scheduler)
        first = engine.start(directions, MeanDecKernel(), design())
        second = engine.start(directions, FallbackKernel(), design())
        scheduler.run_all()
        assert first.status is RunStatus.COMPLETED
        assert second.status is RunStatus.COMPLETED

    def test_restart_after_completion(self, directions):
        engine = BootstrapEngine()
        engine.start(directions, MeanDecKernel(), design())
        run = engine.start(directions, MeanDecKernel(), design())
        assert run.status is RunStatus.COMPLETED


class TestKernelFailure:

    def test_failure_on_actual_data(self, directions):
        engine = BootstrapEngine()
        with pytest.raises(KernelError) as info:
            engine.start(directions, FailingKernel(fail_at=0), design())
        assert info.value.iteration == 0
        assert info.value.estimator == 'failing'
        assert isinstance(info.value.__cause__, FloatingPointError)
        assert not engine.controller.is_running('failing')

    def test_failure_mid_run_inline(self, directions):
        engine = BootstrapEngine()
        with pytest.raises(KernelError) as info:
            engine.start(directions, FailingKernel(fail_at=7), design())
        assert info.value.iteration == 7
        assert not engine.controller.is_running('failing')

    def test_failure_mid_run_deferred(self, directions):
        scheduler = ManualScheduler()
        sink = RecordingSink()
        engine = BootstrapEngine(scheduler=scheduler)
        run = engine.start(directions, FailingKernel(fail_at=7), design(), sink)

        scheduler.run_all()
        assert run.status is RunStatus.FAILED
        assert run.n_success == 0
        assert len(sink.errors) == 1
        assert sink.errors[0].iteration == 7
        assert sink.summaries == []
        with pytest.raises(KernelError):
            run.result()
        assert not engine.controller.is_running('failing')


class TestAsyncio:

    def test_wait(self, directions):
        async def main():
            engine = BootstrapEngine(scheduler=AsyncioScheduler())
            run = engine.start(directions, MeanDecKernel(), design(n_iterations=30))
            assert not run.done
            return await run.wait()

        result = asyncio.run(main())
        assert result.params.n_success == 30

    def test_cancel_while_waiting(self, directions):
        async def main():
            engine = BootstrapEngine(scheduler=AsyncioScheduler())
            run = engine.start(directions, MeanDecKernel(), design(n_iterations=1000))
            await asyncio.sleep(0)
            run.cancel()
            with pytest.raises(RunCancelledError):
                await run.wait()
            return run

        run = asyncio.run(main())
        assert run.status is RunStatus.CANCELLED
        assert run.iteration < 1000

    def test_scheduler_reused_across_event_loops(self, directions):
        engine = BootstrapEngine(scheduler=AsyncioScheduler())

        async def main():
            run = engine.start(directions, MeanDecKernel(), design(n_iterations=12))
            return await run.wait()

        first = asyncio.run(main())
        second = asyncio.run(main())
        np.testing.assert_array_equal(first.params.outcomes, second.params.outcomes)
        assert engine.controller.active() == frozenset()


class TestSchedulerFailure:

    def test_first_batch_refused(self, directions):
        sink = RecordingSink()
        engine = BootstrapEngine(scheduler=RefusingScheduler())
        with pytest.raises(RuntimeError, match="closed"):
            engine.start(directions, MeanDecKernel(), design(), sink)
        assert not engine.controller.is_running('mean_dec')
        assert len(sink.errors) == 1

        retry = BootstrapEngine(controller=engine.controller)
        run = retry.start(directions, MeanDecKernel(), design())
        assert run.status is RunStatus.COMPLETED

    def test_later_batch_refused(self, directions):
        scheduler = RefusingScheduler(accept=1)
        engine = BootstrapEngine(scheduler=scheduler)
        run = engine.start(directions, MeanDecKernel(), design())
        assert engine.controller.is_running('mean_dec')

        with pytest.raises(RuntimeError, match="closed"):
            scheduler.run_next()
        assert run.status is RunStatus.FAILED
        assert run.iteration == 4
        assert isinstance(run.error, RuntimeError)
        assert not engine.controller.is_running('mean_dec')


class TestBlockingOnDeferringEngine:

    def test_run_bootstrap_frees_flag(self, directions):
        scheduler = ManualScheduler()
        sink = RecordingSink()
        engine = BootstrapEngine(scheduler=scheduler)
        with pytest.raises(RunNotFinishedError, match="synchronously"):
            run_bootstrap(directions, MeanDecKernel(), design(), engine=engine, progress=sink)
        assert not engine.controller.is_running('mean_dec')
        assert sink.n_cancelled == 1

        # The queued batch is now a no-op.
        scheduler.run_all()
        assert sink.updates == []

    def test_require_finished_passes_finished_run(self, directions):
        run = BootstrapEngine().start(directions, MeanDecKernel(), design())
        assert require_finished(run) is run
