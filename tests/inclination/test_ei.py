"""
Tests for the ei() solver and EISolution.
"""

import warnings

import numpy as np
import pytest

from pypaleomag.core.exceptions import (
    AlreadyRunningError,
    EmptyInputError,
    InsufficientDirectionsError,
    RunNotFinishedError,
    ValidationError,
)
from pypaleomag.directions import DirectionSet, tilt_correct
from pypaleomag.inclination import EIDesign, EISolution, ei, start_ei
from pypaleomag.montecarlo import BootstrapEngine, ManualScheduler, RunStatus

TRUE_INCLINATION = float(np.degrees(np.arctan(1.0 / 0.6)))


def quiet_ei(*args, **kwargs):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        return ei(*args, **kwargs)


class TestEI:

    def test_basic(self, flattened_ring):
        result = quiet_ei(flattened_ring, n_bootstraps=40, seed=3)
        assert isinstance(result, EISolution)
        assert result.intersects
        assert result.unflattened_inclination == pytest.approx(TRUE_INCLINATION, abs=1.0)
        assert 0.55 <= result.flattening_factor <= 0.65
        assert result.original_inclination == pytest.approx(45.0, abs=2.0)
        assert result.n_iterations == 40
        assert result.lower <= result.upper
        assert result.mean_inclination == result.mean
        assert result.cdf.shape == (result.n_success, 2)
        assert result.coordinates == 'geographic'

    def test_accepts_rows(self, flattened_ring):
        rows = np.column_stack([flattened_ring.dec, flattened_ring.inc])
        result = quiet_ei(rows, n_bootstraps=10, seed=1)
        assert result.intersects

    def test_seed_reproducible(self, flattened_ring):
        a = quiet_ei(flattened_ring, n_bootstraps=30, seed=11)
        b = quiet_ei(flattened_ring, n_bootstraps=30, seed=11)
        np.testing.assert_array_equal(a.outcomes, b.outcomes)
        assert (a.lower, a.upper) == (b.lower, b.upper)

    def test_zero_policy_counts_every_iteration(self, flattened_ring):
        result = quiet_ei(flattened_ring, n_bootstraps=30, seed=5)
        assert result.n_success == 30
        assert result.n_intersections == 30 - result.params.n_degenerate
        assert result.success_label == f"{result.n_intersections} out of 30"

    def test_drop_policy_excludes(self, flattened_ring):
        result = quiet_ei(flattened_ring, n_bootstraps=30, seed=5, no_intersection='drop')
        assert result.params.n_degenerate == 0
        assert result.n_success == result.n_intersections
        assert np.all(result.outcomes > 0.0)

    def test_saved_curves(self, flattened_ring):
        result = quiet_ei(flattened_ring, n_bootstraps=30, seed=2, n_saved_curves=4)
        assert len(result.curves) <= 4
        for curve in result.curves:
            assert curve.shape[1] == 3
            assert np.all(np.diff(curve[:, 0]) < 0)

    def test_tectonic_coordinates(self, flattened_ring):
        n = flattened_ring.n_observations
        strike, dip = np.full(n, 30.0), np.full(n, 25.0)
        dec, inc = tilt_correct(strike, -dip, flattened_ring.dec, flattened_ring.inc)
        tilted = DirectionSet.from_components(dec, inc, strike=strike, dip=dip)

        result = quiet_ei(tilted, n_bootstraps=5, seed=1, coordinates='tectonic')
        assert result.coordinates == 'tectonic'
        assert result.unflattened_inclination == pytest.approx(
            quiet_ei(flattened_ring, n_bootstraps=5, seed=1).unflattened_inclination,
        )

    def test_summary(self, flattened_ring):
        text = quiet_ei(flattened_ring, n_bootstraps=10, seed=1).summary()
        assert "Unflattened inclination" in text
        assert "Flattening factor: 0.6" in text


class TestWarnings:

    def test_no_intersection(self, streaked_set):
        with pytest.warns(RuntimeWarning, match="never reaches"):
            result = ei(streaked_set, n_bootstraps=10, seed=1)
        assert not result.intersects
        assert result.unflattened_inclination == 0.0
        assert result.flattening_factor == 0.0
        assert "Flattening factor: 0.00 (no intersection)" in result.summary()

    def test_few_intersections(self, streaked_set):
        with pytest.warns(RuntimeWarning, match="unreliable"):
            result = ei(streaked_set, n_bootstraps=10, seed=1)
        assert result.n_intersections == 0
        assert result.params.n_degenerate == 10


class TestValidation:

    def test_empty(self):
        with pytest.raises(EmptyInputError):
            ei([], n_bootstraps=10)

    def test_single_direction(self):
        with pytest.raises(InsufficientDirectionsError):
            ei([[10.0, 40.0]], n_bootstraps=10)

    def test_bad_coordinates(self, flattened_ring):
        with pytest.raises(ValidationError):
            ei(flattened_ring, coordinates='stratigraphic')

    def test_bad_policy(self, flattened_ring):
        with pytest.raises(ValidationError):
            EIDesign.for_ei(flattened_ring, no_intersection='ignore')

    def test_bad_iterations(self, flattened_ring):
        with pytest.raises(ValidationError):
            ei(flattened_ring, n_bootstraps=0)


class TestNonBlocking:

    def test_start_and_wrap(self, flattened_ring):
        scheduler = ManualScheduler()
        engine = BootstrapEngine(scheduler=scheduler)
        design = EIDesign.for_ei(flattened_ring, n_bootstraps=25, seed=4)

        run = start_ei(design, engine=engine)
        assert run.status is RunStatus.RUNNING
        assert run.estimator == 'ei'

        with pytest.raises(AlreadyRunningError):
            start_ei(flattened_ring, engine=engine, n_bootstraps=5)

        assert scheduler.run_all() == 3
        solution = EISolution.from_run(run, design)
        assert solution.n_iterations == 25
        assert solution.unflattened_inclination == pytest.approx(TRUE_INCLINATION, abs=1.0)

    def test_matches_blocking_path(self, flattened_ring):
        scheduler = ManualScheduler()
        design = EIDesign.for_ei(flattened_ring, n_bootstraps=12, seed=8)
        run = start_ei(design, engine=BootstrapEngine(scheduler=scheduler))
        scheduler.run_all()

        blocking = quiet_ei(flattened_ring, n_bootstraps=12, seed=8)
        np.testing.assert_array_equal(
            EISolution.from_run(run, design).outcomes, blocking.outcomes,
        )

    def test_blocking_call_on_deferring_engine(self, flattened_ring):
        engine = BootstrapEngine(scheduler=ManualScheduler())
        with pytest.raises(RunNotFinishedError):
            ei(flattened_ring, n_bootstraps=10, engine=engine)
        assert engine.controller.active() == frozenset()

        run = start_ei(flattened_ring, engine=engine, n_bootstraps=10, seed=2)
        assert run.status is RunStatus.RUNNING
