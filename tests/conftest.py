"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pypaleomag.directions import DirectionSet, fisher_sample, tilt_correct


# Strikes spread round the compass so that partial unfolding moves every
# direction differently; dips between 30 and 60 degrees.
_STRIKES = np.arange(0.0, 360.0, 36.0)
_DIPS = np.linspace(30.0, 60.0, _STRIKES.size)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def fisher_directions(rng):
    """Fisher-distributed directions about (10, 45) without bedding."""
    return fisher_sample(40, 30.0, mean_dec=10.0, mean_inc=45.0, rng=rng)


@pytest.fixture
def post_folding_set():
    """Identical geographic directions on differently tilted beds (best unfolding 0 %)."""
    n = _STRIKES.size
    return DirectionSet.from_components(
        np.full(n, 10.0), np.full(n, 40.0), strike=_STRIKES, dip=_DIPS,
    )


@pytest.fixture
def pre_folding_set():
    """Identical tectonic directions re-tilted onto varied beds (best unfolding 100 %)."""
    n = _STRIKES.size
    dec, inc = tilt_correct(_STRIKES, -_DIPS, np.full(n, 10.0), np.full(n, 40.0))
    return DirectionSet.from_components(dec, inc, strike=_STRIKES, dip=_DIPS)
