"""
Synthetic inclination-shallowing scenario.

A ring of directions elongated N-S about a mean inclination of
arctan(1 / 0.6), with its E-W half-width tuned so that the elongation
sits 1 % above the TK03.GAD curve. Flattening it with f = 0.6 moves the
mean inclination to 45 degrees; unflattening must find f close to 0.6.
"""

import numpy as np
import pytest
from scipy.optimize import brentq

from pypaleomag.directions import (
    DirectionSet,
    eigen_decompose,
    fisher_mean,
    flatten,
    rotate_to,
)
from pypaleomag.inclination import tk03_elongation

TRUE_FACTOR = 0.6
TRUE_INCLINATION = float(np.degrees(np.arctan(1.0 / TRUE_FACTOR)))
HALF_LENGTH = 10.0


def elongated_ring(a, b, mean_inc, n=20):
    """n directions on an ellipse with N-S half-axis a and E-W half-axis b (degrees)."""
    phi = np.linspace(0.0, 2.0 * np.pi, n, endpoint=False)
    dx = a * np.cos(phi)
    dy = b * np.sin(phi)
    dec = np.degrees(np.arctan2(dy, dx)) % 360.0
    inc = 90.0 - np.hypot(dx, dy)
    dec, inc = rotate_to(dec, inc, 0.0, mean_inc)
    return DirectionSet.from_components(dec, inc)


def _excess_elongation(b):
    ring = elongated_ring(HALF_LENGTH, b, TRUE_INCLINATION)
    reference = tk03_elongation(abs(fisher_mean(ring.dec, ring.inc).inc))
    return eigen_decompose(ring.dec, ring.inc).elongation - 1.01 * reference


@pytest.fixture(scope="session")
def true_ring():
    """Unflattened directions, elongation 1 % above TK03.GAD."""
    b = brentq(_excess_elongation, HALF_LENGTH / 3.0, HALF_LENGTH)
    return elongated_ring(HALF_LENGTH, b, TRUE_INCLINATION)


@pytest.fixture(scope="session")
def flattened_ring(true_ring):
    """true_ring shallowed with f = 0.6."""
    return DirectionSet.from_components(
        true_ring.dec, flatten(true_ring.inc, TRUE_FACTOR),
    )


@pytest.fixture(scope="session")
def streaked_set():
    """Strongly N-S streaked set: above TK03.GAD from f = 1.00 on."""
    return elongated_ring(20.0, 2.0, 30.0)
