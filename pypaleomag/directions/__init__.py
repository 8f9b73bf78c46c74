"""
Paleomagnetic direction sets and the geometry/statistics primitives
the estimators are built on.

Usage:
    from pypaleomag.directions import DirectionSet, fisher_mean

    directions = DirectionSet.from_array([[352.1, 41.0, 120.0, 35.0], ...])
    mean = fisher_mean(directions.dec, directions.inc)
    tectonic = directions.tilt_corrected()
"""

from pypaleomag.directions.design import DirectionSet, ensure_direction_set
from pypaleomag.directions._geometry import (
    flatten,
    orientation_matrix,
    rotate_to,
    tilt_correct,
    to_cartesian,
    to_direction,
    unflatten,
)
from pypaleomag.directions._statistics import (
    Eigenvalues,
    FisherMean,
    eigen_decompose,
    fisher_mean,
)
from pypaleomag.directions._simulation import fisher_sample

__all__ = [
    "DirectionSet",
    "ensure_direction_set",
    "Eigenvalues",
    "FisherMean",
    "eigen_decompose",
    "fisher_mean",
    "fisher_sample",
    "flatten",
    "orientation_matrix",
    "rotate_to",
    "tilt_correct",
    "to_cartesian",
    "to_direction",
    "unflatten",
]
