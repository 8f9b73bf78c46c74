"""
Fisher and orientation-matrix statistics for direction sets.

fisher_mean() and eigen_decompose() are the public per-set functions.
mean_inclination() and principal_eigenvalues() are their batched
counterparts operating on Cartesian stacks of shape (..., n, 3); the
kernels call those to evaluate every grid point in one pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pypaleomag.directions._geometry import (
    orientation_matrix,
    to_cartesian,
    to_direction,
)


@dataclass(frozen=True)
class FisherMean:
    """
    Fisher (1953) statistics of a direction set.

    Attributes:
        dec: Mean declination in degrees.
        inc: Mean inclination in degrees.
        n: Number of directions.
        R: Resultant vector length.
        k: Precision parameter estimate (N - 1) / (N - R).
        a95: Semi-angle of the 95% cone of confidence in degrees.
    """
    dec: float
    inc: float
    n: int
    R: float
    k: float
    a95: float


@dataclass(frozen=True)
class Eigenvalues:
    """Normalised orientation-matrix eigenvalues, t1 >= t2 >= t3, sum 1."""
    t1: float
    t2: float
    t3: float

    @property
    def elongation(self) -> float:
        """t2 / t3; infinite when the set is confined to a plane."""
        with np.errstate(divide='ignore', invalid='ignore'):
            return float(np.float64(self.t2) / np.float64(self.t3))


def fisher_mean(dec: ArrayLike, inc: ArrayLike, confidence: float = 0.95) -> FisherMean:
    """
    Fisher mean direction and dispersion.

    Args:
        dec: Declinations in degrees.
        inc: Inclinations in degrees.
        confidence: Confidence level of the a95 cone.

    Returns:
        FisherMean. k and a95 are NaN for fewer than two directions;
        a perfectly clustered set gives k = inf and a95 = 0.
    """
    xyz = to_cartesian(dec, inc).reshape(-1, 3)
    n = xyz.shape[0]
    mean_dec, mean_inc, R = to_direction(xyz.sum(axis=0))
    R = float(R)

    if n < 2:
        return FisherMean(
            dec=float(mean_dec), inc=float(mean_inc), n=n, R=R,
            k=float('nan'), a95=float('nan'),
        )

    p = 1.0 - confidence
    with np.errstate(divide='ignore', invalid='ignore'):
        k = np.float64(n - 1) / np.float64(n - R)
        cos_a95 = 1.0 - ((1.0 / p) ** (1.0 / (n - 1)) - 1.0) * (n - R) / R
    a95 = np.degrees(np.arccos(np.clip(cos_a95, -1.0, 1.0)))

    return FisherMean(
        dec=float(mean_dec),
        inc=float(mean_inc),
        n=n,
        R=R,
        k=float(k),
        a95=float(a95),
    )


def eigen_decompose(dec: ArrayLike, inc: ArrayLike) -> Eigenvalues:
    """
    Eigenvalues of the orientation matrix of a direction set.

    Returns:
        Eigenvalues normalised by their trace, largest first.
    """
    xyz = to_cartesian(dec, inc).reshape(-1, 3)
    tau = principal_eigenvalues(xyz)
    return Eigenvalues(t1=float(tau[0]), t2=float(tau[1]), t3=float(tau[2]))


def principal_eigenvalues(xyz: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Batched normalised eigenvalues, shape (..., 3) ordered t1, t2, t3.

    Args:
        xyz: Unit vectors, shape (..., n, 3).
    """
    T = orientation_matrix(xyz)
    tau = np.linalg.eigvalsh(T)[..., ::-1]
    with np.errstate(divide='ignore', invalid='ignore'):
        return tau / tau.sum(axis=-1, keepdims=True)


def mean_inclination(xyz: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Batched Fisher mean inclination in degrees, shape (...).

    Args:
        xyz: Unit vectors, shape (..., n, 3).
    """
    _, inc, _ = to_direction(np.asarray(xyz).sum(axis=-2))
    return inc
