"""
Spherical geometry for paleomagnetic directions.

Reference frame (Tauxe, Essentials of Paleomagnetism, eq. 2.13):
x points north, y east, z down, so positive inclination points
below the horizontal. All angles are in degrees at the API boundary.

Every function broadcasts over leading axes. The kernels rely on this to
evaluate a whole grid of trial sets (flattening factors, unfolding
percentages) in one call.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray


def to_cartesian(dec: ArrayLike, inc: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Unit vectors for directions.

    Args:
        dec: Declination(s) in degrees.
        inc: Inclination(s) in degrees, broadcastable against dec.

    Returns:
        Array of shape broadcast(dec, inc).shape + (3,).
    """
    dec_r = np.radians(dec)
    inc_r = np.radians(inc)
    cos_inc = np.cos(inc_r)
    return np.stack(
        np.broadcast_arrays(
            np.cos(dec_r) * cos_inc,
            np.sin(dec_r) * cos_inc,
            np.sin(inc_r),
        ),
        axis=-1,
    )


def to_direction(
    xyz: ArrayLike,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Directions for Cartesian vectors.

    Returns:
        (dec, inc, R) with dec in [0, 360), inc in [-90, 90] and R the
        vector length. A zero vector yields NaN inclination.
    """
    xyz = np.asarray(xyz, dtype=np.float64)
    x, y, z = xyz[..., 0], xyz[..., 1], xyz[..., 2]
    R = np.sqrt(x * x + y * y + z * z)
    dec = np.degrees(np.arctan2(y, x)) % 360.0
    with np.errstate(invalid='ignore', divide='ignore'):
        inc = np.degrees(np.arcsin(np.clip(z / R, -1.0, 1.0)))
    return dec, inc, R


def orientation_matrix(xyz: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Orientation tensor T = sum(x x^T) over the direction axis.

    Args:
        xyz: Array of shape (..., n, 3).

    Returns:
        Array of shape (..., 3, 3).
    """
    xyz = np.asarray(xyz, dtype=np.float64)
    return np.einsum('...ni,...nj->...ij', xyz, xyz)


def tilt_correct(
    strike: ArrayLike,
    dip: ArrayLike,
    dec: ArrayLike,
    inc: ArrayLike,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Restore directions to palaeo-horizontal by rotating about strike.

    Strike follows the right-hand rule, so the bed dips towards
    strike + 90. Passing a fraction of the dip performs partial
    unfolding (the fold test scales dip by percent / 100; negative
    fractions over-rotate in the opposite sense).

    Args:
        strike: Bedding strike(s) in degrees.
        dip: Bedding dip(s) in degrees.
        dec: Declination(s) in degrees.
        inc: Inclination(s) in degrees.

    Returns:
        (dec, inc) after correction, broadcast over all inputs.
    """
    dip_direction = np.radians(np.asarray(strike, dtype=np.float64) + 90.0)
    dip_r = np.radians(dip)
    sa = -np.sin(dip_direction)
    ca = np.cos(dip_direction)
    cdp = np.cos(dip_r)
    sdp = np.sin(dip_r)

    xyz = to_cartesian(dec, inc)
    x, y, z = xyz[..., 0], xyz[..., 1], xyz[..., 2]

    xc = x * (sa * sa + ca * ca * cdp) + y * (ca * sa * (1.0 - cdp)) + z * sdp * ca
    yc = x * ca * sa * (1.0 - cdp) + y * (ca * ca + sa * sa * cdp) - z * sa * sdp
    zc = x * ca * sdp - y * sdp * sa - z * cdp

    dec_c, inc_c, _ = to_direction(np.stack(np.broadcast_arrays(xc, yc, -zc), axis=-1))
    return dec_c, inc_c


def rotate_to(
    dec: ArrayLike,
    inc: ArrayLike,
    mean_dec: float,
    mean_inc: float,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Rotate directions distributed about the vertical (inc = 90) so that
    the vertical maps onto (mean_dec, mean_inc).
    """
    xyz = to_cartesian(dec, inc)
    x, y, z = xyz[..., 0], xyz[..., 1], xyz[..., 2]

    # Tilt the vertical towards north, then swing it to mean_dec.
    theta = np.radians(90.0 - mean_inc)
    x1 = x * np.cos(theta) + z * np.sin(theta)
    z1 = -x * np.sin(theta) + z * np.cos(theta)

    phi = np.radians(mean_dec)
    x2 = x1 * np.cos(phi) - y * np.sin(phi)
    y2 = x1 * np.sin(phi) + y * np.cos(phi)

    dec_r, inc_r, _ = to_direction(np.stack([x2, y2, z1], axis=-1))
    return dec_r, inc_r


def flatten(inc: ArrayLike, f: float) -> NDArray[np.floating[Any]]:
    """
    Apply inclination shallowing, King (1955): tan(I_o) = f tan(I_f).

    Args:
        inc: True (field) inclination(s) in degrees.
        f: Flattening factor in (0, 1].

    Returns:
        Observed (flattened) inclination(s) in degrees.
    """
    return np.degrees(np.arctan(f * np.tan(np.radians(inc))))


def unflatten(inc: ArrayLike, f: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Invert King's relation: tan(I_f) = tan(I_o) / f.

    f broadcasts against inc, so a column of factors against a row of
    inclinations yields one unflattened set per factor.
    """
    return np.degrees(np.arctan(np.tan(np.radians(inc)) / np.asarray(f)))
