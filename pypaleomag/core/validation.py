"""
Input validation utilities for pypaleomag.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pypaleomag.core.exceptions import (
    DimensionError,
    EmptyInputError,
    InsufficientDirectionsError,
    ValidationError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with float64 dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if result.size and not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    return result.astype(np.float64)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_in_range(
    array: NDArray[np.floating[Any]],
    low: float,
    high: float,
    name: str,
) -> None:
    """
    Verify every element lies in the closed interval [low, high].

    Raises:
        ValidationError: If any element falls outside the interval
    """
    bad = (array < low) | (array > high)
    if np.any(bad):
        first = float(array[np.argmax(bad)])
        raise ValidationError(
            f"{name}: {int(bad.sum())} values outside [{low}, {high}] "
            f"(first offending value: {first})"
        )


def check_min_directions(n: int, min_directions: int, name: str) -> None:
    """
    Verify a direction set is large enough for an estimator.

    Args:
        n: Number of directions supplied
        min_directions: Minimum the estimator requires
        name: Estimator or parameter name for error messages

    Raises:
        EmptyInputError: If the set is empty
        InsufficientDirectionsError: If 0 < n < min_directions
    """
    if n == 0:
        raise EmptyInputError(
            f"{name}: direction set is empty, requires at least "
            f"{min_directions} directions",
            n_directions=0,
            min_directions=min_directions,
        )
    if n < min_directions:
        raise InsufficientDirectionsError(
            f"{name}: requires at least {min_directions} directions, got {n}",
            n_directions=n,
            min_directions=min_directions,
        )
