"""
Input validation utilities for regworkbench.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent. Every data check runs before
the external solver sees the data.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Field names included in all error messages
"""

from collections.abc import Iterable
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from regworkbench.core.exceptions import (
    ValidationError,
    DimensionError,
    InvalidDataError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Rejects inputs that result in object or other non-numeric dtypes
    (mixed types, label columns, strings).

    Raises:
        InvalidDataError: If input cannot be converted to a numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise InvalidDataError(
            f"{name}: cannot convert to array: {e}", field=name
        ) from e

    if result.dtype == object:
        raise InvalidDataError(
            f"{name}: converted to object dtype, indicating mixed types "
            f"or non-numeric data",
            field=name,
        )

    if result.dtype == bool:
        return result.astype(np.float64)

    if not np.issubdtype(result.dtype, np.number):
        raise InvalidDataError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data",
            field=name,
        )

    return result.astype(np.float64, copy=False)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        InvalidDataError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise InvalidDataError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)",
            field=name,
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D "
            f"with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_consistent_length(
    *arrays: NDArray,
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
            f"Number of arrays ({len(arrays)}) must match number of "
            f"names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(
            f"{name}={length}" for name, length in zip(names, lengths)
        )
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_min_samples(n: int, min_samples: int, name: str) -> None:
    """
    Verify there are at least the minimum number of observations.

    Raises:
        ValidationError: If n < min_samples
    """
    if n < min_samples:
        raise ValidationError(
            f"{name}: requires at least {min_samples} observations, got {n}"
        )


def check_column_rank(X: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify the design matrix has full column rank.

    A rank-deficient design indicates perfect multicollinearity; the
    coefficients would not be identifiable.

    Raises:
        ValidationError: If matrix is rank-deficient
    """
    p = X.shape[1]
    rank = int(np.linalg.matrix_rank(X))
    if rank < p:
        raise ValidationError(
            f"{name}: rank-deficient (rank={rank}, expected={p}). "
            f"This indicates perfect multicollinearity."
        )


def check_columns_present(
    available: Iterable[str],
    required: Iterable[str],
    context: str,
) -> None:
    """
    Verify every required column name is available.

    Raises:
        InvalidDataError: Listing every missing column at once
    """
    available = set(available)
    missing = tuple(name for name in required if name not in available)
    if missing:
        raise InvalidDataError(
            f"{context}: missing column(s) {list(missing)}; "
            f"available: {sorted(available)}",
            missing=missing,
        )


def check_count_response(y: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify a response is usable as counts: non-negative integers.

    Raises:
        InvalidDataError: On negative or fractional values
    """
    negative = np.flatnonzero(y < 0)
    if negative.size > 0:
        raise InvalidDataError(
            f"{name}: count response contains {negative.size} negative "
            f"value(s) (first at row {int(negative[0])}: {y[negative[0]]:g})",
            field=name,
        )

    fractional = np.flatnonzero(y != np.floor(y))
    if fractional.size > 0:
        raise InvalidDataError(
            f"{name}: count response contains {fractional.size} non-integer "
            f"value(s) (first at row {int(fractional[0])}: "
            f"{y[fractional[0]]:g})",
            field=name,
        )


def check_positive(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify all values are strictly positive.

    Raises:
        InvalidDataError: If any value is <= 0
    """
    bad = np.flatnonzero(array <= 0)
    if bad.size > 0:
        raise InvalidDataError(
            f"{name}: must be strictly positive, found {bad.size} value(s) "
            f"<= 0 (first at row {int(bad[0])}: {array[bad[0]]:g})",
            field=name,
        )
