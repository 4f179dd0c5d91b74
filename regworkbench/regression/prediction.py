"""
Prediction from a fitted model.

There is exactly one way to get from coefficients to predictions:

    η = X β + offset          (complete linear predictor)
    μ = g⁻¹(η)                (inverse link, response scale only)

The inverse link is only ever applied to the complete linear predictor.
For the log link, exp(b0) * exp(b1 x) equals exp(b0 + b1 x), but adding
an exponentiated slope to a raw intercept does not; nothing here
transforms a single coefficient on its own.
"""

from __future__ import annotations

from typing import Any, Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray

from regworkbench.core.exceptions import ValidationError
from regworkbench.core.validation import (
    check_1d,
    check_array,
    check_consistent_length,
    check_finite,
)
from regworkbench.regression.coefficients import require_fitted
from regworkbench.regression.solution import FittedModel


Scale = Literal['linear', 'response']
_SCALES = ('linear', 'response')


def predict(
    model: FittedModel,
    new_data: Any = None,
    scale: Scale = 'response',
    *,
    offset: ArrayLike | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Predict from a fitted model.

    Args:
        model: Model returned by fit()
        new_data: Rows to predict for (ObservationTable, DataFrame or
            mapping of arrays). Must contain every predictor used at fit
            time and, if the model has one, the offset/exposure column.
            None predicts for the training rows.
        scale: 'linear' for η, 'response' for g⁻¹(η)
        offset: Explicit offset values on the link scale; overrides the
            offset/exposure column of new_data

    Returns:
        1-D array of predictions, one per row

    Raises:
        UnfitModelError: If model is not a fitted model
        InvalidDataError: If new_data lacks a fit-time column
        ValidationError: If scale is unknown

    Examples:
        >>> predict(model, {'x': [-2.0]}, scale='linear')
        >>> predict(pois, df, scale='response')   # exp(η)
    """
    model = require_fitted(model, 'predict')
    if scale not in _SCALES:
        raise ValidationError(
            f"scale must be one of {_SCALES}, got {scale!r}"
        )

    design = model.design
    if new_data is None:
        X = design.X
        off = design.offset
    else:
        X = design.matrix_for(new_data)
        off = None if offset is not None else design.offset_for(new_data)

    if offset is not None:
        off = check_array(offset, 'offset')
        check_1d(off, 'offset')
        check_finite(off, 'offset')
        check_consistent_length(X, off, names=('new_data', 'offset'))

    eta = _linear_predictor(model, X, off)
    if scale == 'linear':
        return eta
    return model.link.linkinv(eta)


def _linear_predictor(
    model: FittedModel,
    X: NDArray[np.floating[Any]],
    offset: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """η = intercept + Σ coefficient·predictor + offset."""
    return X @ model.coefficients + offset
