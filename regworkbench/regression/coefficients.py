"""
Coefficient extraction.
"""

from __future__ import annotations

from typing import Any

from regworkbench.core.exceptions import UnfitModelError
from regworkbench.regression.solution import CoefficientVector, FittedModel


def require_fitted(model: Any, operation: str) -> FittedModel:
    """
    Return model if it is a FittedModel, else raise UnfitModelError.

    A FittedModel only exists after a successful fit(), so this is the
    single check every post-fit operation needs.
    """
    if not isinstance(model, FittedModel):
        raise UnfitModelError(
            f"{operation} requires a model returned by fit(), "
            f"got {type(model).__name__}"
        )
    return model


def extract_coefficients(model: FittedModel) -> CoefficientVector:
    """
    Extract the estimated coefficients, intercept first.

    The order matches the predictor order given to fit(). Offsets are not
    estimated and are not included; neither is the negative binomial
    dispersion (see FittedModel.alpha).

    Raises:
        UnfitModelError: If model is not a fitted model
    """
    model = require_fitted(model, 'extract_coefficients')
    return CoefficientVector(
        names=model.coefficient_names,
        values=model.coefficients,
    )
