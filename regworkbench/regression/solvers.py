"""
Solver dispatch for regression.

This module provides the fit() function (public API) and backend selection.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from regworkbench.core.config import DEFAULT_FIT_OPTIONS, FitOptions, NonConvergencePolicy
from regworkbench.core.exceptions import ConvergenceError, ValidationError
from regworkbench.regression.design import RegressionDesign
from regworkbench.regression.families import (
    Family, Gaussian, NegativeBinomial, Poisson, resolve_family,
)
from regworkbench.regression.solution import FittedModel
from regworkbench.regression.backends import (
    LeastSquaresBackend,
    NegativeBinomialBackend,
    PoissonGLMBackend,
)

logger = logging.getLogger(__name__)


def fit(
    data: Any,
    response: str,
    predictors: str | Sequence[str],
    family: str | Family = 'gaussian',
    *,
    offset: str | None = None,
    exposure: str | None = None,
    max_iter: int | None = None,
    tol: float | None = None,
    on_nonconvergence: NonConvergencePolicy | None = None,
    options: FitOptions | None = None,
) -> FittedModel:
    """
    Fit a regression model by delegating to statsmodels.

    This is the primary public API. All input validation, design
    construction, backend selection and result wrapping happens here.
    Every data check runs before the external solver is called.

    Args:
        data: ObservationTable, pandas DataFrame, mapping of arrays, or a
            path to a delimited file
        response: Response column
        predictors: Predictor column or columns, in coefficient order.
            An empty sequence fits an intercept-only model.
        family: 'gaussian' (identity link), 'poisson' (log link) or
            'negative_binomial' (log link); also accepts 'poisson-log',
            'gaussian-identity', 'negative-binomial-log', 'nb' or a
            Family instance
        offset: Column added to the linear predictor with a fixed
            coefficient of 1.0 (already on the link scale)
        exposure: Strictly positive column whose log is used as the
            offset (log-link families only)
        max_iter: Solver iteration cap (default from FitOptions)
        tol: IRLS convergence tolerance (default from FitOptions)
        on_nonconvergence: 'warn' (default) or 'raise'
        options: Base FitOptions; the keyword arguments above override it

    Returns:
        FittedModel with coefficients, fitted values, residuals and fit
        statistics

    Raises:
        InvalidDataError: Missing/non-numeric columns, negative or
            non-integer counts, non-positive exposure
        ValidationError: Unknown family, conflicting offset/exposure,
            rank-deficient design
        NumericalError: Linear algebra failure inside the solver
        ConvergenceError: Solver did not converge and
            on_nonconvergence='raise'

    Example:
        >>> from regworkbench import fit, predict
        >>> from regworkbench.datasets import simulate_linear
        >>> model = fit(simulate_linear(seed=1), 'y', ['x'])
        >>> predict(model, {'x': [2.0]})
    """
    options = (options or DEFAULT_FIT_OPTIONS).with_overrides(
        max_iter=max_iter, tol=tol, on_nonconvergence=on_nonconvergence,
    )
    if options.on_nonconvergence not in ('warn', 'raise'):
        raise ValidationError(
            f"on_nonconvergence must be 'warn' or 'raise', "
            f"got {options.on_nonconvergence!r}"
        )

    # === Construct Design ===
    # This is the boundary - validate here, trust everywhere else
    family = resolve_family(family)
    design = RegressionDesign.build(
        data, response, predictors, family, offset=offset, exposure=exposure,
    )

    # === Select Backend ===
    backend_impl = _get_backend(design.family)
    logger.debug(
        "fit %s ~ %s (family=%s, n=%d) with %s",
        response, list(design.predictors), family.name, design.n,
        backend_impl.name,
    )

    # === Solve ===
    result = backend_impl.solve(design, options)

    if not result.params.converged and options.on_nonconvergence == 'raise':
        raise ConvergenceError(
            f"{backend_impl.name} did not converge "
            f"after {result.params.n_iter} iterations",
            iterations=result.params.n_iter,
            solver=backend_impl.name,
        )
    for message in result.warnings:
        warnings.warn(message, RuntimeWarning, stacklevel=2)

    # The fitted family carries the estimated NB dispersion
    if result.params.alpha is not None:
        design = replace(design, family=NegativeBinomial(alpha=result.params.alpha))

    # === Wrap and Return ===
    return FittedModel(_result=result, _design=design)


def _get_backend(family: Family):
    """
    Select the backend for a family.

    Raises:
        ValidationError: If no backend handles the family
    """
    if isinstance(family, Gaussian):
        return LeastSquaresBackend()
    if isinstance(family, Poisson):
        return PoissonGLMBackend()
    if isinstance(family, NegativeBinomial):
        return NegativeBinomialBackend()
    raise ValidationError(f"No backend available for family {family!r}")
