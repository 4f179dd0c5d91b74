"""
Linear, Poisson and negative binomial regression.

Public API:
    fit(data, response, predictors, family, ...) -> FittedModel
    extract_coefficients(model) -> CoefficientVector
    predict(model, new_data, scale) -> ndarray
    test_overdispersion(poisson_model, nb_model) -> OverdispersionSolution
    dispersion_test(poisson_model) -> OverdispersionSolution
    tidy / glance / augment -> pandas DataFrame

fit() is the only way to obtain a FittedModel. It handles:
    - Input validation (before any solver call)
    - Design construction
    - Backend selection (statsmodels OLS, GLM or NegativeBinomial)
    - Result wrapping

Example:
    >>> from regworkbench.regression import fit, predict
    >>> model = fit(df, 'deaths', ['temperature'], 'poisson', exposure='area')
    >>> predict(model, new_df, scale='response')
"""

from regworkbench.regression.design import RegressionDesign
from regworkbench.regression.families import (
    Family, Gaussian, Poisson, NegativeBinomial, resolve_family,
)
from regworkbench.regression.solution import (
    FittedModel, CoefficientVector, ModelParams,
)
from regworkbench.regression.solvers import fit
from regworkbench.regression.coefficients import extract_coefficients
from regworkbench.regression.prediction import predict
from regworkbench.regression.overdispersion import (
    test_overdispersion, dispersion_test, OverdispersionSolution,
)
from regworkbench.regression.tidy import tidy, glance, augment

__all__ = [
    "fit",
    "extract_coefficients",
    "predict",
    "test_overdispersion",
    "dispersion_test",
    "tidy",
    "glance",
    "augment",
    "RegressionDesign",
    "Family",
    "Gaussian",
    "Poisson",
    "NegativeBinomial",
    "resolve_family",
    "FittedModel",
    "CoefficientVector",
    "ModelParams",
    "OverdispersionSolution",
]
