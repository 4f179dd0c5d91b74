"""
regworkbench: fit, interpret and predict from linear and count regressions.

A small teaching library around statsmodels. It reproduces the steps
of an introductory linear model walkthrough and a Poisson / negative
binomial tutorial: fit, extract coefficients, predict on the link and
response scales, and test for overdispersion.

Submodules:
    regression: fit, extract_coefficients, predict, dispersion tests, tidy
    datasets: synthetic tutorial data and prediction grids
    workbench: RegressionWorkbench (named models over one dataset)
"""

import logging

__version__ = "0.1.0"

from regworkbench.core import (
    ObservationTable,
    WorkbenchError,
    ValidationError,
    DimensionError,
    InvalidDataError,
    UnfitModelError,
    NumericalError,
    ConvergenceError,
)
from regworkbench.regression import (
    fit,
    extract_coefficients,
    predict,
    test_overdispersion,
    dispersion_test,
    tidy,
    glance,
    augment,
    FittedModel,
    CoefficientVector,
)
from regworkbench.workbench import RegressionWorkbench
from regworkbench import datasets

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "ObservationTable",
    "RegressionWorkbench",
    "fit",
    "extract_coefficients",
    "predict",
    "test_overdispersion",
    "dispersion_test",
    "tidy",
    "glance",
    "augment",
    "FittedModel",
    "CoefficientVector",
    "datasets",
    "WorkbenchError",
    "ValidationError",
    "DimensionError",
    "InvalidDataError",
    "UnfitModelError",
    "NumericalError",
    "ConvergenceError",
]
