"""
Regression backends.

Every backend delegates estimation to statsmodels and reports the
result through the same ModelParams payload.

Available backends:
    LeastSquaresBackend: gaussian / identity, statsmodels OLS
    PoissonGLMBackend: poisson / log, statsmodels GLM (IRLS)
    NegativeBinomialBackend: negative binomial (NB2) / log, statsmodels MLE
"""

from regworkbench.regression.backends.least_squares import LeastSquaresBackend
from regworkbench.regression.backends.glm import PoissonGLMBackend
from regworkbench.regression.backends.negative_binomial import NegativeBinomialBackend

__all__ = [
    "LeastSquaresBackend",
    "PoissonGLMBackend",
    "NegativeBinomialBackend",
]
