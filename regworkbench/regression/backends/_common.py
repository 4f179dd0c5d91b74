"""
Shared post-processing for the statsmodels backends.

The solvers differ in what they estimate; what happens afterwards does
not. Given the coefficients, every backend recomputes the linear
predictor, fitted values and residuals through the family, so a model's
reported fitted values are exactly what predict() returns on the
training rows.
"""

from __future__ import annotations

import warnings
from contextlib import contextmanager
from typing import Any, Iterator

import numpy as np
from numpy.typing import NDArray

from regworkbench.core.exceptions import NumericalError
from regworkbench.regression.design import RegressionDesign
from regworkbench.regression.families import Family
from regworkbench.regression.solution import ModelParams


def assemble_params(
    design: RegressionDesign,
    family: Family,
    coefficients: NDArray,
    *,
    std_errors: NDArray,
    statistics: NDArray,
    p_values: NDArray,
    null_deviance: float,
    log_likelihood: float,
    aic: float,
    bic: float,
    df_residual: float,
    df_model: float,
    converged: bool,
    n_iter: int | None,
    statistic_name: str,
    alpha: float | None = None,
    extras: dict[str, float] | None = None,
) -> ModelParams:
    """Build ModelParams from solver estimates and the design."""
    coefficients = np.asarray(coefficients, dtype=np.float64)
    eta = design.X @ coefficients + design.offset
    mu = family.link.linkinv(eta)
    y = design.y

    pearson = family.pearson_residuals(y, mu)
    dispersion = (
        float(np.sum(pearson ** 2) / df_residual) if df_residual > 0
        else float('nan')
    )

    return ModelParams(
        coefficients=coefficients,
        std_errors=np.asarray(std_errors, dtype=np.float64),
        statistics=np.asarray(statistics, dtype=np.float64),
        p_values=np.asarray(p_values, dtype=np.float64),
        linear_predictor=eta,
        fitted_values=mu,
        residuals_response=y - mu,
        residuals_pearson=pearson,
        residuals_deviance=family.deviance_residuals(y, mu),
        deviance=family.deviance(y, mu),
        null_deviance=float(null_deviance),
        log_likelihood=float(log_likelihood),
        aic=float(aic),
        bic=float(bic),
        dispersion=dispersion,
        df_residual=float(df_residual),
        df_model=float(df_model),
        converged=bool(converged),
        n_iter=n_iter,
        statistic_name=statistic_name,
        alpha=alpha,
        extras=dict(extras or {}),
    )


@contextmanager
def solver_guard(solver: str, collected: list[str]) -> Iterator[None]:
    """
    Run a statsmodels call, collecting its warnings and translating
    linear-algebra failures into NumericalError.
    """
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter('always')
        try:
            yield
        except np.linalg.LinAlgError as e:
            raise NumericalError(f"{solver}: {e}", solver=solver) from e
    for w in caught:
        message = f"{w.category.__name__}: {w.message}"
        if message not in collected:
            collected.append(message)


def solver_info(method: str, raw: Any, **extra: Any) -> dict[str, Any]:
    info = {'method': method, 'solver_result': raw}
    info.update(extra)
    return info
