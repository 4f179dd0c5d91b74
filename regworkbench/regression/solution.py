"""
Regression solution types.

Contains the parameter payload computed by the backends, the read-only
coefficient vector, and the user-facing FittedModel wrapper.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from regworkbench.core.result import Result
from regworkbench.regression.design import RegressionDesign
from regworkbench.regression.families import Family, Link


@dataclass(frozen=True)
class ModelParams:
    """
    Parameter payload for a fitted model.

    This is the immutable data computed by backends. Inference columns
    (std_errors, statistics, p_values) come straight from the solver;
    fitted values and residuals are recomputed from the coefficients so
    every backend reports them the same way.
    """
    coefficients: NDArray[np.floating[Any]]
    std_errors: NDArray[np.floating[Any]]
    statistics: NDArray[np.floating[Any]]
    p_values: NDArray[np.floating[Any]]
    linear_predictor: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    residuals_response: NDArray[np.floating[Any]]
    residuals_pearson: NDArray[np.floating[Any]]
    residuals_deviance: NDArray[np.floating[Any]]
    deviance: float
    null_deviance: float
    log_likelihood: float
    aic: float
    bic: float
    dispersion: float
    df_residual: float
    df_model: float
    converged: bool
    n_iter: int | None
    statistic_name: str
    alpha: float | None = None
    extras: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True, eq=False)
class CoefficientVector:
    """
    Ordered, read-only coefficient estimates.

    Entry 0 is the intercept; the rest are slopes in the predictor order
    used at fit time. Offsets are not estimated and never appear here.

    Indexing accepts a position or a term name:
        >>> coefs = extract_coefficients(model)
        >>> coefs[0] == coefs['(Intercept)'] == coefs.intercept
    """
    names: tuple[str, ...]
    values: NDArray[np.floating[Any]]

    def __post_init__(self):
        values = np.array(self.values, dtype=np.float64, copy=True)
        values.setflags(write=False)
        object.__setattr__(self, 'values', values)
        if len(self.names) != len(values):
            raise ValueError(
                f"{len(self.names)} names for {len(values)} coefficients"
            )

    @property
    def intercept(self) -> float:
        return float(self.values[0])

    @property
    def slopes(self) -> dict[str, float]:
        """Slope estimates keyed by predictor name, in order."""
        return {n: float(v) for n, v in zip(self.names[1:], self.values[1:])}

    def __getitem__(self, key: int | str) -> float:
        if isinstance(key, str):
            try:
                key = self.names.index(key)
            except ValueError:
                raise KeyError(
                    f"No coefficient named {key!r}. Available: {list(self.names)}"
                ) from None
        return float(self.values[key])

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self) -> Iterator[float]:
        return (float(v) for v in self.values)

    def as_dict(self) -> dict[str, float]:
        return {n: float(v) for n, v in zip(self.names, self.values)}

    def as_series(self) -> pd.Series:
        return pd.Series(np.array(self.values), index=list(self.names), name='estimate')

    def __repr__(self) -> str:
        body = ", ".join(f"{n}={v:.6g}" for n, v in zip(self.names, self.values))
        return f"CoefficientVector({body})"


@dataclass(frozen=True, eq=False)
class FittedModel:
    """
    User-facing fitted model.

    Created only by fit(); never mutated afterwards. Wraps the backend
    Result and the design it was fitted on, and exposes the quantities the
    tutorials inspect (fitted values, residuals, fit statistics).
    """
    _result: Result[ModelParams]
    _design: RegressionDesign

    # === Model specification ===

    @property
    def family(self) -> Family:
        return self._design.family

    @property
    def link(self) -> Link:
        return self._design.family.link

    @property
    def link_name(self) -> str:
        return self._design.family.link.name

    @property
    def response(self) -> str:
        return self._design.response

    @property
    def predictors(self) -> tuple[str, ...]:
        return self._design.predictors

    @property
    def offset_field(self) -> str | None:
        return self._design.offset_field

    @property
    def exposure_field(self) -> str | None:
        return self._design.exposure_field

    @property
    def design(self) -> RegressionDesign:
        return self._design

    @property
    def n_obs(self) -> int:
        return self._design.n

    # === Estimates ===

    @property
    def coefficient_names(self) -> tuple[str, ...]:
        return self._design.coefficient_names

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def std_errors(self) -> NDArray[np.floating[Any]]:
        return self._result.params.std_errors

    @property
    def statistics(self) -> NDArray[np.floating[Any]]:
        """t values (gaussian) or z values (count families)."""
        return self._result.params.statistics

    @property
    def statistic_name(self) -> str:
        return self._result.params.statistic_name

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.p_values

    @property
    def alpha(self) -> float | None:
        """NB2 dispersion α (negative binomial only)."""
        return self._result.params.alpha

    @property
    def theta(self) -> float | None:
        """θ = 1/α, the size parameter R's glm.nb reports."""
        alpha = self._result.params.alpha
        return None if alpha is None else 1.0 / alpha

    # === Fitted values and residuals ===

    @property
    def linear_predictor(self) -> NDArray[np.floating[Any]]:
        """η = Xβ + offset on the training rows."""
        return self._result.params.linear_predictor

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        """μ = g⁻¹(η) on the training rows."""
        return self._result.params.fitted_values

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        """Response residuals y - μ."""
        return self._result.params.residuals_response

    @property
    def residuals_pearson(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals_pearson

    @property
    def residuals_deviance(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals_deviance

    # === Fit statistics ===

    @property
    def deviance(self) -> float:
        return self._result.params.deviance

    @property
    def null_deviance(self) -> float:
        return self._result.params.null_deviance

    @property
    def log_likelihood(self) -> float:
        return self._result.params.log_likelihood

    @property
    def aic(self) -> float:
        return self._result.params.aic

    @property
    def bic(self) -> float:
        return self._result.params.bic

    @property
    def dispersion(self) -> float:
        """Pearson χ² / residual df; close to 1 for a well-specified Poisson."""
        return self._result.params.dispersion

    @property
    def df_residual(self) -> float:
        return self._result.params.df_residual

    @property
    def df_model(self) -> float:
        return self._result.params.df_model

    @property
    def converged(self) -> bool:
        return self._result.params.converged

    @property
    def n_iter(self) -> int | None:
        return self._result.params.n_iter

    @property
    def extras(self) -> dict[str, float]:
        """Family-specific statistics (r_squared, f_statistic, ...)."""
        return dict(self._result.params.extras)

    # === Metadata ===

    @property
    def info(self) -> dict[str, Any]:
        return dict(self._result.info)

    @property
    def solver_result(self) -> Any:
        """The raw statsmodels results object."""
        return self._result.info.get('solver_result')

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Plain-text coefficient table in the style of R's summary()."""
        offset = self.offset_field or (
            f"log({self.exposure_field})" if self.exposure_field else None
        )
        terms = " + ".join(self.predictors) or "1"
        if offset:
            terms += f" + offset({offset})"

        lines = [
            f"Family: {self.family.name} (link = {self.link_name})",
            f"Formula: {self.response} ~ {terms}",
            "=" * 64,
            f"{'':<16} {'Estimate':>12} {'Std.Error':>12} "
            f"{self.statistic_name + ' value':>10} {'Pr(>|' + self.statistic_name + '|)':>10}",
            "-" * 64,
        ]
        for name, est, se, stat, p in zip(
            self.coefficient_names, self.coefficients,
            self.std_errors, self.statistics, self.p_values,
        ):
            lines.append(
                f"{name:<16} {est:12.6f} {se:12.6f} {stat:10.3f} {_format_p(p):>10}"
            )
        lines.append("-" * 64)

        if self.family.name == 'gaussian':
            lines.append(
                f"Residual standard error: {np.sqrt(self.dispersion):.4f} "
                f"on {self.df_residual:g} degrees of freedom"
            )
            lines.append(
                f"R-squared: {self.extras['r_squared']:.4f}, "
                f"Adjusted R-squared: {self.extras['adj_r_squared']:.4f}"
            )
        else:
            lines.append(
                f"Null deviance: {self.null_deviance:.4f} on "
                f"{self.n_obs - 1} degrees of freedom"
            )
            lines.append(
                f"Residual deviance: {self.deviance:.4f} on "
                f"{self.df_residual:g} degrees of freedom"
            )
            if self.alpha is not None:
                lines.append(f"Theta: {self.theta:.4f} (alpha = {self.alpha:.4f})")
        lines.append(f"AIC: {self.aic:.4f}")
        lines.append(f"Backend: {self.backend_name}")
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"FittedModel(family={self.family.name!r}, "
            f"response={self.response!r}, predictors={list(self.predictors)}, "
            f"n={self.n_obs})"
        )


def _format_p(p: float) -> str:
    if np.isnan(p):
        return "NA"
    if p < 2e-16:
        return "<2e-16"
    return f"{p:.4g}"


