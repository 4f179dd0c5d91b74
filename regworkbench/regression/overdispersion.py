"""
Overdispersion tests for Poisson count models.

Two tests, both answering "is the variance larger than the mean?":

    test_overdispersion(poisson, nb)  - likelihood ratio, Poisson vs NB2
                                        (R: pscl::odTest)
    dispersion_test(poisson)          - Cameron & Trivedi auxiliary
                                        regression (R: AER::dispersiontest)

The dispersion parameter itself is never estimated here; the likelihood
ratio test reads it off the negative binomial fit.

References:
    Cameron, A. C., & Trivedi, P. K. (1990). Regression-based tests for
        overdispersion in the Poisson model. J. Econometrics 46, 347-364.
    Self, S. G., & Liang, K.-Y. (1987). Asymptotic properties of maximum
        likelihood estimators ... under nonstandard conditions. JASA 82.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

import numpy as np
import statsmodels.api as sm
from scipy import stats

from regworkbench.core.config import DEFAULT_ALPHA_LEVEL
from regworkbench.core.exceptions import ValidationError
from regworkbench.core.result import Result
from regworkbench.core.timing import Timer
from regworkbench.regression.coefficients import require_fitted
from regworkbench.regression.solution import FittedModel


VALID_ALTERNATIVES = ("greater", "two.sided", "less")


@dataclass(frozen=True)
class OverdispersionParams:
    """
    Parameter payload for an overdispersion test.

    Attributes
    ----------
    statistic : float
        Test statistic (likelihood ratio χ² or z).
    statistic_name : str
        "LR" or "z".
    parameter : dict or None
        Distribution parameters, e.g. {"df": 1}.
    p_value : float
    estimate : dict
        Point estimate, e.g. {"alpha": 0.42} or {"dispersion": 1.8}.
    null_value : dict
        Value under H0, e.g. {"alpha": 0} or {"dispersion": 1}.
    alternative : str
        "greater", "two.sided" or "less".
    method : str
    data_name : str
    extras : dict
    """
    statistic: float
    statistic_name: str
    parameter: dict[str, float] | None
    p_value: float
    estimate: dict[str, float]
    null_value: dict[str, float]
    alternative: str
    method: str
    data_name: str
    extras: dict[str, Any] = field(default_factory=dict)


@dataclass
class OverdispersionSolution:
    """
    User-facing overdispersion test result.

    Wraps Result[OverdispersionParams]; summary() prints in the style of
    R's print.htest.
    """
    _result: Result[OverdispersionParams]

    @property
    def statistic(self) -> float:
        return self._result.params.statistic

    @property
    def statistic_name(self) -> str:
        return self._result.params.statistic_name

    @property
    def parameter(self) -> dict[str, float] | None:
        return self._result.params.parameter

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def estimate(self) -> dict[str, float]:
        return self._result.params.estimate

    @property
    def null_value(self) -> dict[str, float]:
        return self._result.params.null_value

    @property
    def alternative(self) -> str:
        return self._result.params.alternative

    @property
    def method(self) -> str:
        return self._result.params.method

    @property
    def extras(self) -> dict[str, Any]:
        return self._result.params.extras

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    def significant(self, level: float = DEFAULT_ALPHA_LEVEL) -> bool:
        """Whether H0 (no overdispersion) is rejected at the given level."""
        if not 0 < level < 1:
            raise ValidationError(f"level must be in (0, 1), got {level!r}")
        return self.p_value < level

    @property
    def overdispersed(self) -> bool:
        """significant() at the default 5% level."""
        return self.significant()

    def summary(self) -> str:
        p = self._result.params
        parts = [f"{p.statistic_name} = {p.statistic:.5g}"]
        if p.parameter:
            parts.extend(f"{k} = {v:.5g}" for k, v in p.parameter.items())
        parts.append(f"p-value = {_format_pvalue(p.p_value)}")

        nv_name, nv_val = next(iter(p.null_value.items()))
        relation = {
            "greater": "greater than",
            "less": "less than",
            "two.sided": "not equal to",
        }[p.alternative]

        lines = [
            f"\t{p.method}",
            "",
            f"data:  {p.data_name}",
            ", ".join(parts),
            f"alternative hypothesis: true {nv_name} is {relation} {nv_val:g}",
            "sample estimates:",
        ]
        for name, value in p.estimate.items():
            lines.append(f"{name:>12}")
            lines.append(f"{value:12.7g}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"OverdispersionSolution({self.statistic_name}={self.statistic:.4g}, "
            f"p_value={self.p_value:.4g})"
        )


def test_overdispersion(
    poisson_model: FittedModel,
    nb_model: FittedModel,
) -> OverdispersionSolution:
    """
    Likelihood ratio test of Poisson against negative binomial.

    H0: α = 0 (Poisson); H1: α > 0 (NB2). Because α = 0 lies on the
    boundary of the parameter space, the null distribution of
    LR = 2 (ℓ_NB - ℓ_Poisson) is a 50:50 mixture of a point mass at 0
    and χ²₁, so p = ½ P(χ²₁ > LR).

    Args:
        poisson_model: fit(..., family='poisson')
        nb_model: fit(..., family='negative_binomial') on the same response,
            predictors and rows

    Raises:
        UnfitModelError: If either argument is not a fitted model
        ValidationError: If the families or data do not match
    """
    poisson_model = require_fitted(poisson_model, 'test_overdispersion')
    nb_model = require_fitted(nb_model, 'test_overdispersion')
    _check_family(poisson_model, 'poisson', 'poisson_model')
    _check_family(nb_model, 'negative_binomial', 'nb_model')

    if poisson_model.response != nb_model.response:
        raise ValidationError(
            f"Models have different responses: "
            f"{poisson_model.response!r} vs {nb_model.response!r}"
        )
    if poisson_model.n_obs != nb_model.n_obs:
        raise ValidationError(
            f"Models were fitted on different numbers of rows: "
            f"{poisson_model.n_obs} vs {nb_model.n_obs}"
        )
    if not np.array_equal(poisson_model.design.y, nb_model.design.y):
        raise ValidationError("Models were fitted on different response values")
    if poisson_model.predictors != nb_model.predictors:
        raise ValidationError(
            f"Models use different predictors: "
            f"{list(poisson_model.predictors)} vs {list(nb_model.predictors)}"
        )

    timer = Timer()
    timer.start()
    lr = 2.0 * (nb_model.log_likelihood - poisson_model.log_likelihood)
    # NB nests Poisson; a tiny negative value is optimizer noise
    lr = max(lr, 0.0)
    p_value = 0.5 * float(stats.chi2.sf(lr, df=1))
    timer.stop()

    params = OverdispersionParams(
        statistic=lr,
        statistic_name="LR",
        parameter={"df": 1.0},
        p_value=p_value,
        estimate={"alpha": nb_model.alpha, "theta": nb_model.theta},
        null_value={"alpha": 0.0},
        alternative="greater",
        method="Likelihood ratio test of over-dispersion",
        data_name=f"{poisson_model.response} (poisson vs negative binomial)",
        extras={
            "loglik_poisson": poisson_model.log_likelihood,
            "loglik_nb": nb_model.log_likelihood,
            "poisson_dispersion": poisson_model.dispersion,
        },
    )
    return OverdispersionSolution(_result=Result(
        params=params,
        info={'method': 'likelihood_ratio', 'boundary_corrected': True},
        timing=timer.result(),
        backend_name='scipy_chi2',
    ))


def dispersion_test(
    poisson_model: FittedModel,
    trafo: Literal[1, 2] | None = None,
    alternative: Literal["greater", "two.sided", "less"] = "greater",
) -> OverdispersionSolution:
    """
    Cameron & Trivedi score-type test for overdispersion.

    With aux_i = ((y_i - μ_i)² - y_i) / μ_i:

    - trafo=None tests Var(y) = c·μ with H0 c = 1:
      z = √n · mean(aux) / sd(aux), estimate c = mean(aux) + 1.
    - trafo=1 (NB1, Var = μ + α μ) and trafo=2 (NB2, Var = μ + α μ²)
      regress aux on trafo(μ)/μ without intercept (statsmodels OLS);
      the t value of α is the statistic, H0 α = 0.

    p-values come from the standard normal distribution.

    Raises:
        UnfitModelError: If poisson_model is not a fitted model
        ValidationError: For a non-Poisson model or invalid arguments
    """
    poisson_model = require_fitted(poisson_model, 'dispersion_test')
    _check_family(poisson_model, 'poisson', 'poisson_model')
    if alternative not in VALID_ALTERNATIVES:
        raise ValidationError(
            f"alternative must be one of {VALID_ALTERNATIVES}, got {alternative!r}"
        )
    if trafo not in (None, 1, 2):
        raise ValidationError(f"trafo must be None, 1 or 2, got {trafo!r}")

    y = poisson_model.design.y
    mu = poisson_model.fitted_values
    aux = ((y - mu) ** 2 - y) / mu
    n = len(aux)

    timer = Timer()
    timer.start()
    info: dict[str, Any] = {'method': 'cameron_trivedi', 'trafo': trafo}
    if trafo is None:
        sd = float(np.std(aux, ddof=1))
        if sd == 0:
            raise ValidationError("Auxiliary values are constant; test undefined")
        statistic = float(np.sqrt(n) * np.mean(aux) / sd)
        estimate = {"dispersion": float(np.mean(aux) + 1.0)}
        null_value = {"dispersion": 1.0}
        backend_name = 'numpy'
    else:
        regressor = mu if trafo == 2 else np.ones_like(mu)
        with timer.section('auxiliary_regression'):
            aux_fit = sm.OLS(aux, regressor.reshape(-1, 1)).fit()
        statistic = float(np.asarray(aux_fit.tvalues)[0])
        estimate = {"alpha": float(np.asarray(aux_fit.params)[0])}
        null_value = {"alpha": 0.0}
        info['solver_result'] = aux_fit
        backend_name = 'statsmodels_ols'

    if alternative == "greater":
        p_value = float(stats.norm.sf(statistic))
    elif alternative == "less":
        p_value = float(stats.norm.cdf(statistic))
    else:
        p_value = float(2.0 * stats.norm.sf(abs(statistic)))
    timer.stop()

    params = OverdispersionParams(
        statistic=statistic,
        statistic_name="z",
        parameter=None,
        p_value=p_value,
        estimate=estimate,
        null_value=null_value,
        alternative=alternative,
        method="Overdispersion test",
        data_name=f"{poisson_model.response} (poisson)",
        extras={"n": n},
    )
    return OverdispersionSolution(_result=Result(
        params=params,
        info=info,
        timing=timer.result(),
        backend_name=backend_name,
    ))


def _check_family(model: FittedModel, expected: str, argument: str) -> None:
    if model.family.name != expected:
        raise ValidationError(
            f"{argument} must be a {expected} model, got {model.family.name}"
        )


def _format_pvalue(p: float) -> str:
    """Format p-value like R's format.pval."""
    if p < 2.2e-16:
        return "< 2.2e-16"
    return f"{p:.4g}"
