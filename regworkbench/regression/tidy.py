"""
Tidy model summaries, in the manner of R's broom package.

    tidy(model)     - one row per coefficient
    glance(model)   - one row per model
    augment(model)  - one row per observation

All three return pandas DataFrames so they can be filtered, joined and
written out like any other table.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from scipy import stats

from regworkbench.core.exceptions import ValidationError
from regworkbench.regression.coefficients import require_fitted
from regworkbench.regression.families import LogLink
from regworkbench.regression.solution import FittedModel


def tidy(
    model: FittedModel,
    *,
    conf_int: bool = False,
    conf_level: float = 0.95,
    exponentiate: bool = False,
) -> pd.DataFrame:
    """
    Coefficient table: term, estimate, std_error, statistic, p_value.

    Args:
        model: Model returned by fit()
        conf_int: Add Wald interval columns conf_low / conf_high
            (t quantiles for gaussian, normal quantiles otherwise)
        conf_level: Interval coverage
        exponentiate: Report exp(estimate) and exp(interval), i.e. the
            multiplicative effect of a one-unit change (rate ratios).
            Log-link models only. These are effect sizes, not predictions.

    Raises:
        UnfitModelError: If model is not a fitted model
        ValidationError: For conf_level outside (0, 1), or exponentiate
            on an identity-link model
    """
    model = require_fitted(model, 'tidy')
    if not 0 < conf_level < 1:
        raise ValidationError(f"conf_level must be in (0, 1), got {conf_level!r}")
    if exponentiate and not isinstance(model.link, LogLink):
        raise ValidationError(
            f"exponentiate=True needs a log link; {model.family.name} "
            f"uses {model.link_name}"
        )

    estimate = np.array(model.coefficients)
    frame = pd.DataFrame({
        'term': list(model.coefficient_names),
        'estimate': estimate,
        'std_error': model.std_errors,
        'statistic': model.statistics,
        'p_value': model.p_values,
    })

    if conf_int:
        tail = (1.0 + conf_level) / 2.0
        if model.statistic_name == 't':
            q = stats.t.ppf(tail, df=model.df_residual)
        else:
            q = stats.norm.ppf(tail)
        frame['conf_low'] = estimate - q * model.std_errors
        frame['conf_high'] = estimate + q * model.std_errors

    if exponentiate:
        for column in ('estimate', 'conf_low', 'conf_high'):
            if column in frame:
                frame[column] = np.exp(frame[column])

    return frame


def glance(model: FittedModel) -> pd.DataFrame:
    """One-row model summary (fit statistics)."""
    model = require_fitted(model, 'glance')
    extras = model.extras

    if model.family.name == 'gaussian':
        row = {
            'r_squared': extras['r_squared'],
            'adj_r_squared': extras['adj_r_squared'],
            'sigma': extras['sigma'],
            'statistic': extras['f_statistic'],
            'p_value': extras['f_p_value'],
            'df': model.df_model,
        }
    else:
        row = {
            'null_deviance': model.null_deviance,
            'df_null': model.n_obs - 1,
        }
        if model.alpha is not None:
            row['alpha'] = model.alpha
            row['theta'] = model.theta

    row.update({
        'log_lik': model.log_likelihood,
        'aic': model.aic,
        'bic': model.bic,
        'deviance': model.deviance,
        'df_residual': model.df_residual,
        'nobs': model.n_obs,
    })
    return pd.DataFrame([row])


def augment(model: FittedModel) -> pd.DataFrame:
    """
    Training data with per-observation model columns appended.

    Adds .linear (η), .fitted (μ), .resid (y - μ), .pearson and
    .deviance residuals.
    """
    model = require_fitted(model, 'augment')
    source = model.design.source
    if source is not None:
        frame = source.to_dataframe()
    else:
        frame = pd.DataFrame({model.response: model.design.y})

    frame['.linear'] = model.linear_predictor
    frame['.fitted'] = model.fitted_values
    frame['.resid'] = model.residuals
    frame['.pearson'] = model.residuals_pearson
    frame['.deviance'] = model.residuals_deviance
    return frame
