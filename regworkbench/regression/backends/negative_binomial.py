"""
Negative binomial (NB2, log link) backend.

Delegates to the statsmodels discrete NegativeBinomial model, which
estimates the coefficients and the dispersion α jointly by maximum
likelihood (the analogue of R's MASS::glm.nb, which reports θ = 1/α).
The solver appends α to its parameter vector; it is split off here so
the coefficient vector only holds the intercept and slopes.
"""

import logging

import numpy as np
import statsmodels.api as sm

from regworkbench.core.config import FitOptions
from regworkbench.core.exceptions import NumericalError
from regworkbench.core.result import Result
from regworkbench.core.timing import Timer
from regworkbench.regression.design import RegressionDesign
from regworkbench.regression.families import NegativeBinomial
from regworkbench.regression.solution import ModelParams
from regworkbench.regression.backends._common import (
    assemble_params,
    solver_guard,
    solver_info,
)

logger = logging.getLogger(__name__)


class NegativeBinomialBackend:
    """NB2 regression via statsmodels discrete NegativeBinomial (MLE)."""

    @property
    def name(self) -> str:
        return 'statsmodels_nb2'

    def solve(self, design: RegressionDesign, options: FitOptions) -> Result[ModelParams]:
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        offset = design.offset if design.has_offset else None
        with timer.section('solver'), solver_guard(self.name, warnings_list):
            model = sm.NegativeBinomial(
                design.y, design.X,
                loglike_method='nb2',
                offset=offset,
            )
            raw = model.fit(maxiter=options.max_iter, disp=0)

        p = design.p
        estimates = np.asarray(raw.params, dtype=np.float64)
        alpha = float(estimates[p])
        if not np.isfinite(alpha) or alpha <= 0:
            raise NumericalError(
                f"{self.name}: estimated alpha is not positive ({alpha!r})",
                solver=self.name,
            )

        retvals = getattr(raw, 'mle_retvals', None) or {}
        converged = bool(retvals.get('converged', True))
        n_iter = retvals.get('iterations')

        # The family carries the estimated alpha for residuals and deviance
        fitted_family = NegativeBinomial(alpha=alpha)

        with timer.section('null_deviance'), solver_guard(self.name, warnings_list):
            null_fit = sm.GLM(
                design.y, np.ones((design.n, 1)),
                family=sm.families.NegativeBinomial(alpha=alpha),
                offset=offset,
            ).fit()

        with timer.section('post_process'):
            params = assemble_params(
                design,
                fitted_family,
                estimates[:p],
                std_errors=np.asarray(raw.bse)[:p],
                statistics=np.asarray(raw.tvalues)[:p],
                p_values=np.asarray(raw.pvalues)[:p],
                null_deviance=null_fit.deviance,
                log_likelihood=raw.llf,
                aic=raw.aic,
                bic=raw.bic,
                df_residual=raw.df_resid,
                df_model=raw.df_model,
                converged=converged,
                n_iter=n_iter,
                statistic_name='z',
                alpha=alpha,
                extras={
                    'alpha_std_error': float(np.asarray(raw.bse)[p]),
                    'theta': 1.0 / alpha,
                },
            )

        if not converged:
            warnings_list.append(
                f"Maximum likelihood did not converge in {options.max_iter} "
                f"iterations (alpha={alpha:.6g})"
            )

        timer.stop()
        logger.debug("%s: n=%d p=%d alpha=%.6g in %.4fs", self.name,
                     design.n, p, alpha, timer.result()['total_seconds'])

        return Result(
            params=params,
            info=solver_info('mle', raw, iterations=n_iter, alpha=alpha),
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
