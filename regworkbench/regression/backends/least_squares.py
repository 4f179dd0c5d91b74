"""
Least-squares backend for the gaussian (identity link) family.

Delegates estimation to statsmodels OLS. An offset is handled by
fitting y - offset, which is exactly a coefficient of 1.0 on the offset.
"""

import logging

import numpy as np
import statsmodels.api as sm

from regworkbench.core.config import FitOptions
from regworkbench.core.result import Result
from regworkbench.core.timing import Timer
from regworkbench.regression.design import RegressionDesign
from regworkbench.regression.solution import ModelParams
from regworkbench.regression.backends._common import (
    assemble_params,
    solver_guard,
    solver_info,
)

logger = logging.getLogger(__name__)


class LeastSquaresBackend:
    """OLS via statsmodels, reported the way R's lm() reports it."""

    @property
    def name(self) -> str:
        return 'statsmodels_ols'

    def solve(self, design: RegressionDesign, options: FitOptions) -> Result[ModelParams]:
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        with timer.section('solver'), solver_guard(self.name, warnings_list):
            raw = sm.OLS(design.y - design.offset, design.X).fit()

        n, p = design.n, design.p
        # R's lm counts sigma as a parameter in AIC/BIC; statsmodels does not
        k = p + 1
        aic = -2.0 * raw.llf + 2.0 * k
        bic = -2.0 * raw.llf + np.log(n) * k

        extras = {
            'r_squared': float(raw.rsquared),
            'adj_r_squared': float(raw.rsquared_adj),
            'sigma': float(np.sqrt(raw.mse_resid)),
        }
        if p > 1:
            extras['f_statistic'] = float(raw.fvalue)
            extras['f_p_value'] = float(raw.f_pvalue)
        else:
            extras['f_statistic'] = float('nan')
            extras['f_p_value'] = float('nan')

        with timer.section('post_process'):
            params = assemble_params(
                design,
                design.family,
                raw.params,
                std_errors=raw.bse,
                statistics=raw.tvalues,
                p_values=raw.pvalues,
                null_deviance=raw.centered_tss,
                log_likelihood=raw.llf,
                aic=aic,
                bic=bic,
                df_residual=raw.df_resid,
                df_model=raw.df_model,
                converged=True,
                n_iter=None,
                statistic_name='t',
                extras=extras,
            )

        timer.stop()
        logger.debug("%s: n=%d p=%d in %.4fs", self.name, n, p,
                     timer.result()['total_seconds'])

        return Result(
            params=params,
            info=solver_info('pinv', raw, rank=int(raw.model.rank)),
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
