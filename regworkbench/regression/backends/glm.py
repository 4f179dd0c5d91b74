"""
GLM backend for the Poisson (log link) family.

Delegates to statsmodels GLM, which fits by IRLS (Fisher scoring)
with the same convergence rule R's glm.fit uses. The offset goes to the
solver as-is; exposure has already been logged by the design.
"""

import logging

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


class PoissonGLMBackend:
    """Poisson regression via statsmodels GLM (IRLS)."""

    @property
    def name(self) -> str:
        return 'statsmodels_glm'

    def solve(self, design: RegressionDesign, options: FitOptions) -> Result[ModelParams]:
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        offset = design.offset if design.has_offset else None
        with timer.section('solver'), solver_guard(self.name, warnings_list):
            model = sm.GLM(
                design.y, design.X,
                family=sm.families.Poisson(),
                offset=offset,
            )
            raw = model.fit(maxiter=options.max_iter, tol=options.tol)

        converged = bool(getattr(raw, 'converged', True))
        n_iter = raw.fit_history.get('iteration') if hasattr(raw, 'fit_history') else None

        with timer.section('post_process'):
            params = assemble_params(
                design,
                design.family,
                raw.params,
                std_errors=raw.bse,
                statistics=raw.tvalues,
                p_values=raw.pvalues,
                null_deviance=raw.null_deviance,
                log_likelihood=raw.llf,
                aic=raw.aic,
                bic=raw.bic_llf,
                df_residual=raw.df_resid,
                df_model=raw.df_model,
                converged=converged,
                n_iter=n_iter,
                statistic_name='z',
            )

        if not converged:
            warnings_list.append(
                f"IRLS did not converge in {options.max_iter} iterations "
                f"(deviance={params.deviance:.6f})"
            )

        timer.stop()
        logger.debug("%s: n=%d p=%d iterations=%s in %.4fs", self.name,
                     design.n, design.p, n_iter, timer.result()['total_seconds'])

        return Result(
            params=params,
            info=solver_info('irls', raw, iterations=n_iter),
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
