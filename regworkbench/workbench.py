"""
RegressionWorkbench: one dataset, several named models.

The workbench is a thin convenience over the functional API. It holds
an immutable ObservationTable and a registry of FittedModels by name;
every method delegates to fit(), extract_coefficients(), predict() and
the dispersion tests. Asking for a model that has not been fitted raises
UnfitModelError.

Usage:
    wb = RegressionWorkbench("countries.csv")
    wb.fit("pois", "deaths", ["temperature"], "poisson", exposure="area")
    wb.fit("nb", "deaths", ["temperature"], "negative_binomial", exposure="area")
    wb.test_overdispersion("pois", "nb").p_value
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from regworkbench.core.exceptions import UnfitModelError
from regworkbench.core.table import ObservationTable
from regworkbench.regression import (
    CoefficientVector,
    Family,
    FittedModel,
    OverdispersionSolution,
    augment,
    dispersion_test,
    extract_coefficients,
    fit,
    glance,
    predict,
    test_overdispersion,
    tidy,
)

logger = logging.getLogger(__name__)


class RegressionWorkbench:
    """Orchestrates fitting, extraction and prediction on one dataset."""

    def __init__(self, data: Any):
        self._table = ObservationTable.build(data)
        self._models: dict[str, FittedModel] = {}

    @property
    def table(self) -> ObservationTable:
        return self._table

    @property
    def models(self) -> tuple[str, ...]:
        """Names of fitted models, in the order they were fitted."""
        return tuple(self._models)

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def fit(
        self,
        name: str,
        response: str,
        predictors: str | Sequence[str],
        family: str | Family = 'gaussian',
        **kwargs: Any,
    ) -> FittedModel:
        """Fit a model on the workbench data and register it under name.

        Keyword arguments go to regworkbench.fit (offset, exposure,
        max_iter, tol, on_nonconvergence). Refitting a name replaces the
        previous model only if the new fit succeeds.
        """
        model = fit(self._table, response, predictors, family, **kwargs)
        if name in self._models:
            logger.debug("replacing model %r", name)
        self._models[name] = model
        return model

    def model(self, name: str) -> FittedModel:
        """
        Look up a fitted model.

        Raises:
            UnfitModelError: If nothing has been fitted under name
        """
        try:
            return self._models[name]
        except KeyError:
            raise UnfitModelError(
                f"No model named {name!r} has been fitted. "
                f"Fitted: {list(self._models)}",
                name=name,
            ) from None

    def coefficients(self, name: str) -> CoefficientVector:
        return extract_coefficients(self.model(name))

    def predict(
        self,
        name: str,
        new_data: Any = None,
        scale: str = 'response',
        **kwargs: Any,
    ) -> NDArray[np.floating[Any]]:
        return predict(self.model(name), new_data, scale, **kwargs)

    def test_overdispersion(self, poisson_name: str, nb_name: str) -> OverdispersionSolution:
        return test_overdispersion(self.model(poisson_name), self.model(nb_name))

    def dispersion_test(self, name: str, **kwargs: Any) -> OverdispersionSolution:
        return dispersion_test(self.model(name), **kwargs)

    def tidy(self, name: str, **kwargs: Any) -> pd.DataFrame:
        return tidy(self.model(name), **kwargs)

    def glance(self, name: str) -> pd.DataFrame:
        return glance(self.model(name))

    def augment(self, name: str) -> pd.DataFrame:
        return augment(self.model(name))

    def __repr__(self) -> str:
        return (
            f"RegressionWorkbench(n={self._table.n_observations}, "
            f"models={list(self._models)})"
        )
