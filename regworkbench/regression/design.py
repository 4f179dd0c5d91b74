"""
Regression Design.

Design wraps an ObservationTable and extracts X (design matrix with a
leading intercept column), y (response) and the offset. It knows it's
building a regression; the table doesn't.

All data checks happen here, before any external solver is called.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from regworkbench.core.exceptions import ValidationError
from regworkbench.core.table import ObservationTable
from regworkbench.core.validation import (
    check_column_rank,
    check_columns_present,
    check_count_response,
    check_finite,
    check_min_samples,
    check_positive,
)
from regworkbench.regression.families import Family, IdentityLink


INTERCEPT = '(Intercept)'


@dataclass(frozen=True)
class RegressionDesign:
    """
    Regression design specification.

    Immutable after construction. Column 0 of X is the intercept; the
    remaining columns follow the predictor order given at build time.

    Construction:
        RegressionDesign.build(table, 'y', ['x'], Poisson())
        RegressionDesign.build(table, 'deaths', 'x', Poisson(), exposure='area')
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _offset: NDArray[np.floating[Any]]
    response: str
    predictors: tuple[str, ...]
    family: Family
    offset_field: str | None = None
    exposure_field: str | None = None
    _source: ObservationTable | None = None

    @classmethod
    def build(
        cls,
        data: Any,
        response: str,
        predictors: str | Sequence[str],
        family: Family,
        *,
        offset: str | None = None,
        exposure: str | None = None,
    ) -> RegressionDesign:
        """
        Build and validate a design from tabular data.

        Args:
            data: ObservationTable, DataFrame, mapping of arrays, or path
            response: Response column
            predictors: Predictor column(s); empty for intercept-only
            family: Resolved Family
            offset: Column added to the linear predictor with coefficient 1
            exposure: Positive column whose log is used as the offset

        Raises:
            ValidationError: Conflicting or malformed arguments
            InvalidDataError: Missing, non-numeric or invalid column data
        """
        table = ObservationTable.build(data)
        predictors = _normalize_predictors(predictors)

        if response in predictors:
            raise ValidationError(
                f"Response '{response}' cannot also be a predictor"
            )
        if offset is not None and exposure is not None:
            raise ValidationError(
                "Specify at most one of offset and exposure"
            )
        if exposure is not None and isinstance(family.link, IdentityLink):
            raise ValidationError(
                f"exposure requires a log link; family '{family.name}' "
                f"uses the identity link (pass a precomputed offset instead)"
            )

        required = [response, *predictors]
        extra_field = offset if offset is not None else exposure
        if extra_field is not None:
            required.append(extra_field)
        check_columns_present(table.columns, required, context='fit')

        y = _numeric_column(table, response)
        if family.is_count:
            check_count_response(y, response)

        X = _build_matrix(table, predictors)
        off = _build_offset(table, offset, exposure)

        check_min_samples(table.n_observations, X.shape[1], 'fit')
        check_column_rank(X, 'design matrix')

        return cls(
            _X=X,
            _y=y,
            _offset=off,
            response=response,
            predictors=predictors,
            family=family,
            offset_field=offset,
            exposure_field=exposure,
            _source=table,
        )

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p), intercept column first."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def offset(self) -> NDArray[np.floating[Any]]:
        """Offset on the link scale (n,); zeros when none was given."""
        return self._offset

    @property
    def has_offset(self) -> bool:
        return self.offset_field is not None or self.exposure_field is not None

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._X.shape[0]

    @property
    def p(self) -> int:
        """Number of estimated coefficients (intercept included)."""
        return self._X.shape[1]

    @property
    def coefficient_names(self) -> tuple[str, ...]:
        return (INTERCEPT, *self.predictors)

    @property
    def source(self) -> ObservationTable | None:
        """Original ObservationTable, if available."""
        return self._source

    # === Rebuilding rows for new data ===

    def matrix_for(self, data: Any) -> NDArray[np.floating[Any]]:
        """
        Design matrix for new rows, same column order as the fit.

        Raises:
            InvalidDataError: If a fit-time predictor is missing
        """
        table = ObservationTable.build(data)
        check_columns_present(
            table.columns, self.predictors, context='prediction'
        )
        return _build_matrix(table, self.predictors)

    def offset_for(self, data: Any) -> NDArray[np.floating[Any]]:
        """
        Offset for new rows, computed the same way as at fit time.

        Raises:
            InvalidDataError: If the offset/exposure column is missing
        """
        table = ObservationTable.build(data)
        field = self.offset_field or self.exposure_field
        if field is not None:
            check_columns_present(table.columns, [field], context='prediction')
        return _build_offset(table, self.offset_field, self.exposure_field)


def _normalize_predictors(predictors: str | Sequence[str]) -> tuple[str, ...]:
    if isinstance(predictors, str):
        return (predictors,)
    names = tuple(predictors)
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValidationError(f"Duplicate predictor(s): {duplicates}")
    return names


def _numeric_column(table: ObservationTable, name: str) -> NDArray[np.floating[Any]]:
    arr = table.numeric(name)
    check_finite(arr, name)
    return arr


def _build_matrix(
    table: ObservationTable, predictors: tuple[str, ...]
) -> NDArray[np.floating[Any]]:
    """Stack an intercept column and the predictor columns."""
    columns = [np.ones(table.n_observations, dtype=np.float64)]
    columns.extend(_numeric_column(table, name) for name in predictors)
    return np.column_stack(columns)


def _build_offset(
    table: ObservationTable,
    offset: str | None,
    exposure: str | None,
) -> NDArray[np.floating[Any]]:
    if offset is not None:
        return np.array(_numeric_column(table, offset), dtype=np.float64)
    if exposure is not None:
        values = _numeric_column(table, exposure)
        check_positive(values, exposure)
        return np.log(values)
    return np.zeros(table.n_observations, dtype=np.float64)
