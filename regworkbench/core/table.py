"""
ObservationTable: the "I have data" abstraction.

An ObservationTable is an ordered collection of equal-length named
columns. It doesn't know which column is a response, which is a
predictor and which is an exposure; the regression design asks for
columns by name.

Numeric columns are stored as read-only float64 arrays. Anything else
(country names, labels) is kept as a read-only object array so it can
travel with the data, but it can never enter a model.

Usage:
    from regworkbench import ObservationTable

    table = ObservationTable.from_file("countries.csv")
    table = ObservationTable.from_dataframe(df)
    table = ObservationTable.from_arrays(x=x, y=y)

    table.columns          # ('country', 'x', 'y')
    y = table.numeric('y')
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from regworkbench.core.exceptions import InvalidDataError, ValidationError
from regworkbench.core.validation import check_consistent_length


_SEPARATORS = {
    '.csv': ',',
    '.tsv': '\t',
    '.tab': '\t',
}


@dataclass(frozen=True)
class ObservationTable:
    """
    Immutable, ordered table of named columns.

    Construct via factory classmethods, not directly.
    """
    _columns: dict[str, NDArray]
    _n: int
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Column Access ===

    @property
    def columns(self) -> tuple[str, ...]:
        """Column names in their original order."""
        return tuple(self._columns)

    def keys(self) -> tuple[str, ...]:
        return self.columns

    def __getitem__(self, key: str) -> NDArray:
        """
        Access a named column.

        Raises:
            InvalidDataError: If the column does not exist, listing the
                available columns
        """
        if key not in self._columns:
            raise InvalidDataError(
                f"ObservationTable has no column '{key}'. "
                f"Available: {list(self._columns)}",
                field=key,
                missing=(key,),
            )
        return self._columns[key]

    def __contains__(self, key: object) -> bool:
        return key in self._columns

    def __len__(self) -> int:
        return self._n

    def is_numeric(self, key: str) -> bool:
        """Whether the column holds numeric data."""
        return self[key].dtype != object

    def numeric(self, key: str) -> NDArray[np.floating[Any]]:
        """
        Access a column that must be numeric.

        Raises:
            InvalidDataError: If missing or non-numeric
        """
        arr = self[key]
        if arr.dtype == object:
            raise InvalidDataError(
                f"Column '{key}' is not numeric and cannot be used in a model",
                field=key,
            )
        return arr

    # === Properties ===

    @property
    def n_observations(self) -> int:
        """Number of rows."""
        return self._n

    @property
    def metadata(self) -> dict[str, Any]:
        return self._metadata.copy()

    # === Derivation ===

    def with_column(self, name: str, values: ArrayLike) -> ObservationTable:
        """Return a new table with a column added or replaced."""
        arrays = dict(self._columns)
        arrays[name] = values
        return ObservationTable.from_arrays(**arrays)

    def to_dataframe(self) -> pd.DataFrame:
        """Copy the table into a pandas DataFrame (column order kept)."""
        return pd.DataFrame({k: np.array(v) for k, v in self._columns.items()})

    def __repr__(self) -> str:
        return f"ObservationTable(n={self._n}, columns={list(self._columns)})"

    # === Factory Methods ===

    @classmethod
    def from_arrays(cls, **named_arrays: ArrayLike) -> ObservationTable:
        """Construct from named 1-D arrays of equal length."""
        storage: dict[str, NDArray] = {}
        for name, values in named_arrays.items():
            storage[name] = _freeze(_as_column(values, name))

        if storage:
            check_consistent_length(
                *storage.values(), names=tuple(storage.keys())
            )
        n_obs = len(next(iter(storage.values()))) if storage else 0

        return cls(
            _columns=storage,
            _n=n_obs,
            _metadata={'n_observations': n_obs, 'source': 'arrays'},
        )

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        *,
        source_path: str | None = None,
    ) -> ObservationTable:
        """Construct from a pandas DataFrame (index is discarded)."""
        storage: dict[str, NDArray] = {}
        for col in df.columns:
            series = df[col]
            if pd.api.types.is_bool_dtype(series) or pd.api.types.is_numeric_dtype(series):
                arr = series.to_numpy(dtype=np.float64, na_value=np.nan)
            else:
                arr = series.to_numpy(dtype=object)
            storage[str(col)] = _freeze(arr)

        metadata = {
            'n_observations': len(df),
            'source': 'dataframe',
        }
        if source_path:
            metadata['source'] = 'file'
            metadata['source_path'] = source_path

        return cls(_columns=storage, _n=len(df), _metadata=metadata)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> ObservationTable:
        """Construct from an iterable of row mappings."""
        return cls.from_dataframe(pd.DataFrame.from_records(list(records)))

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        *,
        sep: str | None = None,
        columns: list[str] | None = None,
    ) -> ObservationTable:
        """
        Construct from a delimited text file with a header row.

        The separator is inferred from the suffix (.csv, .tsv, .tab)
        unless given explicitly.

        Raises:
            FileNotFoundError: If the file does not exist
            ValidationError: If the format cannot be inferred
            InvalidDataError: If the file has no header or no data rows
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Data file not found: {path}")

        if sep is None:
            sep = _SEPARATORS.get(path.suffix.lower())
            if sep is None:
                raise ValidationError(
                    f"Unknown file format: {path.suffix!r}. "
                    f"Pass sep= for delimited files with other suffixes."
                )

        try:
            df = pd.read_csv(path, sep=sep, usecols=columns)
        except pd.errors.EmptyDataError as e:
            raise InvalidDataError(f"{path.name}: file is empty") from e

        if len(df) == 0:
            raise InvalidDataError(f"{path.name}: header row but no data rows")

        return cls.from_dataframe(df, source_path=str(path))

    @classmethod
    def build(cls, data: Any) -> ObservationTable:
        """
        Convenience factory that dispatches on the input type.

        Examples:
            ObservationTable.build(table)             # passthrough
            ObservationTable.build(df)                # from_dataframe
            ObservationTable.build("data.csv")        # from_file
            ObservationTable.build({'x': x, 'y': y})  # from_arrays
        """
        if isinstance(data, ObservationTable):
            return data
        if isinstance(data, pd.DataFrame):
            return cls.from_dataframe(data)
        if isinstance(data, (str, Path)):
            return cls.from_file(data)
        if isinstance(data, Mapping):
            return cls.from_arrays(**data)
        raise TypeError(
            f"Cannot build an ObservationTable from {type(data).__name__}"
        )


def _as_column(values: ArrayLike, name: str) -> NDArray:
    """Coerce values to a 1-D float64 column, or an object column."""
    arr = np.asarray(values)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    if arr.ndim != 1:
        raise InvalidDataError(
            f"Column '{name}' must be 1-dimensional, got shape {arr.shape}",
            field=name,
        )
    if arr.dtype.kind in 'biuf':
        return arr.astype(np.float64)
    return arr.astype(object)


def _freeze(arr: NDArray) -> NDArray:
    arr = np.array(arr, copy=True)
    arr.setflags(write=False)
    return arr
