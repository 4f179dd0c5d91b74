"""
Tests for ObservationTable construction and column access.
"""

import numpy as np
import pandas as pd
import pytest

from regworkbench.core.exceptions import (
    DimensionError,
    InvalidDataError,
    ValidationError,
)
from regworkbench.core.table import ObservationTable


# ═══════════════════════════════════════════════════════════════════════
# from_arrays
# ═══════════════════════════════════════════════════════════════════════


class TestFromArrays:

    def test_numeric_columns_are_float64(self):
        table = ObservationTable.from_arrays(x=[1, 2, 3], y=[True, False, True])
        assert table['x'].dtype == np.float64
        assert table['y'].dtype == np.float64
        assert len(table) == 3
        assert table.n_observations == 3

    def test_column_order_preserved(self):
        table = ObservationTable.from_arrays(b=[1.0], a=[2.0], c=[3.0])
        assert table.columns == ('b', 'a', 'c')

    def test_labels_kept_as_object(self):
        table = ObservationTable.from_arrays(
            country=['Chile', 'Peru'], x=[1.0, 2.0],
        )
        assert not table.is_numeric('country')
        assert table.is_numeric('x')
        np.testing.assert_array_equal(table['country'], ['Chile', 'Peru'])

    def test_numeric_rejects_labels(self):
        table = ObservationTable.from_arrays(country=['Chile', 'Peru'])
        with pytest.raises(InvalidDataError, match="not numeric") as excinfo:
            table.numeric('country')
        assert excinfo.value.field == 'country'

    def test_columns_are_read_only(self):
        x = np.array([1.0, 2.0])
        table = ObservationTable.from_arrays(x=x)
        with pytest.raises(ValueError):
            table['x'][0] = 5.0
        x[0] = 99.0
        assert table['x'][0] == 1.0

    def test_inconsistent_lengths(self):
        with pytest.raises(DimensionError):
            ObservationTable.from_arrays(x=[1.0, 2.0], y=[1.0])

    def test_2d_column_rejected(self):
        with pytest.raises(InvalidDataError, match="1-dimensional"):
            ObservationTable.from_arrays(x=np.ones((2, 2)))

    def test_missing_column_lists_available(self):
        table = ObservationTable.from_arrays(x=[1.0], y=[2.0])
        with pytest.raises(InvalidDataError, match="Available") as excinfo:
            table['z']
        assert excinfo.value.missing == ('z',)

    def test_contains(self):
        table = ObservationTable.from_arrays(x=[1.0])
        assert 'x' in table
        assert 'y' not in table


# ═══════════════════════════════════════════════════════════════════════
# Derivation and conversion
# ═══════════════════════════════════════════════════════════════════════


class TestDerivation:

    def test_with_column_adds(self):
        table = ObservationTable.from_arrays(x=[1.0, 2.0])
        wider = table.with_column('y', [3.0, 4.0])
        assert wider.columns == ('x', 'y')
        assert table.columns == ('x',)

    def test_with_column_replaces(self):
        table = ObservationTable.from_arrays(x=[1.0, 2.0])
        replaced = table.with_column('x', [5.0, 6.0])
        np.testing.assert_array_equal(replaced['x'], [5.0, 6.0])

    def test_to_dataframe(self):
        table = ObservationTable.from_arrays(label=['a', 'b'], x=[1.0, 2.0])
        df = table.to_dataframe()
        assert list(df.columns) == ['label', 'x']
        assert df['x'].tolist() == [1.0, 2.0]

    def test_from_dataframe(self):
        df = pd.DataFrame({'x': [1, 2], 'name': ['a', 'b']}, index=[10, 11])
        table = ObservationTable.from_dataframe(df)
        assert table.metadata['source'] == 'dataframe'
        assert table.is_numeric('x')
        assert not table.is_numeric('name')

    def test_from_records(self):
        table = ObservationTable.from_records([{'x': 1, 'y': 2}, {'x': 3, 'y': 4}])
        np.testing.assert_array_equal(table['y'], [2.0, 4.0])


# ═══════════════════════════════════════════════════════════════════════
# from_file
# ═══════════════════════════════════════════════════════════════════════


class TestFromFile:

    def test_csv(self, tmp_path):
        path = tmp_path / "countries.csv"
        path.write_text("country,x,y\nChile,1.0,5.0\nPeru,2.0,8.0\n")
        table = ObservationTable.from_file(path)
        assert table.columns == ('country', 'x', 'y')
        assert table.metadata['source'] == 'file'
        assert table.metadata['source_path'] == str(path)
        np.testing.assert_array_equal(table['y'], [5.0, 8.0])

    def test_tsv(self, tmp_path):
        path = tmp_path / "counts.tsv"
        path.write_text("x\tcount\n0.5\t3\n1.5\t7\n")
        table = ObservationTable.from_file(path)
        np.testing.assert_array_equal(table['count'], [3.0, 7.0])

    def test_explicit_separator(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("x;y\n1;2\n")
        table = ObservationTable.from_file(path, sep=';')
        assert table.columns == ('x', 'y')

    def test_unknown_suffix(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("x,y\n1,2\n")
        with pytest.raises(ValidationError, match="Unknown file format"):
            ObservationTable.from_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ObservationTable.from_file(tmp_path / "absent.csv")

    def test_header_only(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("x,y\n")
        with pytest.raises(InvalidDataError, match="no data rows"):
            ObservationTable.from_file(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "blank.csv"
        path.write_text("")
        with pytest.raises(InvalidDataError, match="empty"):
            ObservationTable.from_file(path)


class TestBuild:

    def test_passthrough(self):
        table = ObservationTable.from_arrays(x=[1.0])
        assert ObservationTable.build(table) is table

    def test_mapping(self):
        table = ObservationTable.build({'x': [1.0, 2.0]})
        assert len(table) == 2

    def test_dataframe(self):
        table = ObservationTable.build(pd.DataFrame({'x': [1.0]}))
        assert table.columns == ('x',)

    def test_path(self, tmp_path):
        path = tmp_path / "d.csv"
        path.write_text("x\n1\n")
        assert ObservationTable.build(str(path)).columns == ('x',)

    def test_unsupported(self):
        with pytest.raises(TypeError):
            ObservationTable.build(42)
