"""
Tests for extract_coefficients() and CoefficientVector.
"""

import numpy as np
import pytest

from regworkbench.core.exceptions import UnfitModelError
from regworkbench.regression import extract_coefficients, fit


class TestExtractCoefficients:

    def test_intercept_first(self, exact_linear_table):
        coefs = extract_coefficients(fit(exact_linear_table, 'y', ['x']))
        assert coefs.names == ('(Intercept)', 'x')
        assert coefs.intercept == pytest.approx(2.0)
        assert coefs[1] == pytest.approx(3.0)
        assert coefs['x'] == pytest.approx(3.0)

    def test_length_is_one_plus_predictors(self, overdispersed_table):
        for family in ('poisson', 'negative_binomial'):
            model = fit(overdispersed_table, 'count', ['x', 'log_exposure'], family)
            assert len(extract_coefficients(model)) == 3

    def test_offset_not_counted(self, poisson_model):
        coefs = extract_coefficients(poisson_model)
        assert len(coefs) == 2
        assert 'exposure' not in coefs.names

    def test_predictor_order_kept(self, rng):
        data = {
            'a': rng.standard_normal(30),
            'b': rng.standard_normal(30),
            'y': rng.standard_normal(30),
        }
        coefs = extract_coefficients(fit(data, 'y', ['b', 'a']))
        assert coefs.names == ('(Intercept)', 'b', 'a')
        assert list(coefs.slopes) == ['b', 'a']

    def test_intercept_only(self, linear_table):
        coefs = extract_coefficients(fit(linear_table, 'y', []))
        assert len(coefs) == 1
        assert coefs.intercept == pytest.approx(np.mean(linear_table['y']))

    def test_values_read_only(self, linear_model):
        coefs = extract_coefficients(linear_model)
        with pytest.raises(ValueError):
            coefs.values[0] = 0.0
        assert coefs.values[0] == linear_model.coefficients[0]

    def test_unknown_name(self, linear_model):
        with pytest.raises(KeyError, match="Available"):
            extract_coefficients(linear_model)['z']

    def test_conversions(self, linear_model):
        coefs = extract_coefficients(linear_model)
        assert list(coefs.as_dict()) == ['(Intercept)', 'x']
        assert coefs.as_series().index.tolist() == ['(Intercept)', 'x']
        assert list(coefs) == [coefs[0], coefs[1]]

    def test_unfit(self):
        with pytest.raises(UnfitModelError, match="extract_coefficients"):
            extract_coefficients(None)
