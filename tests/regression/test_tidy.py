"""
Tests for tidy(), glance() and augment().
"""

import numpy as np
import pytest

from regworkbench.core.exceptions import UnfitModelError, ValidationError
from regworkbench.regression import augment, glance, tidy


class TestTidy:

    def test_columns_and_terms(self, linear_model):
        frame = tidy(linear_model)
        assert list(frame.columns) == [
            'term', 'estimate', 'std_error', 'statistic', 'p_value',
        ]
        assert frame['term'].tolist() == ['(Intercept)', 'x']
        np.testing.assert_array_equal(frame['estimate'], linear_model.coefficients)

    def test_conf_int_matches_solver(self, linear_model):
        frame = tidy(linear_model, conf_int=True)
        expected = np.asarray(linear_model.solver_result.conf_int())
        np.testing.assert_allclose(frame['conf_low'], expected[:, 0])
        np.testing.assert_allclose(frame['conf_high'], expected[:, 1])

    def test_conf_int_normal_for_counts(self, poisson_model):
        frame = tidy(poisson_model, conf_int=True, conf_level=0.9)
        expected = np.asarray(poisson_model.solver_result.conf_int(alpha=0.1))
        np.testing.assert_allclose(frame['conf_low'], expected[:, 0])

    def test_exponentiate_gives_rate_ratios(self, poisson_model):
        plain = tidy(poisson_model, conf_int=True)
        ratios = tidy(poisson_model, conf_int=True, exponentiate=True)
        np.testing.assert_allclose(ratios['estimate'], np.exp(plain['estimate']))
        np.testing.assert_allclose(ratios['conf_high'], np.exp(plain['conf_high']))
        np.testing.assert_array_equal(ratios['std_error'], plain['std_error'])

    def test_exponentiate_identity_rejected(self, linear_model):
        with pytest.raises(ValidationError, match="log link"):
            tidy(linear_model, exponentiate=True)

    def test_bad_conf_level(self, linear_model):
        with pytest.raises(ValidationError):
            tidy(linear_model, conf_int=True, conf_level=95)

    def test_unfit(self):
        with pytest.raises(UnfitModelError):
            tidy(None)


class TestGlance:

    def test_gaussian(self, linear_model):
        row = glance(linear_model).iloc[0]
        assert row['r_squared'] == pytest.approx(linear_model.extras['r_squared'])
        assert row['nobs'] == 50
        assert row['df_residual'] == 48

    def test_poisson(self, poisson_model):
        frame = glance(poisson_model)
        assert 'null_deviance' in frame.columns
        assert 'alpha' not in frame.columns
        assert frame.iloc[0]['deviance'] == pytest.approx(poisson_model.deviance)

    def test_negative_binomial(self, od_nb_model):
        row = glance(od_nb_model).iloc[0]
        assert row['alpha'] == pytest.approx(od_nb_model.alpha)
        assert row['theta'] == pytest.approx(od_nb_model.theta)


class TestAugment:

    def test_keeps_source_columns(self, poisson_table, poisson_model):
        frame = augment(poisson_model)
        assert list(frame.columns[:5]) == list(poisson_table.columns)
        assert len(frame) == len(poisson_table)

    def test_model_columns(self, poisson_model):
        frame = augment(poisson_model)
        np.testing.assert_array_equal(frame['.fitted'], poisson_model.fitted_values)
        np.testing.assert_allclose(frame['.fitted'], np.exp(frame['.linear']))
        np.testing.assert_allclose(
            frame['.resid'], frame['count'] - frame['.fitted'],
        )
