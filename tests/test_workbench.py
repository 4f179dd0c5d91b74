"""
Tests for RegressionWorkbench and the top-level package API.
"""

import numpy as np
import pytest

import regworkbench
from regworkbench import RegressionWorkbench
from regworkbench.core.exceptions import InvalidDataError, UnfitModelError


@pytest.fixture
def workbench(overdispersed_table):
    return RegressionWorkbench(overdispersed_table)


class TestWorkbench:

    def test_fit_and_lookup(self, workbench):
        model = workbench.fit('pois', 'count', ['x'], 'poisson', exposure='exposure')
        assert workbench.model('pois') is model
        assert 'pois' in workbench
        assert workbench.models == ('pois',)

    def test_unknown_model(self, workbench):
        with pytest.raises(UnfitModelError) as excinfo:
            workbench.coefficients('nb')
        assert excinfo.value.name == 'nb'

    def test_predict_before_fit(self, workbench):
        with pytest.raises(UnfitModelError):
            workbench.predict('pois', {'x': [0.0], 'exposure': [1.0]})

    def test_failed_refit_keeps_model(self, workbench):
        first = workbench.fit('m', 'count', ['x'], 'poisson')
        with pytest.raises(InvalidDataError):
            workbench.fit('m', 'count', ['missing'], 'poisson')
        assert workbench.model('m') is first

    def test_tutorial_flow(self, workbench):
        workbench.fit('pois', 'count', ['x'], 'poisson', exposure='exposure')
        workbench.fit('nb', 'count', ['x'], 'negative_binomial', exposure='exposure')

        assert len(workbench.coefficients('nb')) == 2
        assert workbench.test_overdispersion('pois', 'nb').p_value < 0.01
        assert workbench.dispersion_test('pois', trafo=2).p_value < 0.01

        grid = {'x': [-1.0, 0.0, 1.0], 'exposure': [1.0, 1.0, 1.0]}
        eta = workbench.predict('nb', grid, 'linear')
        mu = workbench.predict('nb', grid)
        np.testing.assert_allclose(mu, np.exp(eta))
        assert np.all(np.diff(mu) > 0)

        assert workbench.tidy('nb')['term'].tolist() == ['(Intercept)', 'x']
        assert 'theta' in workbench.glance('nb').columns
        assert '.fitted' in workbench.augment('pois').columns

    def test_from_csv(self, tmp_path, overdispersed_table):
        path = tmp_path / "counts.csv"
        overdispersed_table.to_dataframe().to_csv(path, index=False)
        wb = RegressionWorkbench(path)
        assert wb.table.columns == overdispersed_table.columns
        model = wb.fit('pois', 'count', ['x'], 'poisson', exposure='exposure')
        assert model.converged

    def test_repr(self, workbench):
        workbench.fit('lin', 'count', ['x'])
        assert "lin" in repr(workbench)


class TestPackageApi:

    def test_exports(self):
        for name in ('fit', 'extract_coefficients', 'predict',
                     'test_overdispersion', 'dispersion_test',
                     'InvalidDataError', 'UnfitModelError', 'ObservationTable'):
            assert hasattr(regworkbench, name)

    def test_functional_flow(self, exact_linear_table):
        model = regworkbench.fit(exact_linear_table, 'y', ['x'], 'gaussian-identity')
        coefs = regworkbench.extract_coefficients(model)
        assert coefs.intercept == pytest.approx(2.0)
        assert regworkbench.predict(model, {'x': [-2.0]}, 'linear')[0] == pytest.approx(-4.0)
