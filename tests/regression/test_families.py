"""
Tests for family and link specifications.
"""

import numpy as np
import pytest

from regworkbench.core.exceptions import ValidationError
from regworkbench.regression.families import (
    Gaussian,
    IdentityLink,
    LogLink,
    NegativeBinomial,
    Poisson,
    resolve_family,
)


class TestLinks:

    def test_identity_inverse_is_copy(self):
        eta = np.array([-4.0, 0.0, 2.5])
        mu = IdentityLink().linkinv(eta)
        np.testing.assert_array_equal(mu, eta)
        assert mu is not eta

    def test_log_inverse_is_exp(self):
        eta = np.array([-1.0, 0.0, 3.0])
        np.testing.assert_allclose(LogLink().linkinv(eta), np.exp(eta))

    def test_log_inverse_not_clipped(self):
        eta = np.array([-600.0, 618.5, 700.0])
        np.testing.assert_allclose(LogLink().linkinv(eta), np.exp(eta), rtol=1e-12)

    def test_log_inverse_overflow_is_inf(self):
        with np.errstate(over='raise'):
            mu = LogLink().linkinv(np.array([1e4]))
        assert np.isposinf(mu[0])

    def test_equality_by_name(self):
        assert LogLink() == LogLink()
        assert LogLink() != IdentityLink()


class TestFamilies:

    def test_fixed_links(self):
        assert Gaussian().link == IdentityLink()
        assert Poisson().link == LogLink()
        assert NegativeBinomial().link == LogLink()

    def test_count_flags(self):
        assert not Gaussian().is_count
        assert Poisson().is_count
        assert NegativeBinomial().is_count

    def test_gaussian_deviance_is_rss(self):
        y = np.array([1.0, 2.0, 4.0])
        mu = np.array([1.5, 2.0, 3.0])
        assert Gaussian().deviance(y, mu) == pytest.approx(0.25 + 0.0 + 1.0)

    def test_poisson_deviance_zero_at_saturation(self):
        y = np.array([0.0, 3.0, 10.0])
        np.testing.assert_allclose(
            Poisson().unit_deviance(y, np.maximum(y, 1e-10)), 0.0, atol=1e-8,
        )

    def test_poisson_zero_count_deviance(self):
        """d(0, μ) = 2μ."""
        d = Poisson().unit_deviance(np.array([0.0]), np.array([1.5]))
        assert d[0] == pytest.approx(3.0)

    def test_nb_variance(self):
        fam = NegativeBinomial(alpha=0.5)
        mu = np.array([2.0, 4.0])
        np.testing.assert_allclose(fam.variance(mu), mu + 0.5 * mu ** 2)
        assert fam.theta == pytest.approx(2.0)

    def test_nb_deviance_approaches_poisson(self):
        y = np.array([0.0, 2.0, 5.0])
        mu = np.array([1.0, 2.5, 4.0])
        np.testing.assert_allclose(
            NegativeBinomial(alpha=1e-8).unit_deviance(y, mu),
            Poisson().unit_deviance(y, mu),
            rtol=1e-5,
        )

    def test_nb_rejects_non_positive_alpha(self):
        with pytest.raises(ValidationError, match="alpha"):
            NegativeBinomial(alpha=0.0)

    def test_pearson_residuals(self):
        y = np.array([4.0])
        mu = np.array([1.0])
        np.testing.assert_allclose(Poisson().pearson_residuals(y, mu), [3.0])


class TestResolveFamily:

    @pytest.mark.parametrize("name, cls", [
        ('gaussian', Gaussian),
        ('gaussian-identity', Gaussian),
        ('normal', Gaussian),
        ('poisson', Poisson),
        ('Poisson-Log', Poisson),
        ('negative_binomial', NegativeBinomial),
        ('negative-binomial-log', NegativeBinomial),
        ('nb', NegativeBinomial),
    ])
    def test_names(self, name, cls):
        assert isinstance(resolve_family(name), cls)

    def test_instance_passthrough(self):
        fam = NegativeBinomial(alpha=2.0)
        assert resolve_family(fam) is fam

    def test_unknown_name(self):
        with pytest.raises(ValidationError, match="Unknown family"):
            resolve_family('binomial')

    def test_wrong_type(self):
        with pytest.raises(TypeError):
            resolve_family(3)
