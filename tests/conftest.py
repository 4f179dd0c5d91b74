"""
pytest configuration and shared fixtures.
"""

import numpy as np
import pytest

from regworkbench.core.table import ObservationTable
from regworkbench.datasets import simulate_counts, simulate_linear
from regworkbench.regression import fit


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def linear_table():
    """The linear model intro data: x ~ N(0,1), y = 2 + 3x + N(0,1)."""
    return simulate_linear(n=50, intercept=2.0, slope=3.0, seed=2020)


@pytest.fixture
def exact_linear_table():
    """Noise-free y = 2 + 3x."""
    x = np.linspace(-3.0, 3.0, 25)
    return ObservationTable.from_arrays(x=x, y=2.0 + 3.0 * x)


@pytest.fixture
def poisson_table():
    """Poisson counts with exposure, log μ = log(exposure) + 1 + 0.5x."""
    return simulate_counts(n=500, intercept=1.0, slope=0.5, alpha=0.0, seed=7)


@pytest.fixture
def overdispersed_table():
    """NB2 counts with α = 0.5, log μ = log(exposure) + 1 + 0.5x."""
    return simulate_counts(n=800, intercept=1.0, slope=0.5, alpha=0.5, seed=11)


@pytest.fixture
def linear_model(linear_table):
    return fit(linear_table, 'y', ['x'], 'gaussian')


@pytest.fixture
def poisson_model(poisson_table):
    return fit(poisson_table, 'count', ['x'], 'poisson', exposure='exposure')


@pytest.fixture
def od_poisson_model(overdispersed_table):
    return fit(overdispersed_table, 'count', ['x'], 'poisson', exposure='exposure')


@pytest.fixture
def od_nb_model(overdispersed_table):
    return fit(
        overdispersed_table, 'count', ['x'], 'negative_binomial',
        exposure='exposure',
    )
