"""
Synthetic datasets for the tutorials, and prediction grids.

    simulate_linear()   - y = 2 + 3x + noise, the linear model intro
    simulate_counts()   - counts with an exposure, Poisson or NB2
    prediction_grid()   - evenly spaced values of one predictor
"""

from __future__ import annotations

import numpy as np

from regworkbench.core.exceptions import ValidationError
from regworkbench.core.table import ObservationTable


def simulate_linear(
    n: int = 50,
    intercept: float = 2.0,
    slope: float = 3.0,
    noise_sd: float = 1.0,
    seed: int | np.random.Generator | None = None,
) -> ObservationTable:
    """
    Simulate x ~ N(0, 1) and y = intercept + slope * x + N(0, noise_sd²).

    Returns:
        ObservationTable with columns x, y
    """
    if n < 1:
        raise ValidationError(f"n must be positive, got {n}")
    if noise_sd < 0:
        raise ValidationError(f"noise_sd must be non-negative, got {noise_sd}")
    rng = np.random.default_rng(seed)
    x = rng.standard_normal(n)
    y = intercept + slope * x + rng.normal(0.0, noise_sd, size=n)
    return ObservationTable.from_arrays(x=x, y=y)


def simulate_counts(
    n: int = 100,
    intercept: float = 1.0,
    slope: float = 0.5,
    alpha: float = 0.0,
    exposure_range: tuple[float, float] = (1.0, 10.0),
    seed: int | np.random.Generator | None = None,
) -> ObservationTable:
    """
    Simulate count data with an exposure.

    μ_i = exposure_i · exp(intercept + slope · x_i) with x ~ N(0, 1) and
    exposure ~ Uniform(exposure_range). Counts are Poisson(μ) when
    alpha == 0, otherwise NB2 with Var = μ + α μ² (a gamma-Poisson
    mixture).

    Returns:
        ObservationTable with columns label, x, exposure, log_exposure, count
    """
    if n < 1:
        raise ValidationError(f"n must be positive, got {n}")
    if alpha < 0:
        raise ValidationError(f"alpha must be non-negative, got {alpha}")
    low, high = exposure_range
    if not 0 < low <= high:
        raise ValidationError(
            f"exposure_range must satisfy 0 < low <= high, got {exposure_range}"
        )

    rng = np.random.default_rng(seed)
    x = rng.standard_normal(n)
    exposure = rng.uniform(low, high, size=n)
    mu = exposure * np.exp(intercept + slope * x)

    if alpha == 0:
        count = rng.poisson(mu)
    else:
        # Gamma(shape=1/α, scale=α μ) has mean μ and variance α μ²
        rate = rng.gamma(shape=1.0 / alpha, scale=alpha * mu)
        count = rng.poisson(rate)

    width = len(str(n))
    label = np.array([f"unit_{i:0{width}d}" for i in range(1, n + 1)], dtype=object)
    return ObservationTable.from_arrays(
        label=label,
        x=x,
        exposure=exposure,
        log_exposure=np.log(exposure),
        count=count.astype(np.float64),
    )


def prediction_grid(
    field: str,
    start: float,
    stop: float,
    step: float,
) -> ObservationTable:
    """
    Evenly spaced values from start to stop inclusive, like R's seq().

    >>> prediction_grid('x', -2, 2, 0.1)   # 41 rows
    """
    if step <= 0:
        raise ValidationError(f"step must be positive, got {step}")
    if stop < start:
        raise ValidationError(f"stop ({stop}) must not be less than start ({start})")
    count = int(np.floor((stop - start) / step + 1e-10)) + 1
    values = start + step * np.arange(count)
    return ObservationTable.from_arrays(**{field: values})
