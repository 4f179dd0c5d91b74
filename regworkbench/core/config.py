"""
Fit defaults and numerical tolerances.

Configuration is passed as keyword arguments; the defaults live here so
the solver dispatch, the tests and the workbench agree on them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal


NonConvergencePolicy = Literal['warn', 'raise']


@dataclass(frozen=True)
class FitOptions:
    """Options forwarded to the external solver.

    Attributes:
        max_iter: Iteration cap for iterative solvers (IRLS, Newton)
        tol: Convergence tolerance for IRLS
        on_nonconvergence: 'warn' records a warning, 'raise' raises
            ConvergenceError
    """
    max_iter: int = 100
    tol: float = 1e-8
    on_nonconvergence: NonConvergencePolicy = 'warn'

    def with_overrides(self, **overrides) -> FitOptions:
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


DEFAULT_FIT_OPTIONS = FitOptions()

# Conventional significance level for dispersion tests
DEFAULT_ALPHA_LEVEL = 0.05


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Recomputing a linear predictor from extracted coefficients
ROUNDTRIP = ToleranceTier(
    rtol=1e-10,
    atol=1e-10,
    name='roundtrip',
    description='same coefficients, same design, float64 arithmetic',
)

# Comparing our post-processing against the solver's own outputs
SOLVER_AGREEMENT = ToleranceTier(
    rtol=1e-6,
    atol=1e-8,
    name='solver_agreement',
    description='recomputed quantities vs solver-reported quantities',
)
