"""
Generic result container for regworkbench computations.

Every backend returns its payload wrapped in a Result, so timing,
solver metadata and warnings travel with the numbers in one place.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for solver metadata (method, iterations, raw solver result)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True); fitted models are never mutated
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope.

    Attributes:
        params: Domain-specific parameters (coefficients, fit statistics)
        info: Structured metadata (method, convergence, raw solver output)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=ModelParams(...),
        ...     info={'method': 'irls', 'iterations': 6},
        ...     timing={'total_seconds': 0.01},
        ...     backend_name='statsmodels_glm',
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
