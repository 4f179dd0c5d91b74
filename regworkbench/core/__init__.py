"""
Core infrastructure for regworkbench.

Shared abstractions used by the regression module and the workbench.

Key components:
    table: ObservationTable (named, immutable columns)
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    config: Fit defaults and tolerance tiers
    timing: Section timer
"""

from regworkbench.core.table import ObservationTable
from regworkbench.core.result import Result
from regworkbench.core.config import FitOptions, DEFAULT_FIT_OPTIONS
from regworkbench.core.exceptions import (
    WorkbenchError,
    ValidationError,
    DimensionError,
    InvalidDataError,
    UnfitModelError,
    NumericalError,
    ConvergenceError,
)

__all__ = [
    # Data
    "ObservationTable",
    # Result
    "Result",
    # Config
    "FitOptions",
    "DEFAULT_FIT_OPTIONS",
    # Exceptions
    "WorkbenchError",
    "ValidationError",
    "DimensionError",
    "InvalidDataError",
    "UnfitModelError",
    "NumericalError",
    "ConvergenceError",
]
