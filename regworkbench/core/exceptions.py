"""
Exception hierarchy for regworkbench.

All exceptions inherit from WorkbenchError so callers can catch any
library-specific error in one place. Every error is raised immediately;
an analysis step never recovers from a failure in the step before it.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages name the offending field and the actual values
    - Never catch and re-raise with less information
"""

from __future__ import annotations


class WorkbenchError(Exception):
    """Base exception for all regworkbench errors."""
    pass


class ValidationError(WorkbenchError):
    """
    Input validation failed.

    Raised when user-provided arguments fail validation checks
    (unknown family, bad scale name, conflicting options).
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple columns have inconsistent lengths.
    """
    pass


class InvalidDataError(ValidationError):
    """
    The observation data cannot be used for the requested model.

    Raised for negative or non-integer counts under a count family,
    missing or non-numeric columns, non-positive exposures, and column
    names that differ between the fit and a later prediction request.

    Attributes:
        field: Name of the offending column, if a single one is at fault
        missing: Column names that were required but not found
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        missing: tuple[str, ...] = (),
    ):
        super().__init__(message)
        self.field = field
        self.missing = tuple(missing)


class UnfitModelError(WorkbenchError):
    """
    A fitted model was required but none is available.

    Raised when coefficient extraction, prediction or a dispersion test
    is attempted on something that is not the product of a successful
    fit() call.

    Attributes:
        name: Model name, when the lookup went through a workbench
    """

    def __init__(self, message: str, name: str | None = None):
        super().__init__(message)
        self.name = name


class NumericalError(WorkbenchError):
    """
    Numerical computation failed inside the external solver.

    Attributes:
        solver: Name of the solver that failed
    """

    def __init__(self, message: str, solver: str | None = None):
        super().__init__(message)
        self.solver = solver


class ConvergenceError(WorkbenchError):
    """
    The external solver failed to converge.

    Only raised when the caller asks for on_nonconvergence='raise';
    otherwise non-convergence is reported as a warning.

    Attributes:
        iterations: Number of iterations completed, if reported
        solver: Name of the solver that did not converge
    """

    def __init__(
        self,
        message: str,
        iterations: int | None = None,
        solver: str | None = None,
    ):
        super().__init__(message)
        self.iterations = iterations
        self.solver = solver
