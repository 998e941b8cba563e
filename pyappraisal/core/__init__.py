"""
Core infrastructure for PyAppraisal.

Shared abstractions, utilities, and compute infrastructure used by the
regression engine and its consumers (diagnostics, valuation, persistence).

Key components:
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, tolerances, linear algebra kernels
"""

from pyappraisal.core.protocols import Backend
from pyappraisal.core.result import Result
from pyappraisal.core.exceptions import (
    PyAppraisalError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    DegenerateDataError,
)

__all__ = [
    # Protocols
    "Backend",
    # Result
    "Result",
    # Exceptions
    "PyAppraisalError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "DegenerateDataError",
]
