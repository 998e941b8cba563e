"""
Exception hierarchy for PyAppraisal.

All exceptions inherit from PyAppraisalError to allow catching any
library-specific error.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information

The estimator is permissive by default: singular matrices and degenerate
data surface as NaN/Inf in the results. NumericalError subclasses are only
raised when the caller asks for strict checking.
"""


class PyAppraisalError(Exception):
    """Base exception for all PyAppraisal errors."""
    pass


class ValidationError(PyAppraisalError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when vector lengths disagree, when a matrix is not rectangular,
    when a non-square matrix is inverted, or when two matrices cannot be
    multiplied.
    """
    pass


class NumericalError(PyAppraisalError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised by strict inversion when a Gauss-Jordan pivot (or a QR diagonal
    entry) falls below the singularity tolerance.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        pivot_index: Column at which elimination broke down
        pivot_value: Absolute value of the offending pivot
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        pivot_index: int | None = None,
        pivot_value: float | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.pivot_index = pivot_index
        self.pivot_value = pivot_value


class DegenerateDataError(NumericalError):
    """
    Data cannot support the requested statistics.

    Raised in strict mode when the residual degrees of freedom are not
    positive or the target has zero total sum of squares.

    Attributes:
        reason: Short machine-readable tag ('df_nonpositive', 'zero_tss')
        n_observations: Number of observations in the fit
        n_parameters: Number of estimated coefficients (intercept included)
    """

    def __init__(
        self,
        message: str,
        reason: str,
        n_observations: int | None = None,
        n_parameters: int | None = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.n_observations = n_observations
        self.n_parameters = n_parameters
