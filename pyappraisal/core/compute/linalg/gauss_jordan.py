"""
Dense matrix utility with Gauss-Jordan inversion.

This is the reference linear algebra path for the OLS estimator: the
normal equations are formed explicitly and (X'X) is inverted by
Gauss-Jordan elimination with partial pivoting. It is O(n^3) in the
matrix dimension and squares the condition number of X, which is fine
for the small (k+1) x (k+1) systems a valuation model produces.

Shape problems raise DimensionError immediately. Singularity is
permissive by default: a zero pivot divides through and the NaN/Inf
values flow into every downstream statistic. Pass check_singular=True
to get a SingularMatrixError instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyappraisal.core.exceptions import DimensionError, SingularMatrixError
from pyappraisal.core.compute.tolerances import SINGULAR_PIVOT_TOLERANCE
from pyappraisal.core.validation import (
    check_array,
    check_2d,
    check_rectangular,
    check_square,
)


@dataclass(frozen=True)
class GaussJordanResult:
    """
    Result of a Gauss-Jordan inversion.

    Attributes:
        inverse: The computed inverse (may contain NaN/Inf if singular)
        min_abs_pivot: Smallest absolute pivot met during elimination
        singular_at: First column whose pivot fell below tolerance, or None
    """
    inverse: NDArray[np.floating[Any]]
    min_abs_pivot: float
    singular_at: int | None

    @property
    def is_singular(self) -> bool:
        return self.singular_at is not None


def gauss_jordan_inverse(
    A: NDArray[np.floating[Any]],
    *,
    check_singular: bool = False,
    tol: float = SINGULAR_PIVOT_TOLERANCE,
    name: str = 'A',
) -> GaussJordanResult:
    """
    Invert a square matrix by Gauss-Jordan elimination with partial pivoting.

    Algorithm (on the augmented matrix [A | I] of width 2n), for each
    column i:
        1. Pick the row at or below i with the largest |a_ki|
        2. Swap it into row i
        3. Divide row i by the pivot
        4. Subtract multiples of row i from every other row

    Args:
        A: Square matrix (n x n)
        check_singular: If True, raise on a pivot below tolerance
        tol: Pivot tolerance, relative to the column scale (|a_ii| of the
            input, or max |a_*i| when that diagonal entry is zero)
        name: Matrix name for error messages

    Returns:
        GaussJordanResult with the inverse and pivot diagnostics

    Raises:
        DimensionError: If A is not square
        SingularMatrixError: If check_singular and a pivot is too small
    """
    check_square(A, name)
    n = A.shape[0]

    aug = np.hstack([np.array(A, dtype=np.float64), np.eye(n)])
    thresholds = tol * _column_scales(aug[:, :n])

    min_abs_pivot = np.inf
    singular_at: int | None = None
    rows = np.arange(n)

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        for i in range(n):
            # First maximal row wins ties
            max_row = i + int(np.argmax(np.abs(aug[i:, i])))
            if max_row != i:
                aug[[i, max_row]] = aug[[max_row, i]]

            pivot = aug[i, i]
            abs_pivot = abs(pivot)
            # NaN pivots also fail this comparison
            threshold = thresholds[i]
            if not abs_pivot > threshold:
                if check_singular:
                    raise SingularMatrixError(
                        f"{name} is singular: pivot {abs_pivot:.3e} at column {i} "
                        f"is below tolerance {threshold:.3e}",
                        matrix_name=name,
                        pivot_index=i,
                        pivot_value=float(abs_pivot),
                    )
                if singular_at is None:
                    singular_at = i
            min_abs_pivot = min(min_abs_pivot, float(abs_pivot))

            aug[i] = aug[i] / pivot

            others = rows != i
            factors = aug[others, i]
            aug[others] -= np.outer(factors, aug[i])

    return GaussJordanResult(
        inverse=aug[:, n:].copy(),
        min_abs_pivot=min_abs_pivot,
        singular_at=singular_at,
    )


def _column_scales(A: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    Per-column reference magnitude for the pivot test.

    Without row swaps, the pivot met in column i of a symmetric positive
    semi-definite matrix is a_ii times (1 - R²) of column i on the earlier
    ones. Comparing it with a_ii keeps the test independent of how each
    feature is scaled.
    """
    abs_A = np.abs(A)
    diagonal = np.diagonal(abs_A).copy()
    if A.size:
        zero = diagonal == 0
        diagonal[zero] = abs_A[:, zero].max(axis=0)
    return diagonal


@dataclass(frozen=True, eq=False)
class Matrix:
    """
    Immutable dense 2D matrix of doubles.

    Wraps a read-only float64 ndarray. Every operation returns a new
    Matrix; the source is never modified.

    Construction:
        Matrix.from_array([[1, 2], [3, 4]])
        Matrix.identity(3)
        Matrix(np_array)
    """
    data: NDArray[np.floating[Any]]

    def __post_init__(self) -> None:
        arr = check_array(self.data, 'data')
        check_2d(arr, 'data')
        arr = np.array(arr, dtype=np.float64)
        arr.flags.writeable = False
        object.__setattr__(self, 'data', arr)

    @classmethod
    def from_array(cls, rows: Sequence[Sequence[float]] | ArrayLike) -> Matrix:
        """Build a Matrix from nested rows, rejecting ragged input."""
        check_rectangular(rows, 'rows')
        return cls(check_array(rows, 'rows'))

    @classmethod
    def identity(cls, n: int) -> Matrix:
        return cls(np.eye(n))

    # === Properties ===

    @property
    def rows(self) -> int:
        return self.data.shape[0]

    @property
    def cols(self) -> int:
        return self.data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    # === Operations ===

    def transpose(self) -> Matrix:
        """Return the transpose: result[i][j] = self[j][i]."""
        return Matrix(self.data.T)

    def multiply(self, other: Matrix) -> Matrix:
        """
        Matrix product self @ other.

        Raises:
            DimensionError: If self.cols != other.rows
        """
        if self.cols != other.rows:
            raise DimensionError(
                f"Cannot multiply {self.rows}x{self.cols} by {other.rows}x{other.cols}: "
                f"inner dimensions differ"
            )
        return Matrix(self.data @ other.data)

    def inverse(self, *, check_singular: bool = False) -> Matrix:
        """
        Gauss-Jordan inverse with partial pivoting.

        A singular matrix yields NaN/Inf entries unless check_singular=True,
        in which case SingularMatrixError is raised.
        """
        result = gauss_jordan_inverse(self.data, check_singular=check_singular)
        return Matrix(result.inverse)

    def get_diagonal(self) -> NDArray[np.floating[Any]]:
        """First min(rows, cols) diagonal entries."""
        return np.diagonal(self.data).copy()

    def to_array(self) -> NDArray[np.floating[Any]]:
        """Writable copy of the underlying data."""
        return self.data.copy()

    def __repr__(self) -> str:
        return f"Matrix(rows={self.rows}, cols={self.cols})"
