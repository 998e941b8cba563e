"""
QR decomposition kernel.

Alternative to the Gauss-Jordan normal-equation path. Solving through
X = QR never forms X'X, so the condition number is not squared; the
unscaled covariance (X'X)^-1 is recovered as R^-1 R^-T.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import solve_triangular

from pyappraisal.core.exceptions import SingularMatrixError


@dataclass(frozen=True)
class QRResult:
    """
    Result of QR decomposition.

    Attributes:
        Q: Orthogonal matrix (n x k where k = min(n, p))
        R: Upper triangular matrix (k x p)
        rank: Numerical rank determined from the R diagonal
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int


@dataclass(frozen=True)
class QRSolve:
    """
    Least-squares solution via QR.

    Attributes:
        coefficients: β (p,), NaN-filled when X is rank-deficient
        xtx_inverse: (X'X)^-1 (p x p), NaN-filled when X is rank-deficient
        rank: Numerical rank of X
    """
    coefficients: NDArray[np.floating[Any]]
    xtx_inverse: NDArray[np.floating[Any]]
    rank: int


def qr_cpu(X: NDArray[np.floating[Any]]) -> QRResult:
    """
    Reduced QR decomposition using LAPACK (via NumPy).

    Args:
        X: Matrix to decompose (n x p)

    Returns:
        QRResult with Q, R, and numerical rank
    """
    Q, R = np.linalg.qr(X, mode='reduced')

    diag_R = np.abs(np.diag(R))
    if len(diag_R) > 0 and diag_R.max() > 0:
        tol = max(X.shape) * np.finfo(X.dtype).eps * diag_R.max()
        rank = int(np.sum(diag_R > tol))
    else:
        rank = 0

    return QRResult(Q=Q, R=R, rank=rank)


def qr_solve_cpu(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    check_rank: bool,
) -> QRSolve:
    """
    Solve min_β ||y - Xβ||² via QR decomposition.

        X = QR
        β = R⁻¹ Q'y
        (X'X)⁻¹ = R⁻¹ R⁻ᵀ

    Args:
        X: Design matrix (n x p)
        y: Response vector (n,)
        check_rank: If True, raise SingularMatrixError on rank-deficient X

    Returns:
        QRSolve with coefficients, (X'X)^-1 and rank

    Raises:
        SingularMatrixError: If X is rank-deficient and check_rank=True
    """
    n, p = X.shape
    qr_result = qr_cpu(X)

    if qr_result.rank < p:
        if check_rank:
            raise SingularMatrixError(
                f"Design matrix is rank-deficient: rank={qr_result.rank}, expected={p}. "
                f"This indicates perfect multicollinearity or too few observations.",
                matrix_name='X',
            )
        return QRSolve(
            coefficients=np.full(p, np.nan),
            xtx_inverse=np.full((p, p), np.nan),
            rank=qr_result.rank,
        )

    R = qr_result.R[:p, :p]
    beta = solve_triangular(R, qr_result.Q.T @ y, lower=False)
    R_inv = solve_triangular(R, np.eye(p), lower=False)

    return QRSolve(
        coefficients=beta,
        xtx_inverse=R_inv @ R_inv.T,
        rank=qr_result.rank,
    )
