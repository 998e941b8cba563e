"""
Linear algebra kernels for PyAppraisal.

All functions follow these conventions:
    - CPU only, NumPy/SciPy (LAPACK under the hood where available)
    - Each operation returns a structured result dataclass
    - Shape errors are raised immediately with clear messages

Submodules:
    gauss_jordan: Matrix utility and Gauss-Jordan inversion (reference path)
    qr: QR decomposition and least-squares solve
"""

from pyappraisal.core.compute.linalg.gauss_jordan import (
    GaussJordanResult,
    Matrix,
    gauss_jordan_inverse,
)
from pyappraisal.core.compute.linalg.qr import (
    QRResult,
    QRSolve,
    qr_cpu,
    qr_solve_cpu,
)

__all__ = [
    # Gauss-Jordan
    "GaussJordanResult",
    "Matrix",
    "gauss_jordan_inverse",
    # QR decomposition
    "QRResult",
    "QRSolve",
    "qr_cpu",
    "qr_solve_cpu",
]
