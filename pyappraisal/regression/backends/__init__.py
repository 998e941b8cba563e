"""
Regression backends.

Available backends:
    CPUGaussJordanBackend: reference normal-equation solver (Gauss-Jordan)
    CPUQRBackend: QR decomposition solver
"""

from pyappraisal.regression.backends.cpu import CPUGaussJordanBackend, CPUQRBackend

__all__ = [
    "CPUGaussJordanBackend",
    "CPUQRBackend",
]
