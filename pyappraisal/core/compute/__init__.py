"""
Shared compute infrastructure for PyAppraisal.

This module provides timing utilities, tolerance tiers and linear algebra
kernels used by the regression backends.

IMPORTANT: This is NOT where domain-specific backends live. Those go in
{domain}/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Numerical tolerance tiers
    linalg: Linear algebra kernels (Gauss-Jordan, QR)
"""

from pyappraisal.core.compute.timing import Timer

__all__ = [
    "Timer",
]
