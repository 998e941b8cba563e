"""
Tolerance tiers for numerical validation.

Gauss-Jordan on the normal equations squares the condition number of X,
so the achievable precision depends on the path:
- exact recovery on well-conditioned noiseless data: 1e-9
- M @ inverse(M) against the identity: 1e-6
- QR path compared with the Gauss-Jordan path: relaxed

Used by the test suite and by strict-mode singularity checks.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


EXACT_RECOVERY = ToleranceTier(
    rtol=1e-9,
    atol=1e-9,
    name='exact_recovery',
    description='Noiseless data, well-conditioned design',
)

INVERSE_IDENTITY = ToleranceTier(
    rtol=1e-6,
    atol=1e-6,
    name='inverse_identity',
    description='M @ inverse(M) compared with the identity',
)

BACKEND_AGREEMENT = ToleranceTier(
    rtol=1e-7,
    atol=1e-8,
    name='backend_agreement',
    description='cpu_qr compared with the cpu_gj reference',
)

# Pivot magnitude below which Gauss-Jordan declares the matrix singular.
# Relative to the diagonal entry of the pivot column in the input.
SINGULAR_PIVOT_TOLERANCE = 1e-12


def select_tolerance(backend_name: str) -> ToleranceTier:
    """Select the tolerance tier for comparing a backend against the reference."""
    if backend_name == 'cpu_qr':
        return BACKEND_AGREEMENT
    return EXACT_RECOVERY
