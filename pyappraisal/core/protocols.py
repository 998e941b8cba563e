"""
Core protocols for PyAppraisal.

We use Protocol (structural typing) rather than ABC (nominal typing) so
backends only need the right shape, not a common base class.
"""

from typing import Protocol, TypeVar, runtime_checkable

from pyappraisal.core.result import Result

# Type variables for generic payloads
P = TypeVar('P', covariant=True)  # Parameter payload type
D = TypeVar('D', contravariant=True)  # Design type


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.

    Each backend takes a domain-specific design and produces a
    domain-specific parameter payload wrapped in a Result.

    Backends are stateless; options are fixed at construction time.
    This makes them easy to test and swap.

    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{algorithm}'
        Examples: 'cpu_gj', 'cpu_qr'
        """
        ...

    def solve(self, design: D) -> Result[P]:
        """
        Execute the statistical computation.

        Raises:
            NumericalError: If strict checking is on and the problem is
                singular or degenerate
        """
        ...
