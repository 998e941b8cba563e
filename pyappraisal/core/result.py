"""
Backend result envelope.

A backend returns its numbers wrapped in Result together with the
metadata every fit reports the same way: what method ran, how long each
phase took, and which non-fatal conditions were met along the way.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Frozen wrapper around a backend's parameter payload.

    Attributes:
        params: The payload (OLSParams for regression)
        info: Method metadata such as 'method', 'df_residual', 'rank'
        timing: Seconds per phase plus 'total_seconds'; None when untimed
        backend_name: Name of the producing backend, e.g. 'cpu_gj'
        warnings: Messages for conditions that degraded the numbers
            without stopping the fit (singular X'X, constant target)
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """True if any warning message contains `substring`."""
        return any(substring in message for message in self.warnings)
