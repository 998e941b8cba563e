"""
Residual diagnostics.

Numeric inputs for the diagnostic charts (Q-Q plot, residuals vs
fitted, observed vs predicted) and the normality p-value stored with a
model run. Nothing here renders anything.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import stats as sp_stats

from pyappraisal.core.validation import check_1d, check_array, check_consistent_length

if TYPE_CHECKING:
    from pyappraisal.regression.solution import OLSSolution


# p-value reported when the normality test cannot run
NORMALITY_FALLBACK_PVALUE = 0.5


@dataclass(frozen=True, eq=False)
class PairedSeries:
    """x/y pairs for a scatter chart."""
    x: NDArray[np.floating[Any]]
    y: NDArray[np.floating[Any]]

    def __len__(self) -> int:
        return len(self.x)


def qq_points(residuals: ArrayLike) -> PairedSeries:
    """
    Normal Q-Q plot points.

    x = Φ⁻¹((i + 0.5) / n) for i = 0..n-1, y = sorted residuals.
    """
    r = check_array(residuals, 'residuals')
    check_1d(r, 'residuals')
    n = len(r)
    probabilities = (np.arange(n) + 0.5) / n
    return PairedSeries(x=sp_stats.norm.ppf(probabilities), y=np.sort(r))


def residuals_vs_fitted(solution: 'OLSSolution') -> PairedSeries:
    """Fitted values against residuals."""
    return PairedSeries(
        x=np.array(solution.fitted),
        y=np.array(solution.residuals),
    )


def observed_vs_predicted(solution: 'OLSSolution', observed: ArrayLike) -> PairedSeries:
    """
    Observed target against fitted values.

    `observed` should be on the scale the model was fitted on (log scale
    for a log-target model).
    """
    obs = check_array(observed, 'observed')
    check_1d(obs, 'observed')
    check_consistent_length(obs, solution.fitted, names=('observed', 'fitted'))
    return PairedSeries(x=obs.copy(), y=np.array(solution.fitted))


def normality_pvalue(residuals: ArrayLike) -> float:
    """
    Shapiro-Wilk p-value for the residuals.

    Falls back to NORMALITY_FALLBACK_PVALUE, with a RuntimeWarning, when
    the test cannot run (fewer than 3 residuals, non-finite values).
    """
    r = check_array(residuals, 'residuals')
    if len(r) < 3 or not np.all(np.isfinite(r)):
        warnings.warn(
            f"normality test needs at least 3 finite residuals, got {len(r)} "
            f"({int(np.sum(~np.isfinite(r)))} non-finite); "
            f"using p={NORMALITY_FALLBACK_PVALUE}",
            RuntimeWarning,
            stacklevel=2,
        )
        return NORMALITY_FALLBACK_PVALUE
    return float(sp_stats.shapiro(r).pvalue)
