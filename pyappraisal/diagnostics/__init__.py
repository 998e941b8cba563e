"""
Residual diagnostics for fitted OLS models.

Public API:
    qq_points(residuals) -> PairedSeries
    residuals_vs_fitted(solution) -> PairedSeries
    observed_vs_predicted(solution, observed) -> PairedSeries
    normality_pvalue(residuals) -> float
"""

from pyappraisal.diagnostics.residuals import (
    NORMALITY_FALLBACK_PVALUE,
    PairedSeries,
    normality_pvalue,
    observed_vs_predicted,
    qq_points,
    residuals_vs_fitted,
)

__all__ = [
    "NORMALITY_FALLBACK_PVALUE",
    "PairedSeries",
    "normality_pvalue",
    "observed_vs_predicted",
    "qq_points",
    "residuals_vs_fitted",
]
