"""
Persistence collaborator contracts.

The estimator does not store anything. Model runs and valuation results
are handed to caller-supplied stores that satisfy the protocols below;
how and where they persist is their business. This module only shapes
the payloads and refuses to send unusable numbers.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from pyappraisal.core.exceptions import ValidationError
from pyappraisal.diagnostics import normality_pvalue
from pyappraisal.regression.design import TransformConfig
from pyappraisal.regression.solution import OLSSolution


# Method tag recorded with every model run fitted by this engine
MODEL_RUN_METHOD = 'OLS-client'


@runtime_checkable
class ModelRunStore(Protocol):
    """Accepts a fitted model run and returns its identifier."""

    def create(
        self,
        *,
        project_id: str,
        method: str,
        features: Sequence[str],
        target_column: str,
        transform_config: Mapping[str, Any],
        fit_metrics: Mapping[str, float],
        diagnostics: Mapping[str, Any],
        artifacts: Sequence[str],
    ) -> Any:
        ...


@runtime_checkable
class ResultStore(Protocol):
    """Accepts a valuation result for a model run and returns its identifier."""

    def create(
        self,
        *,
        project_id: str,
        model_run_id: str,
        estimated_value: float,
        ci_lower: float,
        ci_upper: float,
        elasticities: Mapping[str, float],
    ) -> Any:
        ...


def fit_metrics(solution: OLSSolution) -> dict[str, float]:
    """The fit metrics stored with a model run."""
    return {
        'r_squared': solution.r_squared,
        'r_squared_adjusted': solution.r_squared_adjusted,
        'rmse': solution.rmse,
        'mae': solution.mae,
    }


def save_model_run(
    store: ModelRunStore,
    project_id: str,
    features: Sequence[str],
    target_column: str,
    config: TransformConfig,
    solution: OLSSolution,
    artifacts: Sequence[str] = (),
) -> str:
    """
    Send a fitted model run to the store.

    Args:
        store: ModelRunStore implementation
        project_id: Appraisal project identifier
        features: Feature columns the user selected (pre-transform)
        target_column: Name of the target column
        config: Transforms the model was fitted with
        solution: The fitted model
        artifacts: References to rendered diagnostic charts

    Returns:
        The store's identifier for the run, as a string

    Raises:
        ValidationError: If any fit metric or VIF is NaN or infinite
    """
    metrics = fit_metrics(solution)
    bad = [name for name, value in metrics.items() if not math.isfinite(value)]
    if bad:
        raise ValidationError(
            f"refusing to save model run with non-finite fit metrics: "
            f"{', '.join(f'{name}={metrics[name]}' for name in bad)}"
        )
    vif = solution.vif
    bad = [name for name, value in vif.items() if not math.isfinite(value)]
    if bad:
        raise ValidationError(
            f"refusing to save model run with non-finite VIF: "
            f"{', '.join(f'{name}={vif[name]}' for name in bad)}"
        )

    diagnostics = {
        'vif': vif,
        'shapiro_wilk_p': normality_pvalue(solution.residuals),
    }

    run_id = store.create(
        project_id=project_id,
        method=MODEL_RUN_METHOD,
        features=list(features),
        target_column=target_column,
        transform_config=config.to_dict(),
        fit_metrics=metrics,
        diagnostics=diagnostics,
        artifacts=list(artifacts),
    )
    return str(run_id)


def save_result(
    store: ResultStore,
    project_id: str,
    model_run_id: str,
    estimated_value: float,
    confidence_interval: tuple[float, float],
    elasticities: Mapping[str, float],
) -> str:
    """
    Send a valuation result to the store.

    Raises:
        ValidationError: If the estimate or interval bounds are not finite
    """
    lower, upper = confidence_interval
    values = {'estimated_value': estimated_value, 'ci_lower': lower, 'ci_upper': upper}
    bad = [name for name, value in values.items() if not math.isfinite(value)]
    if bad:
        raise ValidationError(f"refusing to save result with non-finite {', '.join(bad)}")

    result_id = store.create(
        project_id=project_id,
        model_run_id=model_run_id,
        estimated_value=float(estimated_value),
        ci_lower=float(lower),
        ci_upper=float(upper),
        elasticities=dict(elasticities),
    )
    return str(result_id)
