"""
Opportunity Scoring Engine.

Computes value, effort, ROI and a weighted confidence for an opportunity from
caller-supplied factors. The engine has no knowledge of how an opportunity maps
to hours saved or cost avoided; that translation is the scoring resolver's job.

All scoring is deterministic. Missing factors contribute 0 to value/effort and
0 to confidence; ROI is 0 whenever effort is 0.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from opsight.opportunities.dto import Score, ScoredOpportunity, ScoringFactors

# =============================================================================
# CONFIDENCE WEIGHTS
# =============================================================================

# Relative importance of each factor's presence. Sums to 1.0.
CONFIDENCE_WEIGHTS = {
    "fte_hours_saved": 0.35,
    "error_cost_avoided": 0.35,
    "complexity_score": 0.15,
    "system_integration_depth": 0.15,
}


def normalize(value: float | None) -> float:
    """0 for None or non-finite values, else the value as float."""
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _as_factors(factors: ScoringFactors | Mapping[str, Any] | None) -> ScoringFactors:
    if factors is None:
        return ScoringFactors()
    if isinstance(factors, ScoringFactors):
        return factors
    return ScoringFactors.model_validate(factors)


def compute_confidence(factors: ScoringFactors) -> float:
    """
    Weighted completeness of the scoring input, in [0, 1].

    Per factor, completeness is the data_completeness override (clamped) if
    one is given, else 1 when the factor was supplied and 0 when it was not.
    """
    weighted = 0.0
    total_weight = 0.0

    for name, weight in CONFIDENCE_WEIGHTS.items():
        override = factors.data_completeness.get(name)
        if override is not None:
            completeness = _clamp(override)
        else:
            completeness = 1.0 if getattr(factors, name) is not None else 0.0
        weighted += weight * completeness
        total_weight += weight

    if total_weight <= 0:
        return 0.0
    return _clamp(weighted / total_weight)


def score(factors: ScoringFactors | Mapping[str, Any] | None = None) -> Score:
    """
    Score one opportunity.

    Args:
        factors: ScoringFactors, a raw mapping (snake_case or camelCase keys),
            or None for "nothing known"

    Returns:
        Score with estimated_value, estimated_effort, roi and confidence
    """
    factors = _as_factors(factors)

    estimated_value = normalize(factors.fte_hours_saved) + normalize(factors.error_cost_avoided)
    estimated_effort = normalize(factors.complexity_score) + normalize(
        factors.system_integration_depth
    )
    roi = estimated_value / estimated_effort if estimated_effort > 0 else 0.0

    return Score(
        estimated_value=estimated_value,
        estimated_effort=estimated_effort,
        roi=roi,
        confidence=compute_confidence(factors),
    )


def score_all(
    factors_list: Iterable[ScoringFactors | Mapping[str, Any] | None],
) -> list[Score]:
    """Score a batch of factor sets, preserving order."""
    return [score(factors) for factors in factors_list]


def rank_scored(scored: Iterable[ScoredOpportunity]) -> list[ScoredOpportunity]:
    """
    Order scored opportunities best first.

    Sort keys: roi, then confidence, then estimated_value, all descending.
    The sort is stable, so ties keep generation order. Input is not mutated.
    """
    return sorted(
        scored,
        key=lambda item: (
            item.score.roi,
            item.score.confidence,
            item.score.estimated_value,
        ),
        reverse=True,
    )
