"""
Opsight Opportunity Engines Layer.

Engines are pure Python modules that:
- Take signal DTOs (or raw mappings) as inputs
- Return DTOs as outputs
- Contain no HTTP, no persistence, no global state
- Own deterministic business logic (detection, scoring, ranking)
"""

from .opportunities_engine import OpportunityEngine, PersistCallback, ScoringResolver
from .pain_point_engine import detect_pain_points
from .scoring_engine import CONFIDENCE_WEIGHTS, rank_scored, score, score_all
from .structural_engine import detect_structural, resolve_system_count
from .template_engine import detect_templates

__all__ = [
    "OpportunityEngine",
    "PersistCallback",
    "ScoringResolver",
    "detect_structural",
    "resolve_system_count",
    "detect_pain_points",
    "detect_templates",
    "score",
    "score_all",
    "rank_scored",
    "CONFIDENCE_WEIGHTS",
]
