"""
Opportunity generation and scoring.

Exports the engine and the DTOs callers exchange with it.
"""

from opsight.opportunities.dto import (
    GeneratedResult,
    OpportunityRecord,
    PainPointOpportunity,
    PainPointSignal,
    ProcessSignal,
    Score,
    ScoredOpportunity,
    ScoringFactors,
    SignalBundle,
    StructuralOpportunity,
    StructuralThresholds,
    TemplateOpportunity,
    UseCaseSignal,
)
from opsight.opportunities.engines import OpportunityEngine

__all__ = [
    "OpportunityEngine",
    "GeneratedResult",
    "OpportunityRecord",
    "PainPointOpportunity",
    "PainPointSignal",
    "ProcessSignal",
    "Score",
    "ScoredOpportunity",
    "ScoringFactors",
    "SignalBundle",
    "StructuralOpportunity",
    "StructuralThresholds",
    "TemplateOpportunity",
    "UseCaseSignal",
]
