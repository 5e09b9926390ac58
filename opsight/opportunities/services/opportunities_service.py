"""
Opportunities Service.

Entry point for the embedding application:
- Builds a RunContext for each generation run
- Holds the process-wide engine configured from the environment
- Converts a GeneratedResult into ranked OpportunityRecord rows
"""

from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from opsight import settings  # noqa: F401  (loads .env before config is read)
from opsight.opportunities.config import load_config_from_env
from opsight.opportunities.dto import (
    GeneratedResult,
    OpportunityRecord,
    ScoredOpportunity,
    SignalBundle,
)
from opsight.opportunities.engines import OpportunityEngine, rank_scored
from opsight.opportunities.engines.opportunities_engine import (
    PersistCallback,
    ScoringResolver,
)
from opsight.opportunities.run_context import RunContext, TriggerSource, create_run_context


@lru_cache(maxsize=1)
def get_default_engine() -> OpportunityEngine:
    """
    Engine built once from environment configuration.

    The engine is immutable after construction and safe to share.
    """
    config = load_config_from_env()
    return OpportunityEngine(default_thresholds=config.thresholds)


def generate_opportunities_for_company(
    company_id: str,
    signals: SignalBundle | Mapping[str, Any],
    *,
    scoring_resolver: ScoringResolver | None = None,
    persist: PersistCallback | None = None,
    trigger_source: TriggerSource = "api",
    ctx: RunContext | None = None,
) -> GeneratedResult:
    """
    Generate and score opportunities for a company with the default engine.

    Constructs a RunContext if not provided.

    Raises:
        Whatever persist raises, unchanged.
    """
    if ctx is None:
        ctx = create_run_context(company_id=company_id, trigger_source=trigger_source)

    return get_default_engine().generate_all(
        company_id,
        signals,
        scoring_resolver=scoring_resolver,
        persist=persist,
        ctx=ctx,
    )


def _record_tags(item: ScoredOpportunity) -> list[str]:
    opportunity = item.opportunity
    tags = [opportunity.kind]
    if opportunity.kind == "template":
        tags.append(opportunity.match_type.value)
    else:
        tags.append(opportunity.trigger.value)
    tags.append(opportunity.category.value)
    return tags


def to_record(item: ScoredOpportunity) -> OpportunityRecord:
    """Convert one scored opportunity to its stored row shape."""
    opportunity = item.opportunity
    if opportunity.kind == "structural":
        description = opportunity.notes
        pain_point_ids: list[str] = []
        use_case_id = None
    else:
        description = opportunity.description
        pain_point_ids = list(opportunity.pain_point_ids)
        use_case_id = opportunity.use_case_id if opportunity.kind == "template" else None

    return OpportunityRecord(
        title=opportunity.title,
        description=description,
        process_id=opportunity.process_id,
        pain_point_ids=pain_point_ids,
        use_case_id=use_case_id,
        category=opportunity.category,
        estimated_value=item.score.estimated_value,
        estimated_effort=item.score.estimated_effort,
        roi=item.score.roi,
        confidence=item.score.confidence,
        tags=_record_tags(item),
    )


def build_opportunity_records(result: GeneratedResult) -> list[OpportunityRecord]:
    """
    Ranked OpportunityRecord rows for a generated result, best first.

    Intended for persist callbacks that write to the opportunities table.
    """
    return [to_record(item) for item in rank_scored(result.scored)]
