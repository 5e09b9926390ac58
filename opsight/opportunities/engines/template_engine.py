"""
Template Matcher.

Cross-references use case (candidate solution) categories against pain point
categories and process types to propose reusable "template" opportunities.

Matching is exact equality on the normalized (stripped, lower-cased) string.
Duplicates are removed within a single call only; the seen-set is local to
detect_templates and nothing is cached between calls.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel

from opsight.core.enums import TemplateMatchType, normalize_label
from opsight.opportunities.dto import (
    PainPointSignal,
    ProcessSignal,
    TemplateOpportunity,
    UseCaseSignal,
    coerce_signals,
)

logger = logging.getLogger("opsight.engines.template")

_Signal = TypeVar("_Signal", bound=BaseModel)


def _index_by(items: list[_Signal], attribute: str) -> dict[str, list[_Signal]]:
    """Group items by a normalized label, skipping empty labels."""
    index: dict[str, list[_Signal]] = defaultdict(list)
    for item in items:
        key = normalize_label(getattr(item, attribute))
        if key:
            index[key].append(item)
    return index


def detect_templates(
    use_cases: Iterable[UseCaseSignal | Mapping[str, Any]],
    pain_points: Iterable[PainPointSignal | Mapping[str, Any]],
    processes: Iterable[ProcessSignal | Mapping[str, Any]],
) -> list[TemplateOpportunity]:
    """
    Match use case categories against pain point categories and process types.

    For each use case with a category:
    1. One "pain-point" opportunity per pain point with the same category,
       attributed to that pain point's process.
    2. One "process" opportunity per process whose type equals the category.

    Returns:
        TemplateOpportunity list in use case order, pain point matches before
        process matches for each use case
    """
    pain_points_by_category = _index_by(coerce_signals(PainPointSignal, pain_points), "category")
    processes_by_type = _index_by(coerce_signals(ProcessSignal, processes), "type")

    seen: set[tuple[str, ...]] = set()
    opportunities: list[TemplateOpportunity] = []
    duplicate_count = 0

    for use_case in coerce_signals(UseCaseSignal, use_cases):
        category = normalize_label(use_case.category)
        if not category:
            continue
        label = use_case.category.strip()

        for pain_point in pain_points_by_category.get(category, []):
            key = (
                pain_point.process_id,
                pain_point.id,
                use_case.id,
                TemplateMatchType.PAIN_POINT.value,
            )
            if key in seen:
                duplicate_count += 1
                continue
            seen.add(key)
            opportunities.append(
                TemplateOpportunity(
                    process_id=pain_point.process_id,
                    use_case_id=use_case.id,
                    pain_point_ids=[pain_point.id],
                    title=f"{use_case.name}: address {pain_point.statement}",
                    description=(
                        f"{label} solution '{use_case.name}' addresses the pain point "
                        f"'{pain_point.statement}'."
                    ),
                    match_type=TemplateMatchType.PAIN_POINT,
                    match_reference=category,
                )
            )

        for process in processes_by_type.get(category, []):
            key = (process.id, use_case.id, TemplateMatchType.PROCESS.value)
            if key in seen:
                duplicate_count += 1
                continue
            seen.add(key)
            opportunities.append(
                TemplateOpportunity(
                    process_id=process.id,
                    use_case_id=use_case.id,
                    title=f"{use_case.name}: apply to {process.name}",
                    description=(
                        f"{label} solution '{use_case.name}' fits the "
                        f"'{process.type.strip()}' process '{process.name}'."
                    ),
                    match_type=TemplateMatchType.PROCESS,
                    match_reference=category,
                )
            )

    logger.debug(
        "Template matching complete",
        extra={
            "opportunities_count": len(opportunities),
            "duplicates_filtered": duplicate_count,
        },
    )
    return opportunities
