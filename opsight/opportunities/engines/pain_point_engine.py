"""
Pain-Point Opportunity Detector.

Applies categorical heuristics to pain point records. Each rule is evaluated
independently, so one pain point yields 0-3 opportunities:

- frequency high AND magnitude high -> automation
- root cause data                   -> data-quality
- workarounds manual                -> workflow-automation

Labels go through normalize_label(), the legacy free-text shim. The enum
values in opsight.core.enums are the vocabulary being matched.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from opsight.core.enums import (
    Level,
    OpportunityCategory,
    PainPointTrigger,
    RootCause,
    Workaround,
    normalize_label,
)
from opsight.opportunities.dto import PainPointOpportunity, PainPointSignal, coerce_signals

logger = logging.getLogger("opsight.engines.pain_point")


def detect_pain_points(
    pain_points: Iterable[PainPointSignal | Mapping[str, Any]],
) -> list[PainPointOpportunity]:
    """
    Detect pain-point opportunities.

    No aggregation across pain points: every opportunity carries exactly the
    one originating pain point id.
    """
    opportunities: list[PainPointOpportunity] = []

    for pain_point in coerce_signals(PainPointSignal, pain_points):
        frequency = normalize_label(pain_point.frequency)
        magnitude = normalize_label(pain_point.magnitude)
        root_cause = normalize_label(pain_point.root_cause)
        workarounds = normalize_label(pain_point.workarounds)

        if frequency == Level.HIGH.value and magnitude == Level.HIGH.value:
            opportunities.append(
                PainPointOpportunity(
                    process_id=pain_point.process_id,
                    pain_point_ids=[pain_point.id],
                    title=f"{pain_point.statement}: automate the pain point",
                    description="High frequency and magnitude suggest automation potential.",
                    category=OpportunityCategory.AUTOMATION,
                    trigger=PainPointTrigger.FREQUENCY_MAGNITUDE,
                )
            )

        if root_cause == RootCause.DATA.value:
            opportunities.append(
                PainPointOpportunity(
                    process_id=pain_point.process_id,
                    pain_point_ids=[pain_point.id],
                    title=f"{pain_point.statement}: improve data quality",
                    description="Data-related root causes warrant a data quality agent.",
                    category=OpportunityCategory.DATA_QUALITY,
                    trigger=PainPointTrigger.ROOT_CAUSE,
                )
            )

        if workarounds == Workaround.MANUAL.value:
            opportunities.append(
                PainPointOpportunity(
                    process_id=pain_point.process_id,
                    pain_point_ids=[pain_point.id],
                    title=f"{pain_point.statement}: remove manual workarounds",
                    description="Manual workarounds highlight workflow automation potential.",
                    category=OpportunityCategory.WORKFLOW_AUTOMATION,
                    trigger=PainPointTrigger.WORKAROUNDS,
                )
            )

    logger.debug(
        "Pain point detection complete",
        extra={"opportunities_count": len(opportunities)},
    )
    return opportunities
