"""
Structural Opportunity Detector.

Flags processes whose size/complexity signals exceed configurable thresholds:
- fte: headcount allocated to the process
- volume: transaction volume
- systemCount: number of systems the process touches

Rules are independent; one process yields 0-3 opportunities. Missing signal
values mean the rule does not fire. Pure function, no side effects.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from opsight.core.enums import StructuralTrigger
from opsight.opportunities.dto import (
    ProcessSignal,
    StructuralOpportunity,
    StructuralThresholds,
    coerce_signals,
)

logger = logging.getLogger("opsight.engines.structural")

DEFAULT_THRESHOLDS = StructuralThresholds()

_SYSTEM_SEPARATORS = re.compile(r"[,;|]")


def resolve_system_count(process: ProcessSignal) -> float:
    """
    Number of systems a process uses.

    Explicit system_count wins; otherwise systems_used is counted, either as
    a list of names or a string delimited by "," ";" or "|".
    """
    if process.system_count is not None:
        count = process.system_count
        return int(count) if count.is_integer() else count

    systems = process.systems_used
    if isinstance(systems, list):
        return len([system for system in systems if system])
    if isinstance(systems, str):
        return len([s for s in (part.strip() for part in _SYSTEM_SEPARATORS.split(systems)) if s])
    return 0


def detect_structural(
    processes: Iterable[ProcessSignal | Mapping[str, Any]],
    thresholds: StructuralThresholds | Mapping[str, Any] | None = None,
    defaults: StructuralThresholds = DEFAULT_THRESHOLDS,
) -> list[StructuralOpportunity]:
    """
    Detect structural opportunities.

    Args:
        processes: Process signals (DTOs or raw mappings)
        thresholds: Partial override merged over defaults. An explicit None
            disables that rule.
        defaults: Base thresholds (the engine's configured defaults)

    Returns:
        StructuralOpportunity list in process order, fte/volume/systemCount
        within a process
    """
    config = defaults.merged_with(thresholds)
    opportunities: list[StructuralOpportunity] = []

    for process in coerce_signals(ProcessSignal, processes):
        system_count = resolve_system_count(process)
        fte_value = process.fte if process.fte is not None else 0.0

        if config.fte is not None and process.fte is not None and process.fte > config.fte:
            opportunities.append(
                StructuralOpportunity(
                    process_id=process.id,
                    title=f"{process.name}: reduce manual effort",
                    estimated_value=process.fte,
                    trigger=StructuralTrigger.FTE,
                    notes="High FTE allocation suggests automation potential.",
                )
            )

        if config.volume is not None and process.volume is not None and process.volume > config.volume:
            # Value reuses the fte figure, not the volume.
            opportunities.append(
                StructuralOpportunity(
                    process_id=process.id,
                    title=f"{process.name}: streamline high volume work",
                    estimated_value=fte_value,
                    trigger=StructuralTrigger.VOLUME,
                    notes="Large transaction volumes indicate structural efficiency gains.",
                )
            )

        if config.system_count is not None and system_count > config.system_count:
            opportunities.append(
                StructuralOpportunity(
                    process_id=process.id,
                    title=f"{process.name}: consolidate {system_count} systems",
                    estimated_value=fte_value,
                    trigger=StructuralTrigger.SYSTEM_COUNT,
                    notes="Multiple systems increase handoffs and coordination effort.",
                )
            )

    logger.debug(
        "Structural detection complete",
        extra={"opportunities_count": len(opportunities)},
    )
    return opportunities
