"""
Opportunity engine configuration.

Reads structural thresholds from environment variables with the documented
defaults, so tests and local runs need no configuration.

Environment Variables:
- OPSIGHT_THRESHOLD_FTE: FTE threshold (default: 5)
- OPSIGHT_THRESHOLD_VOLUME: Volume threshold (default: 1000)
- OPSIGHT_THRESHOLD_SYSTEM_COUNT: System count threshold (default: 3)

Set a threshold to "off", "none" or "disabled" to turn its rule off.
"""

import logging
import math
import os
from dataclasses import dataclass, field

from opsight.opportunities.dto import StructuralThresholds

logger = logging.getLogger("opsight.config")

DEFAULT_FTE_THRESHOLD = 5.0
DEFAULT_VOLUME_THRESHOLD = 1_000.0
DEFAULT_SYSTEM_COUNT_THRESHOLD = 3.0

_DISABLED_VALUES = ("off", "none", "disabled")


@dataclass(frozen=True)
class EngineConfig:
    """Immutable configuration for an OpportunityEngine."""

    thresholds: StructuralThresholds = field(
        default_factory=lambda: StructuralThresholds(
            fte=DEFAULT_FTE_THRESHOLD,
            volume=DEFAULT_VOLUME_THRESHOLD,
            system_count=DEFAULT_SYSTEM_COUNT_THRESHOLD,
        )
    )


def _threshold_from_env(name: str, default: float) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    if raw.strip().lower() in _DISABLED_VALUES:
        return None
    try:
        value = float(raw)
    except ValueError:
        value = None
    if value is None or not math.isfinite(value):
        logger.warning(
            "Invalid threshold in environment, using default",
            extra={"variable": name, "value": raw, "default": default},
        )
        return default
    return value


def load_config_from_env() -> EngineConfig:
    """Load engine configuration from environment variables."""
    return EngineConfig(
        thresholds=StructuralThresholds(
            fte=_threshold_from_env("OPSIGHT_THRESHOLD_FTE", DEFAULT_FTE_THRESHOLD),
            volume=_threshold_from_env("OPSIGHT_THRESHOLD_VOLUME", DEFAULT_VOLUME_THRESHOLD),
            system_count=_threshold_from_env(
                "OPSIGHT_THRESHOLD_SYSTEM_COUNT", DEFAULT_SYSTEM_COUNT_THRESHOLD
            ),
        )
    )
