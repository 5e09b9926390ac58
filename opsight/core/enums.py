"""
Opsight domain enums.

Closed vocabularies shared by the opportunity detectors, the DTO layer and
the records handed back to the surrounding application.

All enums are str-valued so they serialize as their plain values and compare
equal to the raw strings stored by the application.
"""

from enum import Enum


class OpportunityCategory(str, Enum):
    """Category stored on an opportunity row."""
    STRUCTURAL = "structural"
    AUTOMATION = "automation"
    DATA_QUALITY = "data-quality"
    WORKFLOW_AUTOMATION = "workflow-automation"
    TEMPLATE = "template"


class StructuralTrigger(str, Enum):
    """Threshold that caused a structural opportunity."""
    FTE = "fte"
    VOLUME = "volume"
    SYSTEM_COUNT = "systemCount"


class PainPointTrigger(str, Enum):
    """Heuristic that caused a pain-point opportunity."""
    FREQUENCY_MAGNITUDE = "frequency-magnitude"
    ROOT_CAUSE = "root-cause"
    WORKAROUNDS = "workarounds"


class TemplateMatchType(str, Enum):
    """What a use case category was matched against."""
    PAIN_POINT = "pain-point"
    PROCESS = "process"


class OpportunityStatus(str, Enum):
    """Lifecycle status of a stored opportunity."""
    IDENTIFIED = "identified"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    REJECTED = "rejected"


# =============================================================================
# PAIN POINT LABELS
# =============================================================================
# Pain point frequency/magnitude/root cause/workaround labels historically
# arrive as free text ("High", " HIGH ", "Data"). These enums are the
# canonical vocabulary; normalize_label() is kept for legacy input only.


class Level(str, Enum):
    """Frequency / magnitude level of a pain point."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RootCause(str, Enum):
    """Root cause classification of a pain point."""
    DATA = "data"
    PROCESS = "process"
    PEOPLE = "people"
    TECHNOLOGY = "technology"
    OTHER = "other"


class Workaround(str, Enum):
    """How a pain point is currently worked around."""
    NONE = "none"
    MANUAL = "manual"
    PARTIAL = "partial"
    AUTOMATED = "automated"


def normalize_label(value) -> str:
    """
    Legacy compatibility shim: strip and lower-case a free-text label.

    None becomes "" (which never matches a rule). Non-string values, such as
    numeric spreadsheet cells, are stringified first.
    """
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip().lower()


def parse_label(enum_cls: type[Enum], value) -> Enum | None:
    """
    Validate a raw label against a closed vocabulary.

    Returns the enum member, or None if the label is absent or unknown.
    Intended for use at the system boundary, before signals reach the
    detectors.
    """
    normalized = normalize_label(value)
    if not normalized:
        return None
    try:
        return enum_cls(normalized)
    except ValueError:
        return None
