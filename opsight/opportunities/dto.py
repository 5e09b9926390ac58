"""
Opsight Opportunity DTOs.

These Pydantic v2 BaseModels define the shapes exchanged between the
surrounding application and the opportunity engines:

- Signal DTOs (ProcessSignal, PainPointSignal, UseCaseSignal) are inputs.
  They are lenient: a field of the wrong shape degrades to "absent" rather
  than raising, so malformed rows never abort a generation run.
- Opportunity DTOs are a tagged union discriminated by `kind`.
- ScoringFactors / Score carry the scoring engine's inputs and outputs.
- GeneratedResult and OpportunityRecord are outputs.

Field names are snake_case; camelCase aliases (systemCount, painPointIds, ...)
are accepted on input so rows from the application's API validate directly.
"""

import math
from collections.abc import Iterable, Mapping
from typing import Annotated, Any, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel, to_snake

from opsight.core.enums import (
    OpportunityCategory,
    OpportunityStatus,
    PainPointTrigger,
    StructuralTrigger,
    TemplateMatchType,
)


# =============================================================================
# COERCION HELPERS
# =============================================================================


def _coerce_number(value: Any, allow_infinite: bool = False) -> float | None:
    """Finite number or None. Numeric strings are parsed. NaN is always None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number):
        return None
    if math.isinf(number) and not allow_infinite:
        return None
    return number


def _coerce_text(value: Any) -> str | None:
    if value is None:
        return None
    if hasattr(value, "value") and isinstance(value.value, str):
        return value.value
    return str(value)


class _SignalModel(BaseModel):
    """Base for lenient input models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# SIGNAL DTOs
# =============================================================================


class ProcessSignal(_SignalModel):
    """
    Size/complexity attributes of a business process.

    systems_used is only consulted when system_count is absent.
    """
    id: str = ""
    name: str = ""
    fte: float | None = None
    volume: float | None = None
    type: str | None = None
    system_count: float | None = None
    systems_used: str | list[str] | None = None

    @field_validator("id", "name", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        return _coerce_text(value) or ""

    @field_validator("fte", "volume", "system_count", mode="before")
    @classmethod
    def _number_or_none(cls, value: Any) -> float | None:
        return _coerce_number(value)

    @field_validator("type", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> str | None:
        return _coerce_text(value)

    @field_validator("systems_used", mode="before")
    @classmethod
    def _systems(cls, value: Any) -> str | list[str] | None:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (list, tuple, set)):
            return [str(item) for item in value if item is not None]
        return None


class PainPointSignal(_SignalModel):
    """
    A recorded operational problem tied to a process.

    frequency / magnitude / root_cause / workarounds are kept as raw labels.
    Legacy spreadsheet imports may send numbers here; they are stringified.
    """
    id: str = ""
    process_id: str = ""
    statement: str = ""
    category: str | None = None
    frequency: str | None = None
    magnitude: str | None = None
    root_cause: str | None = None
    workarounds: str | None = None

    @field_validator("id", "process_id", "statement", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        return _coerce_text(value) or ""

    @field_validator(
        "category", "frequency", "magnitude", "root_cause", "workarounds",
        mode="before",
    )
    @classmethod
    def _optional_text(cls, value: Any) -> str | None:
        return _coerce_text(value)


class UseCaseSignal(_SignalModel):
    """A candidate automation/technology solution."""
    id: str = ""
    name: str = ""
    category: str | None = None
    description: str | None = None

    @field_validator("id", "name", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        return _coerce_text(value) or ""

    @field_validator("category", "description", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> str | None:
        return _coerce_text(value)


_Signal = TypeVar("_Signal", bound=_SignalModel)


def coerce_signals(model: type[_Signal], items: Any) -> list[_Signal]:
    """
    Validate a list of signal records, dropping what cannot be a record.

    Records may be instances of model, other pydantic models or mappings.
    Anything else (None, strings, numbers) is skipped. A value that is not a
    list of records at all (None, a string, a single mapping) gives [].
    """
    if items is None or isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Iterable):
        return []

    signals: list[_Signal] = []
    for item in items:
        if isinstance(item, model):
            signals.append(item)
        elif isinstance(item, BaseModel):
            signals.append(model.model_validate(item.model_dump()))
        elif isinstance(item, Mapping):
            signals.append(model.model_validate(dict(item)))
    return signals


class SignalBundle(_SignalModel):
    """All signals for one company, as gathered by the application."""
    processes: list[ProcessSignal] = Field(default_factory=list)
    pain_points: list[PainPointSignal] = Field(default_factory=list)
    use_cases: list[UseCaseSignal] = Field(default_factory=list)

    @field_validator("processes", "pain_points", "use_cases", mode="before")
    @classmethod
    def _records_only(cls, value: Any, info: ValidationInfo) -> list:
        return coerce_signals(_BUNDLE_MODELS[info.field_name], value)

    @classmethod
    def coerce(cls, signals: Any) -> "SignalBundle":
        """SignalBundle from a bundle, a mapping, or anything else (empty)."""
        if isinstance(signals, SignalBundle):
            return signals
        if isinstance(signals, BaseModel):
            signals = signals.model_dump()
        if not isinstance(signals, Mapping):
            return cls()
        return cls.model_validate(dict(signals))


_BUNDLE_MODELS: dict[str, type[_SignalModel]] = {
    "processes": ProcessSignal,
    "pain_points": PainPointSignal,
    "use_cases": UseCaseSignal,
}


# =============================================================================
# THRESHOLDS
# =============================================================================


class StructuralThresholds(_SignalModel):
    """
    Structural detector thresholds. A None threshold disables its rule.

    Immutable: an engine holds its defaults for its whole lifetime.
    """
    model_config = ConfigDict(frozen=True)

    fte: float | None = 5
    volume: float | None = 1_000
    system_count: float | None = 3

    @field_validator("fte", "volume", "system_count", mode="before")
    @classmethod
    def _number_or_none(cls, value: Any) -> float | None:
        return _coerce_number(value)

    def merged_with(self, overrides: "StructuralThresholds | dict | None") -> "StructuralThresholds":
        """
        Merge a partial override over these thresholds.

        Keys explicitly present in the override win, including an explicit
        None (which disables the rule). Keys not given keep their value here.
        """
        if overrides is None:
            return self
        if isinstance(overrides, StructuralThresholds):
            patch = overrides.model_dump(exclude_unset=True)
        else:
            patch = {
                to_snake(key): _coerce_number(value)
                for key, value in overrides.items()
                if to_snake(key) in type(self).model_fields
            }
        return self.model_copy(update=patch)


# =============================================================================
# OPPORTUNITY DTOs
# =============================================================================


class StructuralOpportunity(BaseModel):
    """
    Opportunity triggered by a process exceeding a size/complexity threshold.
    """
    kind: Literal["structural"] = "structural"
    process_id: str
    title: str
    category: OpportunityCategory = OpportunityCategory.STRUCTURAL
    estimated_value: float = 0.0
    trigger: StructuralTrigger
    notes: str | None = None


class PainPointOpportunity(BaseModel):
    """Opportunity triggered by categorical heuristics on one pain point."""
    kind: Literal["pain_point"] = "pain_point"
    process_id: str
    pain_point_ids: list[str] = Field(default_factory=list)
    title: str
    description: str
    category: OpportunityCategory
    trigger: PainPointTrigger


class TemplateOpportunity(BaseModel):
    """
    Opportunity formed by matching a use case category against a pain point
    category or a process type. pain_point_ids is empty for process matches.
    """
    kind: Literal["template"] = "template"
    process_id: str
    use_case_id: str
    pain_point_ids: list[str] = Field(default_factory=list)
    title: str
    description: str
    category: OpportunityCategory = OpportunityCategory.TEMPLATE
    match_type: TemplateMatchType
    match_reference: str


Opportunity = Annotated[
    Union[StructuralOpportunity, PainPointOpportunity, TemplateOpportunity],
    Field(discriminator="kind"),
]


# =============================================================================
# SCORING DTOs
# =============================================================================


class ScoringFactors(_SignalModel):
    """
    Inputs to the scoring engine.

    None means "unknown". A value that is present but unusable (a non-numeric
    string, NaN) is kept as NaN: it counts as supplied for confidence and as
    zero for value/effort.

    data_completeness optionally overrides the per-factor completeness
    (expected in [0, 1], clamped by the engine). Keys may be snake_case or
    camelCase factor names.
    """
    fte_hours_saved: float | None = None
    error_cost_avoided: float | None = None
    complexity_score: float | None = None
    system_integration_depth: float | None = None
    data_completeness: dict[str, float] = Field(default_factory=dict)

    @field_validator(
        "fte_hours_saved", "error_cost_avoided", "complexity_score",
        "system_integration_depth",
        mode="before",
    )
    @classmethod
    def _present_number(cls, value: Any) -> float | None:
        if value is None:
            return None
        number = _coerce_number(value)
        return float("nan") if number is None else number

    @field_validator("data_completeness", mode="before")
    @classmethod
    def _completeness(cls, value: Any) -> dict[str, float]:
        if not isinstance(value, dict):
            return {}
        overrides = {}
        for key, raw in value.items():
            # Infinite overrides are kept; the engine clamps them.
            number = _coerce_number(raw, allow_infinite=True)
            if number is not None:
                overrides[to_snake(str(key))] = number
        return overrides


class Score(BaseModel):
    """Scoring engine output for one opportunity."""
    estimated_value: float
    estimated_effort: float
    roi: float
    confidence: float = Field(ge=0, le=1)


class ScoredOpportunity(BaseModel):
    """An opportunity paired with its score."""
    opportunity: Opportunity
    score: Score


# =============================================================================
# RESULT DTOs
# =============================================================================


class GeneratedResult(BaseModel):
    """
    Output of one generation run.

    scored is index-aligned with structural + pain_points + templates.
    """
    company_id: str
    structural: list[StructuralOpportunity] = Field(default_factory=list)
    pain_points: list[PainPointOpportunity] = Field(default_factory=list)
    templates: list[TemplateOpportunity] = Field(default_factory=list)
    scored: list[ScoredOpportunity] = Field(default_factory=list)


class OpportunityRecord(BaseModel):
    """
    Row shape of a stored opportunity in the surrounding application.
    """
    title: str
    description: str | None = None
    process_id: str
    pain_point_ids: list[str] = Field(default_factory=list)
    use_case_id: str | None = None
    category: OpportunityCategory
    estimated_value: float
    estimated_effort: float
    roi: float
    confidence: float = Field(ge=0, le=1)
    tags: list[str] = Field(default_factory=list)
    status: OpportunityStatus = OpportunityStatus.IDENTIFIED
