"""
Opportunities Engine.

Runs the opportunity generation pipeline for one company:
1. Structural, pain-point and template detectors (in that order)
2. Flatten into one opportunity sequence
3. Resolve scoring factors via the injected scoring resolver
4. Score the batch
5. Zip opportunities with scores
6. Assemble the GeneratedResult
7. Hand the result to the injected persist callback, if any

Key responsibilities:
- Engine owns no state beyond its default thresholds, fixed at construction;
  one instance can be shared across concurrent callers
- Detectors and scoring never raise on malformed signal data
- Only caller code can fail: a persist (or scoring resolver) exception is
  logged as a failure event and re-raised unchanged, with no retry and no
  partial result
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Mapping
from typing import Any, Protocol

from opsight.opportunities.dto import (
    GeneratedResult,
    ScoredOpportunity,
    ScoringFactors,
    SignalBundle,
    StructuralThresholds,
)
from opsight.opportunities.engines.pain_point_engine import detect_pain_points
from opsight.opportunities.engines.scoring_engine import score_all
from opsight.opportunities.engines.structural_engine import detect_structural
from opsight.opportunities.engines.template_engine import detect_templates
from opsight.opportunities.observability import log_engine_event
from opsight.opportunities.run_context import RunContext, create_run_context

ENGINE_NAME = "opportunities_engine"


class ScoringResolver(Protocol):
    """Translates an opportunity into scoring factors."""

    def __call__(self, opportunity: Any) -> ScoringFactors | Mapping[str, Any] | None: ...


class PersistCallback(Protocol):
    """Stores a generated result. May be sync or return an awaitable."""

    def __call__(self, result: GeneratedResult) -> Awaitable[None] | None: ...


class OpportunityEngine:
    """
    Multi-strategy opportunity detector and scorer.

    Args:
        default_thresholds: Structural thresholds used when a call gives no
            override (default: fte 5, volume 1000, system count 3)
    """

    def __init__(self, default_thresholds: StructuralThresholds | None = None):
        # StructuralThresholds is frozen, so holding the reference is safe.
        self._default_thresholds = default_thresholds or StructuralThresholds()

    @property
    def default_thresholds(self) -> StructuralThresholds:
        return self._default_thresholds

    # -------------------------------------------------------------------------
    # Detectors
    # -------------------------------------------------------------------------

    def detect_structural(self, processes, thresholds=None):
        """Structural detector with this engine's default thresholds."""
        return detect_structural(processes, thresholds, defaults=self._default_thresholds)

    def detect_pain_points(self, pain_points):
        return detect_pain_points(pain_points)

    def detect_templates(self, use_cases, pain_points, processes):
        return detect_templates(use_cases, pain_points, processes)

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _build_result(
        self,
        company_id: str,
        signals: SignalBundle | Mapping[str, Any],
        thresholds: StructuralThresholds | Mapping[str, Any] | None,
        scoring_resolver: ScoringResolver | None,
    ) -> GeneratedResult:
        """Steps 1-6: detect, resolve, score, zip, assemble."""
        bundle = SignalBundle.coerce(signals)

        structural = self.detect_structural(bundle.processes, thresholds)
        pain_points = self.detect_pain_points(bundle.pain_points)
        templates = self.detect_templates(bundle.use_cases, bundle.pain_points, bundle.processes)

        opportunities = [*structural, *pain_points, *templates]

        if scoring_resolver is None:
            factors_list = [ScoringFactors() for _ in opportunities]
        else:
            factors_list = [scoring_resolver(opportunity) for opportunity in opportunities]

        scores = score_all(factors_list)

        return GeneratedResult(
            company_id=str(company_id),
            structural=structural,
            pain_points=pain_points,
            templates=templates,
            scored=[
                ScoredOpportunity(opportunity=opportunity, score=opportunity_score)
                for opportunity, opportunity_score in zip(opportunities, scores)
            ],
        )

    def _log_start(self, ctx: RunContext, operation: str) -> None:
        log_engine_event(ctx, ENGINE_NAME, operation, "start")

    def _log_success(self, ctx: RunContext, operation: str, result: GeneratedResult) -> None:
        log_engine_event(
            ctx,
            ENGINE_NAME,
            operation,
            "success",
            extra={
                "structural_count": len(result.structural),
                "pain_point_count": len(result.pain_points),
                "template_count": len(result.templates),
                "scored_count": len(result.scored),
            },
        )

    def _log_failure(
        self, ctx: RunContext, operation: str, step: str, error: Exception
    ) -> None:
        log_engine_event(
            ctx.with_step(step),
            ENGINE_NAME,
            operation,
            "failure",
            error_summary=f"{type(error).__name__}: {str(error)[:100]}",
        )

    def generate_all(
        self,
        company_id: str,
        signals: SignalBundle | Mapping[str, Any],
        thresholds: StructuralThresholds | Mapping[str, Any] | None = None,
        scoring_resolver: ScoringResolver | None = None,
        persist: PersistCallback | None = None,
        ctx: RunContext | None = None,
    ) -> GeneratedResult:
        """
        Generate, score and optionally persist opportunities for a company.

        Args:
            company_id: Identity of the company
            signals: SignalBundle, or a mapping with processes / pain_points /
                use_cases lists (camelCase keys accepted)
            thresholds: Partial structural threshold override for this call
            scoring_resolver: opportunity -> factors. Without one, every
                opportunity is scored from empty factors.
            persist: Called with the result before returning. Must be
                synchronous here; use agenerate_all for async callbacks.
            ctx: Optional RunContext (created with trigger_source="api" if None)

        Returns:
            GeneratedResult with scored index-aligned to
            structural + pain_points + templates

        Raises:
            Whatever persist or scoring_resolver raises, unchanged.
            TypeError: persist returned an awaitable.
        """
        if ctx is None:
            ctx = create_run_context(company_id=company_id)
        self._log_start(ctx, "generate_all")

        try:
            result = self._build_result(company_id, signals, thresholds, scoring_resolver)
        except Exception as e:
            self._log_failure(ctx, "generate_all", "resolve", e)
            raise

        if persist is not None:
            try:
                outcome = persist(result)
            except Exception as e:
                self._log_failure(ctx, "generate_all", "persist", e)
                raise

            if inspect.isawaitable(outcome):
                if inspect.iscoroutine(outcome):
                    outcome.close()
                error = TypeError(
                    "persist returned an awaitable; use agenerate_all for async persistence"
                )
                self._log_failure(ctx, "generate_all", "persist", error)
                raise error

        self._log_success(ctx, "generate_all", result)
        return result

    async def agenerate_all(
        self,
        company_id: str,
        signals: SignalBundle | Mapping[str, Any],
        thresholds: StructuralThresholds | Mapping[str, Any] | None = None,
        scoring_resolver: ScoringResolver | None = None,
        persist: PersistCallback | None = None,
        ctx: RunContext | None = None,
    ) -> GeneratedResult:
        """
        Async form of generate_all.

        Identical semantics; persist may be sync or async and is awaited
        before returning. Detection and scoring do not suspend.
        """
        if ctx is None:
            ctx = create_run_context(company_id=company_id)
        self._log_start(ctx, "agenerate_all")

        try:
            result = self._build_result(company_id, signals, thresholds, scoring_resolver)
        except Exception as e:
            self._log_failure(ctx, "agenerate_all", "resolve", e)
            raise

        if persist is not None:
            try:
                outcome = persist(result)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as e:
                self._log_failure(ctx, "agenerate_all", "persist", e)
                raise

        self._log_success(ctx, "agenerate_all", result)
        return result
