"""
Opportunities service tests.

Tests verify:
- The default engine is built once from environment configuration
- generate_opportunities_for_company builds a RunContext with the trigger source
- build_opportunity_records ranks and maps results to stored rows
"""

import pytest

from opsight.core.enums import OpportunityCategory, OpportunityStatus
from opsight.opportunities.dto import ScoringFactors, StructuralOpportunity
from opsight.opportunities.services import opportunities_service
from opsight.opportunities.services.opportunities_service import (
    build_opportunity_records,
    generate_opportunities_for_company,
    get_default_engine,
)


@pytest.fixture
def fresh_default_engine(monkeypatch):
    """Reset the cached default engine around a test."""
    get_default_engine.cache_clear()
    yield monkeypatch
    get_default_engine.cache_clear()


def _resolver(opportunity):
    if isinstance(opportunity, StructuralOpportunity):
        return ScoringFactors(
            fte_hours_saved=opportunity.estimated_value * 160,
            complexity_score=4,
            system_integration_depth=4,
        )
    return ScoringFactors(fte_hours_saved=100, error_cost_avoided=20, complexity_score=2)


class TestDefaultEngine:
    """Tests for get_default_engine."""

    def test_engine_is_shared(self, fresh_default_engine):
        assert get_default_engine() is get_default_engine()

    def test_engine_uses_env_thresholds(self, fresh_default_engine):
        fresh_default_engine.setenv("OPSIGHT_THRESHOLD_FTE", "20")

        assert get_default_engine().default_thresholds.fte == 20


class TestGenerateOpportunitiesForCompany:
    """Tests for generate_opportunities_for_company."""

    def test_generates_with_default_engine(self, fresh_default_engine, invoice_signals):
        fresh_default_engine.delenv("OPSIGHT_THRESHOLD_FTE", raising=False)

        result = generate_opportunities_for_company("company-1", invoice_signals)

        assert result.company_id == "company-1"
        assert len(result.scored) == 3

    def test_trigger_source_reaches_events(
        self, fresh_default_engine, invoice_signals, engine_log_handler
    ):
        generate_opportunities_for_company(
            "company-1", invoice_signals, trigger_source="import"
        )

        assert {r.trigger_source for r in engine_log_handler.records} == {"import"}

    def test_persist_forwarded(self, fresh_default_engine, invoice_signals):
        stored = []

        result = generate_opportunities_for_company(
            "company-1", invoice_signals, persist=stored.append
        )

        assert stored == [result]


class TestBuildOpportunityRecords:
    """Tests for build_opportunity_records."""

    def test_records_ranked_best_first(self, engine, invoice_signals):
        result = engine.generate_all("company-1", invoice_signals, scoring_resolver=_resolver)

        records = build_opportunity_records(result)

        assert len(records) == 3
        rois = [record.roi for record in records]
        assert rois == sorted(rois, reverse=True)
        assert records[0].roi == 160

    def test_record_fields(self, engine, invoice_signals):
        result = engine.generate_all("company-1", invoice_signals, scoring_resolver=_resolver)

        records = {record.category: record for record in build_opportunity_records(result)}

        structural = records[OpportunityCategory.STRUCTURAL]
        assert structural.process_id == "proc-1"
        assert structural.pain_point_ids == []
        assert structural.use_case_id is None
        assert structural.description == "High FTE allocation suggests automation potential."
        assert structural.tags == ["structural", "fte", "structural"]
        assert structural.status == OpportunityStatus.IDENTIFIED

        automation = records[OpportunityCategory.AUTOMATION]
        assert automation.pain_point_ids == ["pp-1"]
        assert automation.tags == ["pain_point", "frequency-magnitude", "automation"]

        template = records[OpportunityCategory.TEMPLATE]
        assert template.use_case_id == "uc-1"
        assert template.pain_point_ids == ["pp-1"]
        assert template.tags == ["template", "pain-point", "template"]

    def test_scores_copied_from_scoring(self, engine, invoice_signals):
        result = engine.generate_all("company-1", invoice_signals, scoring_resolver=_resolver)

        records = build_opportunity_records(result)
        by_title = {item.opportunity.title: item.score for item in result.scored}

        for record in records:
            expected = by_title[record.title]
            assert record.estimated_value == expected.estimated_value
            assert record.estimated_effort == expected.estimated_effort
            assert record.confidence == expected.confidence

    def test_empty_result(self, engine):
        assert build_opportunity_records(engine.generate_all("company-1", {})) == []

    def test_module_exposes_to_record(self):
        assert callable(opportunities_service.to_record)
