"""
Pain point detector tests.

Tests verify:
- Each heuristic fires independently
- Labels are matched after strip + lower-case
- Each opportunity carries exactly its originating pain point id
"""

import pytest

from opsight.core.enums import (
    Level,
    OpportunityCategory,
    PainPointTrigger,
    RootCause,
    Workaround,
    normalize_label,
    parse_label,
)
from opsight.opportunities.dto import PainPointSignal
from opsight.opportunities.engines import detect_pain_points


class TestDetectPainPoints:
    """Tests for detect_pain_points."""

    def test_mixed_case_labels_fire_all_three_rules(self):
        pain_points = [
            {
                "id": "pp-1",
                "processId": "proc-1",
                "statement": "Reports rebuilt weekly",
                "frequency": "High",
                "magnitude": "HIGH",
                "rootCause": "Data",
                "workarounds": "Manual",
            },
        ]

        opportunities = detect_pain_points(pain_points)

        assert [o.category for o in opportunities] == [
            OpportunityCategory.AUTOMATION,
            OpportunityCategory.DATA_QUALITY,
            OpportunityCategory.WORKFLOW_AUTOMATION,
        ]
        assert [o.trigger for o in opportunities] == [
            PainPointTrigger.FREQUENCY_MAGNITUDE,
            PainPointTrigger.ROOT_CAUSE,
            PainPointTrigger.WORKAROUNDS,
        ]
        for opp in opportunities:
            assert opp.pain_point_ids == ["pp-1"]
            assert opp.process_id == "proc-1"

    def test_frequency_alone_is_not_enough(self):
        pain_points = [{"id": "pp", "processId": "p", "statement": "s", "frequency": "high"}]
        assert detect_pain_points(pain_points) == []

    def test_whitespace_is_ignored(self):
        pain_points = [
            {"id": "pp", "processId": "p", "statement": "s", "rootCause": "  data \n"},
        ]

        opportunities = detect_pain_points(pain_points)

        assert len(opportunities) == 1
        assert opportunities[0].category == OpportunityCategory.DATA_QUALITY

    def test_titles_use_statement(self):
        pain_points = [
            PainPointSignal(id="pp", process_id="p", statement="Slow approvals", workarounds="manual"),
        ]

        opportunities = detect_pain_points(pain_points)

        assert opportunities[0].title == "Slow approvals: remove manual workarounds"

    def test_numeric_legacy_labels_never_match(self):
        """Spreadsheet imports may send numbers for frequency/magnitude."""
        pain_points = [
            {"id": "pp", "processId": "p", "statement": "s", "frequency": 9, "magnitude": 10},
        ]
        assert detect_pain_points(pain_points) == []

    def test_no_aggregation_across_pain_points(self):
        pain_points = [
            {"id": "pp-1", "processId": "p", "statement": "a", "rootCause": "data"},
            {"id": "pp-2", "processId": "p", "statement": "b", "rootCause": "data"},
        ]

        opportunities = detect_pain_points(pain_points)

        assert [o.pain_point_ids for o in opportunities] == [["pp-1"], ["pp-2"]]

    def test_enum_values_accepted_as_labels(self):
        pain_points = [
            PainPointSignal(
                id="pp",
                process_id="p",
                statement="s",
                frequency=Level.HIGH,
                magnitude=Level.HIGH,
            ),
        ]
        assert len(detect_pain_points(pain_points)) == 1


class TestLabelVocabulary:
    """Tests for the closed label vocabularies and the legacy shim."""

    @pytest.mark.parametrize("raw", [" High ", "HIGH", "high", Level.HIGH])
    def test_parse_label_normalizes(self, raw):
        assert parse_label(Level, raw) is Level.HIGH

    @pytest.mark.parametrize("raw", [None, "", "extreme", 7])
    def test_parse_label_unknown_is_none(self, raw):
        assert parse_label(Level, raw) is None

    def test_parse_other_vocabularies(self):
        assert parse_label(RootCause, "Data") is RootCause.DATA
        assert parse_label(Workaround, "MANUAL") is Workaround.MANUAL

    def test_normalize_label_absent_is_empty(self):
        assert normalize_label(None) == ""


class TestNonRecordInput:
    """Entries that are not records are skipped, never raised on."""

    def test_non_record_entries_skipped(self):
        pain_points = [42, "pp-1", {"id": "pp-2", "processId": "p", "statement": "s", "rootCause": "data"}]

        opportunities = detect_pain_points(pain_points)

        assert [o.pain_point_ids for o in opportunities] == [["pp-2"]]

    def test_string_input(self):
        assert detect_pain_points("pp-1") == []
