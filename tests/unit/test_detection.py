"""Unit tests for field detection."""

import pytest

from prompt_brief.models import FieldKey
from prompt_brief.pipeline.stages.detection import detect_candidates, detect_field, is_negated
from prompt_brief.pipeline.stages.segmentation import Statement


class TestExplicitLabels:
    """Tests for ``label: value`` statements."""

    @pytest.mark.parametrize(
        "statement,key,value",
        [
            ("Objective: Draft a memo", FieldKey.OBJECTIVE, "Draft a memo"),
            ("audience :  senior engineers", FieldKey.AUDIENCE, "senior engineers"),
            ("Non Goals: pricing details", FieldKey.NON_GOALS, "pricing details"),
            ("nonGoals: pricing details", FieldKey.NON_GOALS, "pricing details"),
            ("Output format: markdown bullets", FieldKey.OUTPUT_FORMAT, "markdown bullets"),
            ("Examples: see the Q3 email", FieldKey.EXAMPLES, "see the Q3 email"),
            ("acceptance criteria: cites every source", FieldKey.ACCEPTANCE_CRITERIA, "cites every source"),
        ],
    )
    def test_known_labels(self, statement, key, value):
        detection = detect_field(statement)

        assert detection.key == key
        assert detection.value == value
        assert detection.explicit is True
        assert detection.implicit is False

    def test_explicit_label_beats_patterns(self):
        # "formal" would otherwise route to tone
        detection = detect_field("objective: Draft a formal policy memo.")
        assert detection.key == FieldKey.OBJECTIVE

    @pytest.mark.parametrize(
        "statement",
        ["Note: this is for new hires", "Avoid: legal jargon", "Budget: no limits"],
    )
    def test_unknown_label_is_dropped(self, statement):
        assert detect_field(statement) is None


class TestBoundaryPhrasing:
    """Tests for unlabeled non-goal and constraint phrasing."""

    def test_out_of_scope_routes_to_non_goals(self):
        detection = detect_field("Pricing is out of scope.")
        assert detection.key == FieldKey.NON_GOALS
        assert detection.explicit is False

    def test_no_limits_routes_to_constraints(self):
        detection = detect_field("There are no limits on length.")
        assert detection.key == FieldKey.CONSTRAINTS

    def test_boundary_checked_before_patterns(self):
        # "for" would otherwise match audience first
        detection = detect_field("No constraints for now.")
        assert detection.key == FieldKey.CONSTRAINTS


class TestPatternOrder:
    """Tests for first-match-wins in declared field order."""

    def test_objective_beats_audience_and_format(self):
        assert detect_field("I need a table for executives").key == FieldKey.OBJECTIVE

    def test_broad_audience_cue_shadows_context(self):
        assert detect_field("Use the data for the report").key == FieldKey.AUDIENCE

    def test_audience_shadows_output_format(self):
        assert detect_field("Write a summary for readers in json").key == FieldKey.AUDIENCE

    def test_pattern_match_without_implicit_cue(self):
        detection = detect_field("We should avoid legal claims.")

        assert detection.key == FieldKey.CONSTRAINTS
        assert detection.explicit is False
        assert detection.implicit is False


class TestImplicitPhrasing:
    """Tests for implicit audience and context detection."""

    def test_implicit_audience_marks_pattern_match(self):
        detection = detect_field("Build a checklist for first-time managers.")

        assert detection.key == FieldKey.AUDIENCE
        assert detection.implicit is True

    def test_implicit_context_fallback(self):
        detection = detect_field("Base it on the onboarding docs and incident notes from last quarter.")

        assert detection.key == FieldKey.CONTEXT
        assert detection.implicit is True

    def test_context_cue_needs_data_noun(self):
        assert detect_field("Summarize it using plain words") is None

    def test_no_match(self):
        assert detect_field("Hello there") is None


class TestNegation:
    """Tests for field-specific negation."""

    @pytest.mark.parametrize(
        "key,text",
        [
            (FieldKey.CONSTRAINTS, "no constraints for now."),
            (FieldKey.CONSTRAINTS, "proceed without hard constraints"),
            (FieldKey.CONSTRAINTS, "there are no limits"),
            (FieldKey.NON_GOALS, "no non-goals this time."),
            (FieldKey.NON_GOALS, "nothing is out of scope"),
        ],
    )
    def test_negated_phrasing(self, key, text):
        assert is_negated(key, text) is True

    def test_affirmed_phrasing(self):
        assert is_negated(FieldKey.NON_GOALS, "non-goals: don't mention competitors.") is False

    def test_other_fields_never_negated(self):
        assert is_negated(FieldKey.OBJECTIVE, "no constraints") is False


class TestDetectCandidates:
    """Tests for grouping candidates by field."""

    def test_groups_in_transcript_order(self):
        statements = [
            Statement(text="objective: Draft a memo", turn_index=0, statement_index=0),
            Statement(text="Hello there", turn_index=0, statement_index=1),
            Statement(text="Note: this is for new hires", turn_index=0, statement_index=2),
            Statement(text="No constraints for now.", turn_index=1, statement_index=0),
            Statement(text="objective: Write an FAQ", turn_index=2, statement_index=0),
        ]
        by_field = detect_candidates(statements)

        assert set(by_field) == set(FieldKey)
        assert [c.value for c in by_field[FieldKey.OBJECTIVE]] == ["Draft a memo", "Write an FAQ"]
        assert by_field[FieldKey.OBJECTIVE][1].turn_index == 2

        constraint = by_field[FieldKey.CONSTRAINTS][0]
        assert constraint.negated is True
        assert constraint.normalized_value == "no constraints for now."
        assert sum(len(items) for items in by_field.values()) == 3
        assert by_field[FieldKey.AUDIENCE] == []
