"""Unit tests for per-field conflict resolution and calibration."""

import pytest

from prompt_brief.models import FieldKey, FieldSource
from prompt_brief.pipeline.stages.detection import Candidate
from prompt_brief.pipeline.stages.resolution import (
    IMPLICIT_ASSUMPTION,
    NEGATED_ASSUMPTION,
    NO_EVIDENCE_ASSUMPTION,
    PATTERN_ASSUMPTION,
    POLARITY_CONFLICT_REASON,
    VALUE_CONFLICT_REASON,
    clamp_confidence,
    resolve_field,
    resolve_fields,
)


def make_candidate(
    key: FieldKey,
    value: str,
    turn_index: int = 0,
    explicit: bool = False,
    implicit: bool = False,
    negated: bool = False,
) -> Candidate:
    return Candidate(
        key=key,
        value=value,
        turn_index=turn_index,
        statement_index=0,
        explicit=explicit,
        implicit=implicit,
        negated=negated,
        normalized_value=value.lower(),
    )


class TestResolveField:
    """Tests for resolve_field."""

    def test_no_candidates(self):
        result, conflict = resolve_field(FieldKey.TONE, [])

        assert result.value is None
        assert result.confidence == 0.0
        assert result.assumptions == [NO_EVIDENCE_ASSUMPTION]
        assert conflict is None

    def test_explicit_winner(self):
        result, conflict = resolve_field(
            FieldKey.OBJECTIVE,
            [make_candidate(FieldKey.OBJECTIVE, "Draft a memo", explicit=True)],
        )

        assert result.value == "Draft a memo"
        assert result.confidence == 0.82
        assert result.source == FieldSource.HEURISTIC
        assert result.assumptions == []
        assert conflict is None

    def test_implicit_winner_uses_implicit_base(self):
        result, _ = resolve_field(
            FieldKey.AUDIENCE,
            [make_candidate(FieldKey.AUDIENCE, "For new managers", implicit=True)],
        )

        assert result.confidence == 0.58
        assert result.assumptions == [IMPLICIT_ASSUMPTION]

    def test_implicit_flag_without_implicit_base_uses_pattern(self):
        result, _ = resolve_field(
            FieldKey.TONE,
            [make_candidate(FieldKey.TONE, "Casual", implicit=True)],
        )
        assert result.confidence == 0.5

    def test_pattern_winner(self):
        result, _ = resolve_field(
            FieldKey.CONSTRAINTS,
            [make_candidate(FieldKey.CONSTRAINTS, "We should avoid jargon")],
        )

        assert result.confidence == 0.63
        assert result.assumptions == [PATTERN_ASSUMPTION]

    def test_latest_value_wins_with_conflict(self):
        result, conflict = resolve_field(
            FieldKey.OBJECTIVE,
            [
                make_candidate(FieldKey.OBJECTIVE, "Draft a memo", turn_index=0, explicit=True),
                make_candidate(FieldKey.OBJECTIVE, "Write an FAQ", turn_index=1, explicit=True),
            ],
        )

        assert result.value == "Write an FAQ"
        assert result.confidence == 0.66
        assert conflict.field == FieldKey.OBJECTIVE
        assert conflict.selected_value == "Write an FAQ"
        assert conflict.reason == VALUE_CONFLICT_REASON
        assert conflict.candidates == ["Draft a memo", "Write an FAQ"]

    def test_repeated_value_is_not_a_conflict(self):
        result, conflict = resolve_field(
            FieldKey.OBJECTIVE,
            [
                make_candidate(FieldKey.OBJECTIVE, "Draft a memo", explicit=True),
                make_candidate(FieldKey.OBJECTIVE, "draft a memo", turn_index=1, explicit=True),
            ],
        )

        assert result.value == "draft a memo"
        assert result.confidence == 0.82
        assert conflict is None

    def test_negated_winner_clears_value(self):
        result, conflict = resolve_field(
            FieldKey.CONSTRAINTS,
            [
                make_candidate(FieldKey.CONSTRAINTS, "Keep it short", explicit=True),
                make_candidate(FieldKey.CONSTRAINTS, "No constraints for now.", turn_index=1, negated=True),
            ],
        )

        assert result.value is None
        assert result.confidence == 0.43
        assert result.assumptions == [NEGATED_ASSUMPTION]
        assert conflict.reason == POLARITY_CONFLICT_REASON
        assert conflict.selected_value is None

    def test_negated_non_goals(self):
        result, _ = resolve_field(
            FieldKey.NON_GOALS,
            [
                make_candidate(FieldKey.NON_GOALS, "Skip pricing", explicit=True),
                make_candidate(FieldKey.NON_GOALS, "No non-goals this time.", turn_index=1, negated=True),
            ],
        )

        assert result.value is None
        assert result.confidence == 0.42

    def test_affirmation_after_negation(self):
        result, conflict = resolve_field(
            FieldKey.CONSTRAINTS,
            [
                make_candidate(FieldKey.CONSTRAINTS, "No constraints for now.", negated=True),
                make_candidate(FieldKey.CONSTRAINTS, "Keep it short", turn_index=1, explicit=True),
            ],
        )

        assert result.value == "Keep it short"
        assert result.confidence == 0.68
        assert conflict.reason == POLARITY_CONFLICT_REASON

    def test_lone_negation_has_no_conflict(self):
        result, conflict = resolve_field(
            FieldKey.CONSTRAINTS,
            [make_candidate(FieldKey.CONSTRAINTS, "No constraints for now.", negated=True)],
        )

        assert result.value is None
        assert result.confidence == 0.55
        assert conflict is None


class TestResolveFields:
    """Tests for resolve_fields."""

    def test_every_key_present_and_conflicts_in_field_order(self):
        by_field = {
            FieldKey.TONE: [
                make_candidate(FieldKey.TONE, "Formal"),
                make_candidate(FieldKey.TONE, "Casual", turn_index=1),
            ],
            FieldKey.OBJECTIVE: [
                make_candidate(FieldKey.OBJECTIVE, "Draft a memo", explicit=True),
                make_candidate(FieldKey.OBJECTIVE, "Write an FAQ", turn_index=1, explicit=True),
            ],
        }
        fields, conflicts = resolve_fields(by_field)

        assert set(fields) == set(FieldKey)
        assert [c.field for c in conflicts] == [FieldKey.OBJECTIVE, FieldKey.TONE]
        assert fields[FieldKey.AUDIENCE].value is None


@pytest.mark.parametrize(
    "raw,expected",
    [(-0.2, 0.0), (1.4, 1.0), (0.6599999999999999, 0.66), (0.123456, 0.1235)],
)
def test_clamp_confidence(raw, expected):
    assert clamp_confidence(raw) == expected
